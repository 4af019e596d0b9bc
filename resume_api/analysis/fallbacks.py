"""Canned results substituted when the model output cannot be used.

These literals are part of the public contract; callers receive a deep copy.
"""

from __future__ import annotations

import copy
from typing import Any

from resume_api.ai.types import AnalysisTask

ANALYZE_FALLBACK: dict[str, Any] = {
    "atsScore": 65,
    "sections": {
        "skills": {
            "present": True,
            "score": 70,
            "issues": ["Could use more specific technical skills"],
            "suggestions": ["Add measurable skills"],
        },
        "experience": {
            "present": True,
            "score": 65,
            "issues": ["Bullet points could be more impactful"],
            "suggestions": ["Use action verbs"],
        },
        "education": {"present": True, "score": 80, "issues": [], "suggestions": []},
        "keywords": {
            "present": True,
            "score": 60,
            "issues": ["Missing industry keywords"],
            "suggestions": ["Add relevant keywords"],
        },
        "formatting": {
            "present": True,
            "score": 70,
            "issues": ["Consider simpler formatting"],
            "suggestions": ["Use standard fonts"],
        },
    },
    "missingItems": ["Contact information could be more prominent", "Summary section recommended"],
    "suggestions": ["Add more quantifiable achievements", "Include relevant certifications"],
}

MATCH_FALLBACK: dict[str, Any] = {
    "matchPercentage": 60,
    "matchedSkills": ["Communication", "Problem Solving", "Team Collaboration"],
    "missingSkills": ["Specific technical skill from JD"],
    "keywordGaps": ["Industry-specific terminology"],
    "recommendations": ["Tailor your resume to include keywords from the job description"],
}

IMPROVE_FALLBACK: dict[str, Any] = {
    "originalPoints": [
        "Worked on various projects",
        "Helped team achieve goals",
        "Managed daily tasks",
    ],
    "improvedPoints": [
        "Led development of 5+ cross-functional projects, delivering results 20% ahead of schedule",
        "Collaborated with 12-person team to exceed quarterly targets by 15%",
        "Streamlined operational workflows, reducing task completion time by 30%",
    ],
    "summary": (
        "Enhanced bullet points with action verbs, quantifiable metrics, and specific achievements "
        "while maintaining accuracy."
    ),
    "downloadReady": True,
}

INTERVIEW_FALLBACK: dict[str, Any] = {
    "questions": [
        {
            "category": "hr",
            "question": "Tell me about yourself and your career journey.",
            "hint": "Focus on relevant experience and career highlights",
        },
        {
            "category": "hr",
            "question": "Why are you interested in this position?",
            "hint": "Connect your skills to the job requirements",
        },
        {
            "category": "hr",
            "question": "What are your greatest strengths?",
            "hint": "Provide specific examples from your experience",
        },
        {
            "category": "technical",
            "question": "Describe your experience with the tools mentioned in your resume.",
            "hint": "Be specific about projects and outcomes",
        },
        {
            "category": "technical",
            "question": "How do you stay updated with industry trends?",
            "hint": "Mention courses, certifications, or communities",
        },
        {
            "category": "technical",
            "question": "Walk me through a challenging technical problem you solved.",
            "hint": "Use the STAR method",
        },
        {
            "category": "situational",
            "question": "Describe a time you had to work under pressure.",
            "hint": "Focus on the outcome and what you learned",
        },
        {
            "category": "situational",
            "question": "Tell me about a conflict with a coworker and how you resolved it.",
            "hint": "Emphasize communication and collaboration",
        },
        {
            "category": "situational",
            "question": "Give an example of when you had to learn something quickly.",
            "hint": "Show adaptability and growth mindset",
        },
    ],
}

# generatedAt is stamped by the assembler.
COVER_LETTER_FALLBACK: dict[str, Any] = {
    "content": (
        "Dear Hiring Manager,\n\n"
        "I am writing to express my strong interest in the position advertised. With my background "
        "and skills, I am confident I would be a valuable addition to your team.\n\n"
        "Throughout my career, I have developed expertise in areas directly relevant to this role. "
        "I am passionate about delivering high-quality work and contributing to team success.\n\n"
        "I am excited about the opportunity to bring my experience to your organization and would "
        "welcome the chance to discuss how I can contribute to your team's goals.\n\n"
        "Thank you for considering my application. I look forward to the opportunity to speak with you.\n\n"
        "Best regards"
    ),
}

_FALLBACKS: dict[AnalysisTask, dict[str, Any]] = {
    AnalysisTask.ANALYZE: ANALYZE_FALLBACK,
    AnalysisTask.MATCH_JOB_DESCRIPTION: MATCH_FALLBACK,
    AnalysisTask.IMPROVE: IMPROVE_FALLBACK,
    AnalysisTask.INTERVIEW_QUESTIONS: INTERVIEW_FALLBACK,
    AnalysisTask.COVER_LETTER: COVER_LETTER_FALLBACK,
}


def fallback_for(task: AnalysisTask) -> dict[str, Any]:
    return copy.deepcopy(_FALLBACKS[task])
