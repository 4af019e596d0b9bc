from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Sequence

from resume_api.ai.types import AnalysisTask, PromptPayload


@dataclass(frozen=True)
class TaskInputs:
    resume_content: str | None = None
    job_description: str | None = None
    suggestions: Sequence[str] | None = None


ANALYZE_CONTRACT = """{
  "atsScore": <number 0-100>,
  "sections": {
    "skills": { "present": <boolean>, "score": <number 0-100>, "issues": [<string>], "suggestions": [<string>] },
    "experience": { "present": <boolean>, "score": <number 0-100>, "issues": [<string>], "suggestions": [<string>] },
    "education": { "present": <boolean>, "score": <number 0-100>, "issues": [<string>], "suggestions": [<string>] },
    "keywords": { "present": <boolean>, "score": <number 0-100>, "issues": [<string>], "suggestions": [<string>] },
    "formatting": { "present": <boolean>, "score": <number 0-100>, "issues": [<string>], "suggestions": [<string>] }
  },
  "missingItems": [<string>],
  "suggestions": [<string>]
}"""

MATCH_CONTRACT = """{
  "matchPercentage": <number 0-100>,
  "matchedSkills": [<string>],
  "missingSkills": [<string>],
  "keywordGaps": [<string>],
  "recommendations": [<string>]
}"""

IMPROVE_CONTRACT = """{
  "originalPoints": [<string>],
  "improvedPoints": [<string>],
  "summary": "<string describing improvements made>",
  "downloadReady": true
}"""

INTERVIEW_CONTRACT = """{
  "questions": [
    { "category": "hr", "question": "<string>", "hint": "<string optional tip>" },
    { "category": "technical", "question": "<string>", "hint": "<string optional tip>" },
    { "category": "situational", "question": "<string>", "hint": "<string optional tip>" }
  ]
}"""

COVER_LETTER_CONTRACT = """{
  "content": "<full cover letter text>",
  "generatedAt": "<ISO date string>"
}"""


def _contract(instructions: str, shape: str, trailer: str = "") -> str:
    text = f"{instructions}\n\nReturn ONLY valid JSON in this exact format:\n{shape}"
    if trailer:
        text = f"{text}\n\n{trailer}"
    return text


SYSTEM_PROMPTS: dict[AnalysisTask, str] = {
    AnalysisTask.ANALYZE: _contract(
        "You are an expert ATS (Applicant Tracking System) resume analyzer. "
        "Analyze the provided resume and return a detailed JSON analysis. "
        "Be constructive and helpful in your feedback.",
        ANALYZE_CONTRACT,
    ),
    AnalysisTask.MATCH_JOB_DESCRIPTION: _contract(
        "You are an expert job matching specialist. "
        "Compare the resume with the job description and provide a detailed match analysis. "
        "Be helpful and constructive.",
        MATCH_CONTRACT,
    ),
    AnalysisTask.IMPROVE: _contract(
        "You are an expert resume writer. "
        "Improve the resume bullet points to be more ATS-friendly while keeping all information "
        "accurate and honest. Use action verbs and quantify achievements where possible.",
        IMPROVE_CONTRACT,
        "Select 3-5 key bullet points from the resume to improve. "
        "improvedPoints must have the same length and order as originalPoints.",
    ),
    AnalysisTask.INTERVIEW_QUESTIONS: _contract(
        "You are an expert interview coach. "
        "Generate personalized interview questions based on the resume and job description. "
        "Include HR, technical, and situational questions.",
        INTERVIEW_CONTRACT,
        "Generate at least 3 questions per category (9+ total questions).",
    ),
    AnalysisTask.COVER_LETTER: _contract(
        "You are an expert cover letter writer. "
        "Write a professional, personalized cover letter based on the resume and job description. "
        "The letter should:\n"
        "- Be professional but personable\n"
        "- Highlight relevant experience and skills\n"
        "- Show enthusiasm for the role\n"
        "- Be concise (3-4 paragraphs)\n"
        '- Not include placeholder text like [Company Name] - use "your company" or similar if unknown',
        COVER_LETTER_CONTRACT,
    ),
}


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _sections(*pairs: tuple[str, str]) -> str:
    return "\n\n".join(f"{label}:\n{body}" for label, body in pairs if body)


def build_user_content(task: AnalysisTask, inputs: TaskInputs) -> str:
    resume = _clean(inputs.resume_content)
    job_description = _clean(inputs.job_description)

    if task is AnalysisTask.ANALYZE:
        return f"Analyze this resume for ATS compatibility:\n\n{resume}"

    if task is AnalysisTask.MATCH_JOB_DESCRIPTION:
        return _sections(("Resume", resume), ("Job Description", job_description))

    if task is AnalysisTask.IMPROVE:
        suggestions = [s for s in (inputs.suggestions or []) if _clean(s)]
        previous = json.dumps(suggestions, ensure_ascii=False) if suggestions else ""
        return _sections(("Resume to improve", resume), ("Previous suggestions", previous))

    if task is AnalysisTask.INTERVIEW_QUESTIONS:
        return _sections(("Resume", resume), ("Job Description", job_description))

    if task is AnalysisTask.COVER_LETTER:
        return _sections(("Resume", resume), ("Job Description", job_description))

    raise ValueError(f"Unsupported analysis task '{task}'")


def build_prompt(task: AnalysisTask, inputs: TaskInputs) -> PromptPayload:
    return PromptPayload(
        system_instruction=SYSTEM_PROMPTS[task],
        user_content=build_user_content(task, inputs),
    )
