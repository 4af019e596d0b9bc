from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

QuestionCategory = Literal["hr", "technical", "situational"]
QUESTION_CATEGORIES: tuple[str, ...] = ("hr", "technical", "situational")
MIN_QUESTIONS_PER_CATEGORY = 3


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clamp_score(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError as exc:
            raise ValueError("score must be a number") from exc
    if isinstance(value, (int, float)):
        return max(0, min(100, int(round(value))))
    return value


Score = Annotated[int, BeforeValidator(_clamp_score)]


# Request bodies. Required fields are checked by the handlers so a missing
# field yields the endpoint's own 400 message.


class MatchJobDescriptionRequest(CamelModel):
    resume_content: str | None = None
    job_description: str | None = None


class ImproveResumeRequest(CamelModel):
    resume_content: str | None = None
    suggestions: list[str] | None = None


class InterviewQuestionsRequest(CamelModel):
    resume_content: str | None = None
    job_description: str | None = None


class CoverLetterRequest(CamelModel):
    resume_content: str | None = None
    job_description: str | None = None


# Structured results returned by the model.


class SectionAnalysis(CamelModel):
    present: bool
    score: Score
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class AnalysisSections(CamelModel):
    skills: SectionAnalysis
    experience: SectionAnalysis
    education: SectionAnalysis
    keywords: SectionAnalysis
    formatting: SectionAnalysis


class AtsAnalysis(CamelModel):
    ats_score: Score
    sections: AnalysisSections
    missing_items: list[str]
    suggestions: list[str]


class JobDescriptionMatch(CamelModel):
    match_percentage: Score
    matched_skills: list[str]
    missing_skills: list[str]
    keyword_gaps: list[str]
    recommendations: list[str]


class ImprovedResume(CamelModel):
    original_points: list[str]
    improved_points: list[str]
    summary: str
    download_ready: bool = True

    @field_validator("download_ready", mode="before")
    @classmethod
    def _always_ready(cls, value: Any) -> bool:
        return True

    @model_validator(mode="after")
    def _points_align(self) -> "ImprovedResume":
        if len(self.original_points) != len(self.improved_points):
            raise ValueError("improvedPoints must pair one-to-one with originalPoints")
        return self


class InterviewQuestion(CamelModel):
    category: QuestionCategory
    question: str
    hint: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class InterviewQuestionSet(CamelModel):
    questions: list[InterviewQuestion]

    @model_validator(mode="after")
    def _covers_every_category(self) -> "InterviewQuestionSet":
        for category in QUESTION_CATEGORIES:
            count = sum(1 for q in self.questions if q.category == category)
            if count < MIN_QUESTIONS_PER_CATEGORY:
                raise ValueError(
                    f"expected at least {MIN_QUESTIONS_PER_CATEGORY} {category} questions, got {count}"
                )
        return self


class CoverLetter(CamelModel):
    content: str
    generated_at: str | None = None

    @field_validator("generated_at", mode="before")
    @classmethod
    def _iso_or_none(cls, value: Any) -> Any:
        # Unparseable timestamps are dropped so the assembler stamps the current time.
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        try:
            datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
        except ValueError:
            return None
        return text
