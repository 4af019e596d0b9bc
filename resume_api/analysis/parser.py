"""Turn raw model text into a structured result.

Parsing never raises: anything that cannot be decoded into the task's schema
is replaced by the task's canned fallback, and the outcome is tagged so the
caller can log which path was taken.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Protocol, Union

from pydantic import BaseModel, ValidationError

from resume_api.ai.types import AnalysisTask
from resume_api.analysis.fallbacks import fallback_for
from resume_api.schemas.resume import (
    AtsAnalysis,
    CoverLetter,
    ImprovedResume,
    InterviewQuestionSet,
    JobDescriptionMatch,
)

logger = logging.getLogger(__name__)

TASK_SCHEMAS: dict[AnalysisTask, type[BaseModel]] = {
    AnalysisTask.ANALYZE: AtsAnalysis,
    AnalysisTask.MATCH_JOB_DESCRIPTION: JobDescriptionMatch,
    AnalysisTask.IMPROVE: ImprovedResume,
    AnalysisTask.INTERVIEW_QUESTIONS: InterviewQuestionSet,
    AnalysisTask.COVER_LETTER: CoverLetter,
}


class ExtractionError(ValueError):
    def __init__(self, message: str, *, reason: str):
        super().__init__(message)
        self.reason = reason


class ExtractionStrategy(Protocol):
    def extract(self, text: str) -> Any: ...


class GreedyBraceStrategy:
    """Decode the span from the first ``{`` to the last ``}``.

    Models often wrap JSON in commentary, so the widest span is taken rather
    than the first balanced object.
    """

    _span = re.compile(r"\{[\s\S]*\}")

    def extract(self, text: str) -> Any:
        match = self._span.search(text or "")
        if match is None:
            raise ExtractionError("No JSON object found in model output", reason="no_json_object")
        try:
            return json.loads(match.group(0))
        except (json.JSONDecodeError, RecursionError) as exc:
            raise ExtractionError(f"Malformed JSON in model output: {exc}", reason="invalid_json") from exc


class StrictJsonStrategy:
    """Accept the output only when the whole text is one JSON document."""

    def extract(self, text: str) -> Any:
        try:
            return json.loads((text or "").strip())
        except (json.JSONDecodeError, RecursionError) as exc:
            raise ExtractionError(f"Model output is not JSON: {exc}", reason="invalid_json") from exc


@dataclass(frozen=True)
class Ok:
    data: dict[str, Any]


@dataclass(frozen=True)
class Fallback:
    data: dict[str, Any]
    reason: str


ParsedOutcome = Union[Ok, Fallback]


def validate_result(task: AnalysisTask, payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ExtractionError("Model output is not a JSON object", reason="not_an_object")
    schema = TASK_SCHEMAS[task]
    try:
        model = schema.model_validate(payload)
    except ValidationError as exc:
        missing = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors() if err["type"] == "missing"})
        detail = f"missing={','.join(missing)}" if missing else f"errors={exc.error_count()}"
        raise ExtractionError(f"Schema violation for {task.value}: {detail}", reason="schema_violation") from exc
    return model.model_dump(by_alias=True, exclude_none=True)


class ResponseParser:
    def __init__(self, strategy: ExtractionStrategy | None = None):
        self._strategy = strategy or GreedyBraceStrategy()

    def parse(self, task: AnalysisTask, raw_text: str) -> ParsedOutcome:
        try:
            data = validate_result(task, self._strategy.extract(raw_text))
        except ExtractionError as exc:
            logger.warning(
                "llm_output_fallback task=%s reason=%s output_len=%s: %s",
                task.value,
                exc.reason,
                len(raw_text or ""),
                exc,
            )
            return Fallback(data=fallback_for(task), reason=exc.reason)
        logger.debug("llm_output_parsed task=%s keys=%s", task.value, sorted(data))
        return Ok(data=data)
