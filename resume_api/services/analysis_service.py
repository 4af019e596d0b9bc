from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Sequence

from resume_api.ai.retry import RetryPolicy, SleepFn, call_with_retry
from resume_api.ai.types import AnalysisTask, ModelInvoker
from resume_api.analysis.assembler import UploadMetadata, assemble
from resume_api.analysis.parser import Fallback, ParsedOutcome, ResponseParser
from resume_api.analysis.prompt import TaskInputs, build_prompt
from resume_api.core.config import settings
from resume_api.parsing.extract import extract_resume_text

logger = logging.getLogger(__name__)


class AnalysisService:
    """Prompt -> retried model call -> parse/fallback -> assembled response body.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        *,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFn = asyncio.sleep,
        parser: ResponseParser | None = None,
        resume_content_max_chars: int | None = None,
        pdf_preview_chars: int | None = None,
    ):
        self._invoker = invoker
        self._retry_policy = retry_policy or RetryPolicy.from_settings()
        self._sleep = sleep
        self._parser = parser or ResponseParser()
        self._max_chars = resume_content_max_chars or settings.resume_content_max_chars
        self._pdf_preview_chars = pdf_preview_chars or settings.pdf_preview_chars

    @property
    def invoker(self) -> ModelInvoker:
        return self._invoker

    async def run_task(self, task: AnalysisTask, inputs: TaskInputs) -> ParsedOutcome:
        prompt = build_prompt(task, inputs)
        started = time.perf_counter()
        raw_text = await call_with_retry(
            lambda: self._invoker.complete(prompt),
            policy=self._retry_policy,
            sleep=self._sleep,
            label=task.value,
        )
        outcome = self._parser.parse(task, raw_text)
        logger.info(
            "llm_task_completed task=%s outcome=%s latency_ms=%s",
            task.value,
            "fallback" if isinstance(outcome, Fallback) else "ok",
            int((time.perf_counter() - started) * 1000),
        )
        return outcome

    async def analyze_resume(
        self,
        content: bytes,
        *,
        filename: str,
        mime_type: str | None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        extracted = await asyncio.to_thread(
            extract_resume_text,
            content,
            mime_type=mime_type,
            filename=filename,
            max_chars=self._max_chars,
            pdf_preview_chars=self._pdf_preview_chars,
        )
        outcome = await self.run_task(AnalysisTask.ANALYZE, TaskInputs(resume_content=extracted.text))
        upload = UploadMetadata(file_name=filename, file_size=len(content), resume_content=extracted.text)
        return assemble(AnalysisTask.ANALYZE, outcome.data, upload=upload, now=now)

    async def match_job_description(self, resume_content: str, job_description: str) -> dict[str, Any]:
        inputs = TaskInputs(resume_content=resume_content, job_description=job_description)
        outcome = await self.run_task(AnalysisTask.MATCH_JOB_DESCRIPTION, inputs)
        return assemble(AnalysisTask.MATCH_JOB_DESCRIPTION, outcome.data)

    async def improve_resume(
        self, resume_content: str, suggestions: Sequence[str] | None = None
    ) -> dict[str, Any]:
        inputs = TaskInputs(resume_content=resume_content, suggestions=suggestions)
        outcome = await self.run_task(AnalysisTask.IMPROVE, inputs)
        return assemble(AnalysisTask.IMPROVE, outcome.data)

    async def generate_interview_questions(
        self, resume_content: str, job_description: str | None = None
    ) -> dict[str, Any]:
        inputs = TaskInputs(resume_content=resume_content, job_description=job_description)
        outcome = await self.run_task(AnalysisTask.INTERVIEW_QUESTIONS, inputs)
        return assemble(AnalysisTask.INTERVIEW_QUESTIONS, outcome.data)

    async def generate_cover_letter(
        self,
        job_description: str,
        resume_content: str | None = None,
        *,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        inputs = TaskInputs(resume_content=resume_content, job_description=job_description)
        outcome = await self.run_task(AnalysisTask.COVER_LETTER, inputs)
        return assemble(AnalysisTask.COVER_LETTER, outcome.data, now=now)
