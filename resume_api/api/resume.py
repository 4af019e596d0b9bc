import asyncio
import contextlib
import logging
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from resume_api.ai.errors import LLMBackendError
from resume_api.core.config import settings
from resume_api.core.errors import ApiError
from resume_api.core.rate_limit import rate_limit
from resume_api.schemas.resume import (
    CoverLetterRequest,
    ImproveResumeRequest,
    InterviewQuestionsRequest,
    MatchJobDescriptionRequest,
)
from resume_api.services.analysis_service import AnalysisService

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")

CLIENT_CLOSED_REQUEST = 499
UPLOAD_CHUNK_BYTES = 1024 * 64


def get_analysis_service(request: Request) -> AnalysisService:
    service = getattr(request.app.state, "analysis_service", None)
    if service is None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "AI backend is not configured")
    return service


def _has_text(value: str | None) -> bool:
    return bool(value and value.strip())


async def _run_until_disconnect(request: Request, work: Awaitable[T]) -> T:
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=settings.disconnect_poll_s)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("client_disconnected path=%s cancelling_backend_call=true", request.url.path)
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                raise ApiError(CLIENT_CLOSED_REQUEST, "Client closed request")
    finally:
        if not task.done():
            task.cancel()


async def _execute(request: Request, work: Awaitable[T], failure_message: str) -> T:
    try:
        return await _run_until_disconnect(request, work)
    except ApiError:
        raise
    except LLMBackendError as exc:
        logger.error("llm_backend_failed path=%s status=%s: %s", request.url.path, exc.status_code, exc)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, failure_message) from exc
    except Exception as exc:
        logger.exception("request_failed path=%s", request.url.path)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, failure_message) from exc


async def _read_upload(file: UploadFile, limit: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise ApiError(
                status.HTTP_400_BAD_REQUEST,
                f"File too large. Maximum allowed size is {limit // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/resume/analyze")
@rate_limit()
async def analyze_resume(
    request: Request,
    file: UploadFile | None = File(default=None),
    service: AnalysisService = Depends(get_analysis_service),
):
    if file is None:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "No file uploaded")

    content = await _read_upload(file, settings.max_upload_bytes)
    filename = file.filename or "resume"
    return await _execute(
        request,
        service.analyze_resume(content, filename=filename, mime_type=file.content_type),
        "Failed to analyze resume",
    )


@router.post("/resume/match-jd")
@rate_limit()
async def match_job_description(
    request: Request,
    payload: MatchJobDescriptionRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    if not _has_text(payload.resume_content) or not _has_text(payload.job_description):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Resume content and job description are required")
    return await _execute(
        request,
        service.match_job_description(payload.resume_content, payload.job_description),
        "Failed to match job description",
    )


@router.post("/resume/improve")
@rate_limit()
async def improve_resume(
    request: Request,
    payload: ImproveResumeRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    if not _has_text(payload.resume_content):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Resume content is required")
    return await _execute(
        request,
        service.improve_resume(payload.resume_content, payload.suggestions),
        "Failed to improve resume",
    )


@router.post("/resume/interview-questions")
@rate_limit()
async def interview_questions(
    request: Request,
    payload: InterviewQuestionsRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    if not _has_text(payload.resume_content):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Resume content is required")
    return await _execute(
        request,
        service.generate_interview_questions(payload.resume_content, payload.job_description),
        "Failed to generate interview questions",
    )


@router.post("/resume/cover-letter")
@rate_limit()
async def cover_letter(
    request: Request,
    payload: CoverLetterRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    if not _has_text(payload.job_description):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Job description is required")
    return await _execute(
        request,
        service.generate_cover_letter(payload.job_description, payload.resume_content),
        "Failed to generate cover letter",
    )
