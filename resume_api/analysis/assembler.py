from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from resume_api.ai.types import AnalysisTask


@dataclass(frozen=True)
class UploadMetadata:
    file_name: str
    file_size: int
    resume_content: str


def new_analysis_id() -> str:
    return uuid.uuid4().hex


def isoformat_utc(moment: datetime | None = None) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble_analysis(
    structured: dict[str, Any],
    upload: UploadMetadata,
    *,
    now: datetime | None = None,
    id_factory: Callable[[], str] = new_analysis_id,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": id_factory(),
        "fileName": upload.file_name,
        "fileSize": upload.file_size,
        "uploadedAt": isoformat_utc(now),
        "resumeContent": upload.resume_content,
    }
    record.update(structured)
    return record


def assemble_cover_letter(structured: dict[str, Any], *, now: datetime | None = None) -> dict[str, Any]:
    result = dict(structured)
    if not result.get("generatedAt"):
        result["generatedAt"] = isoformat_utc(now)
    return result


def assemble(
    task: AnalysisTask,
    structured: dict[str, Any],
    *,
    upload: UploadMetadata | None = None,
    now: datetime | None = None,
    id_factory: Callable[[], str] = new_analysis_id,
) -> dict[str, Any]:
    if task is AnalysisTask.ANALYZE:
        if upload is None:
            raise ValueError("Upload metadata is required to assemble an analysis record")
        return assemble_analysis(structured, upload, now=now, id_factory=id_factory)
    if task is AnalysisTask.COVER_LETTER:
        return assemble_cover_letter(structured, now=now)
    return structured
