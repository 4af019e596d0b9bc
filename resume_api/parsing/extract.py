from __future__ import annotations

import base64
import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from .models import ExtractedResume

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def _extension(filename: str | None) -> str:
    name = (filename or "").strip().lower()
    return name.rsplit(".", 1)[-1] if "." in name else ""


def _pdf_preview(content: bytes, preview_chars: int) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"[PDF Content - Base64 encoded for AI analysis]\n{encoded[:preview_chars]}..."


def _parse_pdf(content: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        reader = PdfReader(BytesIO(content))
        parts = [(page.extract_text() or "").strip() for page in reader.pages]
        text = "\n".join(part for part in parts if part)
        if not text:
            warnings.append("No extractable text found in PDF.")
        return text, warnings
    except Exception as exc:  # noqa: BLE001 - any pypdf failure degrades to the base64 preview
        warnings.append(f"PDF parsing failed: {exc}")
        return "", warnings


def _parse_docx(content: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        document = Document(BytesIO(content))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
        if not paragraphs:
            warnings.append("No extractable text found in DOCX.")
        return "\n".join(paragraphs), warnings
    except Exception as exc:  # noqa: BLE001 - malformed archives fall back to plain decoding
        warnings.append(f"DOCX parsing failed: {exc}")
        return "", warnings


def _decode_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def extract_resume_text(
    content: bytes,
    *,
    mime_type: str | None,
    filename: str | None,
    max_chars: int = 10000,
    pdf_preview_chars: int = 5000,
) -> ExtractedResume:
    mime = (mime_type or "").split(";")[0].strip().lower()
    ext = _extension(filename)
    warnings: list[str] = []

    if mime == PDF_MIME or ext == "pdf":
        source_type = "pdf"
        if content.startswith(PDF_MAGIC):
            text, warnings = _parse_pdf(content)
        else:
            text, warnings = "", ["Upload is labelled PDF but has no PDF header."]
        if not text:
            text = _pdf_preview(content, pdf_preview_chars)
    elif (mime == DOCX_MIME or ext == "docx") and content.startswith(ZIP_MAGICS):
        source_type = "docx"
        text, warnings = _parse_docx(content)
        if not text:
            text = _decode_text(content)
    else:
        source_type = "txt"
        text = _decode_text(content)

    truncated = len(text) > max_chars
    if truncated:
        text = text[:max_chars]
    for warning in warnings:
        logger.info("resume_extraction_warning filename=%s source_type=%s: %s", filename, source_type, warning)
    return ExtractedResume(source_type=source_type, text=text, truncated=truncated, warnings=warnings)
