from __future__ import annotations

import asyncio
import logging

from app.core.config import settings
from app.core.config.scoring import get_scoring_value
from app.parsing.parse import UnsupportedDocumentError, parse_upload
from app.scoring.models import MatchResult
from app.scoring.scorer import score_optimized_resume, score_resume

logger = logging.getLogger(__name__)


class ScoringInputError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 400, code: str = "invalid_input"):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def _scorer_for(variant: str):
    if variant == "optimized":
        return score_optimized_resume
    return score_resume


def extract_resume_text(filename: str, content: bytes, content_type: str | None) -> str:
    max_bytes = settings.max_upload_mb * 1024 * 1024
    if not content:
        raise ScoringInputError("Resume file is empty.", code="empty_file")
    if len(content) > max_bytes:
        raise ScoringInputError(
            f"Resume file exceeds the {settings.max_upload_mb} MB upload limit.",
            status_code=413,
            code="file_too_large",
        )

    try:
        doc = parse_upload(filename, content, content_type)
    except UnsupportedDocumentError as exc:
        raise ScoringInputError(str(exc), status_code=415, code="unsupported_file_type") from exc

    if doc.extraction_failed:
        logger.info("resume_extraction_failed filename=%s warnings=%s", filename, doc.parsing_warnings)
        raise ScoringInputError(
            "Failed to extract text from the resume. " + " ".join(doc.parsing_warnings),
            status_code=422,
            code="extraction_failed",
        )

    min_chars = int(get_scoring_value("validation.min_uploaded_resume_chars", 50))
    if len(doc.text.strip()) < min_chars:
        raise ScoringInputError(
            "Could not extract sufficient text from the resume. Please upload a text-based PDF or DOCX.",
            code="resume_too_short",
        )
    return doc.text


async def run_scoring(resume_text: str, job_description: str, variant: str = "first_pass") -> MatchResult:
    """Run one scoring request under the overall request timeout."""
    scorer = _scorer_for(variant)
    try:
        return await asyncio.wait_for(
            scorer(resume_text, job_description),
            timeout=settings.scoring_request_timeout_s,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("scoring_timeout variant=%s timeout_s=%s", variant, settings.scoring_request_timeout_s)
        raise ScoringInputError(
            "Scoring took too long. Please try again.",
            status_code=408,
            code="timeout",
        ) from exc

