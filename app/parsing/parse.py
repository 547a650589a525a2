from __future__ import annotations

import hashlib
import io
import logging
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

from .models import ParsedBlock, ParsedDoc

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
}
EXTENSIONS = {".pdf": "pdf", ".docx": "docx", ".txt": "txt"}


class UnsupportedDocumentError(ValueError):
    pass


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def detect_source_type(filename: str, content_type: str | None = None) -> str:
    """Resolve pdf/docx/txt from the declared content type, then the extension."""
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared in CONTENT_TYPES:
        return CONTENT_TYPES[declared]
    extension = PurePath(filename or "").suffix.lower()
    if extension in EXTENSIONS:
        return EXTENSIONS[extension]
    raise UnsupportedDocumentError(
        f"Unsupported file type '{extension or declared or 'unknown'}'. Supported types: .pdf, .docx, .txt"
    )


def _parse_txt(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        text = content.decode("utf-8", errors="replace")
        warnings.append("Text file is not valid UTF-8; undecodable bytes were replaced.")
    return text, [], warnings


def _parse_pdf(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
                blocks.append(ParsedBlock(page=index, text=page_text))
        if not text_parts:
            warnings.append("No extractable text found in PDF.")
        return "\n".join(text_parts), blocks, warnings
    except Exception as exc:
        logger.warning("pdf_parse_failed: %s", exc)
        warnings.append(f"PDF parsing failed: {exc}")
        return "", blocks, warnings


def _parse_docx(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        document = Document(io.BytesIO(content))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
        for paragraph_text in paragraphs:
            blocks.append(ParsedBlock(page=None, text=paragraph_text))
        if not paragraphs:
            warnings.append("No extractable text found in DOCX.")
        return "\n".join(paragraphs), blocks, warnings
    except Exception as exc:
        logger.warning("docx_parse_failed: %s", exc)
        warnings.append(f"DOCX parsing failed: {exc}")
        return "", blocks, warnings


PARSERS = {"txt": _parse_txt, "pdf": _parse_pdf, "docx": _parse_docx}


def parse_upload(filename: str, content: bytes, content_type: str | None = None) -> ParsedDoc:
    source_type = detect_source_type(filename, content_type)
    text, blocks, warnings = PARSERS[source_type](content)
    return ParsedDoc(
        doc_id=_compute_doc_id(text=text, filename=filename or ""),
        filename=filename or "",
        source_type=source_type,
        text=text,
        blocks=blocks,
        parsing_warnings=warnings,
    )
