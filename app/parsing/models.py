from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

SUPPORTED_SOURCE_TYPES = {"pdf", "docx", "txt"}


class ParsedBlock(BaseModel):
    page: int | None = None
    text: str


class ParsedDoc(BaseModel):
    doc_id: str
    filename: str
    source_type: str
    text: str
    blocks: list[ParsedBlock] = Field(default_factory=list)
    parsing_warnings: list[str] = Field(default_factory=list)

    @field_validator("source_type")
    @classmethod
    def _validate_source_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SUPPORTED_SOURCE_TYPES:
            raise ValueError("source_type must be one of: pdf, docx, txt")
        return normalized

    @property
    def extraction_failed(self) -> bool:
        return not self.text.strip() and bool(self.parsing_warnings)
