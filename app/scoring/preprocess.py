from __future__ import annotations

import re

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
URL_RE = re.compile(r"https?://\S+|www\.\S+")
NOISE_RE = re.compile(r"[^\w\s\-.,;:()\[\]]")
INLINE_SPACE_RE = re.compile(r"[^\S\n]+")
SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def preprocess_text(text: str, max_length: int) -> str:
    """Redact contact details, drop noise characters and cap the length.

    Redaction runs before the noise filter: the patterns need ``@``, ``+``
    and ``/``, which the filter removes. Phone numbers are redacted once more
    after whitespace is collapsed, since collapsing can join digit groups.
    The placeholder tokens only use characters the filter keeps, so running
    the function twice is a no-op.
    """
    if not text or max_length <= 0:
        return ""

    cleaned = URL_RE.sub("[URL]", text)
    cleaned = EMAIL_RE.sub("[EMAIL]", cleaned)
    cleaned = PHONE_RE.sub("[PHONE]", cleaned)
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = NOISE_RE.sub(" ", cleaned)
    cleaned = INLINE_SPACE_RE.sub(" ", cleaned)
    cleaned = SPACE_AROUND_NEWLINE_RE.sub("\n", cleaned)
    cleaned = EXTRA_NEWLINES_RE.sub("\n\n", cleaned)
    cleaned = PHONE_RE.sub("[PHONE]", cleaned)
    return cleaned.strip()[:max_length].strip()
