from __future__ import annotations

import re
from typing import Any

_WS_RE = re.compile(r"\s+")


def safe_str(value: Any, max_len: int = 1500) -> str:
    if not isinstance(value, str):
        return ""
    text = _WS_RE.sub(" ", value).strip()
    if len(text) > max_len:
        text = text[:max_len].rstrip()
    return text


def safe_str_list(value: Any, max_items: int, max_len: int = 220) -> list[str]:
    """Keep non-empty string items, deduplicated case-insensitively, up to ``max_items``."""
    if not isinstance(value, list) or max_items <= 0:
        return []
    output: list[str] = []
    seen: set[str] = set()
    for item in value:
        text = safe_str(item, max_len=max_len)
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        output.append(text)
        if len(output) >= max_items:
            break
    return output


def as_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return default


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return default
    return default
