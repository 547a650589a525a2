import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str
    base_url: str | None
    timeout_s: float


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if _looks_like_placeholder(api_key):
        api_key = ""
    base_url = (os.getenv("OPENAI_BASE_URL") or "").strip() or None
    try:
        timeout_s = float(os.getenv("OPENAI_TIMEOUT_S", "30"))
    except ValueError:
        timeout_s = 30.0
    return AIConfig(provider=provider, model=model, api_key=api_key, base_url=base_url, timeout_s=timeout_s)
