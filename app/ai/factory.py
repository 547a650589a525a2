import logging
from functools import lru_cache

from app.ai.config import load_ai_config
from app.ai.types import CompletionClient

from app.ai.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _openai_provider(model: str, api_key: str, base_url: str | None, timeout_s: float) -> OpenAIProvider:
    return OpenAIProvider(model=model, api_key=api_key, base_url=base_url, timeout_s=timeout_s)


def get_completion_client() -> CompletionClient | None:
    """Return the configured client, or None when scoring cannot call out.

    Providers are cached per configuration so requests share one HTTP pool.
    """
    cfg = load_ai_config()

    if cfg.provider != "openai":
        logger.warning("completion_client_unavailable provider=%s reason=unsupported_provider", cfg.provider)
        return None

    if not cfg.api_key:
        logger.info("completion_client_unavailable provider=%s reason=missing_api_key", cfg.provider)
        return None

    return _openai_provider(cfg.model, cfg.api_key, cfg.base_url, cfg.timeout_s)
