from fastapi import APIRouter

from app.ai.config import load_ai_config

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the scoring service.")
async def health_check():
    ai_config = load_ai_config()
    return {
        "status": "healthy",
        "llm_configured": ai_config.provider == "openai" and bool(ai_config.api_key),
        "model": ai_config.model,
    }
