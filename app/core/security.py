from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.core.config import settings

AUTH_ERROR_MESSAGE = "Please provide a valid API key to use the scoring service."


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_ERROR_MESSAGE,
        )


def client_key(request: Request) -> str:
    """Identify the caller for usage limits: the first forwarded hop when trusted, else the peer address."""
    if settings.trust_x_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
