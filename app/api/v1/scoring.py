from fastapi import APIRouter, File, Form, Header, HTTPException, Request, UploadFile, status

from app.core.config import settings
from app.core.feature_limit import FeatureLimitExceeded, enforce_feature_limit
from app.core.rate_limit import rate_limit
from app.core.security import check_api_key, client_key
from app.schemas.scoring import ScoreResponse, ScoreTextRequest
from app.services.scoring_service import ScoringInputError, extract_resume_text, run_scoring

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 64
FEATURES = {"first_pass": "score", "optimized": "score_optimized"}


def _enforce_feature_limit(request: Request, variant: str) -> None:
    try:
        enforce_feature_limit(client_key(request), FEATURES[variant])
    except FeatureLimitExceeded as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Daily scoring limit reached. Please try again tomorrow.",
        ) from exc


async def _read_upload(file: UploadFile) -> bytes:
    max_bytes = settings.max_upload_mb * 1024 * 1024
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_mb} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def _score_upload(request: Request, file: UploadFile, job: str, variant: str) -> ScoreResponse:
    if not (job or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job description is required.")

    payload = await _read_upload(file)
    try:
        resume_text = extract_resume_text(file.filename or "resume", payload, file.content_type)
    except ScoringInputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    _enforce_feature_limit(request, variant)
    try:
        result = await run_scoring(resume_text, job, variant)
    except ScoringInputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return ScoreResponse.from_result(result)


@router.post("/resume/score", response_model=ScoreResponse)
@rate_limit()
async def score_resume_upload(
    request: Request,
    file: UploadFile = File(...),
    job: str = Form(...),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key)
    return await _score_upload(request, file, job, "first_pass")


@router.post("/resume/score-optimized", response_model=ScoreResponse)
@rate_limit()
async def score_optimized_resume_upload(
    request: Request,
    file: UploadFile = File(...),
    job: str = Form(...),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key)
    return await _score_upload(request, file, job, "optimized")


@router.post("/resume/score-text", response_model=ScoreResponse)
@rate_limit()
async def score_resume_text(
    request: Request,
    payload: ScoreTextRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key)
    if not payload.job_description.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job description is required.")
    _enforce_feature_limit(request, payload.variant)
    try:
        result = await run_scoring(payload.resume_text, payload.job_description, payload.variant)
    except ScoringInputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return ScoreResponse.from_result(result)
