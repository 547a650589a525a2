from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from app.ai.types import CompletionClient
from app.core.config.scoring import get_scoring_value
from app.scoring.coerce import as_bool, as_int, safe_str_list
from app.scoring.models import JobRequirements, ParsedProfile
from app.scoring.prompts import build_evaluator_user_prompt
from app.scoring.variants import ScoringVariant
from app.services.scoring_llm import ResponseParseError, request_json

RAW_LIST_LIMIT = 40


@dataclass(frozen=True)
class RawEvaluation:
    score: int
    matched_skills: list[str]
    missing_skills: list[str]
    recommendations: list[str]
    alternative_positions: list[str]
    optimization_validation: dict[str, Any] | None


def coerce_score(value: Any, default: int) -> int:
    """Read ``match_score`` leniently.

    Missing values and non-numeric strings fall back to ``default``; numeric
    strings are accepted. Structured values mean the response did not follow
    the schema at all.
    """
    if value is None:
        return default
    if isinstance(value, (bool, list, dict)):
        raise ResponseParseError(f"match_score has invalid type {type(value).__name__}.", code="invalid_schema")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return default
        return int(value)
    if isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        try:
            parsed = float(text)
        except ValueError:
            return default
        return int(parsed) if math.isfinite(parsed) else default
    raise ResponseParseError(f"match_score has invalid type {type(value).__name__}.", code="invalid_schema")


def _validation_payload(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, dict):
        return None
    return {
        "achieved_zero_missing": as_bool(value.get("achieved_zero_missing")),
        "meets_target_score": as_bool(value.get("meets_target_score")),
        "skills_demonstrated": max(0, as_int(value.get("skills_demonstrated"))),
    }


async def evaluate_match(
    client: CompletionClient,
    profile: ParsedProfile,
    requirements: JobRequirements,
    variant: ScoringVariant,
) -> RawEvaluation:
    data = await request_json(
        client,
        system_prompt=variant.system_prompt,
        user_prompt=build_evaluator_user_prompt(profile, requirements),
        stage="evaluate",
        variant=variant.name,
        temperature=float(get_scoring_value("llm.temperature", 0.1)),
        max_tokens=int(get_scoring_value("llm.evaluator_max_tokens", 1500)),
    )
    return RawEvaluation(
        score=coerce_score(data.get("match_score"), variant.default_score),
        matched_skills=safe_str_list(data.get("matched_skills"), max_items=RAW_LIST_LIMIT),
        missing_skills=safe_str_list(data.get("missing_skills"), max_items=RAW_LIST_LIMIT),
        recommendations=safe_str_list(data.get("recommendations"), max_items=RAW_LIST_LIMIT, max_len=400),
        alternative_positions=safe_str_list(data.get("alternative_positions"), max_items=RAW_LIST_LIMIT),
        optimization_validation=_validation_payload(data.get("optimization_validation")),
    )
