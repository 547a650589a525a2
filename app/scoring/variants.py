from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from app.core.config.scoring import get_scoring_value
from app.scoring.prompts import FIRST_PASS_SYSTEM_PROMPT, OPTIMIZED_SYSTEM_PROMPT

VariantName = Literal["first_pass", "optimized"]


@dataclass(frozen=True)
class ScoringVariant:
    name: VariantName
    system_prompt: str
    default_score: int
    score_floor: int
    failure_score: int
    target_score: int
    matched_limit: int
    missing_limit: int
    recommendations_limit: int
    weights: dict[str, float]
    default_recommendations: tuple[str, ...]
    upstream_error_message: str
    parse_error_message: str
    offers_alternative_positions: bool
    validates_optimization: bool


def _variant_value(name: str, key: str, default):
    return get_scoring_value(f"variants.{name}.{key}", default)


def _weights(name: str, defaults: dict[str, float]) -> dict[str, float]:
    raw = _variant_value(name, "weights", {}) or {}
    return {key: float(raw.get(key, value)) for key, value in defaults.items()}


@lru_cache(maxsize=1)
def first_pass_variant() -> ScoringVariant:
    name: VariantName = "first_pass"
    return ScoringVariant(
        name=name,
        system_prompt=FIRST_PASS_SYSTEM_PROMPT,
        default_score=int(_variant_value(name, "default_score", 25)),
        score_floor=int(_variant_value(name, "score_floor", 0)),
        failure_score=int(_variant_value(name, "failure_score", 0)),
        target_score=int(_variant_value(name, "target_score", 0)),
        matched_limit=int(_variant_value(name, "matched_limit", 15)),
        missing_limit=int(_variant_value(name, "missing_limit", 10)),
        recommendations_limit=int(_variant_value(name, "recommendations_limit", 3)),
        weights=_weights(
            name,
            {
                "skills_match": 0.4,
                "experience_relevance": 0.3,
                "education_certifications": 0.1,
                "additional_factors": 0.2,
            },
        ),
        default_recommendations=("Enhance resume with relevant skills",),
        upstream_error_message="Error analyzing resume. Please try again.",
        parse_error_message="Error analyzing resume. The response format was invalid.",
        offers_alternative_positions=True,
        validates_optimization=False,
    )


@lru_cache(maxsize=1)
def optimized_variant() -> ScoringVariant:
    name: VariantName = "optimized"
    return ScoringVariant(
        name=name,
        system_prompt=OPTIMIZED_SYSTEM_PROMPT,
        default_score=int(_variant_value(name, "default_score", 90)),
        score_floor=int(_variant_value(name, "score_floor", 85)),
        failure_score=int(_variant_value(name, "failure_score", 85)),
        target_score=int(_variant_value(name, "target_score", 90)),
        matched_limit=int(_variant_value(name, "matched_limit", 20)),
        missing_limit=int(_variant_value(name, "missing_limit", 5)),
        recommendations_limit=int(_variant_value(name, "recommendations_limit", 2)),
        weights=_weights(
            name,
            {
                "skills_match": 0.5,
                "experience_relevance": 0.3,
                "education_certifications": 0.1,
                "additional_factors": 0.1,
            },
        ),
        default_recommendations=(),
        upstream_error_message="Error occurred while validating optimized resume. Please try again.",
        parse_error_message="Error analyzing optimized resume. The response format was invalid.",
        offers_alternative_positions=False,
        validates_optimization=True,
    )


def get_variant(name: str) -> ScoringVariant:
    if name == "first_pass":
        return first_pass_variant()
    if name == "optimized":
        return optimized_variant()
    raise ValueError(f"Unknown scoring variant '{name}'. Use 'first_pass' or 'optimized'.")
