from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.scoring.models import CategoryScores, MatchResult, OptimizationValidation


class ScoreTextRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=200_000)
    job_description: str = Field(..., max_length=100_000)
    variant: Literal["first_pass", "optimized"] = "first_pass"


class ScoreResponse(BaseModel):
    score: int
    match_score: int
    match_percentage: int
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    category_scores: CategoryScores = Field(default_factory=CategoryScores)
    alternative_positions: list[str] | None = None
    optimization_validation: OptimizationValidation | None = None

    @classmethod
    def from_result(cls, result: MatchResult) -> "ScoreResponse":
        return cls(
            **result.model_dump(),
            match_score=result.score,
            match_percentage=result.score,
        )
