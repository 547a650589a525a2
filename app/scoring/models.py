from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ParsedProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str = ""
    skills: list[str] = Field(default_factory=list, max_length=25)
    experience_summary: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.summary and not self.skills and not self.experience_summary


class JobRequirements(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_skills: list[str] = Field(default_factory=list, max_length=15)
    preferred_skills: list[str] = Field(default_factory=list, max_length=10)
    keywords: list[str] = Field(default_factory=list, max_length=15)
    experience_level: str = ""

    def vocabulary(self) -> list[str]:
        """Lower-cased required + preferred + keyword terms, in that order."""
        terms = [*self.required_skills, *self.preferred_skills, *self.keywords]
        return [term.lower().strip() for term in terms if term and term.strip()]


class CategoryScores(BaseModel):
    skills_match: int = 0
    experience_relevance: int = 0
    education_certifications: int = 0
    additional_factors: int = 0


class OptimizationValidation(BaseModel):
    achieved_zero_missing: bool = False
    meets_target_score: bool = False
    skills_demonstrated: int = Field(default=0, ge=0)
    error: bool = False


class MatchResult(BaseModel):
    score: int = Field(ge=0, le=100)
    matched_skills: list[str] = Field(default_factory=list, max_length=20)
    missing_skills: list[str] = Field(default_factory=list, max_length=10)
    recommendations: list[str] = Field(default_factory=list, max_length=3)
    category_scores: CategoryScores = Field(default_factory=CategoryScores)
    alternative_positions: list[str] | None = None
    optimization_validation: OptimizationValidation | None = None
