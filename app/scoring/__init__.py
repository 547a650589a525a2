from .models import CategoryScores, JobRequirements, MatchResult, OptimizationValidation, ParsedProfile
from .positions import generate_fallback_positions
from .post_filter import filter_missing_skills
from .preprocess import preprocess_text
from .scorer import score_optimized_resume, score_resume
from .variants import ScoringVariant, get_variant

__all__ = [
    "CategoryScores",
    "JobRequirements",
    "MatchResult",
    "OptimizationValidation",
    "ParsedProfile",
    "ScoringVariant",
    "filter_missing_skills",
    "generate_fallback_positions",
    "get_variant",
    "preprocess_text",
    "score_optimized_resume",
    "score_resume",
]
