from __future__ import annotations

import logging

from app.ai.types import CompletionClient
from app.core.config.scoring import get_scoring_value
from app.scoring.coerce import safe_str, safe_str_list
from app.scoring.models import JobRequirements, ParsedProfile
from app.scoring.preprocess import preprocess_text
from app.scoring.prompts import EXTRACTOR_SYSTEM_PROMPT, build_extractor_user_prompt
from app.services.scoring_llm import ScoringLLMError, request_json

logger = logging.getLogger(__name__)

SOFT_SKILL_VOCABULARY = (
    "Communication Skills",
    "Teamwork",
    "Leadership",
    "Problem Solving",
    "Time Management",
    "Attention to Detail",
    "Client Relationship Management",
    "Planning",
    "Organizational Skills",
    "Multitasking",
    "Adaptability",
    "Critical Thinking",
    "Collaboration",
    "Project Coordination",
)
SOFT_SKILL_MARKERS = ("communication", "teamwork", "leadership", "problem", "time management")


def _limit(key: str, default: int) -> int:
    return int(get_scoring_value(f"extractor.limits.{key}", default))


def needs_soft_skill_backstop(skills: list[str]) -> bool:
    min_skills = int(get_scoring_value("extractor.soft_skill_backstop_min_skills", 5))
    if len(skills) < min_skills:
        return True
    lowered = [skill.lower() for skill in skills]
    return not any(marker in skill for skill in lowered for marker in SOFT_SKILL_MARKERS)


def apply_soft_skill_backstop(skills: list[str], resume_text: str) -> list[str]:
    """Append vocabulary terms whose words all occur in the resume text.

    A term is skipped when an extracted skill already contains it, so
    "Communication" alone does not hide "Communication Skills". Never removes
    anything from ``skills``.
    """
    resume_lower = resume_text.lower()
    output = list(skills)
    for term in SOFT_SKILL_VOCABULARY:
        term_lower = term.lower()
        if not all(word in resume_lower for word in term_lower.split()):
            continue
        if any(term_lower in existing.lower() for existing in output):
            continue
        output.append(term)
    return output


async def extract_profile_and_requirements(
    client: CompletionClient,
    resume_text: str,
    job_text: str,
) -> tuple[ParsedProfile, JobRequirements]:
    """One completion call that parses both documents.

    Any completion failure yields empty records; the evaluator then scores
    against empty inputs rather than the request failing here.
    """
    resume_clean = preprocess_text(resume_text, int(get_scoring_value("preprocess.max_resume_chars", 4000)))
    job_clean = preprocess_text(job_text, int(get_scoring_value("preprocess.max_job_description_chars", 2500)))

    try:
        data = await request_json(
            client,
            system_prompt=EXTRACTOR_SYSTEM_PROMPT,
            user_prompt=build_extractor_user_prompt(resume_clean, job_clean),
            stage="extract",
            temperature=float(get_scoring_value("llm.temperature", 0.1)),
            max_tokens=int(get_scoring_value("llm.extractor_max_tokens", 2500)),
        )
    except ScoringLLMError as exc:
        logger.warning("extraction_failed code=%s: %s", exc.code, exc)
        return ParsedProfile(), JobRequirements()

    max_skills = _limit("resume_skills", 25)
    skills = safe_str_list(data.get("resume_skills"), max_items=max_skills)
    if needs_soft_skill_backstop(skills):
        before = len(skills)
        skills = apply_soft_skill_backstop(skills, resume_clean)
        logger.info("soft_skill_backstop added=%s", len(skills) - before)

    profile = ParsedProfile(
        summary=safe_str(data.get("resume_summary")),
        skills=skills[:max_skills],
        experience_summary=safe_str(data.get("resume_experience"), max_len=3000),
    )
    requirements = JobRequirements(
        required_skills=safe_str_list(data.get("job_required_skills"), max_items=_limit("required_skills", 15)),
        preferred_skills=safe_str_list(data.get("job_preferred_skills"), max_items=_limit("preferred_skills", 10)),
        keywords=safe_str_list(data.get("job_keywords"), max_items=_limit("keywords", 15)),
        experience_level=safe_str(data.get("experience_level"), max_len=300),
    )
    return profile, requirements
