from __future__ import annotations

from typing import Iterable

POSITION_BUCKETS: tuple[tuple[tuple[str, ...], list[str]], ...] = (
    (("software", "developer", "programming"), ["Software Developer", "Technical Specialist"]),
    (("design", "creative"), ["Designer", "Creative Specialist"]),
    (("manage", "leadership"), ["Project Manager", "Team Lead"]),
    (("market", "sales"), ["Marketing Specialist", "Sales Representative"]),
    (("data", "analysis"), ["Data Analyst", "Business Analyst"]),
)
GENERIC_POSITIONS = ["Professional role in your field", "Specialist position"]


def generate_fallback_positions(skills: Iterable[str]) -> list[str]:
    """Pick two generic job titles from the first bucket whose keywords occur in the skills."""
    skills_text = " ".join(skill for skill in skills if isinstance(skill, str)).lower()
    for keywords, positions in POSITION_BUCKETS:
        if any(keyword in skills_text for keyword in keywords):
            return list(positions)
    return list(GENERIC_POSITIONS)
