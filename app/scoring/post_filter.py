"""Reconcile the evaluator's missing-skill list with what was already matched.

The evaluator is asked not to report a skill as both matched and missing, but
it does anyway, and it also proposes "missing" skills the job never asked for.
``filter_missing_skills`` is a fuzzy set difference with four drop rules:

1. the candidate is not part of the job's own vocabulary;
2. an experience/qualification requirement whose keywords already show up in
   the resume;
3. a compound phrase whose every component is matched;
4. the candidate is equivalent to a matched skill (see ``equivalence``). A
   compound phrase is only compared with the whole-phrase rungs, never by
   token overlap, so one matched component cannot hide the unmatched ones.
"""

from __future__ import annotations

import re
from typing import Iterable

from app.scoring.equivalence import (
    are_equivalent_skills,
    is_direct_match,
    is_known_synonym,
    is_normalized_match,
)
from app.scoring.models import ParsedProfile

EXPERIENCE_MARKERS = ("experience", "qualification")
EXPERIENCE_FILLER_RE = re.compile(r"experience|qualification|skills?|knowledge|abilit(?:y|ies)")
EXPERIENCE_STOPWORDS = {"on", "in", "with", "of", "the", "and", "or"}
MIN_KEYWORD_LEN = 3

COMPOUND_PREFIX_RE = re.compile(r"\b(?:knowledge of|skills in|abilities in|experience with)\b")
COMPOUND_SPLIT_RE = re.compile(r",|\band\b|\(|\)|/")
MIN_COMPONENT_LEN = 3

TOKEN_EDGE_CHARS = " \t\n-.,;:()[]"


def is_job_skill(candidate: str, job_vocabulary: Iterable[str]) -> bool:
    candidate = candidate.lower().strip()
    if not candidate:
        return False
    return any(term and (term in candidate or candidate in term) for term in job_vocabulary)


def experience_keywords(candidate: str) -> list[str]:
    stripped = EXPERIENCE_FILLER_RE.sub(" ", candidate.lower())
    keywords: list[str] = []
    for raw in stripped.split():
        word = raw.strip(TOKEN_EDGE_CHARS)
        if len(word) < MIN_KEYWORD_LEN or word in EXPERIENCE_STOPWORDS:
            continue
        keywords.append(word)
    return keywords


def is_experience_requirement_met(
    candidate: str,
    profile: ParsedProfile,
    matched_lower: list[str],
) -> bool:
    candidate = candidate.lower()
    if not any(marker in candidate for marker in EXPERIENCE_MARKERS):
        return False

    keywords = experience_keywords(candidate)
    if not keywords:
        return False

    experience_text = profile.experience_summary.lower()
    skills_text = " ".join(profile.skills).lower()
    return any(
        keyword in experience_text
        or keyword in skills_text
        or any(keyword in matched for matched in matched_lower)
        for keyword in keywords
    )


def split_compound_phrase(candidate: str) -> list[str]:
    stripped = COMPOUND_PREFIX_RE.sub(" ", candidate.lower())
    components = [part.strip() for part in COMPOUND_SPLIT_RE.split(stripped)]
    return [part for part in components if len(part) >= MIN_COMPONENT_LEN]


def is_compound_phrase_satisfied(components: list[str], matched_lower: list[str]) -> bool:
    return all(
        any(component in matched or matched in component for matched in matched_lower if matched)
        for component in components
    )


def is_already_matched(candidate: str, matched_skills: Iterable[str]) -> bool:
    return any(are_equivalent_skills(candidate, matched) for matched in matched_skills)


def is_compound_phrase_matched(candidate: str, matched_skills: Iterable[str]) -> bool:
    return any(
        is_direct_match(candidate, matched)
        or is_normalized_match(candidate, matched)
        or is_known_synonym(candidate, matched)
        for matched in matched_skills
    )


def filter_missing_skills(
    missing_skills: Iterable[str],
    matched_skills: Iterable[str],
    job_vocabulary: Iterable[str],
    profile: ParsedProfile,
) -> list[str]:
    matched = [skill.strip() for skill in matched_skills if skill and skill.strip()]
    matched_lower = [skill.lower() for skill in matched]
    vocabulary = [term.lower().strip() for term in job_vocabulary if term and term.strip()]

    kept: list[str] = []
    seen: set[str] = set()
    for raw in missing_skills:
        if not isinstance(raw, str):
            continue
        candidate = raw.strip()
        key = candidate.lower()
        if not candidate or key in seen:
            continue

        if not is_job_skill(candidate, vocabulary):
            continue
        if is_experience_requirement_met(candidate, profile, matched_lower):
            continue

        components = split_compound_phrase(candidate)
        if len(components) > 1:
            if is_compound_phrase_satisfied(components, matched_lower):
                continue
            if is_compound_phrase_matched(candidate, matched):
                continue
        elif is_already_matched(candidate, matched):
            continue

        if key in matched_lower:
            continue
        seen.add(key)
        kept.append(candidate)
    return kept
