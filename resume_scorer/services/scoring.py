from typing import Iterable, List, Optional, Tuple
from resume_scorer.models.schemas import (
    CatalogEntry, RoleNotFound, ScoringResult, ROLE_NOT_FOUND_MESSAGE
)
from resume_scorer.services.catalog import find_role

# Each of skills and frameworks contributes at most this much to the probability
CATEGORY_WEIGHT = 50.0
PERFECT_SCORE = 100.0
PARTIAL_MATCH_MIN = 50.0

PERFECT_MATCH_FEEDBACK = "Great job! You are a perfect match for this role!"
PARTIAL_MATCH_FEEDBACK = "You have some of the required skills and frameworks. Consider improving: "
LOW_MATCH_FEEDBACK = "You need to improve your skills and frameworks significantly. Consider learning: "


def classify(required: Iterable[str], resume_text: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """Split required tokens into (matched, missing) by case-insensitive containment"""
    haystack = resume_text.casefold()
    matched: List[str] = []
    missing: List[str] = []
    for token in required:
        if token.casefold() in haystack:
            matched.append(token)
        else:
            missing.append(token)
    return tuple(matched), tuple(missing)


def coverage_score(matched_count: int, required_count: int, weight: float = CATEGORY_WEIGHT) -> float:
    # an empty requirement list contributes nothing
    if required_count <= 0:
        return 0.0
    return (matched_count / required_count) * weight


def build_feedback(probability: float, missing_skills: Iterable[str], missing_frameworks: Iterable[str]) -> str:
    if probability == PERFECT_SCORE:
        return PERFECT_MATCH_FEEDBACK
    missing = ", ".join(list(missing_skills) + list(missing_frameworks))
    if probability >= PARTIAL_MATCH_MIN:
        return PARTIAL_MATCH_FEEDBACK + missing
    return LOW_MATCH_FEEDBACK + missing


def role_not_found(job_role: Optional[str]) -> ScoringResult:
    return ScoringResult(
        job_role=job_role,
        role_found=False,
        probability=0.0,
        feedback=ROLE_NOT_FOUND_MESSAGE,
    )


def score_entry(resume_text: str, entry: CatalogEntry) -> ScoringResult:
    matched_skills, missing_skills = classify(entry.required_skills, resume_text)
    matched_frameworks, missing_frameworks = classify(entry.required_frameworks, resume_text)

    skills_score = coverage_score(len(matched_skills), len(entry.required_skills))
    frameworks_score = coverage_score(len(matched_frameworks), len(entry.required_frameworks))
    probability = skills_score + frameworks_score

    return ScoringResult(
        job_role=entry.job_role,
        role_found=True,
        probability=probability,
        skills_score=skills_score,
        frameworks_score=frameworks_score,
        matched_skills=matched_skills,
        missing_skills=missing_skills,
        matched_frameworks=matched_frameworks,
        missing_frameworks=missing_frameworks,
        feedback=build_feedback(probability, missing_skills, missing_frameworks),
    )


def score_resume(resume_text: str, job_role: Optional[str], catalog: Iterable[CatalogEntry]) -> ScoringResult:
    """Score resume text against the requirements of ``job_role``.

    Skills and frameworks are weighted equally (50 points each) regardless of how
    many of each the role lists. An unknown role is a normal outcome: probability
    0 with the not-found message in every text field.
    """
    lookup = find_role(catalog, job_role)
    if isinstance(lookup, RoleNotFound):
        return role_not_found(job_role)
    return score_entry(resume_text or "", lookup.entry)
