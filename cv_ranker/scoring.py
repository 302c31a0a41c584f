"""Heuristic compatibility score derived from the extracted profile."""
from __future__ import annotations

from .candidate import NOT_PROCESSED_MARKER, NOT_SPECIFIED
from .extraction_client import ExtractedProfile

BASE_SCORE = 50
EXPERIENCE_BONUS = 10
EDUCATION_BONUS = 5
SKILL_BONUS = 2
ROLE_BONUS = 10
MAX_SCORE = 95
ERROR_PENALTY = 30


def heuristic_score(profile: ExtractedProfile, cv_text: str) -> float:
    """Score how complete and relevant a profile looks.

    The score rewards the presence of experience, education, skills and a
    suggested role, capped below 100. Summaries that mention an error are
    penalised and placeholder texts for unreadable files always score zero.
    """

    score = BASE_SCORE
    if profile.experience > 0:
        score += EXPERIENCE_BONUS
    if profile.education and profile.education != NOT_SPECIFIED:
        score += EDUCATION_BONUS
    score += len(profile.matched_skills) * SKILL_BONUS
    if profile.suggested_role and profile.suggested_role != NOT_SPECIFIED:
        score += ROLE_BONUS
    score = min(score, MAX_SCORE)

    if profile.experience_summary and "error" in profile.experience_summary.lower():
        score = max(0, score - ERROR_PENALTY)
    if NOT_PROCESSED_MARKER in cv_text:
        score = 0

    return float(score)
