"""Chart aggregation and summary statistics for the dashboard."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

import numpy as np

from .candidate import NOT_DETERMINED, NOT_SPECIFIED, Candidate

SENIORITY_ORDER = (
    "Junior",
    "Semi-Senior",
    "Senior",
    "Lead",
    "Architect",
    "Manager",
    "Other",
    NOT_SPECIFIED,
)

SENIORITY_COLORS: Dict[str, str] = {
    "Junior": "#ef4444",
    "Semi-Senior": "#facc15",
    "Senior": "#22c55e",
    "Lead": "#60a5fa",
    "Architect": "#a855f7",
    "Manager": "#f59e0b",
    NOT_SPECIFIED: "#d1d5db",
    "Other": "#22d3ee",
}


@dataclass(frozen=True)
class CandidateStatistics:
    total: int
    processed: int
    unprocessed: int
    mean_score: float
    median_score: float
    top_score: float
    mean_experience: float


def role_seniority_counts(candidates: Iterable[Candidate]) -> List[Dict[str, object]]:
    """Count candidates per suggested role and seniority.

    Every row carries a count for every seniority seen in the data, so the
    rows can be fed straight into a stacked bar chart.
    """

    counts: Dict[str, Dict[str, int]] = {}
    seniorities: Dict[str, None] = {}

    for candidate in candidates:
        role = candidate.suggested_role or NOT_DETERMINED
        seniority = candidate.seniority or NOT_SPECIFIED
        seniorities.setdefault(seniority, None)
        role_counts = counts.setdefault(role, {})
        role_counts[seniority] = role_counts.get(seniority, 0) + 1

    rows: List[Dict[str, object]] = []
    for role, role_counts in counts.items():
        row: Dict[str, object] = {"role": role}
        for seniority in seniorities:
            row[seniority] = role_counts.get(seniority, 0)
        rows.append(row)
    return rows


def seniority_keys(rows: Iterable[Dict[str, object]]) -> List[str]:
    """Seniority columns in legend order; unknown levels follow, alphabetically."""

    keys = {key for row in rows for key in row if key != "role"}
    known = [key for key in SENIORITY_ORDER if key in keys]
    unknown = sorted(keys.difference(SENIORITY_ORDER))
    return known + unknown


def seniority_color(seniority: str) -> str:
    return SENIORITY_COLORS.get(seniority, SENIORITY_COLORS["Other"])


def summarise_candidates(candidates: Iterable[Candidate]) -> CandidateStatistics:
    candidates = list(candidates)
    processed = [candidate for candidate in candidates if candidate.is_processed]

    if not candidates:
        return CandidateStatistics(0, 0, 0, 0.0, 0.0, 0.0, 0.0)

    scores = np.array([candidate.score for candidate in candidates], dtype=float)
    experience = np.array([candidate.experience for candidate in processed], dtype=float)

    return CandidateStatistics(
        total=len(candidates),
        processed=len(processed),
        unprocessed=len(candidates) - len(processed),
        mean_score=float(scores.mean()),
        median_score=float(np.median(scores)),
        top_score=float(scores.max()),
        mean_experience=float(experience.mean()) if experience.size else 0.0,
    )
