"""Ordering helpers for the ranking cards and the sortable table."""
from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Iterable, List

from .candidate import Candidate

SORTABLE_FIELDS = (
    "name",
    "score",
    "experience",
    "education",
    "suggested_role",
    "seniority",
    "file_name",
)


@dataclass(frozen=True)
class SortState:
    key: str = "score"
    descending: bool = True


def next_sort_state(current: SortState, key: str) -> SortState:
    """Clicking the active ascending column flips it; any other click sorts ascending."""

    if current.key == key and not current.descending:
        return SortState(key=key, descending=True)
    return SortState(key=key, descending=False)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _compare(a: Any, b: Any, descending: bool) -> int:
    if _is_missing(a) and _is_missing(b):
        return 0
    if _is_missing(a):
        return 1 if descending else -1
    if _is_missing(b):
        return -1 if descending else 1

    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        left, right = a, b
    elif isinstance(a, str) and isinstance(b, str):
        left, right = a.casefold(), b.casefold()
    else:
        return 0

    if left == right:
        return 0
    result = -1 if left < right else 1
    return -result if descending else result


def sort_candidates(
    candidates: Iterable[Candidate], key: str = "score", *, descending: bool = True
) -> List[Candidate]:
    """Sort by a candidate attribute.

    Missing values come first when ascending and last when descending. The
    sort is stable, so ties keep their incoming order.
    """

    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort candidates by {key!r}. Choose one of: {', '.join(SORTABLE_FIELDS)}.")

    return sorted(
        candidates,
        key=functools.cmp_to_key(
            lambda a, b: _compare(getattr(a, key), getattr(b, key), descending)
        ),
    )


def rank_candidates(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Order candidates by score, best first."""

    return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)


def select_top(
    candidates: Iterable[Candidate], *, top_k: int | None = None, min_score: float = 0.0
) -> List[Candidate]:
    selected = [candidate for candidate in candidates if candidate.score >= min_score]
    if top_k is not None:
        selected = selected[:top_k]
    return selected


def score_band(score: float) -> str:
    if score > 75:
        return "high"
    if score > 50:
        return "medium"
    return "low"


def round_percent(score: float) -> int:
    """Round half up, the way scores are displayed as percentages."""

    return int(score + 0.5) if score >= 0 else -int(-score + 0.5)
