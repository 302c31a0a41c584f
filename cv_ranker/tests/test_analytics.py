from __future__ import annotations

import pytest

from cv_ranker import analytics
from cv_ranker.candidate import NOT_PROCESSED_MARKER, active_popular_roles


def test_role_seniority_counts_fill_missing_levels(make_candidate):
    candidates = [
        make_candidate("A", suggested_role="QA Engineer", seniority="Senior"),
        make_candidate("B", suggested_role="QA Engineer", seniority="Senior"),
        make_candidate("C", suggested_role="Data Analyst", seniority="Junior"),
        make_candidate("D", suggested_role="", seniority=""),
    ]

    rows = analytics.role_seniority_counts(candidates)

    assert rows == [
        {"role": "QA Engineer", "Senior": 2, "Junior": 0, "Not specified": 0},
        {"role": "Data Analyst", "Senior": 0, "Junior": 1, "Not specified": 0},
        {"role": "Not determined", "Senior": 0, "Junior": 0, "Not specified": 1},
    ]


def test_seniority_keys_follow_legend_order():
    rows = [{"role": "x", "Senior": 1, "Not specified": 0, "Junior": 2, "Principal": 1, "Intern": 0}]
    assert analytics.seniority_keys(rows) == ["Junior", "Senior", "Not specified", "Intern", "Principal"]


def test_unknown_seniority_uses_other_color():
    assert analytics.seniority_color("Principal") == analytics.SENIORITY_COLORS["Other"]


def test_summarise_candidates(make_candidate):
    candidates = [
        make_candidate("A", score=90, experience=6),
        make_candidate("B", score=60, experience=2),
        make_candidate("C", score=0, experience=0, experience_summary=f"{NOT_PROCESSED_MARKER} failed"),
    ]

    stats = analytics.summarise_candidates(candidates)

    assert stats.total == 3
    assert stats.processed == 2
    assert stats.unprocessed == 1
    assert stats.mean_score == pytest.approx(50.0)
    assert stats.median_score == pytest.approx(60.0)
    assert stats.top_score == 90
    assert stats.mean_experience == pytest.approx(4.0)


def test_summarise_empty_list():
    stats = analytics.summarise_candidates([])
    assert stats.total == 0
    assert stats.mean_score == 0.0


def test_active_popular_roles_is_case_insensitive(make_candidate):
    candidates = [
        make_candidate("A", suggested_role="devops engineer"),
        make_candidate("B", suggested_role="Chief Vibes Officer"),
    ]
    assert active_popular_roles(candidates) == ["DevOps Engineer"]
