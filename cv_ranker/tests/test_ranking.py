from __future__ import annotations

import pytest

from cv_ranker import ranking
from cv_ranker.ranking import SortState


def test_rank_candidates_orders_by_score(make_candidate):
    candidates = [
        make_candidate("Low", score=40),
        make_candidate("High", score=90),
        make_candidate("Mid", score=65),
    ]
    assert [candidate.name for candidate in ranking.rank_candidates(candidates)] == ["High", "Mid", "Low"]


def test_sort_candidates_by_text_ignores_case(make_candidate):
    candidates = [make_candidate("bob"), make_candidate("Alice"), make_candidate("carol")]

    ascending = ranking.sort_candidates(candidates, "name", descending=False)
    descending = ranking.sort_candidates(candidates, "name", descending=True)

    assert [candidate.name for candidate in ascending] == ["Alice", "bob", "carol"]
    assert [candidate.name for candidate in descending] == ["carol", "bob", "Alice"]


def test_missing_values_sort_first_ascending_and_last_descending(make_candidate):
    candidates = [
        make_candidate("A", seniority="Senior"),
        make_candidate("B", seniority=""),
        make_candidate("C", seniority="Junior"),
    ]

    ascending = ranking.sort_candidates(candidates, "seniority", descending=False)
    descending = ranking.sort_candidates(candidates, "seniority", descending=True)

    assert [candidate.name for candidate in ascending] == ["B", "C", "A"]
    assert [candidate.name for candidate in descending] == ["A", "C", "B"]


def test_sort_is_stable_for_ties(make_candidate):
    candidates = [make_candidate("First", experience=3), make_candidate("Second", experience=3)]
    ordered = ranking.sort_candidates(candidates, "experience", descending=True)
    assert [candidate.name for candidate in ordered] == ["First", "Second"]


def test_sort_rejects_unknown_fields(make_candidate):
    with pytest.raises(ValueError):
        ranking.sort_candidates([make_candidate()], "matched_skills")


def test_next_sort_state_flips_only_the_active_ascending_column():
    state = SortState()
    assert state == SortState("score", True)

    state = ranking.next_sort_state(state, "score")
    assert state == SortState("score", False)
    state = ranking.next_sort_state(state, "score")
    assert state == SortState("score", True)
    assert ranking.next_sort_state(state, "name") == SortState("name", False)


def test_select_top_applies_threshold_then_limit(make_candidate):
    candidates = [make_candidate("A", score=90), make_candidate("B", score=70), make_candidate("C", score=20)]

    assert [c.name for c in ranking.select_top(candidates, min_score=50)] == ["A", "B"]
    assert [c.name for c in ranking.select_top(candidates, top_k=1)] == ["A"]


@pytest.mark.parametrize(("score", "band"), [(76, "high"), (75, "medium"), (51, "medium"), (50, "low")])
def test_score_band(score, band):
    assert ranking.score_band(score) == band


def test_round_percent_rounds_half_up():
    assert ranking.round_percent(72.5) == 73
    assert ranking.round_percent(72.4) == 72
    assert ranking.round_percent(0) == 0
