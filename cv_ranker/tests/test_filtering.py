from __future__ import annotations

from cv_ranker import filtering
from cv_ranker.filtering import ChartSelection


def test_no_required_skills_keeps_everyone(make_candidate):
    candidates = [make_candidate("Alice"), make_candidate("Bob")]
    assert filtering.filter_candidates_by_skills(candidates, []) == candidates


def test_skills_are_matched_across_profile_sections(make_candidate):
    alice = make_candidate("Alice", matched_skills=("ReactJS",))
    bob = make_candidate("Bob", matched_skills=(), other_skills="Some react and Vue")
    carol = make_candidate(
        "Carol",
        matched_skills=(),
        experience_summary="Backend work",
        education_summary="Degree",
        other_skills="",
    )

    kept = filtering.filter_candidates_by_skills([alice, bob, carol], ["react"])
    assert [candidate.name for candidate in kept] == ["Alice", "Bob"]


def test_candidates_need_forty_percent_of_required_skills(make_candidate):
    one_of_three = make_candidate("One", matched_skills=("Python",))
    two_of_three = make_candidate("Two", matched_skills=("Python", "Docker"))

    kept = filtering.filter_candidates_by_skills(
        [one_of_three, two_of_three], ["python", "docker", "kubernetes"]
    )
    assert [candidate.name for candidate in kept] == ["Two"]

    # Two of five is exactly 40%.
    kept = filtering.filter_candidates_by_skills(
        [one_of_three, two_of_three], ["python", "docker", "go", "rust", "java"]
    )
    assert [candidate.name for candidate in kept] == ["Two"]


def test_education_summary_counts_for_certifications(make_candidate):
    candidate = make_candidate(matched_skills=(), education_summary="AWS Solutions Architect")
    assert filtering.matching_required_skills(candidate, ["aws", "gcp"]) == ["aws"]


def test_chart_toggle_selects_and_clears():
    selection = ChartSelection().toggle("QA Engineer", "Senior")
    assert selection == ChartSelection("QA Engineer", "Senior")

    assert selection.toggle("QA Engineer", "Senior") == ChartSelection()
    assert selection.toggle("QA Engineer", None) == ChartSelection()
    assert selection.toggle("Data Analyst", None) == ChartSelection("Data Analyst", None)


def test_legend_toggle_selects_seniority_across_roles():
    selection = ChartSelection("QA Engineer", "Senior").toggle_seniority("Senior")
    assert selection == ChartSelection(None, "Senior")

    assert selection.toggle_seniority("Senior") == ChartSelection()
    assert selection.toggle_seniority("Junior") == ChartSelection(None, "Junior")


def test_chart_selection_applies_role_and_seniority(make_candidate):
    qa_senior = make_candidate("A", suggested_role="QA Engineer", seniority="Senior")
    qa_junior = make_candidate("B", suggested_role="QA Engineer", seniority="Junior")
    dev_senior = make_candidate("C", suggested_role="Backend Developer", seniority="Senior")
    candidates = [qa_senior, qa_junior, dev_senior]

    assert ChartSelection().apply(candidates) == candidates
    assert ChartSelection("QA Engineer").apply(candidates) == [qa_senior, qa_junior]
    assert ChartSelection(None, "Senior").apply(candidates) == [qa_senior, dev_senior]
    assert ChartSelection("QA Engineer", "Senior").apply(candidates) == [qa_senior]


def test_required_skill_list_is_trimmed_and_unique():
    skills = filtering.add_required_skill([], "  React ")
    skills = filtering.add_required_skill(skills, "React")
    skills = filtering.add_required_skill(skills, "   ")
    assert skills == ["React"]
    assert filtering.remove_required_skill(skills, "React") == []


def test_selection_toggle_and_removal(make_candidate):
    selected = filtering.toggle_selection([], "a.pdf")
    selected = filtering.toggle_selection(selected, "b.pdf")
    selected = filtering.toggle_selection(selected, "a.pdf")
    assert selected == ["b.pdf"]

    candidates = [make_candidate("A", file_name="a.pdf"), make_candidate("B", file_name="b.pdf")]
    remaining = filtering.remove_candidates(candidates, selected)
    assert [candidate.file_name for candidate in remaining] == ["a.pdf"]
