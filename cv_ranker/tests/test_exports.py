from __future__ import annotations

import csv
import io
import json
from datetime import date

import pytest
from pdfminer.high_level import extract_text

from cv_ranker import exports
from cv_ranker.pdf_export import build_pdf_report, export_pdf

TODAY = date(2025, 5, 10)


@pytest.fixture
def ranked(make_candidate):
    return [
        make_candidate("Alice Doe", score=82.5, matched_skills=("Python", "Django", "Docker")),
        make_candidate("Bob Roe", score=61, experience=2.5, matched_skills=("React",), seniority=""),
    ]


def test_csv_export_has_ranking_and_skill_columns(ranked):
    export = exports.export_csv(ranked, ["Python", "React"], today=TODAY)

    assert export.file_name == "candidates_evaluation_2025-05-10.csv"
    assert export.mime_type == "text/csv"

    rows = list(csv.DictReader(io.StringIO(export.data.decode("utf-8"))))
    assert list(rows[0]) == [
        "Ranking",
        "Name",
        "Score",
        "Experience (years)",
        "Education",
        "Suggested Role",
        "Seniority",
        "Skill: Python",
        "Skill: React",
        "Highlighted Skills",
    ]
    assert rows[0]["Ranking"] == "1"
    assert rows[0]["Score"] == "83%"
    assert rows[0]["Skill: Python"] == "Yes"
    assert rows[0]["Skill: React"] == "No"
    assert rows[0]["Highlighted Skills"] == "Python, Django, Docker"
    assert rows[1]["Experience (years)"] == "2.5"
    assert rows[1]["Seniority"] == "Not specified"


def test_csv_skill_columns_use_exact_skill_names(make_candidate):
    candidate = make_candidate(matched_skills=("Python 3",))
    rows = exports.candidates_to_csv_rows([candidate], ["Python"])
    assert rows[0]["Skill: Python"] == "No"


def test_markdown_export_formats_each_profile(ranked):
    export = exports.export_ats_markdown(ranked)
    content = export.data.decode("utf-8")

    assert export.file_name == "candidate_profiles_ATS.md"
    assert content.startswith("## Alice Doe\n")
    assert "- **File:** alice_doe.pdf" in content
    assert "- **Score:** 83%" in content
    assert "### Highlighted Skills\n- Python\n- Django\n- Docker" in content
    assert "- **Seniority:** N/A" in content
    assert content.count("---") == 2
    assert "---\n\n## Bob Roe" in content


def test_markdown_export_without_skills_shows_na(make_candidate):
    content = exports.format_candidate_markdown(make_candidate(matched_skills=()))
    assert "### Highlighted Skills\nN/A" in content


def test_markdown_export_requires_candidates():
    with pytest.raises(ValueError):
        exports.export_ats_markdown([])


def test_ats_file_name_includes_sanitised_skills():
    assert exports.ats_file_name(["C++", "Node.js"]) == "ATS_profiles_C_Nodejs.md"
    long_name = exports.ats_file_name(["kubernetes", "terraform", "observability"])
    assert long_name == "ATS_profiles_kubernetes_terraform_observabi.md"


def test_json_export_round_trips_candidate_fields(ranked):
    payload = json.loads(exports.export_json(ranked).data)
    assert payload[0]["name"] == "Alice Doe"
    assert payload[0]["matched_skills"] == ["Python", "Django", "Docker"]


def test_pdf_export_renders_table_details_and_footer(ranked):
    export = export_pdf(ranked, ["Python"], today=TODAY)

    assert export.file_name == "candidates_evaluation_2025-05-10.pdf"
    assert export.data.startswith(b"%PDF")

    text = extract_text(io.BytesIO(export.data))
    assert "IT Candidate Evaluation" in text
    assert "Date: 10/05/2025" in text
    assert "Candidate Details" in text
    assert "1. Alice Doe" in text
    assert "Skills" in text
    assert "Page 1 of" in text
    assert "Generated by CV Profile Ranker" in text


def test_pdf_export_spans_multiple_pages(make_candidate):
    candidates = [make_candidate(f"Candidate {index}", score=90 - index) for index in range(25)]

    text = extract_text(io.BytesIO(build_pdf_report(candidates, today=TODAY)))

    assert "Page 2 of" in text
    assert "Candidate 24" in text
