"""CSV, Markdown (ATS) and JSON exports of the ranked candidate list."""
from __future__ import annotations

import csv
import io
import json
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Sequence

from .candidate import NOT_SPECIFIED, Candidate
from .ranking import round_percent


@dataclass(frozen=True)
class ExportFile:
    """Payload ready to be written to disk or offered as a download."""

    file_name: str
    data: bytes
    mime_type: str


def dated_file_name(prefix: str, extension: str, *, today: date | None = None) -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.{extension}"


def csv_fieldnames(required_skills: Sequence[str]) -> List[str]:
    return [
        "Ranking",
        "Name",
        "Score",
        "Experience (years)",
        "Education",
        "Suggested Role",
        "Seniority",
        *(f"Skill: {skill}" for skill in required_skills),
        "Highlighted Skills",
    ]


def candidates_to_csv_rows(
    candidates: Iterable[Candidate], required_skills: Sequence[str] = ()
) -> List[dict]:
    rows: List[dict] = []
    for index, candidate in enumerate(candidates, start=1):
        row = {
            "Ranking": index,
            "Name": candidate.name,
            "Score": f"{round_percent(candidate.score)}%",
            "Experience (years)": _format_years(candidate.experience),
            "Education": candidate.education,
            "Suggested Role": candidate.suggested_role,
            "Seniority": candidate.seniority or NOT_SPECIFIED,
        }
        for skill in required_skills:
            row[f"Skill: {skill}"] = "Yes" if skill in candidate.matched_skills else "No"
        row["Highlighted Skills"] = ", ".join(candidate.matched_skills)
        rows.append(row)
    return rows


def export_csv(
    candidates: Sequence[Candidate],
    required_skills: Sequence[str] = (),
    *,
    today: date | None = None,
) -> ExportFile:
    """Export candidates, in the given order, as a CSV ranking."""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=csv_fieldnames(required_skills))
    writer.writeheader()
    writer.writerows(candidates_to_csv_rows(candidates, required_skills))
    return ExportFile(
        file_name=dated_file_name("candidates_evaluation", "csv", today=today),
        data=buffer.getvalue().encode("utf-8"),
        mime_type="text/csv",
    )


def _format_years(experience: float) -> str:
    return f"{experience:g}"


def _or_na(value: object) -> str:
    if value is None or value == "":
        return "N/A"
    return str(value)


def format_candidate_markdown(candidate: Candidate) -> str:
    if candidate.matched_skills:
        skills = "\n".join(f"- {skill}" for skill in candidate.matched_skills)
    else:
        skills = "N/A"

    return "\n".join(
        [
            f"## {_or_na(candidate.name)}",
            "",
            f"- **File:** {_or_na(candidate.file_name)}",
            f"- **Suggested Role:** {_or_na(candidate.suggested_role)}",
            f"- **Seniority:** {_or_na(candidate.seniority)}",
            f"- **Score:** {round_percent(candidate.score)}%",
            f"- **Experience (years):** {_format_years(candidate.experience)}",
            f"- **Main Education:** {_or_na(candidate.education)}",
            "",
            "### Experience Summary",
            _or_na(candidate.experience_summary),
            "",
            "### Education and Certifications",
            _or_na(candidate.education_summary),
            "",
            "### Highlighted Skills",
            skills,
            "",
            "### Other Skills",
            _or_na(candidate.other_skills),
            "",
            "---",
        ]
    )


def ats_file_name(required_skills: Sequence[str] = ()) -> str:
    if not required_skills:
        return "candidate_profiles_ATS.md"
    skills = re.sub(r"[^a-zA-Z0-9_]", "", "_".join(required_skills))
    return f"ATS_profiles_{skills[:30]}.md"


def export_ats_markdown(
    candidates: Sequence[Candidate], required_skills: Sequence[str] = ()
) -> ExportFile:
    """Export one Markdown profile per candidate for import into an ATS.

    Raises
    ------
    ValueError
        If there are no candidates to export.
    """

    if not candidates:
        raise ValueError("There are no candidates to export.")

    content = "\n\n".join(format_candidate_markdown(candidate) for candidate in candidates)
    return ExportFile(
        file_name=ats_file_name(required_skills),
        data=content.encode("utf-8"),
        mime_type="text/markdown",
    )


def export_json(candidates: Sequence[Candidate]) -> ExportFile:
    payload = [candidate.as_dict() for candidate in candidates]
    return ExportFile(
        file_name="candidates.json",
        data=json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8"),
        mime_type="application/json",
    )
