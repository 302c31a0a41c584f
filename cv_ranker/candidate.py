"""The candidate profile produced for every evaluated CV."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Tuple

from .preprocessing import display_name_from_filename

NOT_PROCESSED_MARKER = "[FILE NOT PROCESSED]"
NOT_SPECIFIED = "Not specified"
NOT_DETERMINED = "Not determined"

POPULAR_IT_ROLES: Tuple[str, ...] = (
    # Development
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
    "Mobile Developer",
    # Operations and infrastructure
    "DevOps Engineer",
    "SRE (Site Reliability Engineer)",
    "Cloud Architect",
    "Systems Administrator",
    "Database Administrator",
    # Monitoring and observability
    "Observability Engineer",
    "Application Monitoring Specialist",
    "Performance Analyst",
    "Monitoring and Alerting Engineer",
    "APM (Application Performance Monitoring) Specialist",
    "Observability Platform Engineer",
    "Dynatrace Consultant",
    "Cloud Monitoring Engineer",
    "Telemetry Analyst",
    # Data
    "Data Scientist",
    "Machine Learning Engineer",
    "Data Analyst",
    # Quality and security
    "QA Engineer",
    "Cybersecurity Specialist",
    # Design and product
    "UX/UI Designer",
    "Scrum Master",
    "Product Owner",
    "Software Architect",
)


@dataclass(frozen=True)
class Candidate:
    """Attributes extracted or inferred for a single uploaded CV."""

    name: str
    score: float
    experience: float
    education: str
    file_name: str
    suggested_role: str
    matched_skills: Tuple[str, ...] = ()
    missing_skills: Tuple[str, ...] = ()
    experience_summary: str = ""
    education_summary: str = ""
    other_skills: str = ""
    seniority: str = ""
    suggestion_reasoning: str = ""

    @property
    def is_processed(self) -> bool:
        return NOT_PROCESSED_MARKER not in self.experience_summary

    def as_dict(self) -> dict:
        data = asdict(self)
        data["matched_skills"] = list(self.matched_skills)
        data["missing_skills"] = list(self.missing_skills)
        return data


def error_candidate(
    file_name: str,
    reason: str,
    *,
    education: str = "Processing error",
    suggested_role: str = "Error",
    seniority: str = "Error",
    reasoning: str = "Error during the AI analysis.",
    education_summary: str = "Not available",
    other_skills: str = "Not available",
) -> Candidate:
    """Build the zero-score placeholder shown for files that could not be analysed."""

    return Candidate(
        name=display_name_from_filename(file_name),
        score=0,
        experience=0,
        education=education,
        file_name=file_name,
        suggested_role=suggested_role,
        experience_summary=(
            f"{NOT_PROCESSED_MARKER} Error while evaluating the CV: {reason}. "
            "This file could not be analysed correctly."
        ),
        education_summary=education_summary,
        other_skills=other_skills,
        seniority=seniority,
        suggestion_reasoning=reasoning,
    )


def configuration_error_candidate(file_name: str) -> Candidate:
    label = "Configuration error"
    return Candidate(
        name=display_name_from_filename(file_name),
        score=0,
        experience=0,
        education=label,
        file_name=file_name,
        suggested_role=label,
        experience_summary="Error: the Azure OpenAI environment variables are not configured.",
        education_summary=label,
        other_skills=label,
        seniority=label,
        suggestion_reasoning="Could not be processed because the AI service is not configured.",
    )


def active_popular_roles(candidates: Iterable[Candidate]) -> List[str]:
    """Return the popular IT roles that at least one candidate was suggested for."""

    suggested = {candidate.suggested_role.lower() for candidate in candidates if candidate.suggested_role}
    return [role for role in POPULAR_IT_ROLES if role.lower() in suggested]


__all__ = [
    "Candidate",
    "NOT_DETERMINED",
    "NOT_PROCESSED_MARKER",
    "NOT_SPECIFIED",
    "POPULAR_IT_ROLES",
    "active_popular_roles",
    "configuration_error_candidate",
    "display_name_from_filename",
    "error_candidate",
]
