"""In-memory filters applied to the evaluated candidate list."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .candidate import Candidate
from .preprocessing import skill_in_text

# A candidate must cover at least this share of the required skills.
MIN_SKILL_COVERAGE = 0.4


def _candidate_has_skill(candidate: Candidate, skill: str) -> bool:
    skill_lower = skill.lower()
    if any(skill_lower in matched.lower() for matched in candidate.matched_skills):
        return True
    return (
        skill_in_text(skill, candidate.experience_summary)
        or skill_in_text(skill, candidate.education_summary)
        or skill_in_text(skill, candidate.other_skills)
    )


def matching_required_skills(candidate: Candidate, required_skills: Sequence[str]) -> List[str]:
    """Required skills found anywhere in the candidate's profile."""

    return [skill for skill in required_skills if _candidate_has_skill(candidate, skill)]


def filter_candidates_by_skills(
    candidates: Iterable[Candidate], required_skills: Sequence[str]
) -> List[Candidate]:
    """Keep candidates that cover at least 40% (and at least one) of the required skills."""

    candidates = list(candidates)
    if not required_skills:
        return candidates

    threshold = len(required_skills) * MIN_SKILL_COVERAGE
    filtered: List[Candidate] = []
    for candidate in candidates:
        matched = matching_required_skills(candidate, required_skills)
        if matched and len(matched) >= threshold:
            filtered.append(candidate)
    return filtered


@dataclass(frozen=True)
class ChartSelection:
    """Role and/or seniority picked from the role-by-seniority chart."""

    role: Optional[str] = None
    seniority: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.role is not None or self.seniority is not None

    def toggle(self, role: Optional[str], seniority: Optional[str]) -> "ChartSelection":
        """Select a bar; selecting the current one again clears the filter."""

        if self.role == role and self.seniority == seniority:
            return ChartSelection()
        if self.role == role and seniority is None:
            return ChartSelection()
        return ChartSelection(role=role, seniority=seniority)

    def toggle_seniority(self, seniority: str) -> "ChartSelection":
        """Select a seniority across every role, as clicking the chart legend does."""

        if self.seniority == seniority and self.role is None:
            return self.toggle(None, None)
        return self.toggle(None, seniority)

    def apply(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        result = list(candidates)
        if self.role is not None:
            result = [candidate for candidate in result if candidate.suggested_role == self.role]
        if self.seniority is not None:
            result = [candidate for candidate in result if candidate.seniority == self.seniority]
        return result


def add_required_skill(required_skills: Sequence[str], skill: str) -> List[str]:
    skill = skill.strip()
    skills = list(required_skills)
    if skill and skill not in skills:
        skills.append(skill)
    return skills


def remove_required_skill(required_skills: Sequence[str], skill: str) -> List[str]:
    return [existing for existing in required_skills if existing != skill]


def toggle_selection(selected_file_names: Sequence[str], file_name: str) -> List[str]:
    if file_name in selected_file_names:
        return [name for name in selected_file_names if name != file_name]
    return [*selected_file_names, file_name]


def remove_candidates(candidates: Iterable[Candidate], file_names: Iterable[str]) -> List[Candidate]:
    """Drop the candidates whose file name was selected for removal."""

    to_remove = set(file_names)
    return [candidate for candidate in candidates if candidate.file_name not in to_remove]
