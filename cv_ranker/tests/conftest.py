from __future__ import annotations

import pytest

from cv_ranker.candidate import Candidate
from cv_ranker.config import Settings


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(api_key="test-key", endpoint="https://example.openai.azure.com")


@pytest.fixture
def make_candidate():
    def _make(
        name: str = "Alice Example",
        *,
        score: float = 80,
        experience: float = 5,
        file_name: str | None = None,
        suggested_role: str = "Backend Developer",
        seniority: str = "Senior",
        matched_skills: tuple[str, ...] = ("Python", "Django"),
        **overrides,
    ) -> Candidate:
        fields = dict(
            name=name,
            score=score,
            experience=experience,
            education="BSc Computer Science",
            file_name=file_name or f"{name.lower().replace(' ', '_')}.pdf",
            suggested_role=suggested_role,
            matched_skills=matched_skills,
            experience_summary="Built APIs for a fintech company.",
            education_summary="Computer science degree, AWS certification.",
            other_skills="Public speaking",
            seniority=seniority,
            suggestion_reasoning="Strong backend track record.",
        )
        fields.update(overrides)
        return Candidate(**fields)

    return _make
