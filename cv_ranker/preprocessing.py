"""Text normalisation helpers shared by extraction, scoring and filtering."""
from __future__ import annotations

import re

WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_cv_text(text: str) -> str:
    """Collapse whitespace runs into single spaces and strip the ends.

    The chat model handles long contexts, so the text is not truncated.
    """

    return WHITESPACE_PATTERN.sub(" ", text).strip()


def display_name_from_filename(file_name: str) -> str:
    """Turn ``john_doe.cv.pdf`` into ``john doe``."""

    return file_name.split(".")[0].replace("_", " ")


def skill_in_text(skill: str, text: str | None) -> bool:
    """Case-insensitive substring test used by the skill filter."""

    if not text:
        return False
    return skill.lower() in text.lower()
