"""Structured candidate extraction through an Azure OpenAI chat deployment."""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Callable, List, Optional

import openai
from openai import AzureOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import Settings
from .preprocessing import clean_cv_text

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are an expert IT recruiting assistant. Analyse the following CV and return the information as JSON.
The JSON must have the following structure:
{
  "name": "Candidate name (if found, otherwise 'Anonymous Candidate')",
  "experience": "Total years of relevant IT experience (number)",
  "education": "Highest education level or main degree (e.g. 'Systems Engineering', 'BSc Computer Science', 'Higher Technician')",
  "experienceSummary": "A concise summary of the candidate's work experience (150 words maximum).",
  "educationSummary": "A summary of the academic background and relevant certifications (100 words maximum).",
  "matchedSkills": ["Up to 10 key skills matching common IT roles, such as programming languages, frameworks, DevOps tools, databases, etc."],
  "otherSkills": "Other skills or knowledge mentioned that may be relevant (free text, 70 words maximum).",
  "suggestedRole": "The IT role best suited to this candidate given their experience and skills (e.g. 'Frontend Developer', 'DevOps Engineer', 'Data Analyst', 'QA Engineer').",
  "seniority": "Estimated seniority level (e.g. 'Junior', 'Semi-Senior', 'Senior', 'Lead', 'Architect').",
  "suggestionReasoning": "A short explanation (1-2 concise sentences, 50 words maximum) of why the suggested role and seniority fit, based on the CV."
}
If some information cannot be clearly determined, use "Not specified" or a sensible default (e.g. 0 for experience).
Prioritise extracting concrete data from the CV. Do not invent information.
The candidate name is usually at the top of the CV. Try to identify it.
""".strip()

USER_PROMPT_TEMPLATE = """Analyse the following CV text and extract the requested information as JSON:

--- CV TEXT ---
{cv_text}
--- END CV TEXT ---"""


class CandidateExtractionError(RuntimeError):
    """Raised when the chat endpoint fails or returns something unusable."""


class ExtractedProfile(BaseModel):
    """Fields returned by the model, coerced leniently."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    experience: float = 0.0
    education: Optional[str] = None
    experience_summary: Optional[str] = Field(default=None, alias="experienceSummary")
    education_summary: Optional[str] = Field(default=None, alias="educationSummary")
    matched_skills: List[str] = Field(default_factory=list, alias="matchedSkills")
    other_skills: Optional[str] = Field(default=None, alias="otherSkills")
    suggested_role: Optional[str] = Field(default=None, alias="suggestedRole")
    seniority: Optional[str] = None
    suggestion_reasoning: Optional[str] = Field(default=None, alias="suggestionReasoning")

    @field_validator("experience", mode="before")
    @classmethod
    def _coerce_experience(cls, value: Any) -> float:
        if isinstance(value, bool):
            return 0.0
        if not isinstance(value, (int, float, str)):
            return 0.0
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (OverflowError, ValueError):
            return 0.0
        return number if math.isfinite(number) else 0.0

    @field_validator(
        "name",
        "education",
        "experience_summary",
        "education_summary",
        "other_skills",
        "suggested_role",
        "seniority",
        "suggestion_reasoning",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, list):
            return ", ".join(str(item) for item in value)
        return str(value).strip()

    @field_validator("matched_skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, list):
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def build_messages(cv_text: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(cv_text=clean_cv_text(cv_text))},
    ]


def parse_completion_content(content: str | None) -> ExtractedProfile:
    """Validate the JSON document returned by the model."""

    if not content or not content.strip():
        raise CandidateExtractionError("Unexpected or empty response from Azure AI.")

    try:
        payload = json.loads(content)
    except ValueError as exc:  # JSONDecodeError, or an integer past the digit limit
        logger.error("Invalid JSON from Azure AI: %s", content)
        raise CandidateExtractionError(
            "Could not interpret the Azure AI response. Invalid JSON format."
        ) from exc

    if not isinstance(payload, dict):
        raise CandidateExtractionError("Azure AI returned JSON that is not an object.")

    try:
        return ExtractedProfile.model_validate(payload)
    except ValidationError as exc:  # pragma: no cover - validators coerce nearly everything
        raise CandidateExtractionError(f"Azure AI response did not match the profile schema: {exc}") from exc


def _build_azure_client(settings: Settings) -> Any:
    return AzureOpenAI(
        api_key=settings.api_key,
        azure_endpoint=settings.endpoint,
        api_version=settings.api_version,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


class CandidateExtractor:
    """Sends one CV per request to the configured deployment.

    Parameters
    ----------
    settings:
        Endpoint, deployment and request parameters.
    client_factory:
        Optional factory returning an object with the ``chat.completions.create``
        interface of the OpenAI SDK. Primarily useful for injecting stubs in tests.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client_factory: Callable[[Settings], Any] | None = None,
    ) -> None:
        self.settings = settings
        self._client_factory = client_factory or _build_azure_client
        self._client: Any = None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory(self.settings)
        return self._client

    def extract(self, cv_text: str) -> ExtractedProfile:
        messages = build_messages(cv_text)
        logger.debug("Sending %d characters to deployment %s", len(messages[1]["content"]), self.settings.deployment)

        try:
            response = self.client.chat.completions.create(
                model=self.settings.deployment,
                messages=messages,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            logger.error("Azure API error: %s", exc)
            raise CandidateExtractionError(f"Azure API error: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None) if message is not None else None
        if not content:
            logger.error("Unexpected response from Azure AI: %r", response)

        return parse_completion_content(content)
