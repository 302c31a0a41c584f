"""High level orchestration of the CV evaluation workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .candidate import (
    NOT_DETERMINED,
    NOT_PROCESSED_MARKER,
    NOT_SPECIFIED,
    Candidate,
    configuration_error_candidate,
    error_candidate,
)
from .config import Settings, load_settings
from .extraction_client import CandidateExtractionError, CandidateExtractor, ExtractedProfile
from .preprocessing import display_name_from_filename
from .scoring import heuristic_score
from .text_extraction import (
    TextExtractionError,
    UploadedDocument,
    extract_document_text,
    placeholder_text,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class EvaluationError(RuntimeError):
    """Raised when not a single file in a batch could be evaluated."""


@dataclass(frozen=True)
class BatchResult:
    """Candidates produced by a batch plus the files that failed outright."""

    candidates: List[Candidate]
    failed_files: Tuple[str, ...] = ()
    total_files: int = 0

    @property
    def unprocessed(self) -> List[Candidate]:
        return [candidate for candidate in self.candidates if not candidate.is_processed]

    @property
    def processed_count(self) -> int:
        return len(self.candidates) - len(self.unprocessed)

    @property
    def partial(self) -> bool:
        return bool(self.unprocessed)


def candidate_from_profile(profile: ExtractedProfile, cv_text: str, file_name: str) -> Candidate:
    """Fill defaults for missing fields and attach the heuristic score."""

    return Candidate(
        name=profile.name or display_name_from_filename(file_name),
        score=heuristic_score(profile, cv_text),
        experience=profile.experience,
        education=profile.education or NOT_SPECIFIED,
        file_name=file_name,
        suggested_role=profile.suggested_role or NOT_DETERMINED,
        matched_skills=tuple(profile.matched_skills),
        experience_summary=profile.experience_summary or "Could not extract the experience summary.",
        education_summary=profile.education_summary or "Could not extract the education summary.",
        other_skills=profile.other_skills or NOT_SPECIFIED,
        seniority=profile.seniority or NOT_DETERMINED,
        suggestion_reasoning=profile.suggestion_reasoning or "No reasoning provided.",
    )


def evaluate_cv(
    cv_text: str,
    file_name: str,
    *,
    settings: Settings | None = None,
    extractor: CandidateExtractor | None = None,
) -> Candidate:
    """Evaluate one CV text. Failures become zero-score candidates, never exceptions."""

    if settings is None:
        settings = extractor.settings if extractor is not None else load_settings()

    if not settings.is_configured:
        logger.error("Skipping %s: Azure OpenAI is not configured", file_name)
        return configuration_error_candidate(file_name)

    if NOT_PROCESSED_MARKER in cv_text:
        logger.info("Not sending %s to the model: no usable text was extracted", file_name)
        return error_candidate(
            file_name,
            "no usable text could be extracted from the file",
            education="Not processed",
            suggested_role=NOT_DETERMINED,
            seniority=NOT_DETERMINED,
            reasoning="The file content could not be read.",
        )

    if extractor is None:
        extractor = CandidateExtractor(settings)

    try:
        profile = extractor.extract(cv_text)
    except CandidateExtractionError as exc:
        logger.error("Error evaluating CV %s: %s", file_name, exc)
        return error_candidate(file_name, str(exc))

    return candidate_from_profile(profile, cv_text, file_name)


def _document_text(document: UploadedDocument) -> str:
    try:
        text = extract_document_text(document)
    except TextExtractionError as exc:
        logger.error("Error extracting text from %s: %s", document.name, exc)
        return placeholder_text(document.name, f"Error extracting text: {exc}.")

    logger.info("Extracted %d characters from %s", len(text), document.name)
    return text


def evaluate_cvs(
    documents: Sequence[UploadedDocument],
    on_progress: ProgressCallback | None = None,
    *,
    settings: Settings | None = None,
    extractor: CandidateExtractor | None = None,
) -> BatchResult:
    """Evaluate documents one after the other.

    ``on_progress(processed, total, file_name)`` is called before and after
    every file. A failure in one file is logged and recorded in
    :attr:`BatchResult.failed_files` without stopping the batch.

    Raises
    ------
    EvaluationError
        If no document produced a candidate.
    """

    total = len(documents)
    logger.info("Evaluating %d CVs", total)

    if settings is None:
        settings = extractor.settings if extractor is not None else load_settings()
    if extractor is None and settings.is_configured:
        extractor = CandidateExtractor(settings)

    candidates: List[Candidate] = []
    failed_files: List[str] = []

    for index, document in enumerate(documents):
        logger.info("Processing file %d/%d: %s", index + 1, total, document.name)
        if on_progress is not None:
            on_progress(index, total, document.name)

        try:
            text = _document_text(document)
            candidates.append(
                evaluate_cv(text, document.name, settings=settings, extractor=extractor)
            )
        except Exception:  # one broken file must not abort the batch
            logger.exception("Unexpected error while processing %s", document.name)
            failed_files.append(document.name)

        if on_progress is not None:
            on_progress(index + 1, total, document.name)

    logger.info(
        "Processing finished: %d files evaluated, %d files failed",
        len(candidates),
        len(failed_files),
    )
    if failed_files:
        logger.warning("Files that could not be processed: %s", ", ".join(failed_files))

    if not candidates:
        raise EvaluationError(
            f"None of the {total} files could be processed. Check the file formats and try again."
        )

    if on_progress is not None:
        on_progress(total, total, documents[-1].name)

    return BatchResult(candidates=candidates, failed_files=tuple(failed_files), total_files=total)
