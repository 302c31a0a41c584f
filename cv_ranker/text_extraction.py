"""Best-effort text extraction from uploaded CV documents (PDF and Word)."""
from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .candidate import NOT_PROCESSED_MARKER
from .preprocessing import display_name_from_filename

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 50

PDF_MIME_TYPE = "application/pdf"
DOC_MIME_TYPE = "application/msword"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PDF_SUFFIXES = {".pdf"}
WORD_SUFFIXES = {".doc", ".docx"}
SUPPORTED_SUFFIXES = PDF_SUFFIXES | WORD_SUFFIXES

# Runs of printable-looking characters inside a binary Word file.
TEXT_RUN_PATTERN = re.compile(r"[\w\s.,;:!?\-()\[\]{}@#$%&*+='\"]{5,}")


class TextExtractionError(RuntimeError):
    """Raised when a document cannot be turned into text."""


class UnsupportedFileTypeError(TextExtractionError):
    """Raised for uploads that are neither PDF nor Word documents."""


@dataclass(frozen=True)
class UploadedDocument:
    """An uploaded file held in memory."""

    name: str
    data: bytes
    content_type: str | None = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadedDocument":
        file_path = Path(path)
        return cls(name=file_path.name, data=file_path.read_bytes())


def _is_sufficient(text: str) -> bool:
    return len(text.strip()) >= MIN_TEXT_LENGTH


def placeholder_text(file_name: str, reason: str) -> str:
    """Text that stands in for an unreadable file so the batch can continue."""

    return (
        f"CV of {display_name_from_filename(file_name)}. {NOT_PROCESSED_MARKER} {reason} "
        "This file will be left out of the detailed analysis."
    )


def is_pdf(file_name: str, content_type: str | None = None) -> bool:
    return Path(file_name).suffix.lower() in PDF_SUFFIXES or content_type == PDF_MIME_TYPE


def is_word(file_name: str, content_type: str | None = None) -> bool:
    return Path(file_name).suffix.lower() in WORD_SUFFIXES or content_type in {
        DOC_MIME_TYPE,
        DOCX_MIME_TYPE,
    }


def is_supported(file_name: str, content_type: str | None = None) -> bool:
    return is_pdf(file_name, content_type) or is_word(file_name, content_type)


def _docx_text(data: bytes) -> str:
    from docx import Document

    document = Document(io.BytesIO(data))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" ".join(cell.text for cell in row.cells))
    return "\n".join(lines)


def _raw_text_runs(data: bytes) -> str:
    decoded = data.decode("utf-8", errors="replace")
    return " ".join(TEXT_RUN_PATTERN.findall(decoded))


def extract_text_from_word(file_name: str, data: bytes) -> str:
    """Extract text from a ``.doc``/``.docx`` file.

    ``python-docx`` is tried first. Legacy ``.doc`` files and damaged archives
    fall back to scanning the raw bytes for readable runs, and finally to a
    placeholder derived from the file name.
    """

    text = ""
    try:
        text = _docx_text(data)
        logger.debug("python-docx extracted %d characters from %s", len(text), file_name)
    except Exception as exc:  # python-docx raises a variety of zip/xml errors
        logger.warning("python-docx could not read %s: %s", file_name, exc)

    if not _is_sufficient(text):
        logger.info("Insufficient text in %s, scanning raw bytes", file_name)
        raw_text = _raw_text_runs(data)
        if len(raw_text) > len(text):
            text = raw_text

    if not _is_sufficient(text):
        logger.warning("Falling back to a file name placeholder for %s", file_name)
        return placeholder_text(
            file_name,
            "The file content could not be extracted. Try a different format or make sure "
            "the file is not protected or damaged.",
        )

    return text


def _count_pdf_pages(data: bytes) -> int:
    from pdfminer.pdfpage import PDFPage

    return sum(1 for _ in PDFPage.get_pages(io.BytesIO(data)))


def extract_text_from_pdf(file_name: str, data: bytes) -> str:
    """Extract raw text from a PDF, page by page.

    A page that fails to parse is skipped. When the document cannot be opened
    or yields too little text, a placeholder carrying
    :data:`~cv_ranker.candidate.NOT_PROCESSED_MARKER` is returned instead of
    raising, so one broken PDF never stops a batch.
    """

    from pdfminer.high_level import extract_text as pdfminer_extract_text

    try:
        page_count = _count_pdf_pages(data)
    except Exception as exc:  # pdfminer raises PSException subclasses and plain errors alike
        logger.error("Could not open PDF %s: %s", file_name, exc)
        return placeholder_text(
            file_name,
            f"Error while processing the file: {exc}.",
        )

    logger.debug("PDF %s has %d pages", file_name, page_count)

    pages: List[str] = []
    for page_number in range(page_count):
        try:
            pages.append(pdfminer_extract_text(io.BytesIO(data), page_numbers=[page_number]))
        except Exception as exc:  # malformed page content
            logger.warning("Skipping page %d of %s: %s", page_number + 1, file_name, exc)

    text = "\n".join(pages)
    if not _is_sufficient(text):
        logger.warning("Insufficient text extracted from PDF %s", file_name)
        return placeholder_text(
            file_name,
            "No text could be extracted from the PDF because of problems with its structure.",
        )

    return text


def extract_text(file_name: str, data: bytes, content_type: str | None = None) -> str:
    """Extract text from a PDF or Word document.

    Raises
    ------
    UnsupportedFileTypeError
        If the file is neither a PDF nor a Word document.
    TextExtractionError
        If no text at all could be produced.
    """

    if not is_supported(file_name, content_type):
        raise UnsupportedFileTypeError(
            f"Unsupported file type for {file_name} ({content_type or 'unknown'}). "
            "Upload DOC, DOCX or PDF files."
        )

    logger.info("Processing %s (%s, %d bytes)", file_name, content_type or "unknown type", len(data))

    if is_pdf(file_name, content_type):
        text = extract_text_from_pdf(file_name, data)
    else:
        text = extract_text_from_word(file_name, data)

    if not text.strip():
        raise TextExtractionError(
            f"No text could be extracted from {file_name}. The file may be protected or damaged."
        )

    return text


def extract_document_text(document: UploadedDocument) -> str:
    return extract_text(document.name, document.data, document.content_type)


def load_documents_from_directory(directory: Union[str, Path]) -> List[UploadedDocument]:
    """Read every PDF/DOC/DOCX file in a directory, sorted by name."""

    dir_path = Path(directory)
    if not dir_path.exists():
        raise FileNotFoundError(f"CV directory not found: {dir_path}")

    paths = sorted(
        path for path in dir_path.iterdir()
        if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES
    )
    if not paths:
        raise FileNotFoundError(f"No PDF or Word files were found in CV directory: {dir_path}")

    return [UploadedDocument.from_path(path) for path in paths]
