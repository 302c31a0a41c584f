"""CV evaluation, ranking and export utilities."""

from .candidate import Candidate, active_popular_roles
from .evaluation import BatchResult, EvaluationError, evaluate_cv, evaluate_cvs
from .filtering import ChartSelection, filter_candidates_by_skills
from .ranking import rank_candidates, sort_candidates
from .text_extraction import UploadedDocument, extract_text, load_documents_from_directory

__all__ = [
    "BatchResult",
    "Candidate",
    "ChartSelection",
    "EvaluationError",
    "UploadedDocument",
    "active_popular_roles",
    "evaluate_cv",
    "evaluate_cvs",
    "extract_text",
    "filter_candidates_by_skills",
    "load_documents_from_directory",
    "rank_candidates",
    "sort_candidates",
]
