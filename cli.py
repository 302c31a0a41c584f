"""Command line interface for the CV profile ranker."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from cv_ranker import evaluation, exports, filtering, ranking
from cv_ranker.candidate import Candidate
from cv_ranker.config import load_settings
from cv_ranker.pdf_export import export_pdf
from cv_ranker.text_extraction import load_documents_from_directory

logger = logging.getLogger("cv_ranker.cli")


def _parse_arguments(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate CV files with Azure OpenAI and rank the candidate profiles.",
    )
    parser.add_argument(
        "resume_dir",
        type=Path,
        help="Directory containing PDF, DOC or DOCX CVs.",
    )
    parser.add_argument(
        "--skill",
        dest="skills",
        action="append",
        default=[],
        help="Required skill; repeat for several. Candidates must cover at least 40%% of them.",
    )
    parser.add_argument("--role", help="Only keep candidates with this suggested role.")
    parser.add_argument("--seniority", help="Only keep candidates with this seniority.")
    parser.add_argument(
        "--sort-by",
        choices=ranking.SORTABLE_FIELDS,
        default="score",
        help="Field used to order the results (default: score).",
    )
    parser.add_argument(
        "--ascending",
        action="store_true",
        help="Sort in ascending order instead of descending.",
    )
    parser.add_argument(
        "--top-k",
        type=int,
        default=None,
        help="Only return the top K candidates.",
    )
    parser.add_argument(
        "--min-score",
        type=float,
        default=0.0,
        help="Ignore candidates with a score below this threshold.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional path to save the results as CSV, PDF, Markdown or JSON (based on extension).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(list(argv) if argv is not None else None)


def _serialise_results(
    candidates: list[Candidate], required_skills: list[str], destination: Path
) -> None:
    suffix = destination.suffix.lower()
    if suffix == ".csv":
        export = exports.export_csv(candidates, required_skills)
    elif suffix == ".pdf":
        export = export_pdf(candidates, required_skills)
    elif suffix == ".md":
        export = exports.export_ats_markdown(candidates, required_skills)
    elif suffix == ".json":
        export = exports.export_json(candidates)
    else:
        raise ValueError("Unsupported output format. Use a .csv, .pdf, .md or .json file extension.")

    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(export.data)
    logger.info("Wrote %s", destination)


def _print_progress(processed: int, total: int, file_name: str) -> None:
    print(f"[{processed}/{total}] {file_name}", file=sys.stderr)


def main(argv: Iterable[str] | None = None) -> list[Candidate]:
    args = _parse_arguments(argv)
    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    documents = load_documents_from_directory(args.resume_dir)
    result = evaluation.evaluate_cvs(documents, _print_progress, settings=settings)

    if result.partial:
        print(
            f"Partial processing ({result.processed_count}/{result.total_files}): "
            f"{len(result.unprocessed)} file(s) could not be processed correctly.",
            file=sys.stderr,
        )

    candidates = filtering.filter_candidates_by_skills(result.candidates, args.skills)
    candidates = filtering.ChartSelection(args.role, args.seniority).apply(candidates)
    candidates = ranking.sort_candidates(candidates, args.sort_by, descending=not args.ascending)
    candidates = ranking.select_top(candidates, top_k=args.top_k, min_score=args.min_score)

    if args.output:
        _serialise_results(candidates, args.skills, args.output)

    for position, candidate in enumerate(candidates, start=1):
        skill_text = f" (skills: {', '.join(candidate.matched_skills)})" if candidate.matched_skills else ""
        print(
            f"{position}. {candidate.name}: {ranking.round_percent(candidate.score)}% "
            f"{candidate.suggested_role} / {candidate.seniority}{skill_text}"
        )

    return candidates


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
