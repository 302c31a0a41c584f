from __future__ import annotations

import json

import pytest

import cli
from cv_ranker.config import Settings
from cv_ranker.evaluation import BatchResult
from cv_ranker.text_extraction import UploadedDocument


@pytest.fixture
def stub_pipeline(monkeypatch, make_candidate):
    candidates = [
        make_candidate("Alice", score=70, suggested_role="QA Engineer", matched_skills=("Selenium",)),
        make_candidate("Bob", score=90, suggested_role="Backend Developer", matched_skills=("Python",)),
        make_candidate("Carol", score=55, suggested_role="Backend Developer", matched_skills=("Go",)),
    ]
    seen = {}

    def _load(directory):
        seen["directory"] = directory
        return [UploadedDocument(name=candidate.file_name, data=b"") for candidate in candidates]

    def _evaluate(documents, on_progress=None, **kwargs):
        seen["documents"] = documents
        return BatchResult(candidates=candidates, total_files=len(documents))

    monkeypatch.setattr(cli, "load_documents_from_directory", _load)
    monkeypatch.setattr(cli.evaluation, "evaluate_cvs", _evaluate)
    monkeypatch.setattr(cli, "load_settings", lambda: Settings(api_key="key", endpoint="https://example.openai.azure.com"))
    return seen


def test_main_ranks_by_score(stub_pipeline, tmp_path, capsys):
    ranked = cli.main([str(tmp_path)])

    assert [candidate.name for candidate in ranked] == ["Bob", "Alice", "Carol"]
    output = capsys.readouterr().out
    assert output.splitlines()[0].startswith("1. Bob: 90% Backend Developer")


def test_main_applies_skill_role_and_limit_filters(stub_pipeline, tmp_path):
    ranked = cli.main([str(tmp_path), "--role", "Backend Developer", "--top-k", "1"])
    assert [candidate.name for candidate in ranked] == ["Bob"]

    ranked = cli.main([str(tmp_path), "--skill", "selenium"])
    assert [candidate.name for candidate in ranked] == ["Alice"]


def test_main_sorts_by_other_fields(stub_pipeline, tmp_path):
    ranked = cli.main([str(tmp_path), "--sort-by", "name", "--ascending"])
    assert [candidate.name for candidate in ranked] == ["Alice", "Bob", "Carol"]


@pytest.mark.parametrize("suffix", [".csv", ".md", ".pdf", ".json"])
def test_main_writes_requested_format(stub_pipeline, tmp_path, suffix):
    destination = tmp_path / "out" / f"results{suffix}"

    cli.main([str(tmp_path), "--output", str(destination)])

    assert destination.exists()
    assert destination.stat().st_size > 0
    if suffix == ".json":
        payload = json.loads(destination.read_text(encoding="utf-8"))
        assert [item["name"] for item in payload] == ["Bob", "Alice", "Carol"]


def test_main_rejects_unknown_output_format(stub_pipeline, tmp_path):
    with pytest.raises(ValueError):
        cli.main([str(tmp_path), "--output", str(tmp_path / "results.xlsx")])
