"""Tests for the CLI: setup, run, explain and exit codes."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from apiaudit import cli
from apiaudit.errors import LinguisticResourceError

FIXTURES = Path(__file__).parent / "fixtures"
runner = CliRunner()


@pytest.fixture
def lexicon_config(tmp_path):
    p = tmp_path / "apiaudit.yaml"
    p.write_text("linguistics: lexicon\nlexicon_plurals: [entries, lectures, images, favorites]\n")
    return p


def test_run_bad_service_exits_1(lexicon_config):
    result = runner.invoke(cli.app, ["run", str(FIXTURES / "bad_lingua.yaml"), "-c", str(lexicon_config)])
    assert result.exit_code == cli.EXIT_FINDINGS
    assert "GET /en/getFavoriteLectures" in result.output
    assert "Cover image of a lecture" in result.output
    assert "getFavoriteLectures" in result.output


def test_run_improved_service_exits_0(lexicon_config):
    result = runner.invoke(cli.app, ["run", str(FIXTURES / "improved_lingua.yaml"), "-c", str(lexicon_config)])
    assert result.exit_code == 0
    assert "No API design violations detected." in result.output


def test_run_json_output(lexicon_config):
    result = runner.invoke(
        cli.app, ["run", str(FIXTURES / "bad_lingua.yaml"), "-c", str(lexicon_config), "--json"]
    )
    data = json.loads(result.output)
    failed = [a for a in data["audits"] if a["findings"]]
    assert {a["rule_id"] for a in failed} == {
        "complex_return_type",
        "reasonable_parameter_count",
        "encourage_etags",
        "plural_collection_segments",
        "lowercase_path_segments",
        "no_crud_verbs_in_path",
    }
    assert len(data["audits"]) == 6 * 6


def test_run_markdown_output(lexicon_config):
    result = runner.invoke(
        cli.app, ["run", str(FIXTURES / "bad_lingua.yaml"), "-c", str(lexicon_config), "--markdown"]
    )
    assert result.output.startswith("# apiaudit: BadLinguaWebService")
    assert "## `DELETE /en/dictionary/entries/{entryId}` (DeleteDictionaryEntryHandler)" in result.output
    assert "_Cover image of a lecture_" in result.output


def test_fail_on_high_ignores_medium(tmp_path, lexicon_config):
    manifest = tmp_path / "svc.yaml"
    manifest.write_text(
        "service: Svc\n"
        "endpoints:\n"
        "  - {path: '/items/{id}', method: DELETE, handler: Svc.Delete, returns: complex}\n"
    )
    base = ["run", str(manifest), "-c", str(lexicon_config)]
    assert runner.invoke(cli.app, base).exit_code == cli.EXIT_FINDINGS
    assert runner.invoke(cli.app, base + ["--fail-on", "HIGH"]).exit_code == 0


def test_inconclusive_run_exits_3(monkeypatch):
    from apiaudit.linguistics import LexiconLinguistics

    class Unavailable(LexiconLinguistics):
        def ensure_ready(self):
            raise LinguisticResourceError("tagger missing")

    monkeypatch.setattr(cli, "build_linguistics", lambda config: Unavailable())
    result = runner.invoke(cli.app, ["run", str(FIXTURES / "improved_lingua.yaml")])
    assert result.exit_code == cli.EXIT_INCOMPLETE
    assert "inconclusive" in result.output


def test_missing_config_file_is_usage_error(tmp_path):
    result = runner.invoke(cli.app, ["run", str(FIXTURES / "improved_lingua.yaml"), "-c", str(tmp_path / "none.yaml")])
    assert result.exit_code == cli.EXIT_USAGE
    assert "Cannot read config" in result.output


def test_run_missing_manifest_is_usage_error(tmp_path):
    result = runner.invoke(cli.app, ["run", str(tmp_path / "missing.yaml")])
    assert result.exit_code == cli.EXIT_USAGE
    assert "Manifest not found" in result.output


def test_setup_success_and_failure(monkeypatch):
    calls = []

    class Fake:
        def __init__(self, **kwargs):
            self.kwargs = kwargs

        def missing_resources(self):
            return ["wordnet"] if not calls else []

        def ensure_ready(self):
            calls.append(self.kwargs)

    monkeypatch.setattr(cli, "NltkLinguistics", Fake)
    result = runner.invoke(cli.app, ["setup", "--retries", "5"])
    assert result.exit_code == 0
    assert "wordnet" in result.output
    assert calls[0]["retries"] == 5

    result = runner.invoke(cli.app, ["setup"])
    assert result.exit_code == 0
    assert "already installed" in result.output

    class Broken(Fake):
        def ensure_ready(self):
            raise LinguisticResourceError("network unreachable")

    monkeypatch.setattr(cli, "NltkLinguistics", Broken)
    result = runner.invoke(cli.app, ["setup"])
    assert result.exit_code == 1
    assert "network unreachable" in result.output


def test_setup_bad_config_is_usage_error(tmp_path, monkeypatch):
    (tmp_path / "apiaudit.yaml").write_text("colour: blue\n")
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli.app, ["setup"])
    assert result.exit_code == cli.EXIT_USAGE
    assert "Unknown config key(s): colour" in result.output


def test_explain():
    result = runner.invoke(cli.app, ["explain", "plural_collection_segments"])
    assert result.exit_code == 0
    assert "Fix:" in result.output
    listing = runner.invoke(cli.app, ["explain", "list"])
    assert "no_crud_verbs_in_path" in listing.output
    assert "url_naming:" in listing.output
    unknown = runner.invoke(cli.app, ["explain", "nope"])
    assert unknown.exit_code == cli.EXIT_USAGE
    assert "Unknown rule: nope" in unknown.output
