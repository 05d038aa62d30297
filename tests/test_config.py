"""Tests for configuration loading."""

import pytest

from apiaudit.config import NLTK_DATA_ENV, AuditConfig, load_config
from apiaudit.errors import ConfigError
from apiaudit.linguistics import DEFAULT_CRUD_VERBS, LexiconLinguistics, NltkLinguistics, build_linguistics


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv(NLTK_DATA_ENV, raising=False)
    config = load_config(search_dir=tmp_path)
    assert config == AuditConfig()
    assert config.max_parameters == 10
    assert config.crud_verbs == DEFAULT_CRUD_VERBS


def test_discovers_apiaudit_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv(NLTK_DATA_ENV, raising=False)
    (tmp_path / "apiaudit.yaml").write_text(
        "max_parameters: 5\n"
        "minimal_response_methods: [delete, put]\n"
        "disabled_rules: [encourage_etags]\n"
        "linguistics: lexicon\n"
        "lexicon_plurals: [Users]\n"
    )
    config = load_config(search_dir=tmp_path)
    assert config.max_parameters == 5
    assert config.minimal_response_methods == ("DELETE", "PUT")
    assert config.disabled_rules == ("encourage_etags",)
    assert config.lexicon_plurals == ("users",)
    assert config.source.endswith("apiaudit.yaml")


def test_dot_directory_config(tmp_path, monkeypatch):
    monkeypatch.delenv(NLTK_DATA_ENV, raising=False)
    (tmp_path / ".apiaudit").mkdir()
    (tmp_path / ".apiaudit" / "config.yaml").write_text("crud_verbs: [get, grab]\n")
    assert load_config(search_dir=tmp_path).crud_verbs == frozenset({"get", "grab"})


def test_env_overrides_nltk_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv(NLTK_DATA_ENV, str(tmp_path / "data"))
    assert load_config(search_dir=tmp_path).nltk_data_dir == str(tmp_path / "data")


@pytest.mark.parametrize("text,match", [
    ("max_parameters: -1\n", "max_parameters"),
    ("max_parameters: many\n", "max_parameters"),
    ("read_methods: [FETCH]\n", "unknown HTTP method"),
    ("linguistics: spacy\n", "linguistics"),
    ("colour: blue\n", "Unknown config key"),
    ("- just\n- a list\n", "mapping"),
    ("crud_verbs: get\n", "list of strings"),
    ("auto_download: 'false'\n", "auto_download"),
])
def test_invalid_config(tmp_path, text, match):
    p = tmp_path / "apiaudit.yaml"
    p.write_text(text)
    with pytest.raises(ConfigError, match=match):
        load_config(p)


def test_build_linguistics_backends():
    assert isinstance(build_linguistics(AuditConfig(linguistics="lexicon")), LexiconLinguistics)
    provider = build_linguistics(AuditConfig(auto_download=False))
    assert isinstance(provider, NltkLinguistics)
    assert provider.auto_download is False


def test_auto_download_accepts_yaml_booleans(tmp_path):
    p = tmp_path / "apiaudit.yaml"
    p.write_text("auto_download: false\n")
    assert load_config(p).auto_download is False
