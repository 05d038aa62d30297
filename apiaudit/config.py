"""Audit configuration, loaded from apiaudit.yaml or .apiaudit/config.yaml."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import ConfigError
from .linguistics import DEFAULT_CRUD_VERBS
from .models import HTTP_METHODS

CONFIG_FILENAMES = ("apiaudit.yaml", ".apiaudit/config.yaml")
LINGUISTICS_BACKENDS = ("nltk", "lexicon")
NLTK_DATA_ENV = "APIAUDIT_NLTK_DATA"


@dataclass(frozen=True)
class AuditConfig:
    """Knobs for the built-in rules and the linguistic backend."""

    max_parameters: int = 10
    minimal_response_methods: tuple[str, ...] = ("DELETE",)
    read_methods: tuple[str, ...] = ("GET",)
    crud_verbs: frozenset[str] = DEFAULT_CRUD_VERBS
    disabled_rules: tuple[str, ...] = ()
    linguistics: str = "nltk"
    lexicon_plurals: tuple[str, ...] = ()
    nltk_data_dir: Optional[str] = None
    auto_download: bool = True
    source: Optional[str] = field(default=None, compare=False)


def _methods(key: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError(f"{key}: expected a list of HTTP methods")
    methods = tuple(str(m).upper() for m in value)
    unknown = [m for m in methods if m not in HTTP_METHODS]
    if unknown:
        raise ConfigError(f"{key}: unknown HTTP method(s) {', '.join(unknown)}")
    return methods


def _words(key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key}: expected a list of strings")
    return tuple(v.lower() for v in value)


def config_from_dict(data: dict, source: str | None = None) -> AuditConfig:
    """Validate a parsed config mapping. Unknown keys are an error."""
    known = {f.name for f in fields(AuditConfig)} - {"source"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    kwargs: dict[str, Any] = {"source": source}
    if "max_parameters" in data:
        mp = data["max_parameters"]
        if not isinstance(mp, int) or isinstance(mp, bool) or mp < 0:
            raise ConfigError("max_parameters: expected a non-negative integer")
        kwargs["max_parameters"] = mp
    for key in ("minimal_response_methods", "read_methods"):
        if key in data:
            kwargs[key] = _methods(key, data[key])
    if "crud_verbs" in data:
        kwargs["crud_verbs"] = frozenset(_words("crud_verbs", data["crud_verbs"]))
    if "disabled_rules" in data:
        kwargs["disabled_rules"] = tuple(_words("disabled_rules", data["disabled_rules"]))
    if "lexicon_plurals" in data:
        kwargs["lexicon_plurals"] = _words("lexicon_plurals", data["lexicon_plurals"])
    if "linguistics" in data:
        backend = str(data["linguistics"]).lower()
        if backend not in LINGUISTICS_BACKENDS:
            raise ConfigError(f"linguistics: expected one of {', '.join(LINGUISTICS_BACKENDS)}")
        kwargs["linguistics"] = backend
    if data.get("nltk_data_dir") is not None:
        kwargs["nltk_data_dir"] = str(data["nltk_data_dir"])
    if "auto_download" in data:
        if not isinstance(data["auto_download"], bool):
            raise ConfigError("auto_download: expected true or false")
        kwargs["auto_download"] = data["auto_download"]
    return AuditConfig(**kwargs)


def find_config(search_dir: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        p = search_dir / name
        if p.is_file():
            return p
    return None


def load_config(path: Path | None = None, search_dir: Path = Path(".")) -> AuditConfig:
    """Load the explicit file, or the first config found in search_dir, or defaults."""
    if path is None:
        path = find_config(search_dir)
    if path is None:
        data: dict = {}
    else:
        try:
            data = yaml.safe_load(Path(path).read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping")

    env_dir = os.environ.get(NLTK_DATA_ENV)
    if env_dir:
        data = {**data, "nltk_data_dir": env_dir}
    return config_from_dict(data, source=str(path) if path else None)
