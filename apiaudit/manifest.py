"""Endpoint manifests: YAML/JSON files or `module:attribute` selectors."""

import importlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ManifestError
from .models import HTTP_METHODS, Endpoint, Parameter, ParameterKind, ReturnKind, make_endpoint


@dataclass(frozen=True)
class Service:
    """A named web service and its endpoints."""

    name: str
    endpoints: tuple[Endpoint, ...]


def _parameter(raw: Any, where: str) -> Parameter:
    if isinstance(raw, str):
        return Parameter(raw)
    if not isinstance(raw, dict) or "name" not in raw:
        raise ManifestError(f"{where}: parameter needs a name")
    try:
        kind = ParameterKind(str(raw.get("kind", "query")).lower())
    except ValueError:
        raise ManifestError(
            f"{where}: unknown parameter kind {raw.get('kind')!r} "
            f"(expected {', '.join(k.value for k in ParameterKind)})"
        ) from None
    return Parameter(str(raw["name"]), kind, str(raw.get("type", "string")))


def _endpoint(raw: Any, index: int) -> Endpoint:
    where = f"endpoints[{index}]"
    if not isinstance(raw, dict):
        raise ManifestError(f"{where}: expected a mapping")
    for key in ("path", "method", "handler"):
        if not raw.get(key):
            raise ManifestError(f"{where}: missing '{key}'")
    method = str(raw["method"]).upper()
    if method not in HTTP_METHODS:
        raise ManifestError(f"{where}: unknown HTTP method {raw['method']!r}")
    returns = raw.get("returns")
    if returns is not None:
        try:
            returns = ReturnKind(str(returns).lower())
        except ValueError:
            raise ManifestError(
                f"{where}: unknown return kind {returns!r} (expected primitive, complex or blob)"
            ) from None
    params = [_parameter(p, where) for p in raw.get("parameters") or []]
    return make_endpoint(
        path=str(raw["path"]),
        method=method,
        handler=str(raw["handler"]),
        parameters=params,
        returns=returns,
        etag=bool(raw.get("etag", False)),
        description=str(raw.get("description", "")),
    )


def service_from_dict(data: Any, default_name: str = "") -> Service:
    if isinstance(data, list):
        data = {"endpoints": data}
    if not isinstance(data, dict) or not isinstance(data.get("endpoints"), list):
        raise ManifestError("Manifest must contain an 'endpoints' list")
    endpoints = tuple(_endpoint(e, i) for i, e in enumerate(data["endpoints"]))
    return Service(name=str(data.get("service") or default_name), endpoints=endpoints)


def load_manifest(path: Path) -> Service:
    """Parse a .yaml/.yml/.json manifest."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    try:
        if Path(path).suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ManifestError(f"Cannot parse manifest {path}: {e}") from e
    return service_from_dict(data, default_name=Path(path).stem)


def _coerce(obj: Any, name: str) -> Service:
    if isinstance(obj, Service):
        return obj
    if callable(obj):
        return _coerce(obj(), name)
    if isinstance(obj, (list, tuple)) and all(isinstance(e, Endpoint) for e in obj):
        return Service(name=name, endpoints=tuple(obj))
    if isinstance(obj, (dict, list)):
        return service_from_dict(obj, default_name=name)
    raise ManifestError(f"{name} does not resolve to a Service or a list of endpoints")


def load_selector(selector: str) -> Service:
    """Import `pkg.module:attribute` (a Service, endpoint list, or callable returning one)."""
    module_name, _, attr = selector.partition(":")
    if not module_name or not attr:
        raise ManifestError(f"Selector must look like 'module:attribute', got {selector!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ManifestError(f"Cannot import {module_name}: {e}") from e
    obj: Any = module
    for part in attr.split("."):
        if not hasattr(obj, part):
            raise ManifestError(f"{module_name} has no attribute {attr!r}")
        obj = getattr(obj, part)
    return _coerce(obj, attr.split(".")[-1])


def resolve_target(target: str) -> Service:
    """Manifest path if it exists on disk, otherwise a module selector."""
    p = Path(target)
    if p.exists():
        if not p.is_file():
            raise ManifestError(f"Not a manifest file: {target}")
        return load_manifest(p)
    if ":" in target:
        return load_selector(target)
    raise ManifestError(f"Manifest not found: {target}")
