"""Tests for endpoint manifests and selectors."""

import json
from pathlib import Path

import pytest

from apiaudit.errors import ManifestError
from apiaudit.manifest import Service, load_manifest, load_selector, resolve_target
from apiaudit.models import ParameterKind, ReturnKind, make_endpoint, parse_path

FIXTURES = Path(__file__).parent / "fixtures"


def test_parse_path_segments():
    segs = parse_path("/en/lectures/{lectureId}/image/:imageId/")
    assert [s.value for s in segs] == ["en", "lectures", "lectureId", "image", "imageId"]
    assert [s.is_parameter for s in segs] == [False, False, True, False, True]


def test_path_string_round_trips_braces():
    ep = make_endpoint("/en/lectures/:lectureId", "get", "S.H")
    assert ep.path_string == "/en/lectures/{lectureId}"
    assert ep.method == "GET"


def test_bare_handler_name():
    ep = make_endpoint("/a", "GET", "BadLinguaWebService.GetImageHandler")
    assert ep.bare_handler_name("BadLinguaWebService") == "GetImageHandler"
    assert ep.bare_handler_name("Other") == "BadLinguaWebService.GetImageHandler"
    assert ep.bare_handler_name() == "BadLinguaWebService.GetImageHandler"


def test_load_yaml_manifest():
    service = load_manifest(FIXTURES / "bad_lingua.yaml")
    assert service.name == "BadLinguaWebService"
    assert len(service.endpoints) == 6
    delete = service.endpoints[1]
    assert delete.method == "DELETE"
    assert delete.returns == ReturnKind.COMPLEX
    assert delete.parameters[0].kind == ParameterKind.PATH


def test_undeclared_path_parameters_are_added():
    service = load_manifest(FIXTURES / "bad_lingua.yaml")
    image = service.endpoints[4]
    assert [p.name for p in image.parameters] == ["lectureId", "imageId"]
    assert all(p.kind == ParameterKind.PATH for p in image.parameters)


def test_load_json_manifest(tmp_path):
    p = tmp_path / "svc.json"
    p.write_text(json.dumps([{"path": "/users/{id}", "method": "get", "handler": "Users", "returns": "complex"}]))
    service = load_manifest(p)
    assert service.name == "svc"
    assert service.endpoints[0].path_string == "/users/{id}"


@pytest.mark.parametrize("endpoint,match", [
    ({"method": "GET", "handler": "H"}, "missing 'path'"),
    ({"path": "/a", "method": "FETCH", "handler": "H"}, "unknown HTTP method"),
    ({"path": "/a", "method": "GET", "handler": "H", "returns": "stream"}, "unknown return kind"),
    ({"path": "/a", "method": "GET", "handler": "H", "parameters": [{"name": "x", "kind": "cookie"}]}, "parameter kind"),
])
def test_invalid_manifest(tmp_path, endpoint, match):
    p = tmp_path / "bad.yaml"
    p.write_text(json.dumps({"endpoints": [endpoint]}))
    with pytest.raises(ManifestError, match=match):
        load_manifest(p)


def test_manifest_without_endpoints(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("service: Nothing\n")
    with pytest.raises(ManifestError, match="endpoints"):
        load_manifest(p)


def test_selector_resolves_service_and_callables(tmp_path, monkeypatch):
    (tmp_path / "lingua_service.py").write_text(
        "from apiaudit.manifest import Service\n"
        "from apiaudit.models import make_endpoint\n"
        "ENDPOINTS = [make_endpoint('/en/lectures/{id}', 'GET', 'Lingua.GetLecture', returns='complex')]\n"
        "SERVICE = Service('Lingua', tuple(ENDPOINTS))\n"
        "def endpoints():\n"
        "    return ENDPOINTS\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    assert load_selector("lingua_service:SERVICE").name == "Lingua"
    assert load_selector("lingua_service:ENDPOINTS").endpoints[0].handler == "Lingua.GetLecture"
    assert isinstance(load_selector("lingua_service:endpoints"), Service)
    with pytest.raises(ManifestError, match="no attribute"):
        load_selector("lingua_service:missing")


def test_resolve_target_errors(tmp_path):
    with pytest.raises(ManifestError, match="not found"):
        resolve_target(str(tmp_path / "nope.yaml"))
    with pytest.raises(ManifestError, match="Cannot import"):
        resolve_target("no_such_module_xyz:thing")
    with pytest.raises(ManifestError, match="Not a manifest"):
        resolve_target(str(tmp_path))
