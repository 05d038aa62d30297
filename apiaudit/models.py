"""Endpoint descriptors supplied by the host service."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

_PARAM_RE = re.compile(r"^\{([^{}/]+)\}$|^:([^/]+)$")


class ParameterKind(str, Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"
    HEADER = "header"


class ReturnKind(str, Enum):
    """How the host classifies a handler's response type."""

    PRIMITIVE = "primitive"  # String, Int, Bool, UUID, ...
    COMPLEX = "complex"  # structured objects
    BLOB = "blob"  # binary payloads (images, files)


@dataclass(frozen=True)
class PathSegment:
    value: str
    is_parameter: bool = False

    def __str__(self) -> str:
        return f"{{{self.value}}}" if self.is_parameter else self.value


@dataclass(frozen=True)
class Parameter:
    name: str
    kind: ParameterKind = ParameterKind.QUERY
    type: str = "string"


@dataclass(frozen=True)
class Endpoint:
    """One routed operation. Read-only for the duration of a run."""

    segments: tuple[PathSegment, ...]
    method: str
    handler: str
    parameters: tuple[Parameter, ...] = ()
    returns: Optional[ReturnKind] = None
    etag: bool = False  # handler emits an ETag validator / honours If-None-Match
    description: str = field(default="", compare=False)

    @property
    def path_string(self) -> str:
        """'/en/lectures/{lectureId}' form of the path."""
        return "/" + "/".join(str(s) for s in self.segments)

    def literal_segments(self) -> list[str]:
        return [s.value for s in self.segments if not s.is_parameter]

    def bare_handler_name(self, prefix: str = "") -> str:
        """Handler identifier with a known prefix (e.g. the service name) removed.

        'BadLinguaWebService.GetImageHandler' -> 'GetImageHandler' for prefix 'BadLinguaWebService'.
        """
        name = self.handler
        if prefix and name.startswith(prefix):
            name = name[len(prefix):].lstrip(".:")
        return name

    def __str__(self) -> str:
        return f"{self.method} {self.path_string}"


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Split '/a/{b}/c' (or '/a/:b/c') into path segments. Empty segments are dropped."""
    segments: list[PathSegment] = []
    for part in path.strip().split("/"):
        if not part:
            continue
        m = _PARAM_RE.match(part)
        if m:
            segments.append(PathSegment(m.group(1) or m.group(2), is_parameter=True))
        else:
            segments.append(PathSegment(part))
    return tuple(segments)


def make_endpoint(
    path: str,
    method: str,
    handler: str,
    parameters: tuple[Parameter, ...] | list[Parameter] = (),
    returns: ReturnKind | str | None = None,
    etag: bool = False,
    description: str = "",
) -> Endpoint:
    """Build an Endpoint from a path string; undeclared path parameters are added."""
    segments = parse_path(path)
    params = list(parameters)
    declared = {p.name for p in params}
    for seg in segments:
        if seg.is_parameter and seg.value not in declared:
            params.append(Parameter(seg.value, ParameterKind.PATH))
    return Endpoint(
        segments=segments,
        method=method.upper(),
        handler=handler,
        parameters=tuple(params),
        returns=ReturnKind(returns) if returns is not None else None,
        etag=etag,
        description=description,
    )
