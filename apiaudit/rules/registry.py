"""Rule registry: documentation for `apiaudit explain` and the default rule set."""

from ..config import AuditConfig
from ..linguistics import LinguisticProvider, build_linguistics
from .base import BestPractice
from .crud_verbs import NoCRUDVerbsInURLPathSegments
from .etags import EncourageETags
from .lowercase_segments import LowercaseURLPathSegments
from .parameter_count import ReasonableParameterCount
from .plural_segments import PluralSegmentForStoresAndCollections
from .return_type import EndpointHasComplexReturnType

# Registration order is report order
RULE_CLASSES: tuple[type[BestPractice], ...] = (
    EndpointHasComplexReturnType,
    ReasonableParameterCount,
    EncourageETags,
    PluralSegmentForStoresAndCollections,
    LowercaseURLPathSegments,
    NoCRUDVerbsInURLPathSegments,
)

RULE_INFO = {
    "complex_return_type": {
        "severity": "MEDIUM",
        "category": "response_design",
        "description": "Operations such as DELETE should answer with a minimal response.",
        "when": "Method is one of minimal_response_methods (default DELETE) and the handler returns a complex object.",
        "fix": "Return a status, the deleted id or nothing; clients rarely need the removed resource.",
    },
    "reasonable_parameter_count": {
        "severity": "MEDIUM",
        "category": "parameter_design",
        "description": "Endpoints with many parameters are hard to use and to evolve.",
        "when": "More parameters are declared than max_parameters (default 10).",
        "fix": "Group related parameters into a body object or split the endpoint.",
    },
    "encourage_etags": {
        "severity": "LOW",
        "category": "caching",
        "description": "Binary responses on reads are good candidates for conditional caching.",
        "when": "A read method (default GET) returns a blob and the handler sends no ETag.",
        "fix": "Emit an ETag and answer If-None-Match with 304 Not Modified.",
    },
    "plural_collection_segments": {
        "severity": "MEDIUM",
        "category": "url_naming",
        "description": "A segment followed by an identifier names a collection and should be plural.",
        "when": "The literal segment right before a path parameter is not a plural noun.",
        "fix": "Rename e.g. /lectures/{id}/image/{imageId} to /lectures/{id}/images/{imageId}.",
    },
    "lowercase_path_segments": {
        "severity": "HIGH",
        "category": "url_naming",
        "description": "URL paths are case-sensitive; mixed case invites mismatched links.",
        "when": "A literal path segment contains an uppercase character.",
        "fix": "Use lowercase segments, separating words with hyphens (favorite-lectures).",
    },
    "no_crud_verbs_in_path": {
        "severity": "HIGH",
        "category": "url_naming",
        "description": "The HTTP method carries the action; paths should name resources.",
        "when": "A literal path segment contains a CRUD verb such as get, create, update or delete.",
        "fix": "Drop the verb and pick the method instead: GET /favorite-lectures.",
    },
}


def build_rules(config=None, linguistics: LinguisticProvider | None = None) -> dict[str, BestPractice]:
    """Default rule set keyed by rule id, minus rules disabled in config."""
    config = config or AuditConfig()
    if linguistics is None:
        linguistics = build_linguistics(config)

    factories = {
        EndpointHasComplexReturnType.rule_id: lambda: EndpointHasComplexReturnType(config.minimal_response_methods),
        ReasonableParameterCount.rule_id: lambda: ReasonableParameterCount(config.max_parameters),
        EncourageETags.rule_id: lambda: EncourageETags(config.read_methods),
        PluralSegmentForStoresAndCollections.rule_id: lambda: PluralSegmentForStoresAndCollections(linguistics),
        LowercaseURLPathSegments.rule_id: LowercaseURLPathSegments,
        NoCRUDVerbsInURLPathSegments.rule_id: lambda: NoCRUDVerbsInURLPathSegments(linguistics),
    }
    disabled = set(config.disabled_rules)
    return {
        cls.rule_id: factories[cls.rule_id]()
        for cls in RULE_CLASSES
        if cls.rule_id not in disabled
    }
