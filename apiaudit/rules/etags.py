"""Rule: binary blobs served on reads should be cacheable via ETags."""

from dataclasses import dataclass
from typing import ClassVar

from ..models import Endpoint, ReturnKind
from .base import BestPractice, Finding, Severity

RULE_ID = "encourage_etags"


@dataclass(frozen=True)
class ETagsFinding(Finding):
    rule_id: ClassVar[str] = RULE_ID
    kind: str = "cacheable_blob"

    @property
    def message(self) -> str:
        return "Blob response without an ETag; clients cannot revalidate cached copies."


class EncourageETags(BestPractice):
    rule_id = RULE_ID
    title = "ETags for cacheable blobs"
    category = "caching"
    severity = Severity.LOW

    def __init__(self, read_methods: tuple[str, ...] = ("GET",)):
        self.read_methods = tuple(m.upper() for m in read_methods)

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        if endpoint.method not in self.read_methods:
            return []
        if endpoint.returns != ReturnKind.BLOB or endpoint.etag:
            return []
        return [ETagsFinding()]
