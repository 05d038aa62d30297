"""Rule: DELETE-style endpoints should not return complex objects."""

from dataclasses import dataclass
from typing import ClassVar

from ..models import Endpoint, ReturnKind
from .base import BestPractice, Finding, Severity

RULE_ID = "complex_return_type"


@dataclass(frozen=True)
class ReturnTypeFinding(Finding):
    rule_id: ClassVar[str] = RULE_ID
    kind: str = "has_complex_return_type"
    method: str = ""

    @property
    def message(self) -> str:
        return f"{self.method} endpoint returns a complex type; a primitive (or empty) response is expected."


class EndpointHasComplexReturnType(BestPractice):
    rule_id = RULE_ID
    title = "Minimal responses for minimal operations"
    category = "response_design"
    severity = Severity.MEDIUM

    def __init__(self, methods: tuple[str, ...] = ("DELETE",)):
        self.methods = tuple(m.upper() for m in methods)

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        if endpoint.method not in self.methods:
            return []
        if endpoint.returns != ReturnKind.COMPLEX:
            return []
        return [ReturnTypeFinding(method=endpoint.method)]
