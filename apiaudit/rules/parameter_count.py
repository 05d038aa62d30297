"""Rule: endpoints should declare a reasonable number of parameters."""

from dataclasses import dataclass
from typing import ClassVar

from ..models import Endpoint
from .base import BestPractice, Finding, Severity

RULE_ID = "reasonable_parameter_count"
DEFAULT_MAX_PARAMETERS = 10


@dataclass(frozen=True)
class ParameterCountFinding(Finding):
    rule_id: ClassVar[str] = RULE_ID
    kind: str = "too_many_parameters"
    count: int = 0

    @property
    def message(self) -> str:
        return f"Endpoint declares {self.count} parameters."


class ReasonableParameterCount(BestPractice):
    rule_id = RULE_ID
    title = "Reasonable parameter count"
    category = "parameter_design"
    severity = Severity.MEDIUM

    def __init__(self, max_count: int = DEFAULT_MAX_PARAMETERS):
        self.max_count = max_count

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        count = len(endpoint.parameters)
        if count <= self.max_count:
            return []
        return [ParameterCountFinding(count=count)]
