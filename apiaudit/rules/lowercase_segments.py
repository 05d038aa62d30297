"""Rule: URL path segments should be lowercase."""

from dataclasses import dataclass
from typing import ClassVar

from ..models import Endpoint
from .base import BestPractice, Finding, Severity

RULE_ID = "lowercase_path_segments"


@dataclass(frozen=True)
class LowercaseSegmentFinding(Finding):
    rule_id: ClassVar[str] = RULE_ID
    kind: str = "uppercase_character_found"
    segment: str = ""

    @property
    def message(self) -> str:
        return f"Path segment '{self.segment}' contains uppercase characters."


class LowercaseURLPathSegments(BestPractice):
    rule_id = RULE_ID
    title = "Lowercase URL path segments"
    category = "url_naming"
    severity = Severity.HIGH

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        return [
            LowercaseSegmentFinding(segment=seg)
            for seg in endpoint.literal_segments()
            if any(c.isupper() for c in seg)
        ]
