"""Rule: URL paths name resources; the HTTP method is the verb."""

from dataclasses import dataclass
from typing import ClassVar

from ..linguistics import LinguisticProvider, split_words
from ..models import Endpoint
from .base import BestPractice, Finding, Severity

RULE_ID = "no_crud_verbs_in_path"


@dataclass(frozen=True)
class CRUDVerbFinding(Finding):
    rule_id: ClassVar[str] = RULE_ID
    kind: str = "crud_verb_found"
    segment: str = ""
    verb: str = ""

    @property
    def message(self) -> str:
        return f"Path segment '{self.segment}' contains the CRUD verb '{self.verb}'."


class NoCRUDVerbsInURLPathSegments(BestPractice):
    rule_id = RULE_ID
    title = "No CRUD verbs in URL path segments"
    category = "url_naming"
    severity = Severity.HIGH
    requires_linguistics = True

    def __init__(self, linguistics: LinguisticProvider):
        self.linguistics = linguistics

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        findings: list[Finding] = []
        for seg in endpoint.literal_segments():
            for word in split_words(seg):
                if self.linguistics.is_crud_verb(word):
                    findings.append(CRUDVerbFinding(segment=seg, verb=word.lower()))
                    break
        return findings
