"""Rule: a segment naming a collection (followed by an id) should be plural.

'/lectures/{lectureId}/image/{imageId}' -> 'image' is flagged; 'lectures' is fine.
Only the segment directly before a parameter is checked.
"""

from dataclasses import dataclass
from typing import ClassVar

from ..linguistics import LinguisticProvider, split_words
from ..models import Endpoint
from .base import BestPractice, Finding, Severity

RULE_ID = "plural_collection_segments"


@dataclass(frozen=True)
class CollectionSegmentFinding(Finding):
    rule_id: ClassVar[str] = RULE_ID
    kind: str = "non_plural_before_parameter"
    segment: str = ""

    @property
    def message(self) -> str:
        return f"Collection segment '{self.segment}' precedes a parameter but is not plural."


class PluralSegmentForStoresAndCollections(BestPractice):
    rule_id = RULE_ID
    title = "Plural names for collections and stores"
    category = "url_naming"
    severity = Severity.MEDIUM
    requires_linguistics = True

    def __init__(self, linguistics: LinguisticProvider):
        self.linguistics = linguistics

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        findings: list[Finding] = []
        segments = endpoint.segments
        for prev, seg in zip(segments, segments[1:]):
            if not seg.is_parameter or prev.is_parameter:
                continue
            words = split_words(prev.value)
            if not words:
                continue
            # 'favoriteLectures' is a collection of lectures: the head noun is last
            if not self.linguistics.is_plural(words[-1]):
                findings.append(CollectionSegmentFinding(segment=prev.value))
        return findings
