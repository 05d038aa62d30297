"""Base types for best-practice rules."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import ClassVar

from ..models import Endpoint


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


SEVERITY_ORDER = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2, Severity.INFO: 3}

# Rule categories for filtering and grouping
RULE_CATEGORIES = (
    "url_naming",         # path segment wording, casing, plurals
    "response_design",    # what a handler returns
    "parameter_design",   # how many / which parameters an endpoint declares
    "caching",            # conditional requests, ETags
)


@dataclass(frozen=True)
class Finding:
    """One violation found by a rule.

    Subclasses set ``rule_id`` to tie the finding to its rule family and
    declare their payload as dataclass fields; equality is structural.
    """

    rule_id: ClassVar[str] = ""
    kind: str

    @property
    def message(self) -> str:
        return self.kind.replace("_", " ")

    def belongs_to(self, rule: "BestPractice") -> bool:
        return self.rule_id == rule.rule_id

    def to_dict(self) -> dict:
        data = {"kind": self.kind}
        data.update({k: v for k, v in asdict(self).items() if k != "kind"})
        data["message"] = self.message
        return data


class BestPractice:
    """A stateless check of one design convention against one endpoint.

    Subclasses set the class attributes and implement :meth:`evaluate`,
    returning findings of their own family only.
    """

    rule_id: ClassVar[str] = ""
    title: ClassVar[str] = ""
    category: ClassVar[str] = ""
    severity: ClassVar[Severity] = Severity.MEDIUM
    requires_linguistics: ClassVar[bool] = False

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"
