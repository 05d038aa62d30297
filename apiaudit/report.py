"""Audit results: one Audit per (endpoint, rule), collected into a Report."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .models import Endpoint
from .rules.base import BestPractice, Finding, SEVERITY_ORDER, Severity


class AuditStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    INCONCLUSIVE = "inconclusive"  # a resource the rule needs was unavailable
    ERROR = "error"  # the rule raised


@dataclass(frozen=True)
class Audit:
    """Result of evaluating one rule against one endpoint."""

    best_practice: BestPractice = field(compare=False)
    endpoint: Endpoint
    findings: tuple[Finding, ...] = ()
    status: AuditStatus = AuditStatus.PASSED
    diagnostic: Optional[str] = None
    rule_id: str = ""

    def __post_init__(self) -> None:
        if not self.rule_id:
            object.__setattr__(self, "rule_id", self.best_practice.rule_id)

    @property
    def passed(self) -> bool:
        return self.status == AuditStatus.PASSED

    @property
    def severity(self) -> Severity:
        return self.best_practice.severity

    def to_dict(self, prefix: str = "") -> dict:
        out = {
            "rule_id": self.rule_id,
            "category": self.best_practice.category,
            "severity": self.severity.value,
            "endpoint_path": self.endpoint.path_string,
            "method": self.endpoint.method,
            "handler_name": self.endpoint.bare_handler_name(prefix),
            "status": self.status.value,
            "findings": [f.to_dict() for f in self.findings],
        }
        if self.diagnostic:
            out["diagnostic"] = self.diagnostic
        return out


@dataclass(frozen=True)
class Report:
    """Every audit of one run, in endpoint order x rule registration order."""

    audits: tuple[Audit, ...] = ()
    service: str = ""

    def __iter__(self) -> Iterator[Audit]:
        return iter(self.audits)

    def __len__(self) -> int:
        return len(self.audits)

    def audits_for(
        self, path: str | None = None, handler_name: str | None = None, prefix: str | None = None
    ) -> list[Audit]:
        """Audits for the endpoint(s) matching path and/or bare handler name.

        Handler names are stripped of ``prefix`` (default: the service name).
        """
        prefix = self.service if prefix is None else prefix
        return [
            a for a in self.audits
            if (path is None or a.endpoint.path_string == path)
            and (handler_name is None or a.endpoint.bare_handler_name(prefix) == handler_name)
        ]

    def for_rule(self, rule_id: str) -> list[Audit]:
        return [a for a in self.audits if a.rule_id == rule_id]

    def with_findings(self) -> list[Audit]:
        return [a for a in self.audits if a.findings]

    def inconclusive(self) -> list[Audit]:
        return [a for a in self.audits if a.status == AuditStatus.INCONCLUSIVE]

    def errors(self) -> list[Audit]:
        return [a for a in self.audits if a.status == AuditStatus.ERROR]

    def findings(self) -> list[Finding]:
        return [f for a in self.audits for f in a.findings]

    @property
    def is_clean(self) -> bool:
        """No findings and every audit conclusive."""
        return all(a.passed for a in self.audits)

    def failing(self, threshold: Severity = Severity.LOW) -> list[Audit]:
        """Audits with findings at or above threshold. INFO never fails."""
        limit = SEVERITY_ORDER[threshold]
        return [
            a for a in self.with_findings()
            if a.severity != Severity.INFO and SEVERITY_ORDER[a.severity] <= limit
        ]

    def summary(self) -> dict:
        counts = {s.value: 0 for s in AuditStatus}
        for a in self.audits:
            counts[a.status.value] += 1
        return {
            "service": self.service,
            "endpoints": len({a.endpoint for a in self.audits}),
            "audits": len(self.audits),
            "findings": len(self.findings()),
            **counts,
        }

    def to_dict(self) -> dict:
        return {
            "summary": self.summary(),
            "audits": [a.to_dict(self.service) for a in self.audits],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
