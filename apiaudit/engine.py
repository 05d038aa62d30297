"""Audit engine. Cross-applies every rule to every endpoint."""

import logging
from typing import Iterable, Mapping

from .config import AuditConfig
from .errors import LinguisticResourceError
from .linguistics import LinguisticProvider, build_linguistics
from .models import Endpoint
from .report import Audit, AuditStatus, Report
from .rules.base import BestPractice
from .rules.registry import build_rules

logger = logging.getLogger(__name__)


def _evaluate(rule: BestPractice, endpoint: Endpoint) -> Audit:
    """Run one rule; failures become an ERROR audit instead of aborting the run."""
    try:
        findings = tuple(rule.evaluate(endpoint))
    except LinguisticResourceError as e:
        return Audit(rule, endpoint, status=AuditStatus.INCONCLUSIVE, diagnostic=str(e))
    except Exception as e:
        logger.warning("Rule %s failed on %s: %s", rule.rule_id, endpoint, e, exc_info=True)
        return Audit(rule, endpoint, status=AuditStatus.ERROR, diagnostic=f"{type(e).__name__}: {e}")

    foreign = [f for f in findings if not f.belongs_to(rule)]
    if foreign:
        return Audit(
            rule, endpoint,
            status=AuditStatus.ERROR,
            diagnostic=f"Rule produced findings of another rule: {', '.join(type(f).__name__ for f in foreign)}",
        )
    status = AuditStatus.FAILED if findings else AuditStatus.PASSED
    return Audit(rule, endpoint, findings, status)


def get_report(
    endpoints: Iterable[Endpoint],
    rules: Mapping[str, BestPractice] | Iterable[BestPractice],
    linguistics: LinguisticProvider | None = None,
    service: str = "",
) -> Report:
    """Evaluate each rule against each endpoint, in order. No filtering.

    Rules with ``requires_linguistics`` are gated on one ``ensure_ready()`` call;
    if it fails, their audits are INCONCLUSIVE and the other rules still run.
    """
    rule_list = list(rules.values()) if isinstance(rules, Mapping) else list(rules)
    endpoint_list = list(endpoints)

    unavailable: str | None = None
    if linguistics is not None and any(r.requires_linguistics for r in rule_list):
        try:
            linguistics.ensure_ready()
        except LinguisticResourceError as e:
            logger.warning("Linguistic resources unavailable, naming rules are inconclusive: %s", e)
            unavailable = str(e)

    audits: list[Audit] = []
    for endpoint in endpoint_list:
        for rule in rule_list:
            if unavailable is not None and rule.requires_linguistics:
                audits.append(Audit(rule, endpoint, status=AuditStatus.INCONCLUSIVE, diagnostic=unavailable))
                continue
            audits.append(_evaluate(rule, endpoint))

    report = Report(tuple(audits), service=service)
    logger.debug(
        "Audited %d endpoint(s) with %d rule(s): %d finding(s)",
        len(endpoint_list), len(rule_list), len(report.findings()),
    )
    return report


def run_audit(
    endpoints: Iterable[Endpoint],
    config: AuditConfig | None = None,
    linguistics: LinguisticProvider | None = None,
    service: str = "",
) -> Report:
    """Audit endpoints with the built-in rule set."""
    config = config or AuditConfig()
    if linguistics is None:
        linguistics = build_linguistics(config)
    rules = build_rules(config, linguistics)
    return get_report(endpoints, rules, linguistics=linguistics, service=service)
