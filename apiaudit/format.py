"""Terminal and Markdown output — box layout, colors, width control."""

import shutil
from typing import List

import click

from .report import Audit, AuditStatus, Report
from .rules.base import Severity

_SEVERITY_COLORS = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: None,
}


def _get_width() -> int:
    try:
        return min(80, shutil.get_terminal_size((80, 24)).columns)
    except OSError:
        return 80


def _wrap(text: str, indent: int = 0, width: int = 80) -> List[str]:
    """Wrap text to width, first line has indent, following lines +2."""
    prefix = " " * indent
    extra = "  "
    lines = []
    rest = text
    first = True
    while rest:
        max_len = width - (indent if first else indent + len(extra))
        if len(rest) <= max_len:
            lines.append(prefix + rest)
            break
        break_at = rest.rfind(" ", 0, max_len + 1)
        if break_at <= 0:
            break_at = max_len
        chunk = rest[:break_at].strip()
        rest = rest[break_at:].strip()
        lines.append(prefix + chunk)
        prefix = " " * indent + extra
        first = False
    return lines


def _group_by_endpoint(audits: List[Audit]) -> list[tuple[str, List[Audit]]]:
    """Keep report order; one group per endpoint."""
    groups: dict[str, List[Audit]] = {}
    for a in audits:
        groups.setdefault(str(a.endpoint), []).append(a)
    return list(groups.items())


def _status_line(a: Audit, verbose: bool) -> str:
    label = a.rule_id if verbose else a.best_practice.title or a.rule_id
    if a.status == AuditStatus.PASSED:
        return f"✓ {label}"
    if a.status == AuditStatus.INCONCLUSIVE:
        return f"? {label} (inconclusive: {a.diagnostic})"
    if a.status == AuditStatus.ERROR:
        return f"! {label} (rule error: {a.diagnostic})"
    return f"● [{a.severity.value}] {label}"


def _summary_text(report: Report) -> str:
    s = report.summary()
    parts = [f"{s['endpoints']} endpoint(s)", f"{s['audits']} audit(s)", f"{s['findings']} finding(s)"]
    if s["inconclusive"]:
        parts.append(f"{s['inconclusive']} inconclusive")
    if s["error"]:
        parts.append(f"{s['error']} rule error(s)")
    return ", ".join(parts)


def format_human(report: Report, show_all: bool = False, verbose: bool = False) -> str:
    """Build the human terminal output as a single string."""
    width = _get_width()
    lines = []

    lines.append("┌" + "─" * (width - 2) + "┐")
    title = " apiaudit · REST design audit"
    if report.service:
        title += f" · {report.service}"
    lines.append(title)
    lines.append("─" * width)
    color = "green" if report.is_clean else ("red" if report.with_findings() else "yellow")
    lines.append(click.style(f" {_summary_text(report)}", fg=color))
    lines.append("─" * width)

    shown = list(report.audits) if show_all else [a for a in report.audits if not a.passed]
    if not shown:
        lines.append(" No API design violations detected.")
    for endpoint, audits in _group_by_endpoint(shown):
        handler = audits[0].endpoint.bare_handler_name(report.service)
        lines.append(click.style(f" {endpoint}", bold=True) + click.style(f"  ({handler})", dim=True))
        description = audits[0].endpoint.description
        if description:
            lines.extend(click.style(ln, dim=True) for ln in _wrap(description, indent=2, width=width))
        for a in audits:
            fg = _SEVERITY_COLORS.get(a.severity) if a.status == AuditStatus.FAILED else None
            for ln in _wrap(_status_line(a, verbose), indent=2, width=width):
                lines.append(click.style(ln, fg=fg, dim=a.passed))
            for f in a.findings:
                for ln in _wrap(f"○ {f.message}", indent=4, width=width):
                    lines.append(click.style(ln, dim=True))

    lines.append("─" * width)
    footer = " Run with --json for machine output  ·  apiaudit explain <rule_id>"
    if len(footer) > width:
        footer = " --json  ·  explain  ·  --help"
    lines.append(click.style(footer, dim=True))
    lines.append("└" + "─" * (width - 2) + "┘")

    return "\n".join(lines)


def format_markdown(report: Report, show_all: bool = False) -> str:
    """Markdown output for docs/PRs."""
    out = [f"# apiaudit: {report.service or 'web service'}", "", f"**{_summary_text(report)}**", ""]
    shown = list(report.audits) if show_all else [a for a in report.audits if not a.passed]
    if not shown:
        out.append("No API design violations detected.")
        return "\n".join(out)
    for endpoint, audits in _group_by_endpoint(shown):
        handler = audits[0].endpoint.bare_handler_name(report.service)
        out.append(f"## `{endpoint}` ({handler})")
        if audits[0].endpoint.description:
            out.append(f"_{audits[0].endpoint.description}_")
        for a in audits:
            if a.status == AuditStatus.FAILED:
                out.append(f"- **[{a.severity.value}] {a.rule_id}**")
                out.extend(f"  - {f.message}" for f in a.findings)
            elif a.status == AuditStatus.PASSED:
                out.append(f"- {a.rule_id}: passed")
            else:
                out.append(f"- {a.rule_id}: {a.status.value} ({a.diagnostic})")
        out.append("")
    return "\n".join(out).rstrip() + "\n"
