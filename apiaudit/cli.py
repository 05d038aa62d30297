"""CLI entry point — prepare linguistic resources, audit a service, print the report.

Exit codes:
  0  no findings at or above --fail-on and every audit conclusive
  1  findings at or above --fail-on (INFO never fails)
  2  usage, manifest or config error
  3  no failing findings, but some audits are inconclusive or errored
"""

import logging
from dataclasses import replace
from pathlib import Path

import click
import typer

from .config import AuditConfig, load_config
from .engine import run_audit
from .errors import ConfigError, LinguisticResourceError, ManifestError
from .format import format_human, format_markdown
from .linguistics import NltkLinguistics, build_linguistics
from .manifest import resolve_target
from .rules.base import RULE_CATEGORIES, Severity
from .rules.registry import RULE_INFO

EXIT_FINDINGS = 1
EXIT_USAGE = 2
EXIT_INCOMPLETE = 3

app = typer.Typer(help="Audit declared web-service endpoints against REST API design conventions.")


def _err(msg: str) -> None:
    """Print a red error to stderr and exit with the usage code."""
    typer.echo(click.style(msg, fg="red"), err=True)
    raise typer.Exit(EXIT_USAGE)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("setup")
def setup_cmd(
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="NLTK data directory (default: NLTK's search path)"),
    retries: int = typer.Option(3, "--retries", help="Download attempts per resource"),
    timeout: float = typer.Option(30.0, "--timeout", help="Network timeout per attempt, seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Install the NLTK resources used by the naming rules. Safe to run repeatedly."""
    _configure_logging(verbose)
    try:
        config = load_config()
    except ConfigError as e:
        _err(str(e))
    linguistics = NltkLinguistics(
        crud_verbs=config.crud_verbs,
        data_dir=data_dir or config.nltk_data_dir,
        retries=retries,
        timeout=timeout,
    )
    try:
        missing = linguistics.missing_resources()
        linguistics.ensure_ready()
    except LinguisticResourceError as e:
        typer.echo(click.style(f"Setup failed: {e}", fg="red"), err=True)
        raise typer.Exit(1)
    if missing:
        typer.echo(f"Installed NLTK resources: {', '.join(missing)}")
    else:
        typer.echo("NLTK resources already installed.")


@app.command("run")
def run_cmd(
    target: str = typer.Argument(..., help="Endpoint manifest (.yaml/.json) or module:attribute selector"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file (default: ./apiaudit.yaml)"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    markdown_out: bool = typer.Option(False, "--markdown", "-m", help="Output as Markdown"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Include passing audits in text output"),
    fail_on: str = typer.Option("LOW", "--fail-on", help="Exit 1 on findings of this severity or higher (HIGH/MEDIUM/LOW)"),
    offline: bool = typer.Option(False, "--offline", help="Never download NLTK data; naming rules become inconclusive if missing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show rule ids and debug logging"),
) -> None:
    """Audit a web service's endpoints and print the report."""
    _configure_logging(verbose)
    try:
        threshold = Severity(fail_on.upper())
    except ValueError:
        _err(f"--fail-on must be one of HIGH, MEDIUM, LOW (got {fail_on})")
    try:
        config = load_config(config_path)
        service = resolve_target(target)
    except (ConfigError, ManifestError) as e:
        _err(str(e))
    if offline:
        config = _with_offline(config)

    report = run_audit(service.endpoints, config, build_linguistics(config), service=service.name)

    if json_out:
        typer.echo(report.to_json())
    elif markdown_out:
        typer.echo(format_markdown(report, show_all=show_all))
    else:
        typer.echo(format_human(report, show_all=show_all, verbose=verbose))

    if report.failing(threshold):
        raise typer.Exit(EXIT_FINDINGS)
    incomplete = report.inconclusive() + report.errors()
    if incomplete:
        typer.echo(f"{len(incomplete)} audit(s) could not be completed; run `apiaudit setup` or use --verbose.", err=True)
        raise typer.Exit(EXIT_INCOMPLETE)


def _with_offline(config: AuditConfig) -> AuditConfig:
    return replace(config, auto_download=False)


@app.command("explain")
def explain_cmd(rule_id: str = typer.Argument("list", help="Rule id, or 'list'")) -> None:
    """Print rule description."""
    if rule_id in ("list", "rules"):
        typer.echo("Available rules:")
        for category in RULE_CATEGORIES:
            rules = [(rid, info) for rid, info in RULE_INFO.items() if info["category"] == category]
            if not rules:
                continue
            typer.echo(f"  {category}:")
            for rid, info in rules:
                typer.echo(f"    {rid:<30} {info['severity']}")
        typer.echo("\nUse: apiaudit explain <rule_id>")
        return
    info = RULE_INFO.get(rule_id)
    if not info:
        _err(f"Unknown rule: {rule_id}\nAvailable: {', '.join(RULE_INFO.keys())}")
    typer.echo(f"Rule: {rule_id}")
    typer.echo(f"Severity: {info['severity']}")
    typer.echo(f"Category: {info['category']}")
    typer.echo(f"Description: {info['description']}")
    typer.echo(f"When: {info['when']}")
    typer.echo(f"Fix: {info['fix']}")


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
