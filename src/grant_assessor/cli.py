"""CLI for the Grant Assessment Engine.

Loads a project JSON file and prints compliance, performance, validation,
synergy, resource and excellence results.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from policy_catalog import config as catalog_config

from .config import find_config_file, load_config, save_default_config
from .engine import AssessmentEngine, load_project
from .field_validator import field_quality_indicator
from .report import (
    enrich_prompt,
    format_assessment_report,
    format_compliance_summary,
    format_optimization_summary,
    format_validation_report,
)
from .schema import ComplianceLevel, ExcellenceLevel, Severity


console = Console()

_LOG_THEME = Theme({
    "logging.level.debug": "dim cyan",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "bold red",
})

LEVEL_COLORS = {
    ComplianceLevel.NON_COMPLIANT: "red",
    ComplianceLevel.PARTIALLY_COMPLIANT: "yellow",
    ComplianceLevel.COMPLIANT: "green",
    ComplianceLevel.EXCELLENT: "bold green",
    ExcellenceLevel.POOR: "red",
    ExcellenceLevel.BASIC: "yellow",
    ExcellenceLevel.GOOD: "green",
    ExcellenceLevel.EXCELLENT: "bold green",
}

SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.MAJOR: "yellow",
    Severity.MINOR: "dim",
}


def setup_logging(verbose: bool) -> None:
    """Send grant assessor and catalog debug logs to stderr through rich.

    Without ``verbose`` any handler left by an earlier verbose run is removed
    so the package loggers fall back to the root logger's level.
    """
    loggers = [logging.getLogger(name) for name in ("grant_assessor", "policy_catalog")]

    if not verbose:
        for logger in loggers:
            for existing in [h for h in logger.handlers if isinstance(h, RichHandler)]:
                logger.removeHandler(existing)
            logger.setLevel(logging.NOTSET)
        return

    handler = RichHandler(
        console=Console(theme=_LOG_THEME, stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    for logger in loggers:
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)


def _load_configs(config: Optional[str]) -> None:
    """Load the assessor config (explicit or discovered) and any catalog config."""
    config_path = Path(config) if config else find_config_file()
    if config_path:
        load_config(config_path)

    catalog_path = catalog_config.find_config_file()
    if catalog_path:
        catalog_config.load_config(catalog_path)


_PROJECT_OPTIONS = [
    click.option(
        "--project", "-p",
        required=True,
        type=click.Path(exists=True),
        help="Path to project JSON file"
    ),
    click.option(
        "--config", "-c",
        type=click.Path(exists=True),
        help="Path to assessor-config.yaml"
    ),
    click.option(
        "--out", "-o",
        type=click.Path(),
        help="Output file for JSON results"
    ),
    click.option(
        "--json-output", "-j",
        is_flag=True,
        help="Output raw JSON instead of formatted text"
    ),
    click.option(
        "--verbose", "-v",
        is_flag=True,
        help="Show detailed output and debug logs"
    ),
]


def project_command(func):
    """Add the shared options of commands that read a project file."""
    for option in reversed(_PROJECT_OPTIONS):
        func = option(func)
    return func


def _prepare(config: Optional[str], verbose: bool) -> AssessmentEngine:
    setup_logging(verbose)
    _load_configs(config)
    return AssessmentEngine()


def output_json(result: BaseModel, out_path: Optional[str]) -> None:
    """Output result as JSON."""
    json_str = result.model_dump_json(indent=2)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        click.echo(json_str)


def _emit(result: BaseModel, json_output: bool, out: Optional[str], display) -> None:
    if json_output:
        output_json(result, out)
        return

    display()
    if out:
        output_json(result, out)
        console.print(f"\n[green]Results saved to {out}[/green]")


def _bullets(title: str, items: list[str], color: str = "white") -> None:
    if not items:
        return
    console.print(f"\n[bold]{title}:[/bold]")
    for item in items:
        console.print(f"  [{color}]•[/{color}] {item}")


@click.group()
@click.version_option(version="0.1.0", prog_name="grant-assessor")
def main():
    """IPA III Grant Assessment Engine.

    Scores draft grant applications against funding-window policy rules
    and recommends budget, timeline and staffing allocations.
    """
    pass


@main.command("score")
@project_command
def score_cmd(project: str, config: Optional[str], out: Optional[str], json_output: bool, verbose: bool):
    """Score checklist compliance against the project's window.

    Example:
        grant-assessor score -p project.json
    """
    try:
        engine = _prepare(config, verbose)
        record = load_project(project)
        metrics = engine.score_compliance(record)

        def display():
            color = "green" if metrics.meets_window_threshold else "red"
            console.print(Panel(
                f"[bold]{record.title or 'Untitled'}[/bold]\n\n"
                f"Window: {metrics.window_label} ({metrics.window})\n"
                f"Compliance: [{color}]{metrics.total}/100[/{color}] "
                f"(threshold {metrics.window_threshold:g})",
                title="Section Compliance",
            ))

            table = Table(show_header=True, header_style="bold")
            table.add_column("Section", style="cyan")
            table.add_column("Score", justify="right")
            table.add_column("Weight", justify="right")
            table.add_column("Threshold", justify="right")
            table.add_column("Status")
            for section in metrics.sections:
                table.add_row(
                    section.label,
                    f"{section.percentage}%",
                    f"{section.weight:.2f}",
                    f"{section.threshold:g}",
                    "[green]PASS[/green]" if section.meets_threshold else "[red]FAIL[/red]",
                )
            console.print(table)

            if verbose:
                for section in metrics.sections:
                    missing = [item for item in section.items if not item.met]
                    _bullets(
                        f"{section.label} - missing",
                        [f"{item.label}: {item.guidance}" for item in missing],
                        "yellow",
                    )

        _emit(metrics, json_output, out, display)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("assess")
@project_command
def assess_cmd(project: str, config: Optional[str], out: Optional[str], json_output: bool, verbose: bool):
    """Assess relevance, maturity, climate contribution and cross-cutting priorities."""
    try:
        engine = _prepare(config, verbose)
        assessment = engine.assess_performance(load_project(project))

        def display():
            status = (
                "[green]COMPLIANT[/green]" if assessment.compliance.overall_compliant
                else "[red]NON-COMPLIANT[/red]"
            )
            console.print(Panel(
                f"Performance: [bold]{assessment.performance_score}/100[/bold] {status}\n"
                f"Relevance: {assessment.relevance_score}/100 | "
                f"Maturity: {assessment.maturity_score}/100 | "
                f"Climate: {assessment.climate_contribution}%",
                title="Performance Assessment",
            ))

            table = Table(title="Cross-Cutting Priorities", show_header=True, header_style="bold")
            table.add_column("Priority", style="cyan")
            table.add_column("Score", justify="right")
            for name, value in assessment.cross_cutting_priorities.model_dump().items():
                table.add_row(name.replace("_", " ").title(), f"{value}%")
            console.print(table)

            if verbose:
                _bullets("Indicators", [
                    f"{indicator.id}: {indicator.description} (target {indicator.target} {indicator.unit})"
                    for indicator in assessment.indicators
                ])
            _bullets("Recommendations", assessment.recommendations, "yellow")

        _emit(assessment, json_output, out, display)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("validate")
@project_command
def validate_cmd(project: str, config: Optional[str], out: Optional[str], json_output: bool, verbose: bool):
    """Validate a project against IPA III requirements.

    Exits with status 1 when critical errors are found.
    """
    try:
        engine = _prepare(config, verbose)
        result = engine.validate(load_project(project))
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    def display():
        color = LEVEL_COLORS[result.compliance_level]
        mark = "[green]✓ Valid[/green]" if result.is_valid else "[red]✗ Invalid[/red]"
        console.print(
            f"\n{mark} - compliance level: "
            f"[{color}]{result.compliance_level.value}[/{color}] "
            f"(performance {result.assessment.performance_score}/100)"
        )

        if result.errors:
            console.print(f"\n[bold]Errors ({len(result.errors)}):[/bold]")
            for error in result.errors:
                error_color = SEVERITY_COLORS[error.severity]
                console.print(
                    f"  [{error_color}]{error.severity.value.upper()}[/{error_color}] "
                    f"{error.field}: {error.message}"
                )

        if result.warnings:
            console.print(f"\n[bold]Warnings ({len(result.warnings)}):[/bold]")
            for warning in result.warnings:
                console.print(f"  [yellow]•[/yellow] {warning.field}: {warning.message}")
                if verbose:
                    console.print(f"    [dim]Impact: {warning.impact}[/dim]")

        _bullets("Recommendations", result.recommendations, "cyan")

    _emit(result, json_output, out, display)
    sys.exit(0 if result.is_valid else 1)


@main.command("optimize")
@project_command
@click.option(
    "--municipality", "-m",
    help="Municipality to profile (default: the project's municipality)"
)
def optimize_cmd(
    project: str,
    config: Optional[str],
    out: Optional[str],
    json_output: bool,
    verbose: bool,
    municipality: Optional[str],
):
    """Recommend budget, timeline and staffing allocations."""
    try:
        engine = _prepare(config, verbose)
        optimization = engine.optimize_resources(load_project(project), municipality)

        def display():
            if not optimization.municipality_found:
                console.print("[yellow]Municipality profile not found, using regional defaults[/yellow]")
            console.print(Panel(format_optimization_summary(optimization), title="Resource Optimization"))
            if verbose:
                console.print(f"\n[dim]{optimization.budget.justification}[/dim]")
                for risk in optimization.risks:
                    console.print(f"  [yellow]•[/yellow] {risk.risk}: [dim]{risk.mitigation}[/dim]")

        _emit(optimization, json_output, out, display)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("synergy")
@project_command
def synergy_cmd(project: str, config: Optional[str], out: Optional[str], json_output: bool, verbose: bool):
    """Detect cross-window synergies in the project text."""
    try:
        engine = _prepare(config, verbose)
        synergy = engine.detect_synergies(load_project(project))

        def display():
            console.print(
                f"\nPrimary window: [bold cyan]{synergy.primary_window}[/bold cyan] | "
                f"Synergy score: [bold]{synergy.synergy_score:.0%}[/bold]"
            )
            table = Table(title="Window Keyword Hits", show_header=True, header_style="bold")
            table.add_column("Window", style="cyan")
            table.add_column("Hits", justify="right")
            table.add_column("Synergy")
            for window, hits in synergy.window_scores.items():
                table.add_row(window, str(hits), "✓" if window in synergy.synergy_windows else "")
            console.print(table)
            _bullets("Recommendations", synergy.recommendations, "cyan")

        _emit(synergy, json_output, out, display)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("excellence")
@project_command
def excellence_cmd(project: str, config: Optional[str], out: Optional[str], json_output: bool, verbose: bool):
    """Score submission readiness (0-100)."""
    try:
        engine = _prepare(config, verbose)
        excellence = engine.validate_excellence(load_project(project))

        def display():
            color = LEVEL_COLORS[excellence.level]
            console.print(
                f"\nExcellence score: [bold]{excellence.score}/100[/bold] "
                f"[{color}]{excellence.level.value}[/{color}]"
            )
            _bullets("Critical issues", [
                f"{issue.message} - {issue.suggestion}" for issue in excellence.critical_issues
            ], "red")
            _bullets("Improvements", [
                f"{suggestion.title}: {suggestion.description}" for suggestion in excellence.improvements
            ], "yellow")
            if verbose:
                _bullets("Compliance checks", [
                    f"[{check.status.value}] {check.rule}: {check.message}"
                    for check in excellence.compliance_checks
                ])
            _bullets("Recommendations", excellence.recommendations, "cyan")

        _emit(excellence, json_output, out, display)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("check-field")
@click.argument("field")
@click.argument("value", required=False)
@click.option(
    "--project", "-p",
    type=click.Path(exists=True),
    help="Read the field value from this project JSON file"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def check_field_cmd(field: str, value: Optional[str], project: Optional[str], json_output: bool):
    """Quick-check a single field value.

    Examples:
        grant-assessor check-field title "Smart Tirana"
        grant-assessor check-field description -p project.json
    """
    try:
        setup_logging(False)
        engine = AssessmentEngine()
        record = load_project(project) if project else None
        validation = engine.validate_field(field, value, record)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if json_output:
        click.echo(validation.model_dump_json(indent=2))
        return

    indicator = field_quality_indicator(validation.score)
    console.print(
        f"{field}: [bold]{validation.score}[/bold] "
        f"[{indicator.color}]{indicator.message}[/{indicator.color}]"
    )
    for issue in validation.issues:
        console.print(f"  [yellow]•[/yellow] {issue.message} - {issue.suggestion}")
    for suggestion in validation.suggestions:
        console.print(f"  [cyan]•[/cyan] {suggestion}")


@main.command("report")
@project_command
@click.option(
    "--type", "-t", "report_type",
    type=click.Choice(["validation", "assessment", "compliance", "optimization", "prompt"]),
    default="validation",
    help="Report to generate"
)
@click.option(
    "--base-prompt",
    default="",
    help="Prompt text to enrich (prompt report only)"
)
def report_cmd(
    project: str,
    config: Optional[str],
    out: Optional[str],
    json_output: bool,
    verbose: bool,
    report_type: str,
    base_prompt: str,
):
    """Generate a plain-text report.

    Examples:
        grant-assessor report -p project.json
        grant-assessor report -p project.json -t optimization -o plan.txt
    """
    try:
        engine = _prepare(config, verbose)
        record = load_project(project)

        if report_type == "validation":
            text = format_validation_report(engine.validate(record), record)
        elif report_type == "assessment":
            text = format_assessment_report(
                engine.assess_performance(record),
                minimum_climate_target=engine.config.climate.minimum_target,
            )
        elif report_type == "compliance":
            text = format_compliance_summary(engine.score_compliance(record))
        elif report_type == "optimization":
            text = format_optimization_summary(engine.optimize_resources(record))
        else:
            text = enrich_prompt(base_prompt, record.municipality, record)

        if json_output:
            text = json.dumps({"type": report_type, "report": text}, indent=2, ensure_ascii=False)

        if out:
            Path(out).write_text(text, encoding="utf-8")
            console.print(f"[green]Report saved to {out}[/green]")
        else:
            click.echo(text)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="assessor-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default assessor configuration file.

    Example:
        grant-assessor init-config --out my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • relevance_weights - How much each relevance factor contributes")
        console.print("  • maturity_weights - How much each maturity factor contributes")
        console.print("  • climate - Climate contribution attribution and targets")
        console.print("  • thresholds - Relevance and maturity pass marks")
        console.print("\nThe assessor will look for config in this order:")
        console.print("  1. GRANT_ASSESSOR_CONFIG environment variable")
        console.print("  2. ./assessor-config.yaml (current directory)")
        console.print("  3. ~/.config/grant-assessor/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
