"""Environment validation output formatters.

Rich table and JSON output for validation results.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ferrite_core.toolchain.models import CheckResult, CheckStatus, Remediation, ValidationResult


def _status_icon(status: CheckStatus) -> str:
    """Get icon for check status."""
    icons = {
        CheckStatus.PASSED: "✓",
        CheckStatus.FAILED: "✗",
        CheckStatus.WARNING: "⚠",
        CheckStatus.ERROR: "✗",
    }
    return icons.get(status, "?")


def _status_color(status: CheckStatus) -> str:
    """Get color for check status."""
    colors = {
        CheckStatus.PASSED: "green",
        CheckStatus.FAILED: "red",
        CheckStatus.WARNING: "yellow",
        CheckStatus.ERROR: "red bold",
    }
    return colors.get(status, "white")


def format_result_table(result: ValidationResult, console: Console | None = None) -> None:
    """Format validation results as a Rich table.

    Args:
        result: ValidationResult to display
        console: Optional Rich console (creates one if not provided)
    """
    if console is None:
        console = Console()

    overall_color = _status_color(result.overall_status)
    header_text = Text()
    header_text.append("TOOLCHAIN ENVIRONMENT\n\n", style="bold")
    header_text.append(f"Status: {_status_icon(result.overall_status)} ", style=overall_color)
    header_text.append(result.overall_status.value.upper(), style=f"bold {overall_color}")
    header_text.append(
        f"\nChecks: {result.passed_count} passed, {result.warning_count} healed"
    )
    if result.total_duration_ms > 0:
        header_text.append(f"\nDuration: {result.total_duration_ms}ms")

    console.print(Panel(header_text, title="[bold]Validation Results[/bold]"))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Status", width=3, justify="center")
    table.add_column("Check", min_width=20)
    table.add_column("Message", min_width=30)

    for check in result.checks:
        color = _status_color(check.status)
        table.add_row(
            _status_icon(check.status),
            Text(check.name, style=color),
            Text(check.message or "-", style="dim" if not check.message else ""),
        )

    console.print(table)

    if result.remediations:
        console.print()
        console.print("[bold]Remedial actions:[/bold]")
        for action in result.remediations:
            color = _status_color(action.status)
            outcome = "ok" if action.status == CheckStatus.PASSED else f"exit {action.returncode}"
            console.print(
                f"  [{color}]• {action.check}[/{color}]: {' '.join(action.command)} ({outcome})"
            )


def format_result_json(result: ValidationResult, pretty: bool = True) -> str:
    """Format validation results as JSON."""
    data = _result_to_dict(result)
    if pretty:
        return json.dumps(data, indent=2, default=str)
    return json.dumps(data, default=str)


def _result_to_dict(result: ValidationResult) -> dict[str, Any]:
    return {
        "status": result.overall_status.value,
        "passed": result.passed,
        "duration_ms": result.total_duration_ms,
        "started_at": result.started_at.isoformat() if result.started_at else None,
        "finished_at": result.finished_at.isoformat() if result.finished_at else None,
        "checks": [_check_to_dict(check) for check in result.checks],
        "remediations": [_remediation_to_dict(r) for r in result.remediations],
    }


def _check_to_dict(check: CheckResult) -> dict[str, Any]:
    return {
        "name": check.name,
        "status": check.status.value,
        "message": check.message,
        "details": check.details,
        "duration_ms": check.duration_ms,
    }


def _remediation_to_dict(remediation: Remediation) -> dict[str, Any]:
    return {
        "check": remediation.check,
        "command": remediation.command,
        "status": remediation.status.value,
        "returncode": remediation.returncode,
    }


def print_result(
    result: ValidationResult,
    output_format: str = "table",
    console: Console | None = None,
) -> None:
    """Print validation results in the specified format ("table" or "json")."""
    if console is None:
        console = Console()

    if output_format == "json":
        # Raw JSON, bypassing Rich formatting so the output stays parseable
        console.file.write(format_result_json(result, pretty=True) + "\n")
    else:
        format_result_table(result, console)
