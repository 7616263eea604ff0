"""Rich UI helpers for terminal output."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import CheckoutState, External, ExternalStatus, OperationReport

_STATE_STYLES = {
    CheckoutState.UNMATERIALIZED: "dim",
    CheckoutState.CLEAN: "green",
    CheckoutState.DIVERGED: "yellow",
}


def success(console: Console, message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def warning(console: Console, message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(console: Console, message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


def render_externals(externals: Sequence[External], console: Console) -> None:
    for external in externals:
        console.print(escape(external.describe()), highlight=False, soft_wrap=True)


def render_externals_json(externals: Sequence[External], console: Console) -> None:
    payload = [
        {"name": external.name, "url": external.url, "path": external.path, "branch": external.branch}
        for external in externals
    ]
    console.print_json(data=payload)


def render_status_table(statuses: Sequence[ExternalStatus], console: Console) -> None:
    table = Table(title="Externals", show_lines=False)
    table.add_column("Path", no_wrap=True)
    table.add_column("Branch", no_wrap=True)
    table.add_column("State", no_wrap=True)
    table.add_column("URL")
    for status in statuses:
        style = _STATE_STYLES[status.state]
        table.add_row(
            escape(status.external.path),
            escape(status.external.branch),
            f"[{style}]{status.state.value}[/{style}]",
            escape(status.external.url),
        )
    console.print(table)


def render_status_json(statuses: Sequence[ExternalStatus], console: Console) -> None:
    payload = [
        {
            "path": status.external.path,
            "url": status.external.url,
            "branch": status.external.branch,
            "state": status.state.value,
        }
        for status in statuses
    ]
    console.print_json(data=payload)


def render_report(report: OperationReport, console: Console) -> None:
    """Print a one-line summary of an init/update/cmd run."""
    total = len(report.outcomes)
    if report.ok:
        success(console, f"{report.operation}: {total} external(s) processed")
        return
    failed = ", ".join(outcome.external.path for outcome in report.failures)
    error(console, f"{report.operation}: {len(report.failures)} of {total} external(s) failed: {failed}")


__all__ = [
    "success",
    "warning",
    "error",
    "render_externals",
    "render_externals_json",
    "render_status_table",
    "render_status_json",
    "render_report",
]
