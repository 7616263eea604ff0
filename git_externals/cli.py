"""Typer CLI entrypoint for git-externals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from . import __version__
from .config import load_settings
from .exceptions import GitExternalsError
from .ignore import IgnoreList
from .interactive import prompt_external_selection
from .lifecycle import ExternalsManager
from .models import OperationReport
from .provider import GitProvider
from .registry import RegistryStore
from .render import (
    error,
    render_externals,
    render_externals_json,
    render_report,
    render_status_json,
    render_status_table,
    success,
    warning,
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Track external repositories checked out inside a git repository.",
)


@dataclass(slots=True)
class AppState:
    console: Console
    repo_override: Path | None = None
    verbose: bool = False
    manager: ExternalsManager | None = None


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)


def build_manager(repo_override: Path | None) -> ExternalsManager:
    settings = load_settings()
    provider = GitProvider()
    root = provider.repository_root(repo_override)
    return ExternalsManager(
        root=root,
        registry=RegistryStore(root / settings.registry_file, default_branch=settings.default_branch),
        ignore=IgnoreList(root / settings.ignore_file),
        provider=provider,
        default_branch=settings.default_branch,
        strict=settings.strict,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-externals {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        "-r",
        help="Path inside the parent repository (defaults to current working directory).",
        dir_okay=True,
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the git-externals version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)
    ctx.obj = AppState(console=Console(), repo_override=repo, verbose=verbose)


def _require_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


def _require_manager(ctx: typer.Context) -> tuple[AppState, ExternalsManager]:
    state = _require_state(ctx)
    if state.manager is None:
        try:
            state.manager = build_manager(state.repo_override)
        except GitExternalsError as exc:
            _fail(state, exc)
    return state, state.manager


def _fail(state: AppState, exc: Exception, code: int = 1) -> NoReturn:
    error(state.console, str(exc))
    raise typer.Exit(code) from exc


def _finish(state: AppState, report: OperationReport) -> None:
    render_report(report, state.console)
    if not report.ok:
        raise typer.Exit(1)


@app.command(help="Register an external repository checked out at PATH.")
def add(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Repository URL to clone from."),
    path: str = typer.Argument(..., help="Checkout path relative to the repository root."),
    branch: Optional[str] = typer.Argument(None, help="Branch to track (defaults to the configured default branch)."),
) -> None:
    state, manager = _require_manager(ctx)
    try:
        external = manager.add(url, path, branch)
    except GitExternalsError as exc:
        _fail(state, exc)
    success(state.console, f"Registered {external.path} ({external.branch}) from {external.url}")


@app.command("list", help="List registered externals.")
def list_(
    ctx: typer.Context,
    json_: bool = typer.Option(False, "--json", help="Output JSON instead of text."),
) -> None:
    state, manager = _require_manager(ctx)
    try:
        externals = manager.list_externals()
    except GitExternalsError as exc:
        _fail(state, exc)
    if json_:
        render_externals_json(externals, state.console)
    else:
        render_externals(externals, state.console)


@app.command(help="Unregister an external and drop it from the ignore file.")
def rm(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="Path of the external. If omitted, a picker is shown."),
) -> None:
    state, manager = _require_manager(ctx)
    try:
        if path is None:
            externals = manager.registry.entries()
            if not externals:
                state.console.print("No externals registered.")
                raise typer.Exit(0)
            path = prompt_external_selection(externals)
        removed = manager.rm(path)
    except GitExternalsError as exc:
        _fail(state, exc)
    if removed:
        success(state.console, f"Removed external {path}")
    else:
        warning(state.console, f"{path} was not registered")


@app.command(help="Clone every registered external that has no checkout yet.")
def init(ctx: typer.Context) -> None:
    state, manager = _require_manager(ctx)
    try:
        report = manager.init()
    except GitExternalsError as exc:
        _fail(state, exc)
    _finish(state, report)


@app.command(help="Pull every checked-out external that has no local changes.")
def update(
    ctx: typer.Context,
    strict: bool = typer.Option(False, "--strict", help="Treat untracked files as local changes."),
) -> None:
    state, manager = _require_manager(ctx)
    try:
        report = manager.update(strict=True if strict else None)
    except GitExternalsError as exc:
        _fail(state, exc)
    _finish(state, report)


@app.command(help="Run COMMAND through the shell inside every external's checkout.")
def cmd(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Shell command to run, quoted as a single argument."),
) -> None:
    state, manager = _require_manager(ctx)
    try:
        report = manager.cmd(command)
    except GitExternalsError as exc:
        _fail(state, exc)
    _finish(state, report)


@app.command(help="Show the checkout state of every registered external.")
def status(
    ctx: typer.Context,
    json_: bool = typer.Option(False, "--json", help="Output JSON instead of a table."),
    strict: bool = typer.Option(False, "--strict", help="Treat untracked files as local changes."),
) -> None:
    state, manager = _require_manager(ctx)
    try:
        statuses = manager.status(strict=True if strict else None)
    except GitExternalsError as exc:
        _fail(state, exc)
    if json_:
        render_status_json(statuses, state.console)
    else:
        render_status_table(statuses, state.console)


@app.command("help", help="Show this overview of commands.")
def help_(ctx: typer.Context) -> None:
    parent = ctx.parent or ctx
    typer.echo(parent.get_help())


__all__ = ["app", "build_manager"]
