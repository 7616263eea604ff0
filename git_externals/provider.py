"""Version-control provider protocol and its git implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .exceptions import GitCommandError, ProviderFailure, RepoDetectionError
from .git import run_git, run_shell


class VcsProvider(Protocol):
    """Operations the lifecycle engine needs from a version-control tool."""

    def repository_root(self, start: Path | None = None) -> Path:
        """Return the top-level directory of the repository containing ``start``."""
        ...

    def clone(self, url: str, branch: str, dest: Path) -> None:
        """Clone only ``branch`` of ``url`` into ``dest``.

        Raises:
            ProviderFailure: If the clone fails.
        """
        ...

    def pull(self, path: Path, branch: str) -> None:
        """Fast-forward the checkout at ``path`` to the remote ``branch``.

        Raises:
            ProviderFailure: If the pull fails.
        """
        ...

    def has_uncommitted_changes(self, path: Path, *, include_untracked: bool = False) -> bool:
        """Return True unless the working tree at ``path`` matches HEAD."""
        ...

    def is_checked_out(self, path: Path) -> bool:
        ...

    def run_command(self, command: str, cwd: Path) -> int:
        """Execute ``command`` with ``cwd`` as working directory and return its exit status."""
        ...


class GitProvider:
    """Provider that shells out to the ``git`` binary."""

    def repository_root(self, start: Path | None = None) -> Path:
        cwd = start.expanduser().resolve() if start else Path.cwd()
        if not cwd.is_dir():
            raise RepoDetectionError(f"Repository path does not exist: {cwd}")
        try:
            output = run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
        except GitCommandError as exc:
            raise RepoDetectionError(f"Not inside a git repository: {cwd}") from exc
        return Path(output.stdout.strip())

    def clone(self, url: str, branch: str, dest: Path) -> None:
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProviderFailure(f"Could not create {dest.parent}: {exc}") from exc
        run_git(["clone", "--single-branch", "--branch", branch, url, str(dest)])

    def pull(self, path: Path, branch: str) -> None:
        run_git(["pull", "origin", branch], cwd=path)

    def has_uncommitted_changes(self, path: Path, *, include_untracked: bool = False) -> bool:
        untracked = "normal" if include_untracked else "no"
        result = run_git(["status", "--porcelain", f"--untracked-files={untracked}"], cwd=path)
        return bool(result.stdout.strip())

    def is_checked_out(self, path: Path) -> bool:
        return (path / ".git").exists()

    def run_command(self, command: str, cwd: Path) -> int:
        try:
            return run_shell(command, cwd=cwd)
        except OSError as exc:
            raise ProviderFailure(f"Could not run '{command}' in {cwd}: {exc}") from exc


__all__ = ["VcsProvider", "GitProvider"]
