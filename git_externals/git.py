"""Minimal utilities for invoking git commands."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from .exceptions import GitCommandError, ProviderFailure

logger = logging.getLogger(__name__)


def run_git(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    command = ["git", *args]
    logger.debug("Running command: %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            env=env,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise ProviderFailure(f"Could not run {' '.join(command)}: {exc}") from exc
    if check and result.returncode != 0:
        raise GitCommandError(command, result.returncode, stdout=result.stdout, stderr=result.stderr)
    return result


def run_shell(command: str, *, cwd: Path) -> int:
    """Run ``command`` through the shell inside ``cwd`` and return its exit status.

    Output is not captured so the operator sees it as it happens.
    """
    logger.debug("Running shell command in %s: %s", cwd, command)
    result = subprocess.run(command, shell=True, cwd=str(cwd))
    return result.returncode


__all__ = ["run_git", "run_shell"]
