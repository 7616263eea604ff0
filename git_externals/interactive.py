"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import UserAbort, ValidationError
from .models import External


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Provide the external path to run non-interactively."
        )


def build_external_choices(externals: Sequence[External]) -> list[Choice]:
    """Return one Choice per external, valued by its path."""

    choices: list[Choice] = []
    seen: set[str] = set()
    for external in externals:
        if external.path in seen:
            continue
        seen.add(external.path)
        choices.append(Choice(value=external.path, name=f"{external.path} · {external.branch} · {external.url}"))
    return choices


def prompt_external_selection(externals: Sequence[External]) -> str:
    choices = build_external_choices(externals)
    if not choices:
        raise UserAbort("No options available for selection.")
    _ensure_tty()
    try:
        return str(inquirer.fuzzy(message="Select external", choices=choices).execute())
    except KeyboardInterrupt as exc:  # pragma: no cover - user cancel
        raise UserAbort("User cancelled the prompt.") from exc


__all__ = ["build_external_choices", "prompt_external_selection"]
