"""Environment configuration and path helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import PurePosixPath

from .exceptions import ConfigError, ValidationError

DEFAULT_REGISTRY_FILE = ".gitexternals"
DEFAULT_IGNORE_FILE = ".gitignore"
DEFAULT_BRANCH = "master"

_TRUTHY = {"1", "true", "yes", "on"}
# Characters that cannot appear inside a quoted git-config subsection name.
_FORBIDDEN_PATH_CHARS = ("\"", "\n", "\0")


@dataclass(slots=True)
class Settings:
    registry_file: str = DEFAULT_REGISTRY_FILE
    ignore_file: str = DEFAULT_IGNORE_FILE
    default_branch: str = DEFAULT_BRANCH
    strict: bool = False


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    registry_file = _get_relative_name(env, "GIT_EXTERNALS_FILE", DEFAULT_REGISTRY_FILE)
    ignore_file = _get_relative_name(env, "GIT_EXTERNALS_IGNORE_FILE", DEFAULT_IGNORE_FILE)
    default_branch = env.get("GIT_EXTERNALS_DEFAULT_BRANCH", "").strip() or DEFAULT_BRANCH
    strict = env.get("GIT_EXTERNALS_STRICT", "").strip().lower() in _TRUTHY
    return Settings(
        registry_file=registry_file,
        ignore_file=ignore_file,
        default_branch=default_branch,
        strict=strict,
    )


def _get_relative_name(env, var_name: str, default: str) -> str:
    raw = env.get(var_name, "").strip()
    if not raw:
        return default
    candidate = PurePosixPath(raw)
    if candidate.is_absolute() or ".." in candidate.parts:
        raise ConfigError(
            f"{var_name} must be a path relative to the repository root, got: {raw}"
        )
    return str(candidate)


def normalize_external_path(raw: str) -> str:
    """Return the canonical registry key for a user-supplied checkout path."""
    value = raw.strip().replace("\\", "/").rstrip("/")
    if not value:
        raise ValidationError("External path cannot be empty.")
    if any(char in value for char in _FORBIDDEN_PATH_CHARS):
        raise ValidationError(f"External path contains unsupported characters: {raw!r}")
    candidate = PurePosixPath(value)
    if candidate.is_absolute():
        raise ValidationError(f"External path must be relative to the repository root: {raw}")
    parts = [part for part in candidate.parts if part != "."]
    if not parts:
        raise ValidationError("External path cannot be the repository root.")
    if ".." in parts:
        raise ValidationError(f"External path cannot leave the repository: {raw}")
    return "/".join(parts)


__all__ = [
    "Settings",
    "load_settings",
    "normalize_external_path",
    "DEFAULT_REGISTRY_FILE",
    "DEFAULT_IGNORE_FILE",
    "DEFAULT_BRANCH",
]
