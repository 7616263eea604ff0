"""Durable registry of externals stored in a git config file.

The file is read and written with ``git config -f`` so it stays in git's own
syntax, escaping and comment rules::

    [external "libs/foo"]
        url = https://example.com/repo.git
        path = libs/foo
        branch = dev

Every read re-parses the file so edits made between invocations are always
honoured. Every mutation is applied to a copy of the file which then
atomically replaces the original.
"""

from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterator

from .config import DEFAULT_BRANCH, normalize_external_path
from .exceptions import EmptyRegistry, GitCommandError, NotFound, ValidationError
from .git import run_git
from .models import External

logger = logging.getLogger(__name__)

_SECTION = "external"


class RegistryStore:
    def __init__(self, config_path: Path, default_branch: str = DEFAULT_BRANCH) -> None:
        self.config_path = config_path
        self.default_branch = default_branch

    def entries(self) -> list[External]:
        """Return every valid external sorted by name; empty when none exist."""
        found: dict[str, External] = {}
        for name, values in self._grouped_records().items():
            url = values.get("url", "")
            if not url:
                logger.warning("Ignoring malformed external '%s' in %s", name, self.config_path)
                continue
            declared = values.get("path", "")
            if declared and declared.rstrip("/") != name:
                logger.warning("External '%s' declares path '%s'; using the section name", name, declared)
            found[name] = External(url=url, path=name, branch=values.get("branch") or self.default_branch)
        return [found[name] for name in sorted(found)]

    def list_externals(self) -> list[External]:
        externals = self.entries()
        if not externals:
            raise EmptyRegistry(f"No externals registered in {self.config_path.name}.")
        return externals

    def get(self, name: str) -> External:
        for external in self.entries():
            if external.name == name:
                return external
        raise NotFound(f"No external registered for '{name}'.")

    def exists(self, name: str) -> bool:
        return any(external.name == name for external in self.entries())

    def put(self, external: External) -> None:
        if not external.url.strip() or not external.path.strip():
            raise ValidationError("An external needs both a url and a path.")
        stale = self._sections_for(external.name)
        with self._staged_copy() as staged:
            for subsection in stale:
                self._git_config(staged, "--remove-section", f"{_SECTION}.{subsection}")
            for key, value in (("url", external.url), ("path", external.path), ("branch", external.branch)):
                self._git_config(staged, f"{_SECTION}.{external.name}.{key}", value)
        logger.debug("Stored external %s in %s", external.name, self.config_path)

    def remove(self, name: str) -> bool:
        """Delete the record for ``name``; returns False when nothing was registered."""
        stale = self._sections_for(name)
        if not stale:
            return False
        with self._staged_copy() as staged:
            for subsection in stale:
                self._git_config(staged, "--remove-section", f"{_SECTION}.{subsection}")
        logger.debug("Removed external %s from %s", name, self.config_path)
        return True

    def _sections_for(self, name: str) -> list[str]:
        return [subsection for subsection in self._raw_records() if _normalize(subsection) == name]

    def _grouped_records(self) -> dict[str, dict[str, str]]:
        """Merge raw subsections that name the same checkout path."""
        grouped: dict[str, dict[str, str]] = {}
        for subsection, values in self._raw_records().items():
            name = _normalize(subsection)
            if name is None:
                logger.warning("Ignoring external with invalid path '%s' in %s", subsection, self.config_path)
                continue
            grouped.setdefault(name, {}).update(values)
        return grouped

    def _raw_records(self) -> dict[str, dict[str, str]]:
        if not self.config_path.exists():
            return {}
        result = self._git_config(self.config_path, "--null", "--get-regexp", rf"^{_SECTION}\.", check=False)
        if result.returncode == 1:
            return {}
        if result.returncode != 0:
            raise ValidationError(f"Unable to parse {self.config_path}: {result.stderr.strip()}")
        records: dict[str, dict[str, str]] = {}
        for item in result.stdout.split("\0"):
            if not item:
                continue
            key, _, value = item.partition("\n")
            subsection, dot, variable = key[len(_SECTION) + 1 :].rpartition(".")
            if not dot or not subsection:
                continue
            records.setdefault(subsection, {})[variable] = value
        return records

    def _git_config(self, config_file: Path, *args: str, check: bool = True):
        try:
            return run_git(["config", "-f", str(config_file), *args], check=check)
        except GitCommandError as exc:
            raise ValidationError(f"Unable to update {self.config_path.name}: {exc}") from exc

    @contextmanager
    def _staged_copy(self) -> Iterator[Path]:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            "wb",
            dir=self.config_path.parent,
            prefix=f"{self.config_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            if self.config_path.exists():
                handle.write(self.config_path.read_bytes())
        try:
            if self.config_path.exists():
                shutil.copymode(self.config_path, temp_path)
            yield temp_path
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        temp_path.replace(self.config_path)


def _normalize(subsection: str) -> str | None:
    try:
        return normalize_external_path(subsection)
    except ValidationError:
        return None


__all__ = ["RegistryStore"]
