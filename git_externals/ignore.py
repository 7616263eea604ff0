"""Maintain the parent repository's ignore file for external checkouts."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class IgnoreList:
    """Line-oriented view of an ignore file; only whole-line matches are touched."""

    def __init__(self, ignore_path: Path) -> None:
        self.ignore_path = ignore_path

    def contains(self, entry: str) -> bool:
        return any(_matches(line, entry) for line in self._read_lines())

    def append(self, entry: str) -> bool:
        """Add ``entry`` as its own line unless an identical line already exists."""
        lines = self._read_lines()
        if any(_matches(line, entry) for line in lines):
            return False
        text = "".join(lines)
        if text and not text.endswith("\n"):
            text += "\n"
        self.ignore_path.write_text(f"{text}{entry}\n", encoding="utf-8")
        logger.debug("Added %s to %s", entry, self.ignore_path)
        return True

    def remove(self, entry: str) -> bool:
        """Drop every line exactly equal to ``entry``; other lines are kept verbatim."""
        lines = self._read_lines()
        kept = [line for line in lines if not _matches(line, entry)]
        if len(kept) == len(lines):
            return False
        self.ignore_path.write_text("".join(kept), encoding="utf-8")
        logger.debug("Removed %s from %s", entry, self.ignore_path)
        return True

    def _read_lines(self) -> list[str]:
        if not self.ignore_path.exists():
            return []
        return self.ignore_path.read_text(encoding="utf-8").splitlines(keepends=True)


def _matches(line: str, entry: str) -> bool:
    return line.rstrip("\r\n") == entry


__all__ = ["IgnoreList"]
