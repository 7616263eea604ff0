"""Shared dataclasses used throughout the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import GitExternalsError


@dataclass(slots=True, frozen=True)
class External:
    """One registered external, keyed by its path."""

    url: str
    path: str
    branch: str

    @property
    def name(self) -> str:
        return self.path

    def describe(self) -> str:
        return f"[{self.name}] url: {self.url}, path: {self.path}, branch: {self.branch}"


class CheckoutState(str, Enum):
    UNMATERIALIZED = "unmaterialized"
    CLEAN = "clean"
    DIVERGED = "diverged"


@dataclass(slots=True)
class Outcome:
    external: External
    error: GitExternalsError | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class OperationReport:
    """Aggregated per-external results of one command run."""

    operation: str
    outcomes: list[Outcome] = field(default_factory=list)

    def record(self, external: External, error: GitExternalsError | None = None, *, skipped: bool = False) -> None:
        self.outcomes.append(Outcome(external=external, error=error, skipped=skipped))

    @property
    def failures(self) -> list[Outcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(slots=True, frozen=True)
class ExternalStatus:
    external: External
    state: CheckoutState


__all__ = [
    "External",
    "CheckoutState",
    "Outcome",
    "OperationReport",
    "ExternalStatus",
]
