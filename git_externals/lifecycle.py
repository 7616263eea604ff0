"""Lifecycle operations for externals: add, rm, init, update, list, cmd, status.

Each external moves through ``unregistered -> registered -> initialized ->
synchronized``. A checkout with local modifications is ``diverged`` and is
never pulled; divergence is reported, not reconciled.

Operations that touch checkouts process externals one at a time in name
order. A failure on one external is recorded in the returned
:class:`OperationReport` and the loop moves on to the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_BRANCH, normalize_external_path
from .exceptions import (
    AlreadyInitialized,
    Diverged,
    GitExternalsError,
    NotInitialized,
    ProviderFailure,
    ValidationError,
)
from .ignore import IgnoreList
from .models import CheckoutState, External, ExternalStatus, OperationReport
from .provider import VcsProvider
from .registry import RegistryStore

logger = logging.getLogger(__name__)


@dataclass
class ExternalsManager:
    root: Path
    registry: RegistryStore
    ignore: IgnoreList
    provider: VcsProvider
    default_branch: str = DEFAULT_BRANCH
    strict: bool = False

    def add(self, url: str, path: str, branch: str | None = None) -> External:
        url = url.strip()
        if not url or any(char.isspace() for char in url):
            raise ValidationError(f"Invalid external url: {url!r}")
        resolved_branch = (branch or "").strip() or self.default_branch
        external = External(url=url, path=normalize_external_path(path), branch=resolved_branch)
        if self.registry.exists(external.name):
            logger.info("Replacing existing external %s", external.name)
        self.registry.put(external)
        self.ignore.append(external.path)
        logger.info("Registered %s -> %s (%s)", external.path, external.url, external.branch)
        return external

    def rm(self, path: str) -> bool:
        """Unregister ``path``; returns False when it was not registered."""
        name = normalize_external_path(path)
        removed = self.registry.remove(name)
        self.ignore.remove(name)
        if removed:
            logger.info("Unregistered %s", name)
        else:
            logger.info("%s was not registered", name)
        return removed

    def list_externals(self) -> list[External]:
        return self.registry.list_externals()

    def init(self) -> OperationReport:
        report = OperationReport("init")
        for external in self.registry.list_externals():
            target = self.checkout_path(external)
            try:
                if self.provider.is_checked_out(target):
                    raise AlreadyInitialized(external.path)
                logger.info("Cloning %s (%s) into %s", external.url, external.branch, external.path)
                self.provider.clone(external.url, external.branch, target)
            except AlreadyInitialized as exc:
                logger.warning("%s", exc)
                report.record(external, exc, skipped=True)
            except ProviderFailure as exc:
                logger.warning("%s: clone failed: %s", external.path, exc)
                report.record(external, exc)
            else:
                report.record(external)
        return report

    def update(self, *, strict: bool | None = None) -> OperationReport:
        include_untracked = self.strict if strict is None else strict
        report = OperationReport("update")
        for external in self.registry.list_externals():
            target = self.checkout_path(external)
            try:
                if not self.provider.is_checked_out(target):
                    raise NotInitialized(external.path)
                if self.provider.has_uncommitted_changes(target, include_untracked=include_untracked):
                    raise Diverged(external.path)
                logger.info("Pulling %s (%s)", external.path, external.branch)
                self.provider.pull(target, external.branch)
            except (NotInitialized, Diverged) as exc:
                logger.warning("%s", exc)
                report.record(external, exc, skipped=True)
            except ProviderFailure as exc:
                logger.warning("%s: pull failed: %s", external.path, exc)
                report.record(external, exc)
            else:
                report.record(external)
        return report

    def cmd(self, command: str) -> OperationReport:
        if not command.strip():
            raise ValidationError("Command cannot be empty.")
        report = OperationReport("cmd")
        for external in self.registry.entries():
            target = self.checkout_path(external)
            try:
                if not target.is_dir():
                    raise NotInitialized(external.path)
                logger.info("Running '%s' in %s", command, external.path)
                returncode = self.provider.run_command(command, target)
                if returncode != 0:
                    raise ProviderFailure(f"'{command}' exited with status {returncode} in {external.path}")
            except GitExternalsError as exc:
                logger.warning("%s: %s", external.path, exc)
                report.record(external, exc)
            else:
                report.record(external)
        return report

    def status(self, *, strict: bool | None = None) -> list[ExternalStatus]:
        include_untracked = self.strict if strict is None else strict
        return [
            ExternalStatus(external=external, state=self.checkout_state(external, include_untracked=include_untracked))
            for external in self.registry.list_externals()
        ]

    def checkout_state(self, external: External, *, include_untracked: bool = False) -> CheckoutState:
        target = self.checkout_path(external)
        if not self.provider.is_checked_out(target):
            return CheckoutState.UNMATERIALIZED
        if self.provider.has_uncommitted_changes(target, include_untracked=include_untracked):
            return CheckoutState.DIVERGED
        return CheckoutState.CLEAN

    def checkout_path(self, external: External) -> Path:
        return self.root / external.path


__all__ = ["ExternalsManager"]
