"""Custom error hierarchy for git-externals."""

from __future__ import annotations


class GitExternalsError(RuntimeError):
    """Base error for the CLI."""


class ConfigError(GitExternalsError):
    """Raised when environment configuration is missing or invalid."""


class RepoDetectionError(GitExternalsError):
    """Raised when the parent repository cannot be resolved."""


class ValidationError(GitExternalsError):
    """Raised when user input fails validation."""


class UserAbort(GitExternalsError):
    """Raised when the user cancels an interactive flow."""


class EmptyRegistry(GitExternalsError):
    """Raised when an operation needs at least one registered external."""

    def __init__(self, message: str = "No externals registered.") -> None:
        super().__init__(message)


class NotFound(GitExternalsError):
    """Raised when a name or path is not in the registry."""


class ExternalError(GitExternalsError):
    """Failure tied to a single external; carries its path."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class AlreadyInitialized(ExternalError):
    def __init__(self, path: str) -> None:
        super().__init__(path, f"{path} already holds a checkout; skipping clone.")


class NotInitialized(ExternalError):
    def __init__(self, path: str) -> None:
        super().__init__(path, f"{path} is not initialized; run 'git-externals init' first.")


class Diverged(ExternalError):
    def __init__(self, path: str) -> None:
        super().__init__(path, f"{path} has uncommitted changes; refusing to update.")


class ProviderFailure(GitExternalsError):
    """Raised when a clone, pull or broadcast command fails."""


class GitCommandError(ProviderFailure):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


__all__ = [
    "GitExternalsError",
    "ConfigError",
    "RepoDetectionError",
    "ValidationError",
    "UserAbort",
    "EmptyRegistry",
    "NotFound",
    "ExternalError",
    "AlreadyInitialized",
    "NotInitialized",
    "Diverged",
    "ProviderFailure",
    "GitCommandError",
]
