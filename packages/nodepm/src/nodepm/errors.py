"""Error hierarchy for package manager operations."""

from __future__ import annotations


class PackageManagerError(Exception):
    """Base error for all library errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class PreconditionError(PackageManagerError):
    """An operation was called without the configuration it requires."""


class SpawnError(PackageManagerError):
    """The binary could not be started or exited with a non-zero code."""

    def __init__(
        self,
        message: str,
        *,
        command: str,
        exit_code: int | None = None,
        stdout: str | None = None,
        stderr: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
