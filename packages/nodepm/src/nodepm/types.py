"""Core types for package manager invocations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable


class StdioMode(str, Enum):
    INTERACTIVE = "interactive"
    SILENT = "silent"
    CAPTURED = "captured"


@dataclass
class Invocation:
    """One configured execution request for the package manager binary.

    ``env`` of None inherits the parent environment; a dict is used as is.
    """

    binary: str
    args: list[str] = field(default_factory=list)
    cwd: str | None = None
    env: dict[str, str] | None = None
    stdio: StdioMode = StdioMode.INTERACTIVE

    @property
    def command_line(self) -> str:
        return " ".join([self.binary, *self.args])


@dataclass(frozen=True)
class ExecResult:
    exit_code: int = 0
    stdout: str | None = None
    stderr: str | None = None
    duration_ms: int = 0


Logger = Callable[[str], None]
Spawner = Callable[[Invocation], Awaitable[ExecResult]]
