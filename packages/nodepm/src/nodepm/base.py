"""Package manager protocol."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from nodepm.types import ExecResult


@runtime_checkable
class PackageManager(Protocol):
    """Interface every package manager adapter implements."""

    @property
    def name(self) -> str: ...

    async def install(self) -> ExecResult: ...

    async def add(self, *names: str) -> ExecResult: ...

    async def add_with_parameters(
        self, names: Sequence[str], parameters: Sequence[str]
    ) -> ExecResult: ...

    async def add_dev(self, *names: str) -> ExecResult: ...

    async def add_global(self, *names: str) -> ExecResult: ...

    async def remove(self, *names: str) -> ExecResult: ...

    async def version(self) -> str: ...

    async def get_config(self, key: str) -> str: ...

    async def remove_lockfile(self) -> None: ...

    async def clean(self) -> None: ...
