"""pnpm adapter."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Sequence

import click

from nodepm.errors import PreconditionError
from nodepm.filtering import PeerDependencyWarningFilter
from nodepm.process import ProcessInvoker, build_env
from nodepm.types import ExecResult, Invocation, Logger, Spawner, StdioMode


class PnpmPackageManager:
    """Runs pnpm commands on behalf of higher-level tooling.

    Args:
        cwd: Project directory pnpm runs in. Required by ``remove_lockfile``
            and ``clean``.
        log: Receives the echoed command line; defaults to ``click.echo``.
        silent: Discard pnpm's output and skip the command echo.
        spawner: Coroutine function running an Invocation; defaults to a
            ProcessInvoker that hides the peer dependency warning block.
    """

    BINARY = "pnpm"
    LOCKFILE = "pnpm-lock.yaml"
    DEPENDENCY_DIR = "node_modules"

    def __init__(
        self,
        cwd: str | None = None,
        *,
        log: Logger | None = None,
        silent: bool = False,
        spawner: Spawner | None = None,
    ) -> None:
        self.cwd = cwd
        self.silent = silent
        self.env = build_env()
        self._log = log or click.echo
        self._spawner = spawner or ProcessInvoker(
            filter_factory=PeerDependencyWarningFilter
        ).run

    @property
    def name(self) -> str:
        return "pnpm"

    async def install(self) -> ExecResult:
        return await self._run(["install"])

    async def add_with_parameters(
        self, names: Sequence[str], parameters: Sequence[str]
    ) -> ExecResult:
        if not names:
            return await self.install()
        return await self._run(["add", *parameters, *names])

    async def add(self, *names: str) -> ExecResult:
        return await self.add_with_parameters(names, [])

    async def add_dev(self, *names: str) -> ExecResult:
        if not names:
            return await self.install()
        return await self._run(["add", "--save-dev", *names])

    async def add_global(self, *names: str) -> ExecResult:
        if not names:
            return await self.install()
        return await self._run(["add", "--global", *names])

    async def remove(self, *names: str) -> ExecResult:
        return await self._run(["remove", *names])

    async def version(self) -> str:
        result = await self._query(["--version"])
        return (result.stdout or "").strip()

    async def get_config(self, key: str) -> str:
        result = await self._query(["config", "get", key])
        return (result.stdout or "").strip()

    async def remove_lockfile(self) -> None:
        root = self._require_cwd("remove_lockfile")
        _remove_path(root / self.LOCKFILE)

    async def clean(self) -> None:
        root = self._require_cwd("clean")
        _remove_path(root / self.DEPENDENCY_DIR)

    # -- internals --

    def _require_cwd(self, operation: str) -> Path:
        if not self.cwd:
            raise PreconditionError(
                f"cwd required for PnpmPackageManager.{operation}"
            )
        return Path(self.cwd)

    def _invocation(self, args: list[str], stdio: StdioMode) -> Invocation:
        return Invocation(
            binary=self.BINARY,
            args=args,
            cwd=self.cwd,
            env=self.env,
            stdio=stdio,
        )

    async def _run(self, args: list[str]) -> ExecResult:
        if self.silent:
            return await self._spawner(self._invocation(args, StdioMode.SILENT))
        invocation = self._invocation(args, StdioMode.INTERACTIVE)
        self._log(f"> {invocation.command_line}")
        return await self._spawner(invocation)

    async def _query(self, args: list[str]) -> ExecResult:
        return await self._spawner(self._invocation(args, StdioMode.CAPTURED))


def _remove_path(path: Path) -> None:
    """Delete a file or directory tree; a missing path is already clean."""
    if not path.exists():
        return
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
