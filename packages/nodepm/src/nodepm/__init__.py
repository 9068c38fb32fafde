"""Uniform async interface over the pnpm command line."""

from nodepm.types import ExecResult, Invocation, Logger, Spawner, StdioMode
from nodepm.errors import PackageManagerError, PreconditionError, SpawnError
from nodepm.filtering import (
    ANSI_PATTERN,
    PEER_DEPENDENCY_WARNING_PATTERN,
    LineFilter,
    LineSplitter,
    PeerDependencyWarningFilter,
)
from nodepm.process import DISABLE_ADS_ENV, ProcessInvoker, build_env
from nodepm.base import PackageManager
from nodepm.pnpm import PnpmPackageManager

__all__ = [
    "ANSI_PATTERN",
    "DISABLE_ADS_ENV",
    "ExecResult",
    "Invocation",
    "LineFilter",
    "LineSplitter",
    "Logger",
    "PEER_DEPENDENCY_WARNING_PATTERN",
    "PackageManager",
    "PackageManagerError",
    "PeerDependencyWarningFilter",
    "PnpmPackageManager",
    "PreconditionError",
    "ProcessInvoker",
    "SpawnError",
    "Spawner",
    "StdioMode",
    "build_env",
]
