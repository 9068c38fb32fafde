"""CLI entry point for nodepm."""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Any, Awaitable, Callable

import click

from nodepm.errors import PackageManagerError, SpawnError
from nodepm.pnpm import PnpmPackageManager


def _exit_status(code: int | None) -> int:
    """Shell exit status for a failed child; signals map to 128 + signum."""
    if not code:
        return 1
    if code < 0:
        return 128 - code
    return code


def _execute(ctx: click.Context, op: Callable[[PnpmPackageManager], Awaitable[Any]]) -> Any:
    manager: PnpmPackageManager = ctx.obj
    try:
        return asyncio.run(op(manager))
    except SpawnError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(_exit_status(e.exit_code))
    except PackageManagerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--cwd", default="", help="Project directory (defaults to the current directory)")
@click.option("--silent", is_flag=True, help="Hide pnpm output and the command echo")
@click.pass_context
def main(ctx: click.Context, cwd: str, silent: bool):
    """nodepm: drive pnpm without the noise."""
    ctx.obj = PnpmPackageManager(cwd=cwd or os.getcwd(), silent=silent)


@main.command()
@click.pass_context
def install(ctx: click.Context):
    """Install all dependencies."""
    _execute(ctx, lambda pm: pm.install())


@main.command()
@click.argument("names", nargs=-1)
@click.option("--dev", "kind", flag_value="dev", help="Add as dev dependencies")
@click.option("--global", "kind", flag_value="global", help="Add globally")
@click.option("-p", "--param", "params", multiple=True, help="Extra argument passed to pnpm add")
@click.pass_context
def add(ctx: click.Context, names: tuple[str, ...], kind: str | None, params: tuple[str, ...]):
    """Add packages (installs when no names are given)."""
    if kind == "dev":
        _execute(ctx, lambda pm: pm.add_dev(*names))
    elif kind == "global":
        _execute(ctx, lambda pm: pm.add_global(*names))
    else:
        _execute(ctx, lambda pm: pm.add_with_parameters(names, params))


@main.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def remove(ctx: click.Context, names: tuple[str, ...]):
    """Remove packages."""
    _execute(ctx, lambda pm: pm.remove(*names))


@main.command()
@click.pass_context
def version(ctx: click.Context):
    """Print the pnpm version."""
    click.echo(_execute(ctx, lambda pm: pm.version()))


@main.command()
@click.argument("key")
@click.pass_context
def config(ctx: click.Context, key: str):
    """Print a pnpm config value."""
    click.echo(_execute(ctx, lambda pm: pm.get_config(key)))


@main.command()
@click.option("--lockfile", is_flag=True, help="Also delete pnpm-lock.yaml")
@click.pass_context
def clean(ctx: click.Context, lockfile: bool):
    """Delete node_modules (and optionally the lockfile)."""
    _execute(ctx, lambda pm: pm.clean())
    if lockfile:
        _execute(ctx, lambda pm: pm.remove_lockfile())


if __name__ == "__main__":
    main()
