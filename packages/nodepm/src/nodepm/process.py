"""Asynchronous process invocation with live stdout filtering."""

from __future__ import annotations

import asyncio
import codecs
import os
import sys
import time
from typing import Callable, Iterable, TextIO

from nodepm.errors import SpawnError
from nodepm.filtering import LineFilter, LineSplitter
from nodepm.types import ExecResult, Invocation, StdioMode


# Silences funding, ad and update-notifier banners printed by node tooling
DISABLE_ADS_ENV: dict[str, str] = {
    "DISABLE_OPENCOLLECTIVE": "1",
    "ADBLOCK": "1",
    "NPM_CONFIG_UPDATE_NOTIFIER": "false",
}

_CHUNK_SIZE = 4096


def build_env(overrides: dict[str, str] | None = None) -> dict[str, str]:
    """Parent environment with DISABLE_ADS_ENV, then overrides, layered on top."""
    env = dict(os.environ)
    env.update(DISABLE_ADS_ENV)
    if overrides:
        env.update(overrides)
    return env


class ProcessInvoker:
    """Runs an Invocation and routes its output according to its stdio mode.

    In interactive mode stdout is read as a byte stream, split into lines and
    passed through a fresh filter from ``filter_factory`` before the
    surviving lines reach the real stdout. stderr is forwarded unfiltered.
    Both streams are captured raw in the result regardless of filtering.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        filter_factory: Callable[[], LineFilter] | None = None,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._filter_factory = filter_factory

    async def run(self, invocation: Invocation) -> ExecResult:
        mode = invocation.stdio
        start = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                invocation.binary,
                *invocation.args,
                stdin=None if mode == StdioMode.INTERACTIVE else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL if mode == StdioMode.SILENT else asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=invocation.cwd,
                env=invocation.env,
            )
        except (OSError, ValueError) as e:
            raise SpawnError(
                f"Failed to start {invocation.binary}: {e}",
                command=invocation.command_line,
                cause=e,
            ) from e

        if mode == StdioMode.INTERACTIVE:
            tasks = [
                asyncio.ensure_future(self._forward_stdout(proc.stdout)),
                asyncio.ensure_future(self._forward_stderr(proc.stderr)),
                asyncio.ensure_future(proc.wait()),
            ]
            try:
                stdout, stderr, _ = await asyncio.gather(*tasks)
            except BaseException:
                await _abort(proc, tasks)
                raise
        else:
            out, err = await proc.communicate()
            stdout = out.decode(errors="replace") if out is not None else None
            stderr = err.decode(errors="replace") if err is not None else None

        exit_code = proc.returncode if proc.returncode is not None else -1
        result = ExecResult(
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        if exit_code != 0:
            raise SpawnError(
                f"{invocation.command_line} exited with code {exit_code}",
                command=invocation.command_line,
                exit_code=exit_code,
                stdout=stdout,
                stderr=stderr,
            )
        return result

    async def _forward_stdout(self, stream: asyncio.StreamReader) -> str:
        sink = self._stdout or sys.stdout
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        splitter = LineSplitter()
        # One filter per stream; its state dies with this coroutine.
        line_filter = self._filter_factory() if self._filter_factory else None
        captured: list[str] = []

        while True:
            chunk = await stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            captured.append(text)
            _write_lines(sink, splitter.feed(text), line_filter)

        tail = decoder.decode(b"", final=True)
        captured.append(tail)
        _write_lines(sink, splitter.feed(tail) + splitter.flush(), line_filter)
        return "".join(captured)

    async def _forward_stderr(self, stream: asyncio.StreamReader) -> str:
        sink = self._stderr or sys.stderr
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        captured: list[str] = []

        while True:
            chunk = await stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            captured.append(text)
            sink.write(text)
            sink.flush()

        tail = decoder.decode(b"", final=True)
        if tail:
            captured.append(tail)
            sink.write(tail)
            sink.flush()
        return "".join(captured)


def _write_lines(sink: TextIO, lines: Iterable[str], line_filter: LineFilter | None) -> None:
    wrote = False
    for line in lines:
        if line_filter is not None:
            line = line_filter.process(line)
            if line is None:
                continue
        sink.write(line + "\n")
        wrote = True
    if wrote:
        sink.flush()


async def _abort(proc: asyncio.subprocess.Process, tasks: list[asyncio.Future]) -> None:
    """Kill the child and collect the remaining pump tasks after a failure."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    await proc.wait()
