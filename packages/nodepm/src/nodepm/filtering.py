"""Line reassembly and peer dependency warning suppression for pnpm stdout."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Protocol


# One terminal escape sequence (CSI or OSC), same grammar as ansi-regex.
ANSI_PATTERN = (
    r"[\x1b\x9b][\[\]()#;?]*"
    r"(?:(?:(?:(?:;[-a-zA-Z\d/#&.:=?%@~_]+)*"
    r"|[a-zA-Z\d]+(?:;[-a-zA-Z\d/#&.:=?%@~_]*)*)?\x07)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PR-TZcf-ntqry=><~]))"
)

_ANSI = f"(?:{ANSI_PATTERN})*"

PEER_DEPENDENCY_WARNING_PATTERN = re.compile(
    f"{_ANSI}WARN{_ANSI}.*Issues with peer dependencies found"
)

_NEWLINE = re.compile(r"\r?\n")


class LineSplitter:
    """Reassembles raw text chunks into lines split on ``\\r?\\n``.

    Returned lines never include their terminator. A trailing ``\\r`` stays
    buffered until the next chunk, so a ``\\r\\n`` pair split across two
    chunks is still treated as one boundary.
    """

    def __init__(self) -> None:
        self._buffer = ""

    def feed(self, chunk: str) -> list[str]:
        parts = _NEWLINE.split(self._buffer + chunk)
        self._buffer = parts.pop()
        return parts

    def flush(self) -> list[str]:
        """Return the unterminated remainder, if any."""
        rest, self._buffer = self._buffer, ""
        return [rest] if rest else []


class LineFilter(Protocol):
    """Per-line transform; returns the line to forward or None to drop it."""

    def process(self, line: str) -> str | None: ...


class PeerDependencyWarningFilter:
    """Drops pnpm's "Issues with peer dependencies found" block.

    The block starts at the header line and runs up to and including the
    first empty line. Everything else passes through unchanged. A header seen
    while already suppressing has no further effect.
    """

    def __init__(self) -> None:
        self._suppressing = False

    @property
    def suppressing(self) -> bool:
        return self._suppressing

    def process(self, line: str) -> str | None:
        if not self._suppressing:
            if PEER_DEPENDENCY_WARNING_PATTERN.search(line):
                self._suppressing = True
                return None
            return line

        if not line.rstrip("\r\n"):
            self._suppressing = False
        return None

    def apply(self, lines: Iterable[str]) -> Iterator[str]:
        for line in lines:
            out = self.process(line)
            if out is not None:
                yield out
