"""Newline-delimited JSON envelope transport.

Envelopes captured from an inspected page are written one JSON object per
line. This adapter reads them from a file (optionally following it as it
grows, like `tail -f`) or from stdin, and yields decoded envelope dicts in
arrival order. Malformed lines are skipped: a half-written capture must not
stop the inspector.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Iterator, List, Optional, TextIO

LOGGER = logging.getLogger(__name__)

STDIN_PATH = "-"


def parse_line(line: str) -> Optional[dict[str, Any]]:
    """Parse a single envelope line. Returns None for blank or invalid lines."""

    line = line.strip()
    if not line:
        return None
    try:
        envelope = json.loads(line)
    except (ValueError, RecursionError):
        LOGGER.debug("Skipping malformed envelope line: %.80s", line)
        return None
    if not isinstance(envelope, dict):
        return None
    return envelope


def iter_envelopes(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    for line in lines:
        envelope = parse_line(line)
        if envelope is not None:
            yield envelope


def read_envelopes(path: str) -> List[dict[str, Any]]:
    """Read every envelope from a capture file (or stdin for "-")."""

    if path == STDIN_PATH:
        return list(iter_envelopes(sys.stdin))
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        return list(iter_envelopes(handle))


class FileTail:
    """Track a capture file's offset and return complete new lines per poll."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.offset = 0
        # Incomplete trailing line kept until its newline arrives.
        self.partial = ""

    def poll(self) -> List[str]:
        if not self.path.exists():
            return []

        size = self.path.stat().st_size
        if size < self.offset:
            # Truncated or replaced capture: start over.
            LOGGER.info("Capture file %s truncated; rereading", self.path)
            self.offset = 0
            self.partial = ""

        if size == self.offset:
            return []

        with self.path.open("rb") as handle:
            handle.seek(self.offset)
            data = handle.read()
            self.offset += len(data)

        text = self.partial + data.decode("utf-8", errors="replace")
        lines = text.splitlines()
        if text.endswith("\n"):
            self.partial = ""
        else:
            self.partial = lines.pop() if lines else ""
        return lines


class JsonlEnvelopeSource:
    """Async envelope source over a capture file or stdin.

    With follow=True the file is polled every poll_interval seconds after
    the existing content has been replayed, and iteration never ends on its
    own; cancel the consuming task to stop it.
    """

    def __init__(self, path: str, follow: bool = False, poll_interval: float = 0.25) -> None:
        self._path = path
        self._follow = follow
        self._poll_interval = poll_interval

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        if self._path == STDIN_PATH:
            return self._iter_stream(sys.stdin)
        return self._iter_file(Path(self._path))

    async def _iter_stream(self, stream: TextIO) -> AsyncIterator[dict[str, Any]]:
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, stream.readline)
            if not line:
                return
            envelope = parse_line(line)
            if envelope is not None:
                yield envelope

    async def _iter_file(self, path: Path) -> AsyncIterator[dict[str, Any]]:
        tail = FileTail(path)
        while True:
            for envelope in iter_envelopes(tail.poll()):
                yield envelope
            if not self._follow:
                # A final line without a trailing newline is still an envelope.
                if tail.partial:
                    envelope = parse_line(tail.partial)
                    tail.partial = ""
                    if envelope is not None:
                        yield envelope
                return
            await asyncio.sleep(self._poll_interval)
