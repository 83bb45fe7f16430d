"""Ports (interfaces) used around the core session.

Ports define the minimal contracts for transport adapters so that the core
can be fed from a file, stdin, or any future live source.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Protocol


class EnvelopeSourcePort(Protocol):
    """Async source of raw transport envelopes, in arrival order."""

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        ...
