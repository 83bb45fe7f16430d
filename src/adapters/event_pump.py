"""Single-writer event pump.

Several producers may observe the same page (a capture file, stdin, a test
harness). They all `put` envelopes on one queue and a single consumer task
applies them to the session, so the store only ever sees one event at a
time and message logs stay append-only in arrival order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from adapters.event_mapper import dispatch_envelope
from core.ports import EnvelopeSourcePort
from core.session import InspectorSession

LOGGER = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class EventPump:
    """Serializes envelope application onto one InspectorSession."""

    def __init__(
        self,
        session: InspectorSession,
        on_change: Optional[ChangeListener] = None,
        maxsize: int = 0,
    ) -> None:
        self._session = session
        self._on_change = on_change
        self._queue: asyncio.Queue[Optional[dict[str, Any]]] = asyncio.Queue(maxsize=maxsize)
        self.applied = 0

    async def put(self, envelope: dict[str, Any]) -> None:
        await self._queue.put(envelope)

    async def close(self) -> None:
        """Ask the consumer to stop once everything queued so far is applied."""

        await self._queue.put(None)

    async def feed(self, source: EnvelopeSourcePort) -> int:
        """Producer helper: copy every envelope of a source onto the queue."""

        count = 0
        async for envelope in source:
            await self.put(envelope)
            count += 1
        return count

    async def run(self) -> None:
        """Consumer loop: apply envelopes one at a time until close()."""

        while True:
            envelope = await self._queue.get()
            try:
                if envelope is None:
                    return
                self._apply(envelope)
            finally:
                self._queue.task_done()

    def _apply(self, envelope: dict[str, Any]) -> None:
        changed = dispatch_envelope(self._session, envelope)
        if changed is None:
            return
        self.applied += 1
        if self._on_change is not None:
            try:
                self._on_change(changed)
            except Exception:
                # A broken listener must not stop ingestion for later events.
                LOGGER.exception("Change listener failed for %s", changed)
