from __future__ import annotations

import asyncio

from adapters.event_pump import EventPump
from core.session import InspectorSession


class FakeSource:
    def __init__(self, envelopes: list[dict]) -> None:
        self._envelopes = envelopes

    async def __aiter__(self):
        for envelope in self._envelopes:
            await asyncio.sleep(0)
            yield envelope


def _event(**payload) -> dict:
    return {"type": "stream-event", "payload": payload}


def test_pump_applies_producers_in_queue_order() -> None:
    session = InspectorSession()
    changes: list[str] = []
    pump = EventPump(session, on_change=changes.append)

    first = FakeSource(
        [
            _event(type="stream-connection", connectionId="c1", url="https://a.test/s", timestamp=1),
            _event(type="stream-message", connectionId="c1", messageId=1, data='{"n":1}'),
        ]
    )
    second = FakeSource(
        [
            _event(type="stream-message", connectionId="c1", messageId=2, data='{"n":2}'),
            _event(type="stream-message", connectionId="nobody", messageId=9, data="x"),
        ]
    )

    async def _run() -> None:
        consumer = asyncio.create_task(pump.run())
        await pump.feed(first)
        await pump.feed(second)
        await pump.close()
        await consumer

    asyncio.run(_run())

    assert [message.id for message in session.store.get("c1").messages] == [1, 2]
    assert changes == ["c1", "c1", "c1"]
    assert pump.applied == 3


def test_listener_failure_does_not_stop_ingestion() -> None:
    session = InspectorSession()

    def _broken(changed: str) -> None:
        raise RuntimeError("render failed")

    pump = EventPump(session, on_change=_broken)

    async def _run() -> None:
        consumer = asyncio.create_task(pump.run())
        await pump.put(_event(type="stream-connection", connectionId="c1", url="u", timestamp=1))
        await pump.put(_event(type="stream-open", connectionId="c1"))
        await pump.close()
        await consumer

    asyncio.run(_run())
    assert session.store.get("c1").status == "open"
