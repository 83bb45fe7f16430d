from __future__ import annotations

from core.models import Connection, StreamEvent
from core.router import StreamEventRouter
from core.store import ConnectionStore


def _router() -> tuple[ConnectionStore, StreamEventRouter]:
    store = ConnectionStore()
    return store, StreamEventRouter(store)


def _connect(router: StreamEventRouter, connection_id: str, url: str, timestamp: float) -> None:
    router.apply(
        StreamEvent(type="stream-connection", connection_id=connection_id, url=url, timestamp=timestamp)
    )


def test_lifecycle_transitions() -> None:
    store, router = _router()
    _connect(router, "c1", "https://example.test/events", 1000)
    assert store.get("c1").status == "connecting"

    assert router.apply(StreamEvent(type="stream-open", connection_id="c1")) == "c1"
    assert store.get("c1").status == "open"

    router.apply(StreamEvent(type="stream-close", connection_id="c1"))
    assert store.get("c1").status == "closed"


def test_terminal_states_do_not_transition() -> None:
    store, router = _router()
    _connect(router, "c1", "https://example.test/events", 1000)
    router.apply(StreamEvent(type="stream-error", connection_id="c1"))

    assert router.apply(StreamEvent(type="stream-open", connection_id="c1")) is None
    assert router.apply(StreamEvent(type="stream-close", connection_id="c1")) is None
    assert store.get("c1").status == "error"


def test_unknown_connection_events_are_ignored() -> None:
    store, router = _router()
    for event_type in ("stream-open", "stream-message", "stream-error", "stream-close"):
        assert router.apply(StreamEvent(type=event_type, connection_id="ghost")) is None
    assert len(store) == 0


def test_messages_append_in_arrival_order() -> None:
    store, router = _router()
    _connect(router, "c1", "https://example.test/events", 1000)
    for message_id in (5, 2, 9):
        router.apply(
            StreamEvent(
                type="stream-message",
                connection_id="c1",
                message_id=message_id,
                data=f'{{"n": {message_id}}}',
            )
        )
    assert [message.id for message in store.get("c1").messages] == [5, 2, 9]


def test_duplicate_url_creates_separate_connections() -> None:
    store, router = _router()
    _connect(router, "c1", "https://example.test/events", 1000)
    _connect(router, "c2", "https://example.test/events", 2000)
    assert [connection.id for connection in store.list_connections()] == ["c2", "c1"]


def test_list_connections_filters_by_url_case_insensitively() -> None:
    store, router = _router()
    _connect(router, "c1", "https://example.test/Chat/stream", 1000)
    _connect(router, "c2", "https://example.test/prices", 2000)
    _connect(router, "c3", "https://example.test/chat/other", 3000)
    assert [connection.id for connection in store.list_connections("CHAT")] == ["c3", "c1"]


def test_replace_all_and_clear() -> None:
    store = ConnectionStore()
    store.replace_all([Connection(id="a", url="u"), Connection(id="b", url="v")])
    assert len(store) == 2
    assert "a" in store
    store.clear()
    assert len(store) == 0
    assert store.get("a") is None
