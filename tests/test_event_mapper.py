from __future__ import annotations

from adapters.event_mapper import build_event, build_snapshot, dispatch_all, dispatch_envelope
from core.session import InspectorSession


def _stream_event(**payload) -> dict:
    return {"type": "stream-event", "payload": payload}


def test_build_event_maps_camel_case_fields() -> None:
    event = build_event(
        {
            "type": "stream-message",
            "connectionId": 7,
            "messageId": 3,
            "eventType": "tick",
            "data": {"price": 1.5},
            "lastEventId": 99,
            "timestamp": "1700000000000",
        }
    )
    assert event is not None
    assert event.connection_id == "7"
    assert event.message_id == 3
    assert event.event_type == "tick"
    assert event.data == '{"price":1.5}'
    assert event.last_event_id == "99"
    assert event.timestamp == 1700000000000.0


def test_build_event_requires_type_and_connection() -> None:
    assert build_event({"type": "stream-open"}) is None
    assert build_event({"connectionId": "c1"}) is None


def test_dispatch_stream_events_and_navigation() -> None:
    session = InspectorSession()
    changed = dispatch_all(
        session,
        [
            _stream_event(type="stream-connection", connectionId="c1", url="https://a.test/s", timestamp=1),
            _stream_event(type="stream-open", connectionId="c1"),
            _stream_event(type="stream-message", connectionId="c1", messageId=1, data='{"a":1}'),
            _stream_event(type="stream-message", connectionId="ghost", messageId=1, data="x"),
            {"type": "unknown"},
        ],
    )
    assert changed == 3
    assert session.store.get("c1").status == "open"
    assert len(session.store.get("c1").messages) == 1

    session.select_connection("c1")
    assert dispatch_envelope(session, {"type": "navigation"}) == "*"
    assert len(session.store) == 0
    assert session.selected_connection_id is None


def test_init_snapshot_seeds_store() -> None:
    session = InspectorSession()
    envelope = {
        "type": "init-data",
        "data": {
            "connections": {
                "c9": {
                    "id": "c9",
                    "url": "https://a.test/feed",
                    "frameUrl": "https://a.test/frame",
                    "isIframe": True,
                    "status": "open",
                    "createdAt": 42,
                    "messages": [
                        {"id": 1, "eventType": "message", "data": "{}", "timestamp": 43},
                        {"id": 2, "eventType": "message", "data": "hi", "timestamp": 44},
                    ],
                }
            }
        },
    }
    assert dispatch_envelope(session, envelope) == "*"
    connection = session.store.get("c9")
    assert connection.is_iframe is True
    assert connection.frame_url == "https://a.test/frame"
    assert connection.created_at == 42
    assert [message.data for message in connection.messages] == ["{}", "hi"]

    # Later events keep flowing into the seeded connection.
    dispatch_envelope(session, _stream_event(type="stream-close", connectionId="c9"))
    assert connection.status == "closed"


def test_build_snapshot_tolerates_bad_shapes() -> None:
    assert build_snapshot({}) == []
    assert build_snapshot({"connections": []}) == []
    assert build_snapshot({"connections": {"a": "nope"}}) == []
