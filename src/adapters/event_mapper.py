"""Transport-to-core envelope mapping adapter.

This keeps the wire shape of the page-side hook (camelCase keys, tagged
envelopes) out of the core session.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional

from core.models import STATUS_CONNECTING, Connection, Message, StreamEvent
from core.session import InspectorSession

LOGGER = logging.getLogger(__name__)

ENVELOPE_INIT = "init-data"
ENVELOPE_STREAM_EVENT = "stream-event"
ENVELOPE_NAVIGATION = "navigation"


def _coerce_data(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, separators=(",", ":"), ensure_ascii=False)


def _coerce_timestamp(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _optional_str(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    return str(raw)


def build_event(payload: dict[str, Any]) -> Optional[StreamEvent]:
    """Build a core StreamEvent from a `stream-event` payload."""

    event_type = payload.get("type")
    connection_id = payload.get("connectionId")
    if not event_type or connection_id is None:
        LOGGER.debug("Dropping stream event without type or connectionId: %s", payload)
        return None

    return StreamEvent(
        type=str(event_type),
        connection_id=str(connection_id),
        url=str(payload.get("url") or ""),
        frame_url=str(payload.get("frameUrl") or ""),
        is_iframe=bool(payload.get("isIframe", False)),
        timestamp=_coerce_timestamp(payload.get("timestamp")),
        message_id=payload.get("messageId"),
        event_type=str(payload.get("eventType") or "message"),
        data=_coerce_data(payload.get("data")),
        last_event_id=_optional_str(payload.get("lastEventId")),
    )


def build_message(raw: dict[str, Any]) -> Message:
    return Message(
        id=raw.get("id"),
        event_type=str(raw.get("eventType") or "message"),
        data=_coerce_data(raw.get("data")),
        last_event_id=_optional_str(raw.get("lastEventId")),
        timestamp=_coerce_timestamp(raw.get("timestamp")),
    )


def build_connection(connection_id: str, raw: dict[str, Any]) -> Connection:
    """Build a Connection (with its message log) from an init snapshot entry."""

    messages = raw.get("messages") or []
    return Connection(
        id=str(raw.get("id", connection_id)),
        url=str(raw.get("url") or ""),
        frame_url=str(raw.get("frameUrl") or ""),
        is_iframe=bool(raw.get("isIframe", False)),
        created_at=_coerce_timestamp(raw.get("createdAt")) or 0,
        status=str(raw.get("status") or STATUS_CONNECTING),
        messages=[build_message(item) for item in messages if isinstance(item, dict)],
    )


def build_snapshot(data: dict[str, Any]) -> List[Connection]:
    connections = data.get("connections") or {}
    if not isinstance(connections, dict):
        return []
    return [
        build_connection(str(connection_id), raw)
        for connection_id, raw in connections.items()
        if isinstance(raw, dict)
    ]


def dispatch_envelope(session: InspectorSession, envelope: dict[str, Any]) -> Optional[str]:
    """Apply one transport envelope to the session.

    Returns the affected connection id for stream events, "*" when the whole
    store changed (snapshot or navigation), and None when nothing changed.
    """

    kind = envelope.get("type")
    if kind == ENVELOPE_STREAM_EVENT:
        payload = envelope.get("payload")
        if not isinstance(payload, dict):
            return None
        event = build_event(payload)
        if event is None:
            return None
        return session.ingest(event)

    if kind == ENVELOPE_INIT:
        data = envelope.get("data")
        session.load_snapshot(build_snapshot(data if isinstance(data, dict) else {}))
        return "*"

    if kind == ENVELOPE_NAVIGATION:
        LOGGER.info("Inspected page navigated; clearing session")
        session.reset()
        return "*"

    LOGGER.debug("Ignoring unknown envelope type %s", kind)
    return None


def dispatch_all(session: InspectorSession, envelopes: Iterable[dict[str, Any]]) -> int:
    """Apply envelopes in order; returns how many changed the session."""

    changed = 0
    for envelope in envelopes:
        if dispatch_envelope(session, envelope) is not None:
            changed += 1
    return changed
