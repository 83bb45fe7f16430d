"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any transport-specific envelope shapes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Optional

STATUS_CONNECTING = "connecting"
STATUS_OPEN = "open"
STATUS_ERROR = "error"
STATUS_CLOSED = "closed"

TERMINAL_STATUSES = frozenset({STATUS_ERROR, STATUS_CLOSED})

MODE_EQUALS = "equals"
MODE_CONTAINS = "contains"


class _Undecodable:
    """Marker for message data that is not valid JSON."""

    def __repr__(self) -> str:
        return "UNDECODABLE"


UNDECODABLE = _Undecodable()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def decode_payload(data: str) -> Any:
    """Decode a raw payload, returning UNDECODABLE instead of raising.

    NaN and Infinity literals are rejected, as is nesting too deep for the
    decoder.
    """

    try:
        return json.loads(data, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError):
        return UNDECODABLE


@dataclass(frozen=True)
class Message:
    """One event received on a connection. Immutable once recorded."""

    id: Any
    event_type: str
    data: str
    last_event_id: Optional[str] = None
    timestamp: Optional[float] = None

    @cached_property
    def decoded(self) -> Any:
        # Decoded once and shared by field extraction and filter evaluation.
        return decode_payload(self.data)


@dataclass
class Connection:
    """A tracked stream instance with its lifecycle status and message log."""

    id: str
    url: str
    frame_url: str = ""
    is_iframe: bool = False
    created_at: float = 0
    status: str = STATUS_CONNECTING
    messages: list[Message] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def find_message(self, message_id: Any) -> Optional[Message]:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None


@dataclass(frozen=True)
class FilterCondition:
    """A single field predicate; filter sets are ANDed lists of these."""

    field: str
    mode: str = MODE_EQUALS
    value: str = ""


@dataclass(frozen=True)
class StreamEvent:
    """A lifecycle or data event delivered by the transport."""

    type: str
    connection_id: str
    url: str = ""
    frame_url: str = ""
    is_iframe: bool = False
    timestamp: Optional[float] = None
    message_id: Any = None
    event_type: str = "message"
    data: str = ""
    last_event_id: Optional[str] = None
