"""Filter compilation and matching logic (core domain)."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Sequence

from core.fields import MISSING, resolve_path
from core.models import MODE_CONTAINS, MODE_EQUALS, UNDECODABLE, FilterCondition, Message, decode_payload

LOGGER = logging.getLogger(__name__)

FILTER_MODES = (MODE_EQUALS, MODE_CONTAINS)

# Above this magnitude integral floats keep their exponent form.
_INTEGRAL_FLOAT_LIMIT = 1e21


def build_filters(filters_config: Iterable[dict]) -> List[FilterCondition]:
    """Normalize filter configs into conditions.

    Disabled entries and entries without a field are skipped so a partially
    edited config never produces a condition that cannot match anything.
    """

    compiled: List[FilterCondition] = []
    for entry in filters_config:
        if not entry.get("enabled", True):
            continue
        field = str(entry.get("field") or "").strip()
        if not field:
            continue
        compiled.append(
            FilterCondition(
                field=field,
                mode=str(entry.get("mode") or MODE_EQUALS),
                value=stringify(entry.get("value", "")),
            )
        )
    return compiled


def stringify(value: Any) -> str:
    """Render a decoded JSON value as the text filters compare against."""

    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer() and abs(value) < _INTEGRAL_FLOAT_LIMIT:
            return str(int(value))
        return repr(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def condition_holds(decoded: Any, condition: FilterCondition) -> bool:
    """Evaluate one condition against an already decoded payload."""

    field_value = resolve_path(decoded, condition.field)
    if field_value is MISSING:
        return False

    field_text = stringify(field_value)
    filter_text = stringify(condition.value)

    if condition.mode == MODE_EQUALS:
        return field_text == filter_text
    if condition.mode == MODE_CONTAINS:
        return filter_text in field_text

    # Unknown modes pass so a bad preset never hides the whole stream.
    LOGGER.debug("Unknown filter mode %r treated as pass", condition.mode)
    return True


def matches_value(decoded: Any, filters: Sequence[FilterCondition]) -> bool:
    """Return True when a decoded payload satisfies every condition.

    Matching logic:
    - An empty filter set passes everything.
    - Payloads that are not JSON never match a non-empty set.
    - Otherwise all conditions must hold (AND).
    """

    if not filters:
        return True
    if decoded is UNDECODABLE:
        return False
    return all(condition_holds(decoded, condition) for condition in filters)


def matches(payload: str, filters: Sequence[FilterCondition]) -> bool:
    """Decode a raw payload string and evaluate the filter set against it."""

    if not filters:
        return True
    return matches_value(decode_payload(payload), filters)


def filter_messages(messages: Sequence[Message], filters: Sequence[FilterCondition]) -> List[Message]:
    """Stable filter: keeps arrival order, drops messages that do not match."""

    if not filters:
        return list(messages)
    return [message for message in messages if matches_value(message.decoded, filters)]


def filter_stats(filtered_count: int, total_count: int, has_active_filters: bool) -> str:
    """Return the stats line shown above the message list, or "" without filters."""

    if not has_active_filters:
        return ""
    if filtered_count == total_count:
        return f"Showing all {total_count} messages"
    return f"Showing {filtered_count}/{total_count} messages"
