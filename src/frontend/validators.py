"""Validation helpers for filter editing."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import MODE_CONTAINS, MODE_EQUALS, FilterCondition

_OPERATORS = (("~", MODE_CONTAINS), ("=", MODE_EQUALS))


@dataclass
class FilterExpressionInfo:
    condition: FilterCondition | None
    error: str | None = None


def parse_filter_expression(raw_value: str) -> FilterExpressionInfo:
    """Parse `field=value` (equals) or `field~value` (contains)."""

    raw_value = raw_value.strip()
    if not raw_value:
        return FilterExpressionInfo(None, "filter expression is required")

    # The earliest operator wins so values may contain '=' or '~'.
    positions = [
        (raw_value.find(symbol), symbol, mode)
        for symbol, mode in _OPERATORS
        if symbol in raw_value
    ]
    if not positions:
        return FilterExpressionInfo(None, "use field=value or field~value")

    index, symbol, mode = min(positions)
    field = raw_value[:index].strip()
    value = raw_value[index + len(symbol) :]
    if not field:
        return FilterExpressionInfo(None, "field is required")
    if any(not segment for segment in field.split(".")):
        return FilterExpressionInfo(None, "field path has an empty segment")
    return FilterExpressionInfo(FilterCondition(field=field, mode=mode, value=value))
