"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.fields import DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class InspectorConfig:
    """Field extraction settings for the inspector session."""

    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class DisplayConfig:
    """Rendering settings consumed by the presentation layers."""

    preview_chars: int = 120
    time_format: str = "%H:%M:%S"
