"""Static configuration for streamscope.

All user-editable settings (field extraction, display, transport polling,
preset filters, logging) live in a single JSON file for quick edits without
touching Python.
"""

import json
import os

from dotenv import load_dotenv

from core.config import DisplayConfig, InspectorConfig
from core.fields import DEFAULT_MAX_DEPTH

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

# config.json sits next to the checkout by default; STREAMSCOPE_CONFIG points
# at another file (it must then exist).
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")
CONFIG_PATH = os.getenv("STREAMSCOPE_CONFIG") or DEFAULT_CONFIG_PATH


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        if CONFIG_PATH == DEFAULT_CONFIG_PATH:
            return {}
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be an object: {CONFIG_PATH}")
    return loaded


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Field extraction depth cap for pathological payloads.
_fields = _CONFIG.get("fields", {})
FIELDS_MAX_DEPTH = int(_fields.get("max_depth", DEFAULT_MAX_DEPTH))

# Display settings shared by the TUI and the replay printer.
_display = _CONFIG.get("display", {})
PREVIEW_CHARS = int(_display.get("preview_chars", 120))
TIME_FORMAT = str(_display.get("time_format", "%H:%M:%S"))

# Poll interval (seconds) when following a growing capture file.
_transport = _CONFIG.get("transport", {})
POLL_INTERVAL = float(_transport.get("poll_interval", 0.25))

# Preset filters are applied when a session starts.
FILTERS_CONFIG = _CONFIG.get("filters", [])

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})

INSPECTOR_CONFIG = InspectorConfig(max_depth=FIELDS_MAX_DEPTH)
DISPLAY_CONFIG = DisplayConfig(preview_chars=PREVIEW_CHARS, time_format=TIME_FORMAT)
