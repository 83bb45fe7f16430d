"""Textual inspector UI for streamscope."""
