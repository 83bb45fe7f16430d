"""Core domain package for streamscope.

Core contains the connection store, event routing, field extraction and
filter evaluation without any transport or UI-specific code, keeping the
inspector logic portable and testable without a terminal.
"""
