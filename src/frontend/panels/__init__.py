"""Panels composing the inspector screen."""
