"""Output formatters for crate-shield."""

from .formatters import JSONFormatter, TextFormatter, render_json, render_text

__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "render_json",
    "render_text",
]
