"""Utility functions and helpers for crate-shield."""

from .logging import setup_logging, get_logger
from .performance import benchmark, measure

__all__ = [
    "setup_logging",
    "get_logger",
    "benchmark",
    "measure",
]
