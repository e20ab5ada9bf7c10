"""Utilities for ssht."""

from ssht.utils.console import ColorfulFormatter, JSONFormatter, configure_logging

__all__ = [
    "ColorfulFormatter",
    "configure_logging",
    "JSONFormatter",
]
