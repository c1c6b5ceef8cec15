"""Utility modules for footmark.

Provides:
- logger: get_logger and set_debug
"""

from footmark.utils.logger import get_logger, set_debug

__all__ = [
    "get_logger",
    "set_debug",
]
