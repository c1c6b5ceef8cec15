"""Logging helpers for footmark.

Every module logs through ``get_logger(__name__)``, so all engine output sits
under one ``footmark`` logger that a host can tune in one place. The engine
never adds handlers; output goes wherever the host's logging is configured.

Example:
    >>> from footmark.utils.logger import get_logger, set_debug
    >>> logger = get_logger(__name__)
    >>> set_debug(True)  # host "debug mode" preference
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "footmark"


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under ``footmark``.

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> get_logger("planner").name
        'footmark.planner'
    """
    if not (name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}.")):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_debug(enabled: bool) -> None:
    """Switch engine debug logging on or off.

    Debug output reports counts per extraction, grouping, plan and apply.
    Turning it off restores the inherited level.
    """
    get_logger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG if enabled else logging.NOTSET)
