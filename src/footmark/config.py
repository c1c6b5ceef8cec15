"""ContextVar-based engine configuration for footmark.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Hosts set a config once per context; extraction, grouping and planning read
it when the caller does not pass an explicit option.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from footmark.config import EngineConfig, engine_config_context

    with engine_config_context(EngineConfig(grouping_mode="multi")):
        groups = group(model, headers)  # multi-section grouping

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable engine configuration.

    Attributes:
        grouping_mode: "single" places each footnote under the section of its
            first reference; "multi" repeats it under every section that
            references it
        strict_duplicates: Raise DuplicateDefinitionError when an id is
            defined twice instead of keeping the last definition
        collapse_spaces: Ask the applicator to collapse runs of spaces left
            behind by deleted references
        collapse_blank_lines: Ask the applicator to collapse runs of blank
            lines left behind by deleted definitions
        avoid_id_collisions: When renumbering or inserting, skip integer ids
            already held by footnotes that keep their id (unreferenced or
            excluded definitions, orphaned references). Off by default:
            renumbering assigns 1..N and insertion only looks at referenced
            ids, so a new id may coincide with an existing definition.

    """

    grouping_mode: Literal["single", "multi"] = "single"
    strict_duplicates: bool = False
    collapse_spaces: bool = True
    collapse_blank_lines: bool = True
    avoid_id_collisions: bool = False

    def __post_init__(self) -> None:
        if self.grouping_mode not in ("single", "multi"):
            raise ValueError(
                f"grouping_mode must be 'single' or 'multi', got {self.grouping_mode!r}"
            )

    @classmethod
    def from_dict(cls, config_dict: dict) -> EngineConfig:
        """Create EngineConfig from dictionary.

        Useful for hosts that persist preferences as JSON. Only includes keys
        that are valid EngineConfig fields; unknown keys are silently ignored.

        Example:
            >>> config = EngineConfig.from_dict({
            ...     "grouping_mode": "multi",
            ...     "openOnStart": True,
            ... })
            >>> config.grouping_mode
            'multi'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: EngineConfig = EngineConfig()

_engine_config: ContextVar[EngineConfig] = ContextVar(
    "engine_config",
    default=_DEFAULT_CONFIG,
)


def get_engine_config() -> EngineConfig:
    """Get current engine configuration (thread-local)."""
    return _engine_config.get()


def set_engine_config(config: EngineConfig) -> None:
    """Set engine configuration for the current context."""
    _engine_config.set(config)


def reset_engine_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _engine_config.set(_DEFAULT_CONFIG)


@contextmanager
def engine_config_context(config: EngineConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with engine_config_context(EngineConfig(strict_duplicates=True)):
        ...     model = extract(text)  # raises on duplicate definitions
    """
    previous = _engine_config.get()
    _engine_config.set(config)
    try:
        yield
    finally:
        _engine_config.set(previous)


__all__ = [
    "EngineConfig",
    "engine_config_context",
    "get_engine_config",
    "reset_engine_config",
    "set_engine_config",
]
