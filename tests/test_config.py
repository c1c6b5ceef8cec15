"""Tests for ContextVar-based engine configuration.

Validates defaults, dict loading, the context manager and thread isolation.
"""

from threading import Thread

import pytest

from footmark import (
    EngineConfig,
    engine_config_context,
    extract,
    get_engine_config,
    group,
    outline,
    reset_engine_config,
    set_engine_config,
)
from footmark.errors import DuplicateDefinitionError


class TestEngineConfigDataclass:
    """Test EngineConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        """Default config groups by first reference and keeps last duplicate."""
        config = EngineConfig()
        assert config.grouping_mode == "single"
        assert config.strict_duplicates is False
        assert config.collapse_spaces is True
        assert config.collapse_blank_lines is True
        assert config.avoid_id_collisions is False

    def test_immutability(self) -> None:
        """Config is frozen and cannot be modified."""
        config = EngineConfig()
        with pytest.raises(AttributeError):
            config.grouping_mode = "multi"  # type: ignore[misc]

    def test_invalid_grouping_mode(self) -> None:
        with pytest.raises(ValueError, match="grouping_mode"):
            EngineConfig(grouping_mode="nested")  # type: ignore[arg-type]


class TestFromDict:
    """Loading persisted preferences."""

    def test_known_keys(self) -> None:
        config = EngineConfig.from_dict({"grouping_mode": "multi", "collapse_spaces": False})
        assert config.grouping_mode == "multi"
        assert config.collapse_spaces is False
        assert config.collapse_blank_lines is True
        assert config.avoid_id_collisions is False

    def test_unknown_keys_ignored(self) -> None:
        """Host-only preferences do not break loading."""
        config = EngineConfig.from_dict({"openOnStart": True, "strict_duplicates": True})
        assert config.strict_duplicates is True

    def test_empty_dict(self) -> None:
        assert EngineConfig.from_dict({}) == EngineConfig()


class TestContextVarFunctions:
    """Test get/set/reset functions."""

    def teardown_method(self) -> None:
        """Reset config after each test."""
        reset_engine_config()

    def test_default_config(self) -> None:
        assert get_engine_config() == EngineConfig()

    def test_set_and_get(self) -> None:
        set_engine_config(EngineConfig(grouping_mode="multi"))
        assert get_engine_config().grouping_mode == "multi"

    def test_reset_restores_default(self) -> None:
        set_engine_config(EngineConfig(strict_duplicates=True))
        reset_engine_config()
        assert get_engine_config().strict_duplicates is False


class TestEngineConfigContext:
    """Test engine_config_context context manager."""

    def test_nested_contexts(self) -> None:
        with engine_config_context(EngineConfig(grouping_mode="multi")):
            with engine_config_context(EngineConfig(strict_duplicates=True)):
                # Inner config replaces, it does not merge
                assert get_engine_config().grouping_mode == "single"
                assert get_engine_config().strict_duplicates is True
            assert get_engine_config().grouping_mode == "multi"
        assert get_engine_config() == EngineConfig()

    def test_context_restores_on_exception(self) -> None:
        with pytest.raises(ValueError, match="test"):
            with engine_config_context(EngineConfig(grouping_mode="multi")):
                raise ValueError("test")
        assert get_engine_config().grouping_mode == "single"

    def test_strict_duplicates_from_context(self) -> None:
        text = "[^1]: a\n[^1]: b"
        with engine_config_context(EngineConfig(strict_duplicates=True)):
            with pytest.raises(DuplicateDefinitionError):
                extract(text)
        assert extract(text).require("1").content == "b"


class TestThreadIsolation:
    """Test thread-local configuration isolation."""

    def test_thread_isolation(self) -> None:
        """Each thread groups with its own mode."""
        text = "# A\nx[^1]\n# B\ny[^1]\n\n[^1]: one"
        results: dict[int, int] = {}

        def worker(thread_id: int, config: EngineConfig) -> None:
            set_engine_config(config)
            groups = group(extract(text), outline(text))
            results[thread_id] = sum(len(g.footnotes) for g in groups)

        configs = [EngineConfig(grouping_mode="multi"), EngineConfig(grouping_mode="single")]
        threads = [Thread(target=worker, args=(i, c)) for i, c in enumerate(configs)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {0: 2, 1: 1}
        # The main thread never saw either config
        assert get_engine_config() == EngineConfig()
