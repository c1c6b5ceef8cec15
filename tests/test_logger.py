"""Tests for footmark.utils.logger."""

import logging

from footmark import extract, set_debug
from footmark.utils.logger import get_logger


class TestGetLogger:
    """Logger namespacing."""

    def test_prefix_added(self) -> None:
        assert get_logger("mymodule").name == "footmark.mymodule"

    def test_module_names_kept(self) -> None:
        assert get_logger("footmark.extract").name == "footmark.extract"
        assert get_logger("footmark").name == "footmark"

    def test_similar_prefix_not_mistaken(self) -> None:
        assert get_logger("footmarker").name == "footmark.footmarker"


class TestSetDebug:
    """Host-controlled debug output."""

    def teardown_method(self) -> None:
        set_debug(False)

    def test_debug_records_emitted(self, caplog) -> None:  # type: ignore[no-untyped-def]
        set_debug(True)
        with caplog.at_level(logging.DEBUG, logger="footmark"):
            extract("a[^1] b[^2]\n\n[^1]: one")
        assert any("1 referenced" in record.getMessage() for record in caplog.records)

    def test_levels(self) -> None:
        set_debug(True)
        assert logging.getLogger("footmark").level == logging.DEBUG
        set_debug(False)
        assert logging.getLogger("footmark").level == logging.NOTSET
