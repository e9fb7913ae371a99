"""Tests for logging setup."""

from __future__ import annotations

import io
import logging

import pytest
from rich.console import Console

from vnext.logs import resolve_level, setup_logging


class TestResolveLevel:
    """Tests for resolve_level()."""

    def test_default_is_warning(self):
        """Quiet unless asked otherwise."""
        assert resolve_level() == logging.WARNING

    def test_explicit_level(self):
        """Names are case-insensitive."""
        assert resolve_level("debug") == logging.DEBUG

    def test_environment(self, monkeypatch: pytest.MonkeyPatch):
        """LOG_LEVEL is used when no level is given."""
        monkeypatch.setenv("LOG_LEVEL", "info")
        assert resolve_level() == logging.INFO
        assert resolve_level("ERROR") == logging.ERROR

    def test_unknown_level(self):
        """Unknown names fall back to WARNING."""
        assert resolve_level("chatty") == logging.WARNING


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_records_reach_console(self):
        """Records at or above the level are rendered to the given console."""
        buffer = io.StringIO()
        setup_logging("INFO", Console(file=buffer, width=200))

        logging.getLogger("vnext.core.release").info("planning release")
        logging.getLogger("vnext.core.release").debug("hidden detail")

        assert "planning release" in buffer.getvalue()
        assert "hidden detail" not in buffer.getvalue()

    def test_repeated_setup_replaces_handler(self):
        """Calling setup twice does not duplicate output."""
        setup_logging("INFO", Console(file=io.StringIO()))
        setup_logging("INFO", Console(file=io.StringIO()))

        logger = logging.getLogger("vnext")
        assert len(logger.handlers) == 1
        assert logger.propagate is False
