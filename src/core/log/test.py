"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, parse_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("registry")
        assert logger.name == "registry"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "component-templates"

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging is already configured,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET


class TestParseLevel:
    """Tests for level name resolution."""

    @pytest.mark.unit
    def test_names_are_case_insensitive(self) -> None:
        """Level names resolve regardless of case."""
        assert parse_level("warning") == logging.WARNING
        assert parse_level(" ERROR ") == logging.ERROR

    @pytest.mark.unit
    def test_int_passthrough(self) -> None:
        """Integer levels are returned unchanged."""
        assert parse_level(logging.DEBUG) == logging.DEBUG

    @pytest.mark.unit
    def test_unknown_name_falls_back_to_info(self) -> None:
        """Unrecognized names resolve to INFO."""
        assert parse_level("chatty") == logging.INFO
