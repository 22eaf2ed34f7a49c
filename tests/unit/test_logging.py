"""
Unit Tests for the Logging Module

Run with:
    pytest tests/unit/test_logging.py -v
"""

import logging

import pytest

from core.logging import get_logger, log_api_response, logger, set_log_level


@pytest.fixture
def restore_levels():
    app_level = logger.level
    root_level = logging.getLogger().level
    yield
    logger.setLevel(app_level)
    logging.getLogger().setLevel(root_level)


class TestLoggers:

    def test_child_loggers_share_the_application_prefix(self):
        assert get_logger("services.rsi_monitor").name == "rsimonitor.services.rsi_monitor"
        assert logger.name == "rsimonitor"


class TestSetLogLevel:

    def test_switches_app_and_root_levels(self, restore_levels):
        set_log_level("debug")

        assert logger.level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, restore_levels):
        set_log_level("LOUD")

        assert logger.level == logging.INFO

    def test_debug_level_shows_api_timings(self, restore_levels, caplog):
        set_log_level("DEBUG")

        with caplog.at_level(logging.DEBUG, logger="rsimonitor"):
            log_api_response("binance", "/api/v3/klines", 200, 0.3421)

        assert "status=200 in 0.342s" in caplog.text
