"""
Unit Tests for the Logging Helpers

Run with:
    pytest tests/unit/test_logging.py -v
"""

import logging
import pytest

from core.logging import get_logger, log_websocket_event, logger, set_log_level


@pytest.fixture
def restore_levels():
    root = logging.getLogger()
    saved = (logger.level, root.level)
    yield
    logger.setLevel(saved[0])
    root.setLevel(saved[1])


class TestLogLevel:
    """Tests for set_log_level"""

    def test_set_level(self, restore_levels):
        set_log_level("DEBUG")

        assert logger.level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, restore_levels):
        set_log_level("chatty")

        assert logger.level == logging.INFO

    def test_get_logger_is_namespaced(self):
        assert get_logger("exchanges.gateio").name == "gateticker.exchanges.gateio"


class TestWebsocketEvents:
    """Tests for log_websocket_event levels"""

    @pytest.mark.parametrize("event,level", [
        ("connected", logging.INFO),
        ("closed", logging.WARNING),
        ("reconnecting", logging.WARNING),
        ("error", logging.ERROR),
    ])
    def test_event_levels(self, caplog, event, level):
        with caplog.at_level(logging.DEBUG, logger="gateticker"):
            log_websocket_event("gateio", event, details="detail")

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.getMessage() == f"WebSocket: gateio {event} | detail"
