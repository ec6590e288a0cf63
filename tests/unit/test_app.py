"""
Unit Tests for the FastAPI Application

The lifespan (and therefore the live Gate.io connection) is not started:
TestClient is used without a context manager.

Run with:
    pytest tests/unit/test_app.py -v
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.main import app, configure_log_level
from core.config import settings
from core.schemas import ConnectionState
from services.event_bus import EventBus
from services.gateio_rates import GateioRateService


@pytest.fixture
def service(monkeypatch):
    svc = GateioRateService(event_bus=EventBus())
    svc.client.symbols = ["BTC_USDT", "ETH_USDT"]
    monkeypatch.setattr("services.gateio_rates._service", svc)
    return svc


@pytest.fixture
def client():
    return TestClient(app)


class TestSystemEndpoints:
    """Tests for / and /health"""

    def test_root(self, client, service):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["source"] == "gateio"
        assert response.json()["environment"] == settings.environment

    def test_health_degraded_when_not_connected(self, client, service):
        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["connection"] == "closed"
        assert data["symbols"] == 2

    def test_health_healthy_when_open(self, client, service):
        service.client.state = ConnectionState.OPEN

        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["reconnect_attempts"] == 1


class TestRateEndpoints:
    """Tests for /symbols and /rates"""

    def test_symbols(self, client, service):
        data = client.get("/symbols").json()
        assert data == {"symbols": ["BTC_USDT", "ETH_USDT"], "ignored": []}

    def test_rates_empty(self, client, service):
        assert client.get("/rates").json() == {"source": "gateio", "rates": {}}

    def test_rate_for_pair(self, client, service):
        service._latest["BTC_USDT"] = {"from": "BTC", "to": "USDT", "buy": 2.0, "sell": 1.0}

        response = client.get("/rates/btc_usdt")

        assert response.status_code == 200
        assert response.json()["buy"] == 2.0

    def test_unknown_pair_404(self, client, service):
        assert client.get("/rates/FOO_BAR").status_code == 404


class TestRuntimeSettings:
    """Tests for DEBUG / LOG_LEVEL handling"""

    def test_app_debug_follows_settings(self):
        assert app.debug == settings.debug

    def test_log_level_from_settings(self, monkeypatch):
        set_level = MagicMock()
        monkeypatch.setattr("app.main.set_log_level", set_level)
        monkeypatch.setattr(settings, "debug", False)
        monkeypatch.setattr(settings, "log_level", "WARNING")

        assert configure_log_level() == "WARNING"
        set_level.assert_called_once_with("WARNING")

    def test_debug_forces_debug_level(self, monkeypatch):
        set_level = MagicMock()
        monkeypatch.setattr("app.main.set_log_level", set_level)
        monkeypatch.setattr(settings, "debug", True)
        monkeypatch.setattr(settings, "log_level", "WARNING")

        assert configure_log_level() == "DEBUG"
        set_level.assert_called_once_with("DEBUG")
