"""
Unit Tests for Configuration Module

These tests verify that the configuration system works correctly:
- Default values match the Gate.io stream's fixed behaviour
- Comma-separated settings are parsed into lists
- Validation catches invalid configurations

Run with:
    pytest tests/unit/test_config.py -v
"""

import pytest
from core.config import Settings, settings, validate_configuration


@pytest.fixture
def defaults():
    """Settings built from defaults only (no .env, no environment)"""
    return Settings(_env_file=None)


class TestDefaults:
    """Test built-in defaults"""

    def test_gateio_endpoints(self, defaults):
        """Verify the fixed Gate.io endpoints"""
        assert defaults.gateio_ws_url == "wss://api.gateio.ws/ws/v4/"
        assert defaults.gateio_pairs_url == "https://data.gateapi.io/api2/1/pairs"

    def test_default_symbols_are_three_pairs(self, defaults):
        """Verify the fallback pair list"""
        assert defaults.default_symbols_list == ["BTC_USDT", "ETH_USDT", "BNB_USDT"]

    def test_ignore_symbols_empty_by_default(self, defaults):
        """Verify nothing is ignored unless configured"""
        assert defaults.ignore_symbols_list == []

    def test_lifecycle_timings(self, defaults):
        """Verify keepalive and reconnect timings"""
        assert defaults.keepalive_interval == 5.0
        assert defaults.reconnect_short_delay == 2.0
        assert defaults.reconnect_long_delay == 30.0
        assert defaults.reconnect_short_attempts == 4
        assert defaults.reconnect_max_attempts == 60

    def test_source_id(self, defaults):
        """Verify rates are tagged as gateio"""
        assert defaults.rate_source_id == "gateio"


class TestListParsing:
    """Test comma-separated settings"""

    def test_symbols_are_stripped_and_uppercased(self):
        """Verify whitespace and case are normalized"""
        s = Settings(_env_file=None, default_symbols=" btc_usdt , eth_usdt ,,")
        assert s.default_symbols_list == ["BTC_USDT", "ETH_USDT"]

    def test_ignore_symbols_parsed(self):
        """Verify ignored pairs are parsed"""
        s = Settings(_env_file=None, ignore_symbols="DOGE_USDT,SHIB_USDT")
        assert s.ignore_symbols_list == ["DOGE_USDT", "SHIB_USDT"]

    def test_cors_origins_list(self, defaults):
        """Verify CORS origins are split"""
        assert defaults.cors_origins_list == ["http://localhost:3000", "http://localhost:5173"]

    def test_environment_override(self, monkeypatch):
        """Verify environment variables are read case-insensitively"""
        monkeypatch.setenv("KEEPALIVE_INTERVAL", "7.5")
        assert Settings(_env_file=None).keepalive_interval == 7.5


class TestConfigurationValidation:
    """Test configuration validation function"""

    def test_validate_configuration_succeeds(self):
        """Verify validation passes with the active configuration"""
        try:
            validate_configuration()
        except ValueError as e:
            pytest.fail(f"Configuration validation failed: {e}")

    def test_rejects_malformed_default_pair(self, monkeypatch):
        """Verify pairs must be BASE_QUOTE"""
        monkeypatch.setattr(settings, "default_symbols", "BTCUSDT")
        with pytest.raises(ValueError, match="Invalid pair"):
            validate_configuration()

    def test_rejects_malformed_ignored_pair(self, monkeypatch):
        """Verify ignored pairs are validated too"""
        monkeypatch.setattr(settings, "ignore_symbols", "BTC__USDT")
        with pytest.raises(ValueError, match="Invalid pair"):
            validate_configuration()

    def test_rejects_non_websocket_url(self, monkeypatch):
        """Verify the stream URL must be ws:// or wss://"""
        monkeypatch.setattr(settings, "gateio_ws_url", "https://api.gateio.ws/ws/v4/")
        with pytest.raises(ValueError, match="GATEIO_WS_URL"):
            validate_configuration()

    def test_rejects_non_positive_keepalive(self, monkeypatch):
        """Verify timers must be positive"""
        monkeypatch.setattr(settings, "keepalive_interval", 0)
        with pytest.raises(ValueError, match="KEEPALIVE_INTERVAL"):
            validate_configuration()

    def test_rejects_short_attempts_above_max(self, monkeypatch):
        """Verify short attempts cannot exceed the counter ceiling"""
        monkeypatch.setattr(settings, "reconnect_short_attempts", 61)
        with pytest.raises(ValueError, match="RECONNECT_SHORT_ATTEMPTS"):
            validate_configuration()

    def test_rejects_invalid_port(self, monkeypatch):
        """Verify port range check"""
        monkeypatch.setattr(settings, "app_port", 70000)
        with pytest.raises(ValueError, match="Invalid port"):
            validate_configuration()

    def test_rejects_invalid_log_level(self, monkeypatch):
        """Verify log level check"""
        monkeypatch.setattr(settings, "log_level", "LOUD")
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            validate_configuration()
