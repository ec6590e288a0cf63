"""
Unit Tests for the Gate.io API Client and Symbol Loading

These tests verify that:
- get_trading_pairs normalizes and filters the pairs list
- Non-array responses and arrays without usable pair strings are rejected
- _get requires an open session
- GateioTickerClient.load_symbols falls back to the default pairs

Run with:
    pytest tests/unit/test_gateio_api_client.py -v
"""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, patch

from core.config import settings
from core.rate_publisher import NullSink, RatePublisher
from exchanges.gateio.api_client import GateioAPIClient
from exchanges.gateio.ws_client import GateioTickerClient


# ============================================
# Fixtures
# ============================================

@pytest_asyncio.fixture
async def api_client():
    """Create a GateioAPIClient instance for testing"""
    async with GateioAPIClient() as client:
        yield client


@pytest.fixture
def ticker_client():
    return GateioTickerClient(RatePublisher(NullSink(), source_id="gateio"), print_updates=False)


# ============================================
# Tests for get_trading_pairs
# ============================================

class TestGetTradingPairs:
    """Tests for the pairs endpoint"""

    @pytest.mark.asyncio
    async def test_returns_pairs(self, api_client, monkeypatch):
        async def mock_get(url, params=None):
            return ["BTC_USDT", "ETH_USDT"]

        monkeypatch.setattr(api_client, "_get", mock_get)

        assert await api_client.get_trading_pairs() == ["BTC_USDT", "ETH_USDT"]

    @pytest.mark.asyncio
    async def test_requests_configured_url(self, api_client, monkeypatch):
        called = {}

        async def mock_get(url, params=None):
            called["url"] = url
            return []

        monkeypatch.setattr(api_client, "_get", mock_get)
        await api_client.get_trading_pairs()

        assert called["url"] == settings.gateio_pairs_url

    @pytest.mark.asyncio
    async def test_normalizes_and_filters(self, api_client, monkeypatch):
        """Verify slash notation is converted and junk entries dropped"""
        async def mock_get(url, params=None):
            return ["btc/usdt", "ETH_USDT", "BROKEN", "A_B_C"]

        monkeypatch.setattr(api_client, "_get", mock_get)

        assert await api_client.get_trading_pairs() == ["BTC_USDT", "ETH_USDT"]

    @pytest.mark.asyncio
    async def test_rejects_non_array(self, api_client, monkeypatch):
        async def mock_get(url, params=None):
            return {"result": "false", "message": "maintenance"}

        monkeypatch.setattr(api_client, "_get", mock_get)

        with pytest.raises(ValueError, match="Invalid response format"):
            await api_client.get_trading_pairs()

    @pytest.mark.asyncio
    async def test_rejects_non_string_entries(self, api_client, monkeypatch):
        async def mock_get(url, params=None):
            return ["BTC_USDT", 42]

        monkeypatch.setattr(api_client, "_get", mock_get)

        with pytest.raises(ValueError, match="Invalid pair entry"):
            await api_client.get_trading_pairs()

    @pytest.mark.asyncio
    async def test_rejects_array_without_valid_pairs(self, api_client, monkeypatch):
        async def mock_get(url, params=None):
            return ["BROKEN", "A_B_C"]

        monkeypatch.setattr(api_client, "_get", mock_get)

        with pytest.raises(ValueError, match="No valid pairs"):
            await api_client.get_trading_pairs()

    @pytest.mark.asyncio
    async def test_empty_array_is_accepted(self, api_client, monkeypatch):
        async def mock_get(url, params=None):
            return []

        monkeypatch.setattr(api_client, "_get", mock_get)

        assert await api_client.get_trading_pairs() == []

    @pytest.mark.asyncio
    async def test_get_requires_session(self):
        client = GateioAPIClient()
        with pytest.raises(RuntimeError, match="not initialized"):
            await client._get(settings.gateio_pairs_url)


# ============================================
# Tests for symbol loading with fallback
# ============================================

class TestLoadSymbols:
    """Tests for GateioTickerClient.load_symbols"""

    @pytest.mark.asyncio
    async def test_uses_fetched_pairs(self, ticker_client):
        with patch.object(GateioAPIClient, "get_trading_pairs", new_callable=AsyncMock) as mock_pairs:
            mock_pairs.return_value = ["SOL_USDT", "XRP_USDT"]
            symbols = await ticker_client.load_symbols()

        assert symbols == ["SOL_USDT", "XRP_USDT"]
        assert ticker_client.symbols == symbols

    @pytest.mark.asyncio
    async def test_non_array_payload_uses_defaults(self, ticker_client):
        """Verify a non-array response yields the three default pairs"""
        with patch.object(GateioAPIClient, "_get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = {"unexpected": True}
            symbols = await ticker_client.load_symbols()

        assert symbols == ["BTC_USDT", "ETH_USDT", "BNB_USDT"]

    @pytest.mark.asyncio
    async def test_array_of_non_strings_uses_defaults(self, ticker_client):
        """Verify an array with no usable pair strings yields the three default pairs"""
        with patch.object(GateioAPIClient, "_get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = [{"id": "BTC_USDT"}, 42]
            symbols = await ticker_client.load_symbols()

        assert symbols == ["BTC_USDT", "ETH_USDT", "BNB_USDT"]

    @pytest.mark.asyncio
    async def test_network_failure_uses_defaults(self, ticker_client):
        with patch.object(GateioAPIClient, "_get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = RuntimeError("Failed to fetch after 3 attempts")
            symbols = await ticker_client.load_symbols()

        assert symbols == ["BTC_USDT", "ETH_USDT", "BNB_USDT"]
