"""
Gate.io Spot Connector

Streams Gate.io spot tickers and republishes them as normalized rates.

Structure:
    exchanges/gateio/
    ├── __init__.py      # Public exports
    ├── api_client.py    # Pairs list over REST (aiohttp)
    ├── ws_client.py     # Connection manager, reconnect backoff
    ├── keepalive.py     # Periodic liveness probe
    ├── normalizer.py    # Frame parsing, price deltas, NormalizedRate
    └── display.py       # Console progress line
"""

from .api_client import GateioAPIClient
from .normalizer import TickerNormalizer, parse_number
from .ws_client import GateioTickerClient, ReconnectBackoff, build_subscribe_message

__all__ = [
    "GateioAPIClient",
    "GateioTickerClient",
    "ReconnectBackoff",
    "TickerNormalizer",
    "build_subscribe_message",
    "parse_number",
]
