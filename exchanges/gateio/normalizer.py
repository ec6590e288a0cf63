"""
Gate.io Ticker Normalizer

Turns raw `spot.tickers` frames into PriceUpdate objects and keeps the
last observed price per pair so each update carries its delta.

Frame handling:
    - Undecodable JSON: logged and dropped
    - {"event": "subscribe", ...}: subscription ack, dropped
    - {"error": {"message": ...}}: server error, logged and dropped
    - {"channel": "spot.tickers", "event": "update", "result": {...}}: normalized
    - Anything else: ignored

Nothing in here raises; a bad frame never takes the connection down.
"""

import json
import math
from typing import Any, Dict, Optional, Union

from core.logging import get_logger
from core.schemas import NormalizedRate, PriceUpdate
from core.utils.pairs import is_valid_pair, split_pair
from core.utils.time import frame_timestamp

TICKER_CHANNEL = "spot.tickers"


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a Gate.io numeric field ("50000.5", 50000.5).

    Returns None for missing, non-numeric and non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def price_direction(delta: float) -> str:
    if delta == 0:
        return "="
    return "+" if delta > 0 else "-"


class TickerNormalizer:
    """
    Stateful normalizer for Gate.io ticker frames.

    Attributes:
        previous_prices: Last price per pair, only written on accepted updates
    """

    def __init__(self) -> None:
        self.previous_prices: Dict[str, float] = {}
        self.logger = get_logger(__name__)

    def decode(self, raw: Union[str, bytes, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Decode a frame, returning None if it is not a JSON object."""
        if isinstance(raw, dict):
            return raw
        try:
            message = json.loads(raw)
        except (TypeError, ValueError) as e:
            preview = raw[:100] if isinstance(raw, (str, bytes)) else raw
            self.logger.error(f"Failed to parse frame: {preview!r}... Error: {e}")
            return None
        if not isinstance(message, dict):
            self.logger.debug(f"Ignoring non-object frame: {type(message).__name__}")
            return None
        return message

    def normalize(self, raw: Union[str, bytes, Dict[str, Any]]) -> Optional[PriceUpdate]:
        """
        Process one inbound frame.

        Returns:
            PriceUpdate for accepted ticker updates, None for everything else
        """
        message = self.decode(raw)
        if message is None:
            return None

        error = message.get("error")
        if message.get("event") == "subscribe" and not error:
            self.logger.debug(f"Subscription acknowledged: {message.get('result')}")
            return None

        if error:
            detail = error.get("message") if isinstance(error, dict) else error
            self.logger.error(f"Gate.io error: {detail}")
            return None

        if message.get("channel") != TICKER_CHANNEL or message.get("event") != "update":
            return None

        result = message.get("result")
        if not isinstance(result, dict):
            return None

        return self._normalize_ticker(result, frame_timestamp(message))

    def _normalize_ticker(self, result: Dict[str, Any], timestamp) -> Optional[PriceUpdate]:
        pair = result.get("currency_pair")
        current_price = parse_number(result.get("last"))
        if current_price is None:
            return None

        if not is_valid_pair(pair):
            self.logger.warning(f"Ignoring ticker with malformed pair: {pair!r}")
            return None

        previous_price = self.previous_prices.get(pair, current_price)
        delta = current_price - previous_price
        self.previous_prices[pair] = current_price

        base, quote = split_pair(pair)
        # A zero ask/bid means an empty book side, not a price
        rate = NormalizedRate(
            from_asset=base,
            to_asset=quote,
            buy=parse_number(result.get("lowest_ask")) or current_price,
            sell=parse_number(result.get("highest_bid")) or current_price,
        )

        return PriceUpdate(
            pair=pair,
            price=current_price,
            previous_price=previous_price,
            delta=delta,
            direction=price_direction(delta),
            rate=rate,
            timestamp=timestamp,
        )
