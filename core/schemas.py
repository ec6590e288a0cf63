"""
Normalized Data Schemas

This module defines the Pydantic models shared across the rate streamer.

Key Principle:
    Gate.io ticker frames carry prices as strings with exchange-specific
    field names (currency_pair, lowest_ask, highest_bid). Everything past
    the normalizer works with these schemas instead, so consumers of the
    `updateRate` event never see the wire format.

Models:
    - NormalizedRate: Buy/sell rate for one asset pair ({from, to, buy, sell})
    - PriceUpdate: One processed ticker update (price, delta, direction, rate)
    - ConnectionState: Lifecycle state of the streaming connection
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


# ============================================
# Connection State
# ============================================

class ConnectionState(str, Enum):
    """
    Lifecycle state of the streaming connection.

    Transitions:
        CLOSED -> CONNECTING -> OPEN -> CLOSING -> CLOSED
        CONNECTING -> CLOSED (transport construction failed)
    """

    CLOSED = "closed"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


# ============================================
# Normalized Rate Schema
# ============================================

class NormalizedRate(BaseModel):
    """
    Normalized Rate Data Model

    The rate emitted with every `updateRate` event. Immutable once built.

    Attributes:
        from_asset: Base asset (serialized as "from")
        to_asset: Quote asset (serialized as "to")
        buy: Price to buy the base asset (lowest ask, or last trade price)
        sell: Price to sell the base asset (highest bid, or last trade price)

    Example:
        >>> rate = NormalizedRate(**{"from": "BTC", "to": "USDT", "buy": 50001.0, "sell": 49999.0})
        >>> rate.model_dump(by_alias=True)
        {'from': 'BTC', 'to': 'USDT', 'buy': 50001.0, 'sell': 49999.0}
    """

    from_asset: str = Field(
        ...,
        alias="from",
        min_length=1,
        description="Base asset",
        examples=["BTC", "ETH"]
    )

    to_asset: str = Field(
        ...,
        alias="to",
        min_length=1,
        description="Quote asset",
        examples=["USDT"]
    )

    buy: float = Field(
        ...,
        description="Buy price (lowest ask, falls back to last trade price)"
    )

    sell: float = Field(
        ...,
        description="Sell price (highest bid, falls back to last trade price)"
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "from": "BTC",
                "to": "USDT",
                "buy": 50001.0,
                "sell": 49999.0
            }
        }
    )


# ============================================
# Price Update Schema
# ============================================

class PriceUpdate(BaseModel):
    """
    One processed ticker update.

    Produced by the normalizer for every accepted `spot.tickers` update.
    `direction` feeds the console progress line only; consumers of the
    rate event receive `rate`.

    Attributes:
        pair: Gate.io pair (e.g. "BTC_USDT")
        price: Last trade price from this frame
        previous_price: Last price seen for the pair before this frame
        delta: price - previous_price (0.0 on first sighting)
        direction: "=" for no change, "+" for up, "-" for down
        rate: The normalized rate to publish
        timestamp: Frame event time in UTC, if the frame carried one
    """

    pair: str
    price: float
    previous_price: float
    delta: float
    direction: Literal["=", "+", "-"]
    rate: NormalizedRate
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)
