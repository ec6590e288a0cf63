"""
Console progress line for price updates.

    Pair           Price                   Change
    --------------------------------------------------
    BTC_USDT       50000.50000000      + 100.00000000
"""

from typing import List

from core.schemas import PriceUpdate


def table_header() -> List[str]:
    return ["Pair           Price                   Change", "-" * 50]


def format_price_line(update: PriceUpdate) -> str:
    pair_str = update.pair.ljust(15)
    price_str = f"{update.price:.8f}".ljust(20)
    change_str = f"{update.direction} {abs(update.delta):.8f}"
    return f"{pair_str}{price_str}{change_str}"
