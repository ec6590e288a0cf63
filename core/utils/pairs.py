"""
Trading Pair Helpers

Gate.io identifies spot markets as BASE_QUOTE (e.g. BTC_USDT). A pair is
valid only when the separator occurs exactly once and both sides are
non-empty.
"""

from typing import Tuple

PAIR_SEPARATOR = "_"


def is_valid_pair(pair: object) -> bool:
    """Return True if `pair` is a BASE_QUOTE string."""
    if not isinstance(pair, str):
        return False
    parts = pair.split(PAIR_SEPARATOR)
    return len(parts) == 2 and all(parts)


def split_pair(pair: str) -> Tuple[str, str]:
    """
    Split a pair into (base, quote).

    Raises:
        ValueError: If the pair is not of the form BASE_QUOTE

    Example:
        >>> split_pair("BTC_USDT")
        ('BTC', 'USDT')
    """
    if not is_valid_pair(pair):
        raise ValueError(f"Invalid trading pair: {pair!r}")
    base, quote = pair.split(PAIR_SEPARATOR)
    return base, quote


def normalize_pair(pair: str) -> str:
    """
    Bring a pair into Gate.io spot notation.

    The pairs endpoint may answer with either `BTC_USDT` or `btc/usdt`;
    the ticker channel only accepts upper-case underscore form.
    """
    return pair.strip().replace("/", PAIR_SEPARATOR).upper()
