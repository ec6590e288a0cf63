"""
Core Utilities Package

This package contains utility functions and helpers used throughout the application.

Modules:
    - time: Timestamp conversion and normalization utilities
    - pairs: BASE_QUOTE trading pair validation and splitting
"""

from core.utils.time import to_utc_datetime, current_utc_timestamp
from core.utils.pairs import split_pair, is_valid_pair

__all__ = ["to_utc_datetime", "current_utc_timestamp", "split_pair", "is_valid_pair"]
