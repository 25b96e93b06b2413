"""Utility functions and helpers."""

from btc_ticker.utils.logging import setup_logging
from btc_ticker.utils.formatting import format_dollars, format_integer, format_age
from btc_ticker.utils.time import to_utc_timestamp, get_current_utc

__all__ = [
    "setup_logging",
    "format_dollars",
    "format_integer",
    "format_age",
    "to_utc_timestamp",
    "get_current_utc",
]
