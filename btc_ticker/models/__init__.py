"""Data models and configuration."""

from btc_ticker.models.config import TickerConfig
from btc_ticker.models.snapshot import BlockchainStats, PriceInfo, Snapshot
from btc_ticker.models.payloads import StatsPayload, PricePayload

__all__ = [
    "TickerConfig",
    "BlockchainStats",
    "PriceInfo",
    "Snapshot",
    "StatsPayload",
    "PricePayload",
]
