"""
Bitcoin Status Ticker

Polls a block-chain info endpoint and a price endpoint, merges the results
into one snapshot and keeps a one-line status text fresh for a presenter.
"""

__version__ = "1.0.0"
__description__ = "Adaptive Bitcoin price and block height ticker"

from btc_ticker.core.display import DisplayLoop
from btc_ticker.core.fetcher import ResourceFetcher
from btc_ticker.core.scheduler import PollingScheduler, next_delay
from btc_ticker.core.snapshot_builder import SnapshotBuilder
from btc_ticker.models.config import TickerConfig

__all__ = [
    "DisplayLoop",
    "ResourceFetcher",
    "PollingScheduler",
    "SnapshotBuilder",
    "TickerConfig",
    "next_delay",
]
