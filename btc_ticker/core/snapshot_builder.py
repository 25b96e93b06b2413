"""Runs both fetches concurrently and merges them into one Snapshot."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional, Tuple
import structlog

from btc_ticker.core.fetcher import FetchError, ResourceFetcher
from btc_ticker.models.snapshot import BlockchainStats, PriceInfo, Snapshot
from btc_ticker.utils.time import get_current_utc

logger = structlog.get_logger(__name__)

MERGE_PARTIAL = "partial"
MERGE_FAIL_FAST = "fail_fast"


class SnapshotBuilder:
    """
    Builds one Snapshot per fetch cycle.

    Both fetches always run to completion. With the ``partial`` merge policy
    each succeeded field is kept; with ``fail_fast`` any error discards both.
    When both fail, the block-chain error wins.
    """

    def __init__(self,
                 fetch_stats: Callable[[], BlockchainStats],
                 fetch_price: Callable[[], PriceInfo],
                 merge_policy: str = MERGE_PARTIAL,
                 clock: Callable[[], datetime] = get_current_utc):
        if merge_policy not in (MERGE_PARTIAL, MERGE_FAIL_FAST):
            raise ValueError(f"Unknown merge policy: {merge_policy}")
        self.fetch_stats = fetch_stats
        self.fetch_price = fetch_price
        self.merge_policy = merge_policy
        self.clock = clock

    @classmethod
    def from_fetcher(cls, fetcher: ResourceFetcher, merge_policy: str = MERGE_PARTIAL) -> "SnapshotBuilder":
        return cls(fetcher.fetch_stats, fetcher.fetch_price, merge_policy=merge_policy)

    @staticmethod
    def _run(fetch: Callable) -> Tuple[Optional[object], Optional[FetchError]]:
        try:
            return fetch(), None
        except FetchError as e:
            return None, e
        except Exception as e:
            # Anything else is a bug in a fetch callable; keep the loop alive
            logger.exception("Unexpected fetch failure")
            return None, FetchError(f"unexpected error: {e}")

    def build_snapshot(self) -> Snapshot:
        """Fetch both resources and merge them. Never raises for fetch failures."""
        fetched_at = self.clock()

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="fetch") as executor:
            stats_future = executor.submit(self._run, self.fetch_stats)
            price_future = executor.submit(self._run, self.fetch_price)
            stats, stats_error = stats_future.result()
            price, price_error = price_future.result()

        error = stats_error or price_error

        if error is not None and self.merge_policy == MERGE_FAIL_FAST:
            stats = price = None

        snapshot = Snapshot(fetched_at=fetched_at, stats=stats, price=price, error=error)

        logger.info("Snapshot built",
                    has_stats=stats is not None,
                    has_price=price is not None,
                    failed=error is not None)
        return snapshot
