"""
Display loop.

Holds the most recent Snapshot and re-renders the status line on a short
tick, so the block age and fetch age keep counting between fetches.
"""

import queue
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional
import structlog

from btc_ticker.core.presenter import Presenter
from btc_ticker.models.snapshot import BlockchainStats, PriceInfo, Snapshot
from btc_ticker.utils.formatting import format_age, format_dollars, format_integer
from btc_ticker.utils.time import get_current_utc, seconds_since

logger = structlog.get_logger(__name__)

DEFAULT_TICK_SECONDS = 1 / 3


def render_title(snapshot: Snapshot, now: datetime) -> Optional[str]:
    """
    Render the status line for ``snapshot``.

    Returns None when the snapshot carries neither price nor block data.
    """
    fetch_age = format_age(seconds_since(snapshot.fetched_at, now))

    if snapshot.stats is not None:
        height = format_integer(snapshot.stats.height)
        block_age = format_age(seconds_since(snapshot.stats.observed_time, now) / 60)

    if snapshot.price is not None and snapshot.stats is not None:
        return f"{format_dollars(snapshot.price.bitcoin_usd)} @ {height} ({block_age}m/{fetch_age}s)"
    if snapshot.price is not None:
        return f"{format_dollars(snapshot.price.bitcoin_usd)} ({fetch_age}s)"
    if snapshot.stats is not None:
        return f"@ {height} ({block_age}m/{fetch_age}s)"
    return None


class DisplayLoop:
    """
    Consumer side of the ticker.

    State goes from no data to holding a snapshot on the first receive and
    stays there; each receive replaces the held snapshot. Errors are logged
    once and then cleared from the held copy. Until some price or block data
    has been shown, the error text itself is displayed.
    """

    def __init__(self,
                 presenter: Presenter,
                 channel: Optional["queue.Queue[Snapshot]"] = None,
                 tick_seconds: float = DEFAULT_TICK_SECONDS,
                 sticky_values: bool = False,
                 stop_event: Optional[threading.Event] = None,
                 clock: Callable[[], datetime] = get_current_utc):
        self.presenter = presenter
        self.channel = channel
        self.tick_seconds = tick_seconds
        self.sticky_values = sticky_values
        self.stop_event = stop_event or threading.Event()
        self.clock = clock

        self.held: Optional[Snapshot] = None
        self.displayed: Optional[str] = None
        self._shown_data = False

        # Last good value per source and when it was fetched, used with sticky_values
        self._last_stats: Optional[BlockchainStats] = None
        self._last_price: Optional[PriceInfo] = None
        self._stats_fetched_at: Optional[datetime] = None
        self._price_fetched_at: Optional[datetime] = None

    @property
    def has_data(self) -> bool:
        return self.held is not None

    def receive(self, snapshot: Snapshot) -> None:
        """Replace the held snapshot."""
        if self.sticky_values and snapshot.has_data:
            snapshot = self._fill_from_last_good(snapshot)
        self.held = snapshot

    def _fill_from_last_good(self, snapshot: Snapshot) -> Snapshot:
        """
        Fill a missing source from its last good value.

        The fetch age is reported from the oldest value shown.
        """
        if snapshot.stats is not None:
            self._last_stats = snapshot.stats
            self._stats_fetched_at = snapshot.fetched_at
        if snapshot.price is not None:
            self._last_price = snapshot.price
            self._price_fetched_at = snapshot.fetched_at

        fetch_times = [
            fetched_at
            for value, fetched_at in ((self._last_stats, self._stats_fetched_at),
                                      (self._last_price, self._price_fetched_at))
            if value is not None
        ]
        return replace(
            snapshot,
            stats=self._last_stats,
            price=self._last_price,
            fetched_at=min(fetch_times),
        )

    def tick(self, now: Optional[datetime] = None) -> Optional[str]:
        """Render the held snapshot and push it to the presenter."""
        if self.held is None:
            return None

        now = now or self.clock()
        text = render_title(self.held, now)

        if text is not None:
            self._shown_data = True
        elif self.held.error is not None and not self._shown_data:
            text = str(self.held.error)

        if text is not None:
            self.displayed = text
            self.presenter.set_display_text(text)

        if self.held.error is not None:
            logger.error("Snapshot error", error=str(self.held.error))
            self.held = self.held.without_error()

        return self.displayed

    def wait_for_snapshot(self) -> Optional[Snapshot]:
        """Block up to one tick for a new snapshot."""
        if self.channel is None:
            self.stop_event.wait(self.tick_seconds)
            return None
        try:
            return self.channel.get(timeout=self.tick_seconds)
        except queue.Empty:
            return None

    def run(self) -> None:
        """Receive-or-tick loop, until stopped."""
        logger.info("Display loop started", tick_seconds=self.tick_seconds)

        while not self.stop_event.is_set():
            snapshot = self.wait_for_snapshot()
            if snapshot is not None:
                self.receive(snapshot)
            self.tick()

        logger.info("Display loop stopped")
