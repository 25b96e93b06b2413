"""
Adaptive polling scheduler.

Re-polls at half the age of the latest known block, so polling slows down as
the block gets older and speeds up right after a new one, bounded by a floor
and a ceiling.
"""

import queue
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional
import structlog

from btc_ticker.core.snapshot_builder import SnapshotBuilder
from btc_ticker.models.snapshot import Snapshot
from btc_ticker.utils.time import get_current_utc

logger = structlog.get_logger(__name__)

DEFAULT_DELAY = timedelta(minutes=1)
MIN_DELAY = timedelta(minutes=1)
MAX_DELAY = timedelta(minutes=15)

# How often a blocked publish re-checks for shutdown
PUBLISH_POLL_SECONDS = 0.5


def next_delay(previous: Optional[Snapshot],
               now: Optional[datetime] = None,
               default: timedelta = DEFAULT_DELAY,
               minimum: timedelta = MIN_DELAY,
               maximum: timedelta = MAX_DELAY) -> timedelta:
    """
    Compute how long to sleep before the next fetch.

    Args:
        previous: Snapshot of the cycle that just finished
        now: Current time (defaults to UTC now)
        default: Delay used when the block age is unknown or negative
        minimum: Floor applied last
        maximum: Ceiling for the halved block age

    Returns:
        Delay before the next fetch
    """
    delay = default

    if previous is not None and previous.error is None and previous.stats is not None:
        now = now or get_current_utc()
        delay = (now - previous.stats.observed_time) / 2
        if delay < timedelta(0):
            delay = default
        elif delay > maximum:
            delay = maximum

    if delay < minimum:
        delay = minimum

    return delay


class PollingScheduler:
    """
    Producer loop: build a snapshot, publish it, sleep, repeat.

    Snapshots are handed over through a single-slot queue; ``publish`` blocks
    until the consumer has taken the previous one.
    """

    def __init__(self,
                 builder: SnapshotBuilder,
                 channel: "queue.Queue[Snapshot]",
                 default_delay: timedelta = DEFAULT_DELAY,
                 min_delay: timedelta = MIN_DELAY,
                 max_delay: timedelta = MAX_DELAY,
                 stop_event: Optional[threading.Event] = None,
                 clock: Callable[[], datetime] = get_current_utc):
        self.builder = builder
        self.channel = channel
        self.default_delay = default_delay
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.stop_event = stop_event or threading.Event()
        self.clock = clock
        self._thread: Optional[threading.Thread] = None

        # Stats
        self.cycles = 0
        self.errors = 0
        self.last_snapshot: Optional[Snapshot] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self.stop_event.is_set()

    def publish(self, snapshot: Snapshot) -> bool:
        """Hand ``snapshot`` to the consumer. Returns False if stopped first."""
        while not self.stop_event.is_set():
            try:
                self.channel.put(snapshot, timeout=PUBLISH_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def run_cycle(self) -> timedelta:
        """Fetch and publish one snapshot, returning the delay before the next."""
        snapshot = self.builder.build_snapshot()
        self.cycles += 1
        if snapshot.error is not None:
            self.errors += 1
        self.last_snapshot = snapshot

        delay = next_delay(snapshot, self.clock(),
                           default=self.default_delay,
                           minimum=self.min_delay,
                           maximum=self.max_delay)
        self.publish(snapshot)
        logger.info("Sleeping", seconds=delay.total_seconds())
        return delay

    def run(self, max_cycles: Optional[int] = None) -> None:
        """Main scheduler loop, until stopped or ``max_cycles`` is reached."""
        logger.info("Scheduler loop started")

        while not self.stop_event.is_set():
            delay = self.run_cycle()
            if max_cycles is not None and self.cycles >= max_cycles:
                break
            self.stop_event.wait(delay.total_seconds())

        logger.info("Scheduler loop stopped", cycles=self.cycles, errors=self.errors)

    def start(self) -> None:
        """Start the scheduler in a background thread."""
        if self.running:
            return
        self.stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="ticker-producer", daemon=True)
        self._thread.start()
        logger.info("Scheduler started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the scheduler gracefully."""
        self.stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
        logger.info("Scheduler stopped", cycles=self.cycles, errors=self.errors)

    def get_status(self) -> dict:
        """Get scheduler status."""
        return {
            "running": self.running,
            "cycles": self.cycles,
            "errors": self.errors,
            "last_fetch": self.last_snapshot.fetched_at.isoformat() if self.last_snapshot else None,
        }
