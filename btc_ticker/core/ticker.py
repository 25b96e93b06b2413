"""Wires the producer and the display loop together."""

import queue
import threading
from typing import Optional
import requests
import structlog

from btc_ticker.core.display import DisplayLoop
from btc_ticker.core.fetcher import ResourceFetcher
from btc_ticker.core.presenter import Presenter
from btc_ticker.core.scheduler import PollingScheduler
from btc_ticker.core.snapshot_builder import SnapshotBuilder
from btc_ticker.models.config import TickerConfig

logger = structlog.get_logger(__name__)


class Ticker:
    """
    Producer thread plus display loop sharing a single-slot channel and a
    stop event.
    """

    def __init__(self, config: TickerConfig, presenter: Presenter,
                 session: Optional[requests.Session] = None):
        self.config = config
        self.stop_event = threading.Event()
        self.channel: "queue.Queue" = queue.Queue(maxsize=1)

        self.fetcher = ResourceFetcher.from_config(config, session=session)
        self.builder = SnapshotBuilder.from_fetcher(self.fetcher, merge_policy=config.merge_policy)
        self.scheduler = PollingScheduler(
            self.builder,
            self.channel,
            default_delay=config.default_delay,
            min_delay=config.min_delay,
            max_delay=config.max_delay,
            stop_event=self.stop_event,
        )
        self.display = DisplayLoop(
            presenter,
            self.channel,
            tick_seconds=config.tick_seconds,
            sticky_values=config.sticky_values,
            stop_event=self.stop_event,
        )

        logger.info("Ticker initialized", **config.get_source_info())

    def run(self) -> None:
        """Start the producer thread and run the display loop on this thread."""
        self.scheduler.start()
        try:
            self.display.run()
        finally:
            self.stop()

    def stop(self) -> None:
        self.stop_event.set()
        self.scheduler.stop()
        self.fetcher.close()
