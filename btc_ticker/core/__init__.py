"""Core ticker components."""

from btc_ticker.core.fetcher import (
    FetchError,
    TransportError,
    StatusError,
    DecodeError,
    ResourceFetcher,
)
from btc_ticker.core.snapshot_builder import SnapshotBuilder
from btc_ticker.core.scheduler import PollingScheduler, next_delay
from btc_ticker.core.display import DisplayLoop, render_title
from btc_ticker.core.presenter import Presenter, ConsolePresenter, RecordingPresenter

__all__ = [
    "FetchError",
    "TransportError",
    "StatusError",
    "DecodeError",
    "ResourceFetcher",
    "SnapshotBuilder",
    "PollingScheduler",
    "next_delay",
    "DisplayLoop",
    "render_title",
    "Presenter",
    "ConsolePresenter",
    "RecordingPresenter",
]
