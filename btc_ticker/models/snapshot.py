"""Snapshot data models for the ticker."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Mapping, Optional


@dataclass(frozen=True)
class BlockchainStats:
    """Latest block as reported by the block-chain info endpoint."""
    hash: str
    height: int
    observed_time: datetime


@dataclass(frozen=True)
class PriceInfo:
    """Bitcoin quotes keyed by lowercase currency code."""
    quotes: Mapping[str, float] = field(default_factory=dict)

    def quote(self, currency: str) -> float:
        """Return the quote for ``currency``, or 0.0 when it is absent."""
        value = self.quotes.get(currency.lower())
        return float(value) if value is not None else 0.0

    @property
    def bitcoin_usd(self) -> float:
        return self.quote("usd")


@dataclass(frozen=True)
class Snapshot:
    """
    One merged, timestamped attempt at fetching both resources.

    ``error`` is set if and only if at least one of the two fetches failed.
    Whatever succeeded is kept in ``stats``/``price`` even when ``error`` is set.
    """
    fetched_at: datetime
    stats: Optional[BlockchainStats] = None
    price: Optional[PriceInfo] = None
    error: Optional[Exception] = None

    @property
    def has_data(self) -> bool:
        return self.stats is not None or self.price is not None

    def without_error(self) -> "Snapshot":
        return replace(self, error=None)

    def to_dict(self) -> dict:
        """Serialize for logging and the ``snapshot --json`` command."""
        return {
            "fetched_at": self.fetched_at.isoformat(),
            "stats": {
                "hash": self.stats.hash,
                "height": self.stats.height,
                "time": self.stats.observed_time.isoformat(),
            } if self.stats else None,
            "price": dict(self.price.quotes) if self.price else None,
            "error": str(self.error) if self.error else None,
        }
