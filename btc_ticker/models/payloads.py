"""Wire payloads of the two endpoints, validated with Pydantic."""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional
from pydantic import BaseModel, Field, validator

from btc_ticker.models.snapshot import BlockchainStats, PriceInfo
from btc_ticker.utils.time import to_utc_timestamp


class StatsPayload(BaseModel):
    """
    Block-chain info response.

    ``time`` is either a Unix epoch integer or an RFC-3339 string; both end
    up as a timezone-aware UTC datetime.
    """

    hash: str = Field(..., description="Hash of the latest block")
    height: int = Field(..., ge=0, description="Height of the latest block")
    time: datetime = Field(..., description="Time of the latest block")

    class Config:
        extra = "ignore"

    @validator('time')
    def normalize_time(cls, v):
        return to_utc_timestamp(v)

    @classmethod
    def from_response(cls, raw: Any, field_map: Optional[Mapping[str, str]] = None) -> "StatsPayload":
        """Validate ``raw`` after renaming the configured payload fields."""
        if field_map and isinstance(raw, dict):
            raw = {name: raw.get(source) for name, source in field_map.items() if source in raw}
        return cls.model_validate(raw)

    def to_stats(self) -> BlockchainStats:
        return BlockchainStats(hash=self.hash, height=self.height, observed_time=self.time)


class PricePayload(BaseModel):
    """Simple-price response: ``{"bitcoin": {"usd": 67000.0, ...}}``."""

    bitcoin: Dict[str, Optional[float]] = Field(default_factory=dict)

    class Config:
        extra = "ignore"

    def to_price(self) -> PriceInfo:
        quotes = {code.lower(): value for code, value in self.bitcoin.items() if value is not None}
        return PriceInfo(quotes=quotes)
