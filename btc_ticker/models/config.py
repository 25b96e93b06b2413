"""Configuration management using Pydantic settings."""

from datetime import timedelta
from typing import Literal, Optional
from urllib.parse import urlparse
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class TickerConfig(BaseSettings):
    """Configuration for the Bitcoin status ticker."""

    # ==================== Endpoint Settings ====================
    stats_url: str = Field(
        default="https://api.blockcypher.com/v1/btc/main",
        description="Block-chain info endpoint"
    )
    price_url: str = Field(
        default="https://api.coingecko.com/api/v3/simple/price?ids=bitcoin&vs_currencies=usd",
        description="Price endpoint"
    )
    request_timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    # Payload field names of the block-chain info endpoint
    stats_hash_field: str = Field(default="hash", description="Field holding the block hash")
    stats_height_field: str = Field(default="height", description="Field holding the block height")
    stats_time_field: str = Field(default="time", description="Field holding the block time")

    # ==================== Polling Settings ====================
    default_delay_seconds: float = Field(default=60.0, gt=0, description="Delay when block age is unknown")
    min_delay_seconds: float = Field(default=60.0, gt=0, description="Shortest delay between fetches")
    max_delay_seconds: float = Field(default=900.0, gt=0, description="Longest delay between fetches")
    merge_policy: Literal["partial", "fail_fast"] = Field(
        default="partial",
        description="Keep partial results on single failures, or discard the whole snapshot"
    )

    # ==================== Display Settings ====================
    tick_seconds: float = Field(default=1 / 3, gt=0, description="Display refresh interval")
    sticky_values: bool = Field(
        default=False,
        description="Keep the last good price/height when one source fails"
    )

    # ==================== Logging Settings ====================
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size_mb: int = Field(default=10, description="Max log file size in MB")
    log_backup_count: int = Field(default=3, description="Number of log backups")

    class Config:
        env_prefix = "TICKER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @validator('stats_url', 'price_url')
    def validate_url(cls, v):
        """Endpoints must be absolute http(s) URLs."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"not an http(s) URL: {v!r}")
        return v

    @property
    def default_delay(self) -> timedelta:
        return timedelta(seconds=self.default_delay_seconds)

    @property
    def min_delay(self) -> timedelta:
        return timedelta(seconds=self.min_delay_seconds)

    @property
    def max_delay(self) -> timedelta:
        return timedelta(seconds=self.max_delay_seconds)

    @property
    def stats_field_map(self) -> dict:
        """Map of payload field names onto BlockchainStats attributes."""
        return {
            "hash": self.stats_hash_field,
            "height": self.stats_height_field,
            "time": self.stats_time_field,
        }

    def get_source_info(self) -> dict:
        """Get information about the configured endpoints."""
        return {
            "stats_url": self.stats_url,
            "price_url": self.price_url,
            "stats_fields": self.stats_field_map,
            "request_timeout": self.request_timeout,
            "merge_policy": self.merge_policy,
        }
