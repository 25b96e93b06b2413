"""
HTTP JSON resource fetcher for the block-chain info and price endpoints.

One GET per call, no retries. Every failure is mapped onto ``FetchError`` so
the snapshot builder can degrade instead of crashing.
"""

from typing import Any, Callable, Mapping, Optional, TypeVar
import requests
import structlog
from pydantic import ValidationError

from btc_ticker.models.config import TickerConfig
from btc_ticker.models.payloads import PricePayload, StatsPayload
from btc_ticker.models.snapshot import BlockchainStats, PriceInfo

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class FetchError(Exception):
    """Base class for failures fetching one resource."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """Network or connection failure."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"request to {url} failed: {cause}", url=url)
        self.cause = cause


class StatusError(FetchError):
    """Non-200 HTTP response."""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        status = f"{status_code} {reason}".strip()
        super().__init__(f"unexpected status for {url}: {status}", url=url)
        self.status_code = status_code
        self.reason = reason


class DecodeError(FetchError):
    """Body is not JSON, or not shaped as expected."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"cannot decode response from {url}: {cause}", url=url)
        self.cause = cause


class ResourceFetcher:
    """
    Fetches and decodes the two JSON resources.

    Features:
    - Bounded per-request timeout
    - Unknown payload fields ignored
    - Configurable block-chain payload field names
    """

    def __init__(self,
                 stats_url: str,
                 price_url: str,
                 timeout: float = 30.0,
                 stats_field_map: Optional[Mapping[str, str]] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the fetcher.

        Args:
            stats_url: Block-chain info endpoint
            price_url: Price endpoint
            timeout: Request timeout in seconds
            stats_field_map: Payload field names keyed by hash/height/time
            session: Optional pre-built requests session
        """
        self.stats_url = stats_url
        self.price_url = price_url
        self.timeout = timeout
        self.stats_field_map = dict(stats_field_map) if stats_field_map else None
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: TickerConfig,
                    session: Optional[requests.Session] = None) -> "ResourceFetcher":
        return cls(
            stats_url=config.stats_url,
            price_url=config.price_url,
            timeout=config.request_timeout,
            stats_field_map=config.stats_field_map,
            session=session,
        )

    def fetch(self, url: str, decode: Callable[[Any], T]) -> T:
        """
        GET ``url`` and decode its JSON body with ``decode``.

        Raises:
            TransportError: the request itself failed
            StatusError: the response status was not 200
            DecodeError: the body was not JSON or ``decode`` rejected it
        """
        logger.info("Fetching resource", url=url)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(url, e) from e

        if response.status_code != 200:
            raise StatusError(url, response.status_code, response.reason or "")

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(url, e) from e

        try:
            result = decode(body)
        except (ValidationError, TypeError, ValueError) as e:
            raise DecodeError(url, e) from e

        logger.debug("Resource decoded", url=url, payload=repr(result))
        return result

    def fetch_stats(self) -> BlockchainStats:
        """Fetch the latest block from the block-chain info endpoint."""
        return self.fetch(
            self.stats_url,
            lambda body: StatsPayload.from_response(body, self.stats_field_map).to_stats(),
        )

    def fetch_price(self) -> PriceInfo:
        """Fetch Bitcoin quotes from the price endpoint."""
        return self.fetch(
            self.price_url,
            lambda body: PricePayload.model_validate(body).to_price(),
        )

    def close(self) -> None:
        self.session.close()
