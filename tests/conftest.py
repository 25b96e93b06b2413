"""Pytest configuration and fixtures for ticker tests."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, Mock

import requests

from btc_ticker.models.snapshot import BlockchainStats, PriceInfo, Snapshot


# ============================================================================
# TIME FIXTURES
# ============================================================================

@pytest.fixture
def now():
    """Fixed 'current' time used across tests."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================

@pytest.fixture
def sample_stats(now):
    """Block mined five minutes before ``now``."""
    return BlockchainStats(
        hash="00000000000000000002a7c4c1e48d76c5a37902165a270156b7a8d72728a054",
        height=800000,
        observed_time=now - timedelta(minutes=5),
    )


@pytest.fixture
def sample_price():
    """Bitcoin at $67,000."""
    return PriceInfo(quotes={"usd": 67000.0, "eur": 61500.0})


@pytest.fixture
def full_snapshot(now, sample_stats, sample_price):
    """Snapshot where both fetches succeeded."""
    return Snapshot(fetched_at=now, stats=sample_stats, price=sample_price)


@pytest.fixture
def sample_stats_payload():
    """BlockCypher-style block-chain info response."""
    return {
        "name": "BTC.main",
        "height": 800000,
        "hash": "00000000000000000002a7c4c1e48d76c5a37902165a270156b7a8d72728a054",
        "time": "2024-01-15T11:55:00Z",
        "latest_url": "https://api.blockcypher.com/v1/btc/main/blocks/000000",
        "peer_count": 250,
    }


@pytest.fixture
def sample_price_payload():
    """CoinGecko-style simple price response."""
    return {"bitcoin": {"usd": 67000.0}}


# ============================================================================
# HTTP FIXTURES
# ============================================================================

def make_response(status_code=200, json_data=None, reason="OK", json_error=None):
    """Build a mock ``requests.Response``."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.reason = reason
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def mock_session():
    """Mock requests session; set ``get.return_value`` or ``get.side_effect``."""
    return MagicMock(spec=requests.Session)


@pytest.fixture(name="make_response")
def make_response_fixture():
    """Factory fixture for mock responses."""
    return make_response
