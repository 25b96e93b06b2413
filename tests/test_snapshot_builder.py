"""
Unit tests for the snapshot builder.

Tests the merge policy for every success/failure combination.
"""

import threading
import pytest
from unittest.mock import Mock

from btc_ticker.core.fetcher import FetchError, StatusError, TransportError
from btc_ticker.core.snapshot_builder import SnapshotBuilder


@pytest.fixture
def stats_error():
    return TransportError("https://stats.example", ConnectionError("down"))


@pytest.fixture
def price_error():
    return StatusError("https://price.example", 503, "Service Unavailable")


def make_builder(stats_result, price_result, now, **kwargs):
    """Builder whose fetches return a value or raise an exception."""
    fetch_stats = Mock(side_effect=stats_result) if isinstance(stats_result, Exception) \
        else Mock(return_value=stats_result)
    fetch_price = Mock(side_effect=price_result) if isinstance(price_result, Exception) \
        else Mock(return_value=price_result)
    return SnapshotBuilder(fetch_stats, fetch_price, clock=lambda: now, **kwargs)


class TestPartialMerge:
    """Tests for the default partial-success merge."""

    def test_both_succeed(self, now, sample_stats, sample_price):
        """Test both fields set and no error."""
        snapshot = make_builder(sample_stats, sample_price, now).build_snapshot()

        assert snapshot.error is None
        assert snapshot.stats == sample_stats
        assert snapshot.price == sample_price
        assert snapshot.fetched_at == now

    def test_stats_fails(self, now, sample_price, stats_error):
        """Test price kept when the block-chain fetch fails."""
        snapshot = make_builder(stats_error, sample_price, now).build_snapshot()

        assert snapshot.error is stats_error
        assert snapshot.stats is None
        assert snapshot.price == sample_price

    def test_price_fails(self, now, sample_stats, price_error):
        """Test stats kept when the price fetch fails."""
        snapshot = make_builder(sample_stats, price_error, now).build_snapshot()

        assert snapshot.error is price_error
        assert snapshot.stats == sample_stats
        assert snapshot.price is None

    def test_both_fail_prefers_stats_error(self, now, stats_error, price_error):
        """Test the block-chain error wins when both fail."""
        snapshot = make_builder(stats_error, price_error, now).build_snapshot()

        assert snapshot.error is stats_error
        assert snapshot.stats is None
        assert snapshot.price is None
        assert not snapshot.has_data

    def test_unexpected_exception_is_wrapped(self, now, sample_price):
        """Test a non-FetchError exception does not escape."""
        snapshot = make_builder(KeyError("boom"), sample_price, now).build_snapshot()

        assert isinstance(snapshot.error, FetchError)
        assert snapshot.price == sample_price

    def test_both_fetches_always_run(self, now, stats_error, sample_price):
        """Test a failing fetch does not cancel the other one."""
        builder = make_builder(stats_error, sample_price, now)

        builder.build_snapshot()

        builder.fetch_stats.assert_called_once()
        builder.fetch_price.assert_called_once()

    def test_fetches_run_concurrently(self, now, sample_stats, sample_price):
        """Test both fetches are in flight at the same time."""
        barrier = threading.Barrier(2, timeout=5)

        def fetch_stats():
            barrier.wait()
            return sample_stats

        def fetch_price():
            barrier.wait()
            return sample_price

        snapshot = SnapshotBuilder(fetch_stats, fetch_price, clock=lambda: now).build_snapshot()

        assert snapshot.error is None
        assert snapshot.has_data


class TestFailFastMerge:
    """Tests for the fail-fast merge policy."""

    def test_single_failure_discards_everything(self, now, sample_price, stats_error):
        """Test no field survives an error."""
        snapshot = make_builder(stats_error, sample_price, now, merge_policy="fail_fast").build_snapshot()

        assert snapshot.error is stats_error
        assert snapshot.stats is None
        assert snapshot.price is None

    def test_success_unchanged(self, now, sample_stats, sample_price):
        """Test fail-fast keeps a fully successful snapshot."""
        snapshot = make_builder(sample_stats, sample_price, now, merge_policy="fail_fast").build_snapshot()

        assert snapshot.error is None
        assert snapshot.stats == sample_stats
        assert snapshot.price == sample_price

    def test_unknown_policy(self, now):
        """Test an unknown merge policy is rejected at construction."""
        with pytest.raises(ValueError):
            make_builder(None, None, now, merge_policy="newest")
