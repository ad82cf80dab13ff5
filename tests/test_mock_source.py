"""Tests for the mock snapshot source."""

import pytest

from src.api.mock_source import (
    MockSnapshotSource,
    create_sample_prices,
    create_sample_transfers,
)
from src.api.source import SourceError
from src.models import VenuePrice


class TestMockSnapshotSource:
    """Tests for MockSnapshotSource class."""

    @pytest.mark.asyncio
    async def test_serves_configured_data(self):
        source = MockSnapshotSource(
            prices=create_sample_prices(),
            transfers=create_sample_transfers(),
        )

        assert len(await source.fetch_prices()) == 3
        assert len(await source.fetch_pending_transfers()) == 3
        assert source.fetch_count == 2

    @pytest.mark.asyncio
    async def test_add_and_clear(self):
        source = MockSnapshotSource()
        source.add_price(VenuePrice(pair_name="SOL-USDC", price_a=1.0, price_b=2.0))

        assert len(await source.fetch_prices()) == 1

        source.clear()

        assert await source.fetch_prices() == []

    @pytest.mark.asyncio
    async def test_returns_copies(self):
        """Test callers cannot mutate the stored snapshot."""
        source = MockSnapshotSource(prices=create_sample_prices())

        prices = await source.fetch_prices()
        prices.clear()

        assert len(await source.fetch_prices()) == 3

    @pytest.mark.asyncio
    async def test_fail_next(self):
        """Test injected failures raise SourceError then recover."""
        source = MockSnapshotSource(prices=create_sample_prices())
        source.fail_next(2)

        for _ in range(2):
            with pytest.raises(SourceError):
                await source.fetch_prices()

        assert len(await source.fetch_prices()) == 3

    @pytest.mark.asyncio
    async def test_fail_always(self):
        source = MockSnapshotSource(prices=create_sample_prices())
        source.fail_always()

        with pytest.raises(SourceError) as exc_info:
            await source.fetch_pending_transfers()
        assert exc_info.value.source == "mock"

        source.fail_always(False)
        assert len(await source.fetch_prices()) == 3


class TestSampleData:
    """Tests for the bundled sample snapshot."""

    def test_sample_prices(self):
        prices = create_sample_prices()

        assert [p.pair_name for p in prices] == ["SOL-USDC", "BTC-USDC", "ETH-USDC"]
        assert all(p.is_valid for p in prices)

    def test_sample_transfers(self):
        transfers = create_sample_transfers()

        assert [t.id for t in transfers] == ["tx1", "tx2", "tx3"]
        assert all(t.is_valid for t in transfers)
