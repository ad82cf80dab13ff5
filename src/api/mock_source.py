"""Mock snapshot source for testing and demos."""

import asyncio
from typing import List, Optional

from src.api.source import BaseSnapshotSource, SourceError
from src.models.market import PendingTransfer, TradeSide, VenuePrice


class MockSnapshotSource(BaseSnapshotSource):
    """
    Mock implementation of a snapshot source.

    Serves configurable prices and pending transfers, with optional failure and
    delay injection for exercising the scan loop's error handling.
    """

    name = "mock"

    def __init__(
        self,
        prices: Optional[List[VenuePrice]] = None,
        transfers: Optional[List[PendingTransfer]] = None,
    ) -> None:
        self._prices: List[VenuePrice] = list(prices or [])
        self._transfers: List[PendingTransfer] = list(transfers or [])
        self._failures_remaining = 0
        self._fail_forever = False
        self._delay_seconds = 0.0
        self.fetch_count = 0

    def add_price(self, price: VenuePrice) -> None:
        """Add a quote to the mock data store."""
        self._prices.append(price)

    def add_transfer(self, transfer: PendingTransfer) -> None:
        """Add a pending transfer to the mock data store."""
        self._transfers.append(transfer)

    def clear(self) -> None:
        """Clear all mock data."""
        self._prices.clear()
        self._transfers.clear()

    def fail_next(self, count: int = 1) -> None:
        """Make the next ``count`` fetches raise SourceError."""
        self._failures_remaining = count

    def fail_always(self, enabled: bool = True) -> None:
        """Make every fetch raise SourceError until disabled."""
        self._fail_forever = enabled

    def set_delay(self, seconds: float) -> None:
        """Delay every fetch, e.g. to trigger the loop's poll timeout."""
        self._delay_seconds = seconds

    async def _before_fetch(self) -> None:
        self.fetch_count += 1
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        if self._fail_forever:
            raise SourceError("upstream unreachable", source=self.name)
        if self._failures_remaining > 0:
            self._failures_remaining -= 1
            raise SourceError("upstream unreachable", source=self.name)

    async def fetch_prices(self) -> List[VenuePrice]:
        """Return the configured quotes."""
        await self._before_fetch()
        return list(self._prices)

    async def fetch_pending_transfers(self) -> List[PendingTransfer]:
        """Return the configured pending transfers."""
        await self._before_fetch()
        return list(self._transfers)


def create_sample_prices() -> List[VenuePrice]:
    """Create sample two-venue quotes."""
    return [
        # Spread ~0.18%, below the default 0.5% threshold
        VenuePrice(pair_name="SOL-USDC", price_a=136.25, price_b=136.50),
        # Spread ~0.24%, venue B cheaper
        VenuePrice(pair_name="BTC-USDC", price_a=61245.30, price_b=61100.10),
        # Spread ~0.57%, above the default threshold
        VenuePrice(pair_name="ETH-USDC", price_a=3420.75, price_b=3440.25),
    ]


def create_sample_transfers() -> List[PendingTransfer]:
    """Create sample pending transfers."""
    return [
        # Large enough, but profit 28 is below the default 50
        PendingTransfer(
            id="tx1",
            sender="Wallet1",
            pair_name="SOL-USDC",
            side=TradeSide.BUY,
            amount=5000.0,
            expected_impact=0.008,
        ),
        # Too small to sandwich
        PendingTransfer(
            id="tx2",
            sender="Wallet2",
            pair_name="BTC-USDC",
            side=TradeSide.SELL,
            amount=2.5,
            expected_impact=0.003,
        ),
        # Profit 1050
        PendingTransfer(
            id="tx3",
            sender="Wallet3",
            pair_name="ETH-USDC",
            side=TradeSide.BUY,
            amount=100000.0,
            expected_impact=0.015,
        ),
    ]
