"""Tests for opportunity dataclasses."""

import pytest

from src.models import PendingTransfer, TradeSide, VenuePrice
from src.scanner.opportunity import ArbitrageOpportunity, SandwichOpportunity


@pytest.fixture
def eth_price():
    return VenuePrice(pair_name="ETH-USDC", price_a=3420.75, price_b=3440.25)


@pytest.fixture
def victim():
    return PendingTransfer(
        id="tx3",
        sender="Wallet3",
        pair_name="ETH-USDC",
        side=TradeSide.BUY,
        amount=100000.0,
        expected_impact=0.015,
    )


class TestArbitrageOpportunity:
    """Tests for ArbitrageOpportunity."""

    def test_buy_sell_prices(self, eth_price):
        """Test buy/sell prices follow the venue tags."""
        opp = ArbitrageOpportunity(
            instrument=eth_price,
            spread_pct=0.568,
            buy_venue="DEX-A",
            sell_venue="DEX-B",
        )

        assert opp.buy_price == 3420.75
        assert opp.sell_price == 3440.25
        assert opp.price_difference == pytest.approx(19.5)
        assert opp.value == 0.568
        assert opp.pair_name == "ETH-USDC"

    def test_reversed_venues(self, eth_price):
        """Test prices when venue B is the buy side."""
        opp = ArbitrageOpportunity(
            instrument=eth_price,
            spread_pct=0.568,
            buy_venue="DEX-B",
            sell_venue="DEX-A",
        )

        assert opp.buy_price == 3440.25
        assert opp.price_difference == pytest.approx(-19.5)

    def test_negative_spread_rejected(self, eth_price):
        """Test spread must be non-negative."""
        with pytest.raises(ValueError, match="spread_pct"):
            ArbitrageOpportunity(
                instrument=eth_price,
                spread_pct=-0.1,
                buy_venue="DEX-A",
                sell_venue="DEX-B",
            )

    def test_unknown_venue_rejected(self, eth_price):
        """Test venues must belong to the instrument."""
        with pytest.raises(ValueError, match="venues"):
            ArbitrageOpportunity(
                instrument=eth_price,
                spread_pct=0.5,
                buy_venue="DEX-A",
                sell_venue="DEX-C",
            )

    def test_same_venue_rejected(self, eth_price):
        """Test buy and sell venues must differ."""
        with pytest.raises(ValueError):
            ArbitrageOpportunity(
                instrument=eth_price,
                spread_pct=0.5,
                buy_venue="DEX-A",
                sell_venue="DEX-A",
            )

    def test_to_dict(self, eth_price):
        """Test dictionary conversion."""
        opp = ArbitrageOpportunity(
            instrument=eth_price,
            spread_pct=0.568,
            buy_venue="DEX-A",
            sell_venue="DEX-B",
        )

        data = opp.to_dict()

        assert data == {
            "pair_name": "ETH-USDC",
            "buy_venue": "DEX-A",
            "buy_price": 3420.75,
            "sell_venue": "DEX-B",
            "sell_price": 3440.25,
            "spread_pct": 0.568,
        }

    def test_repr(self, eth_price):
        """Test string representation."""
        opp = ArbitrageOpportunity(
            instrument=eth_price,
            spread_pct=0.568,
            buy_venue="DEX-A",
            sell_venue="DEX-B",
        )

        text = repr(opp)

        assert "ETH-USDC" in text
        assert "DEX-A@3420.75" in text
        assert "0.568%" in text

    def test_frozen(self, eth_price):
        """Test opportunities are read-only."""
        opp = ArbitrageOpportunity(
            instrument=eth_price,
            spread_pct=0.568,
            buy_venue="DEX-A",
            sell_venue="DEX-B",
        )

        with pytest.raises(AttributeError):
            opp.spread_pct = 1.0


class TestSandwichOpportunity:
    """Tests for SandwichOpportunity."""

    def test_value_is_profit(self, victim):
        """Test ranking value is the estimated profit."""
        opp = SandwichOpportunity(
            victim=victim,
            front_side=TradeSide.BUY,
            back_side=TradeSide.SELL,
            front_amount=10000.0,
            estimated_profit=1050.0,
        )

        assert opp.value == 1050.0
        assert opp.pair_name == "ETH-USDC"

    def test_back_side_must_reverse(self, victim):
        """Test back_side must be the opposite of front_side."""
        with pytest.raises(ValueError, match="back_side"):
            SandwichOpportunity(
                victim=victim,
                front_side=TradeSide.BUY,
                back_side=TradeSide.BUY,
                front_amount=10000.0,
                estimated_profit=1050.0,
            )

    def test_negative_profit_allowed(self, victim):
        """Test a loss-making opportunity can still be represented."""
        opp = SandwichOpportunity(
            victim=victim,
            front_side=TradeSide.BUY,
            back_side=TradeSide.SELL,
            front_amount=10000.0,
            estimated_profit=-5.0,
        )

        assert opp.value == -5.0

    def test_to_dict(self, victim):
        """Test dictionary conversion."""
        opp = SandwichOpportunity(
            victim=victim,
            front_side=TradeSide.BUY,
            back_side=TradeSide.SELL,
            front_amount=10000.0,
            estimated_profit=1050.0,
        )

        data = opp.to_dict()

        assert data["victim"]["id"] == "tx3"
        assert data["victim"]["side"] == "buy"
        assert data["front_side"] == "buy"
        assert data["back_side"] == "sell"
        assert data["front_amount"] == 10000.0
        assert data["estimated_profit"] == 1050.0

    def test_repr(self, victim):
        """Test string representation."""
        opp = SandwichOpportunity(
            victim=victim,
            front_side=TradeSide.BUY,
            back_side=TradeSide.SELL,
            front_amount=10000.0,
            estimated_profit=1050.0,
        )

        assert "tx3" in repr(opp)
        assert "profit=1050.00" in repr(opp)


class TestSharedVenueLabel:
    """Tests for quotes whose venues carry the same label."""

    def test_same_buy_and_sell_venue_rejected(self):
        price = VenuePrice(pair_name="X", price_a=110.0, price_b=100.0, venue_a="Raydium", venue_b="Raydium")

        with pytest.raises(ValueError, match="venues"):
            ArbitrageOpportunity(
                instrument=price,
                spread_pct=9.524,
                buy_venue="Raydium",
                sell_venue="Raydium",
            )
