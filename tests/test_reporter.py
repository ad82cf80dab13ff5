"""Tests for the ExecutionReporter class."""

import pytest

from config.strategy_params import StrategyKind
from src.execution.reporter import ExecutionReporter
from src.models import LegRole, PendingTransfer, TradeSide, VenuePrice
from src.scanner.arbitrage import detect_arbitrage
from src.scanner.opportunity import SandwichOpportunity
from src.scanner.sandwich import detect_sandwich


@pytest.fixture
def reporter():
    """Create a reporter with the default trade size."""
    return ExecutionReporter()


@pytest.fixture
def arbitrage_opportunity():
    """Create the ETH-USDC arbitrage opportunity."""
    price = VenuePrice(pair_name="ETH-USDC", price_a=3420.75, price_b=3440.25)
    return detect_arbitrage([price], 0.5)[0]


@pytest.fixture
def sandwich_opportunity():
    """Create the large ETH buy sandwich opportunity."""
    transfer = PendingTransfer(
        id="tx3",
        sender="Wallet3",
        pair_name="ETH-USDC",
        side=TradeSide.BUY,
        amount=100000.0,
        expected_impact=0.015,
    )
    return detect_sandwich([transfer], min_amount=1000, min_profit=50)[0]


class TestReportArbitrage:
    """Tests for arbitrage plans."""

    def test_buy_then_sell_legs(self, reporter, arbitrage_opportunity):
        """Test the plan buys on the cheap venue then sells on the dear one."""
        plan = reporter.report(arbitrage_opportunity)

        assert plan.strategy == StrategyKind.ARBITRAGE
        assert plan.instrument == "ETH-USDC"
        assert [leg.role for leg in plan.legs] == [LegRole.BUY, LegRole.SELL]

        buy, sell = plan.legs
        assert buy.side == TradeSide.BUY
        assert buy.venue == "DEX-A"
        assert buy.price == 3420.75
        assert buy.amount == 1.0
        assert sell.side == TradeSide.SELL
        assert sell.venue == "DEX-B"
        assert sell.price == 3440.25

    def test_estimated_profit_per_unit(self, reporter, arbitrage_opportunity):
        """Test profit is the price difference per unit, fees excluded."""
        plan = reporter.report(arbitrage_opportunity)

        assert plan.estimated_profit == pytest.approx(19.5)
        assert plan.value_metric == pytest.approx(arbitrage_opportunity.spread_pct)

    def test_trade_size_scales_profit(self, arbitrage_opportunity):
        """Test a larger trade size scales legs and profit."""
        plan = ExecutionReporter(arbitrage_trade_size=2.0).report(arbitrage_opportunity)

        assert plan.legs[0].amount == 2.0
        assert plan.estimated_profit == pytest.approx(39.0)

    def test_summary_and_notes(self, reporter, arbitrage_opportunity):
        """Test the plan carries a summary and execution notes."""
        plan = reporter.report(arbitrage_opportunity)

        assert "ETH-USDC" in plan.summary
        assert "DEX-A" in plan.summary
        assert plan.notes

    def test_zero_spread_reported_as_is(self, reporter):
        """Test a zero-profit opportunity still produces a plan."""
        price = VenuePrice(pair_name="SOL-USDC", price_a=136.25, price_b=136.25)
        opportunity = detect_arbitrage([price], 0.0)[0]

        plan = reporter.report(opportunity)

        assert plan.estimated_profit == 0.0
        assert plan.value_metric == 0.0


class TestReportSandwich:
    """Tests for sandwich plans."""

    def test_front_victim_back_legs(self, reporter, sandwich_opportunity):
        """Test the plan wraps the victim with front and back runs."""
        plan = reporter.report(sandwich_opportunity)

        assert plan.strategy == StrategyKind.SANDWICH
        assert [leg.role for leg in plan.legs] == [
            LegRole.FRONT_RUN,
            LegRole.VICTIM,
            LegRole.BACK_RUN,
        ]

        front, victim, back = plan.legs
        assert front.side == TradeSide.BUY
        assert front.amount == pytest.approx(10000.0)
        assert victim.ours is False
        assert victim.amount == 100000.0
        assert back.side == TradeSide.SELL
        assert back.amount == pytest.approx(10000.0)

    def test_estimated_profit(self, reporter, sandwich_opportunity):
        """Test profit is carried from detection."""
        plan = reporter.report(sandwich_opportunity)

        assert plan.estimated_profit == pytest.approx(1050.0)
        assert plan.value_metric == pytest.approx(1050.0)

    def test_negative_profit_reported_as_is(self, reporter, sandwich_opportunity):
        """Test the reporter does not filter loss-making opportunities."""
        losing = SandwichOpportunity(
            victim=sandwich_opportunity.victim,
            front_side=TradeSide.BUY,
            back_side=TradeSide.SELL,
            front_amount=10000.0,
            estimated_profit=-12.5,
        )

        plan = reporter.report(losing)

        assert plan.estimated_profit == -12.5

    def test_plan_is_serializable(self, reporter, sandwich_opportunity):
        """Test the plan serializes to JSON."""
        plan = reporter.report(sandwich_opportunity)

        assert '"front_run"' in plan.to_json()


class TestReportUnsupported:
    """Tests for unsupported inputs."""

    def test_unknown_type_raises(self, reporter):
        """Test non-opportunity objects are rejected."""
        with pytest.raises(TypeError):
            reporter.report(object())

    def test_report_is_pure(self, reporter, arbitrage_opportunity):
        """Test reporting twice yields equivalent plans."""
        first = reporter.report(arbitrage_opportunity)
        second = reporter.report(arbitrage_opportunity)

        assert first.legs == second.legs
        assert first.estimated_profit == second.estimated_profit
