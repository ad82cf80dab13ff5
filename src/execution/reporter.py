"""Turns accepted opportunities into action plans."""

from typing import Union

from config.strategy_params import DEFAULT_SCAN_CONFIG, StrategyKind
from src.models import ActionLeg, ActionPlan, LegRole, TradeSide
from src.scanner.opportunity import ArbitrageOpportunity, SandwichOpportunity
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.reporter")

Opportunity = Union[ArbitrageOpportunity, SandwichOpportunity]

ARBITRAGE_NOTES = (
    "Pay a higher priority fee so both legs land before the spread closes",
    "Bundle both legs into one atomic transaction so they succeed or fail together",
)

SANDWICH_NOTES = (
    "Pay a higher priority fee so the front-run lands ahead of the victim",
    "Submit the back-run immediately after the victim lands",
    "Bundle front-run and back-run so neither executes alone",
)


class ExecutionReporter:
    """
    Projects opportunities to action plans.

    Reporting has no side effects; plans describe what would be submitted and
    nothing is sent anywhere. Filtering is the ranker's job, so plans with zero
    or negative profit are reported as-is.
    """

    def __init__(self, arbitrage_trade_size: float = DEFAULT_SCAN_CONFIG.arbitrage_trade_size) -> None:
        """
        Initialize the reporter.

        Args:
            arbitrage_trade_size: Units bought and sold per arbitrage plan
        """
        self._trade_size = arbitrage_trade_size

    def report(self, opportunity: Opportunity) -> ActionPlan:
        """
        Build the action plan for an opportunity.

        Args:
            opportunity: A detected opportunity

        Returns:
            ActionPlan describing the legs and estimated outcome

        Raises:
            TypeError: If the opportunity type is not supported
        """
        logger.debug(f"Reporting {opportunity!r}")
        if isinstance(opportunity, ArbitrageOpportunity):
            return self._report_arbitrage(opportunity)
        if isinstance(opportunity, SandwichOpportunity):
            return self._report_sandwich(opportunity)
        raise TypeError(f"Unsupported opportunity type: {type(opportunity).__name__}")

    def _report_arbitrage(self, opportunity: ArbitrageOpportunity) -> ActionPlan:
        pair = opportunity.pair_name
        size = self._trade_size
        profit = opportunity.price_difference * size

        legs = [
            ActionLeg(
                role=LegRole.BUY,
                side=TradeSide.BUY,
                instrument=pair,
                amount=size,
                venue=opportunity.buy_venue,
                price=opportunity.buy_price,
            ),
            ActionLeg(
                role=LegRole.SELL,
                side=TradeSide.SELL,
                instrument=pair,
                amount=size,
                venue=opportunity.sell_venue,
                price=opportunity.sell_price,
            ),
        ]

        summary = (
            f"{pair}: buy on {opportunity.buy_venue} at {opportunity.buy_price:.2f}, "
            f"sell on {opportunity.sell_venue} at {opportunity.sell_price:.2f} "
            f"(spread {opportunity.spread_pct:.2f}%, est. profit {profit:.2f} excl. fees)"
        )

        return ActionPlan(
            strategy=StrategyKind.ARBITRAGE,
            instrument=pair,
            legs=legs,
            estimated_profit=profit,
            value_metric=opportunity.spread_pct,
            summary=summary,
            notes=list(ARBITRAGE_NOTES),
        )

    def _report_sandwich(self, opportunity: SandwichOpportunity) -> ActionPlan:
        victim = opportunity.victim
        pair = victim.pair_name

        legs = [
            ActionLeg(
                role=LegRole.FRONT_RUN,
                side=opportunity.front_side,
                instrument=pair,
                amount=opportunity.front_amount,
            ),
            ActionLeg(
                role=LegRole.VICTIM,
                side=victim.side,
                instrument=pair,
                amount=victim.amount,
                ours=False,
            ),
            ActionLeg(
                role=LegRole.BACK_RUN,
                side=opportunity.back_side,
                instrument=pair,
                amount=opportunity.front_amount,
            ),
        ]

        summary = (
            f"{pair}: {opportunity.front_side.value} {opportunity.front_amount:.2f} "
            f"before {victim.id} ({victim.side.value} {victim.amount:.2f}), "
            f"{opportunity.back_side.value} {opportunity.front_amount:.2f} after "
            f"(est. profit {opportunity.estimated_profit:.2f})"
        )

        return ActionPlan(
            strategy=StrategyKind.SANDWICH,
            instrument=pair,
            legs=legs,
            estimated_profit=opportunity.estimated_profit,
            value_metric=opportunity.estimated_profit,
            summary=summary,
            notes=list(SANDWICH_NOTES),
        )
