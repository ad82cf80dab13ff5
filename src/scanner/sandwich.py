"""Pending-transfer front/back-run detection."""

from typing import Iterable, List

from src.models.market import PendingTransfer
from src.scanner.opportunity import SandwichOpportunity
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.sandwich")

DEFAULT_SLIPPAGE_FACTOR = 0.7
DEFAULT_FRONT_RUN_FRACTION = 0.1


def estimate_profit(
    transfer: PendingTransfer,
    slippage_factor: float = DEFAULT_SLIPPAGE_FACTOR,
) -> float:
    """Profit kept from the victim's price impact after slippage and fees."""
    return transfer.amount * transfer.expected_impact * slippage_factor


def detect_sandwich(
    transfers: Iterable[PendingTransfer],
    min_amount: float,
    min_profit: float,
    slippage_factor: float = DEFAULT_SLIPPAGE_FACTOR,
    front_run_fraction: float = DEFAULT_FRONT_RUN_FRACTION,
) -> List[SandwichOpportunity]:
    """
    Find pending transfers large enough to sandwich profitably.

    The front-run trades on the victim's side so the victim fills at a worse
    price; the back-run reverses it.

    Args:
        transfers: Pending transfers observed this tick
        min_amount: Transfers below this amount are ignored
        min_profit: Minimum estimated profit to report
        slippage_factor: Share of the price impact kept
        front_run_fraction: Front-run size as a fraction of the victim amount

    Returns:
        Opportunities in input order
    """
    opportunities: List[SandwichOpportunity] = []

    for transfer in transfers:
        if not isinstance(transfer, PendingTransfer):
            logger.debug(f"Skipping non-transfer item: {type(transfer).__name__}")
            continue

        if not transfer.is_valid:
            logger.debug(f"Skipping {transfer.id}: malformed transfer")
            continue

        if transfer.amount < min_amount:
            logger.debug(
                f"Skipping {transfer.id}: amount {transfer.amount} < min {min_amount}"
            )
            continue

        profit = estimate_profit(transfer, slippage_factor)
        if profit < min_profit:
            logger.debug(
                f"Skipping {transfer.id}: profit {profit:.2f} < min {min_profit}"
            )
            continue

        opportunities.append(SandwichOpportunity(
            victim=transfer,
            front_side=transfer.side,
            back_side=transfer.side.opposite,
            front_amount=transfer.amount * front_run_fraction,
            estimated_profit=profit,
        ))

    return opportunities
