"""Cross-venue spread detection."""

from typing import Iterable, List

from src.models.market import VenuePrice
from src.scanner.opportunity import ArbitrageOpportunity
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.arbitrage")


def calculate_spread_pct(price: VenuePrice) -> float:
    """
    Relative difference between the two venue quotes, in percent.

    spread_pct = |price_a - price_b| / mean(price_a, price_b) * 100

    Args:
        price: A valid two-venue quote

    Returns:
        Spread percentage (always >= 0)
    """
    return abs(price.price_a - price.price_b) / price.mean_price * 100.0


def detect_arbitrage(
    prices: Iterable[VenuePrice],
    threshold_pct: float,
) -> List[ArbitrageOpportunity]:
    """
    Find quotes whose cross-venue spread reaches the threshold.

    The lower quote is the buy side; on equal quotes venue B buys and venue A
    sells. Output keeps input order. Invalid quotes are skipped.

    Args:
        prices: Two-venue quotes for this tick
        threshold_pct: Minimum spread in percent

    Returns:
        Opportunities in input order
    """
    opportunities: List[ArbitrageOpportunity] = []

    for price in prices:
        if not isinstance(price, VenuePrice):
            logger.debug(f"Skipping non-quote item: {type(price).__name__}")
            continue

        if not price.is_valid:
            logger.debug(
                f"Skipping {price.pair_name}: invalid quotes "
                f"({price.price_a}, {price.price_b})"
            )
            continue

        spread_pct = calculate_spread_pct(price)
        if spread_pct < threshold_pct:
            logger.debug(
                f"Skipping {price.pair_name}: spread {spread_pct:.3f}% "
                f"< threshold {threshold_pct}%"
            )
            continue

        if price.price_a < price.price_b:
            buy_venue, sell_venue = price.venue_a, price.venue_b
        else:
            buy_venue, sell_venue = price.venue_b, price.venue_a

        opportunities.append(ArbitrageOpportunity(
            instrument=price,
            spread_pct=spread_pct,
            buy_venue=buy_venue,
            sell_venue=sell_venue,
        ))

    return opportunities
