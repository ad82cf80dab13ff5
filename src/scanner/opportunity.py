"""Opportunity data models for MEV detection."""

from dataclasses import dataclass

from src.models.market import PendingTransfer, TradeSide, VenuePrice


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """
    A cross-venue price spread large enough to trade.

    Attributes:
        instrument: The two-venue quote the spread was measured on
        spread_pct: |price_a - price_b| / mean(price_a, price_b) * 100
        buy_venue: Venue with the lower quote
        sell_venue: Venue with the higher quote
    """

    instrument: VenuePrice
    spread_pct: float
    buy_venue: str
    sell_venue: str

    def __post_init__(self) -> None:
        """Validate opportunity data after initialization."""
        if self.spread_pct < 0:
            raise ValueError(f"spread_pct must be >= 0, got {self.spread_pct}")
        venues = {self.instrument.venue_a, self.instrument.venue_b}
        if self.buy_venue == self.sell_venue or {self.buy_venue, self.sell_venue} != venues:
            raise ValueError(
                f"buy/sell venues ({self.buy_venue}, {self.sell_venue}) "
                f"must be the instrument's venues {sorted(venues)}"
            )

    @property
    def pair_name(self) -> str:
        return self.instrument.pair_name

    @property
    def buy_price(self) -> float:
        """Quote on the buy venue."""
        if self.buy_venue == self.instrument.venue_a:
            return self.instrument.price_a
        return self.instrument.price_b

    @property
    def sell_price(self) -> float:
        """Quote on the sell venue."""
        if self.sell_venue == self.instrument.venue_a:
            return self.instrument.price_a
        return self.instrument.price_b

    @property
    def price_difference(self) -> float:
        """Per-unit gross profit, fees excluded."""
        return self.sell_price - self.buy_price

    @property
    def value(self) -> float:
        """Ranking metric."""
        return self.spread_pct

    def to_dict(self) -> dict:
        """Convert opportunity to dictionary format."""
        return {
            "pair_name": self.pair_name,
            "buy_venue": self.buy_venue,
            "buy_price": self.buy_price,
            "sell_venue": self.sell_venue,
            "sell_price": self.sell_price,
            "spread_pct": self.spread_pct,
        }

    def __repr__(self) -> str:
        return (
            f"ArbitrageOpportunity({self.pair_name}, "
            f"buy={self.buy_venue}@{self.buy_price:.2f}, "
            f"sell={self.sell_venue}@{self.sell_price:.2f}, "
            f"spread={self.spread_pct:.3f}%)"
        )


@dataclass(frozen=True)
class SandwichOpportunity:
    """
    A pending transfer worth wrapping with a front-run and a back-run.

    Attributes:
        victim: The observed pending transfer
        front_side: Same side as the victim, amplifies its price move
        back_side: Opposite side, unwinds the front-run after the victim lands
        front_amount: Size of the front-run (and of the back-run)
        estimated_profit: amount * expected_impact * slippage factor
    """

    victim: PendingTransfer
    front_side: TradeSide
    back_side: TradeSide
    front_amount: float
    estimated_profit: float

    def __post_init__(self) -> None:
        """Validate opportunity data after initialization."""
        if self.back_side is not self.front_side.opposite:
            raise ValueError(
                f"back_side must reverse front_side ({self.front_side.value}), "
                f"got {self.back_side.value}"
            )

    @property
    def pair_name(self) -> str:
        return self.victim.pair_name

    @property
    def value(self) -> float:
        """Ranking metric."""
        return self.estimated_profit

    def to_dict(self) -> dict:
        """Convert opportunity to dictionary format."""
        return {
            "victim": self.victim.to_dict(),
            "front_side": self.front_side.value,
            "back_side": self.back_side.value,
            "front_amount": self.front_amount,
            "estimated_profit": self.estimated_profit,
        }

    def __repr__(self) -> str:
        return (
            f"SandwichOpportunity({self.victim.id} {self.pair_name}, "
            f"front={self.front_side.value} {self.front_amount:.2f}, "
            f"profit={self.estimated_profit:.2f})"
        )
