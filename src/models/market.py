"""Market snapshot models sampled once per tick."""

import math
from dataclasses import dataclass
from enum import Enum


class TradeSide(str, Enum):
    """Direction of a trade."""
    BUY = "buy"
    SELL = "sell"

    @property
    def opposite(self) -> "TradeSide":
        """The side that reverses this one."""
        return TradeSide.SELL if self is TradeSide.BUY else TradeSide.BUY


@dataclass(frozen=True)
class VenuePrice:
    """
    The same instrument quoted on two venues at one instant.

    Instances come straight from a snapshot source and are not validated on
    construction; detectors skip items where ``is_valid`` is False.
    """

    pair_name: str
    price_a: float
    price_b: float
    venue_a: str = "DEX-A"
    venue_b: str = "DEX-B"

    @property
    def is_valid(self) -> bool:
        """Both quotes must be finite and positive, on two distinct venues."""
        if self.venue_a == self.venue_b:
            return False
        return all(
            isinstance(p, (int, float)) and math.isfinite(p) and p > 0
            for p in (self.price_a, self.price_b)
        )

    @property
    def mean_price(self) -> float:
        """Average of the two venue quotes."""
        return self.price_a / 2.0 + self.price_b / 2.0

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "pair_name": self.pair_name,
            "price_a": self.price_a,
            "price_b": self.price_b,
            "venue_a": self.venue_a,
            "venue_b": self.venue_b,
        }


@dataclass(frozen=True)
class PendingTransfer:
    """An observed pending transaction in the mempool."""

    id: str
    sender: str
    pair_name: str
    side: TradeSide
    amount: float
    expected_impact: float  # fraction of price moved, 0.015 = 1.5%

    @property
    def is_valid(self) -> bool:
        """Amount must be non-negative and impact within [0, 1]."""
        if not isinstance(self.side, TradeSide):
            return False
        if not isinstance(self.amount, (int, float)) or not math.isfinite(self.amount):
            return False
        if not isinstance(self.expected_impact, (int, float)):
            return False
        return self.amount >= 0 and 0.0 <= self.expected_impact <= 1.0

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "id": self.id,
            "sender": self.sender,
            "pair_name": self.pair_name,
            "side": self.side.value if isinstance(self.side, TradeSide) else self.side,
            "amount": self.amount,
            "expected_impact": self.expected_impact,
        }
