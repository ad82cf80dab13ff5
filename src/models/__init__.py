"""Data models."""

from src.models.action_plan import ActionLeg, ActionPlan, LegRole
from src.models.market import PendingTransfer, TradeSide, VenuePrice

__all__ = [
    # Snapshot models
    "PendingTransfer",
    "TradeSide",
    "VenuePrice",
    # Plan models
    "ActionLeg",
    "ActionPlan",
    "LegRole",
]
