"""Action plan models produced by the execution reporter."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config.strategy_params import StrategyKind
from src.models.market import TradeSide


class LegRole(str, Enum):
    """Role of a leg within a plan."""
    BUY = "buy"
    SELL = "sell"
    FRONT_RUN = "front_run"
    VICTIM = "victim"
    BACK_RUN = "back_run"


class ActionLeg(BaseModel):
    """One step of an action plan."""

    role: LegRole = Field(..., description="What this leg does in the plan")
    side: TradeSide = Field(..., description="Trade direction")
    instrument: str = Field(..., description="Pair traded by this leg")
    amount: float = Field(..., description="Size of the leg")
    venue: Optional[str] = Field(None, description="Venue the leg trades on")
    price: Optional[float] = Field(None, description="Expected fill price")
    ours: bool = Field(default=True, description="False for observed third-party legs")

    model_config = ConfigDict(frozen=True)


class ActionPlan(BaseModel):
    """Serializable description of the action a strategy would take."""

    strategy: StrategyKind = Field(..., description="Strategy that produced the plan")
    instrument: str = Field(..., description="Pair the plan trades")
    legs: List[ActionLeg] = Field(default_factory=list, description="Ordered legs")
    estimated_profit: float = Field(..., description="Estimated outcome before fees")
    value_metric: float = Field(..., description="Value the ranker ordered by")
    summary: str = Field(default="", description="One-line human description")
    notes: List[str] = Field(default_factory=list, description="Execution hints")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the plan was produced"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def our_legs(self) -> List[ActionLeg]:
        """Legs the strategy would submit itself."""
        return [leg for leg in self.legs if leg.ours]

    def to_dict(self) -> dict:
        """Convert plan to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        """Serialize plan to a JSON string."""
        return self.model_dump_json()
