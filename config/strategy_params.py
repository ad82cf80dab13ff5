"""Scan configuration for MEV opportunity detection."""

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

if TYPE_CHECKING:
    from config.settings import Settings


class ConfigurationError(Exception):
    """Raised at startup when the scan configuration is invalid."""


class StrategyKind(str, Enum):
    """Supported detection strategies."""
    ARBITRAGE = "arbitrage"
    SANDWICH = "sandwich"


class ScanConfig(BaseModel):
    """Immutable configuration for one scan loop."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    strategy: StrategyKind = Field(
        default=StrategyKind.ARBITRAGE,
        description="Detection strategy run by the loop"
    )

    # Arbitrage
    threshold: float = Field(
        default=0.5,
        ge=0,
        description="Minimum cross-venue spread in percent"
    )
    arbitrage_trade_size: float = Field(
        default=1.0,
        gt=0,
        description="Units bought and sold per reported arbitrage plan"
    )

    # Sandwich
    min_victim_amount: float = Field(
        default=1000.0,
        ge=0,
        description="Ignore pending transfers smaller than this"
    )
    min_profit_threshold: float = Field(
        default=50.0,
        description="Minimum estimated profit for a sandwich"
    )
    front_run_fraction: float = Field(
        default=0.1,
        gt=0,
        le=1,
        description="Front-run size as a fraction of the victim amount"
    )
    slippage_factor: float = Field(
        default=0.7,
        gt=0,
        le=1,
        description="Share of the price impact kept after slippage and fees"
    )

    # Scheduling
    poll_interval_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Sleep between ticks"
    )
    poll_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="A poll slower than this counts as a failed poll"
    )
    max_results: Optional[int] = Field(
        default=None,
        ge=0,
        description="Report at most this many opportunities per tick"
    )

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "ScanConfig":
        """Build a config from application settings, applying overrides last."""
        values = {
            "strategy": settings.strategy,
            "threshold": settings.target_spread_pct,
            "poll_interval_seconds": settings.poll_interval_seconds,
            "poll_timeout_seconds": settings.poll_timeout_seconds,
            "min_victim_amount": settings.min_victim_amount,
            "min_profit_threshold": settings.min_profit_threshold,
            "front_run_fraction": settings.front_run_fraction,
            "slippage_factor": settings.slippage_factor,
            "max_results": settings.max_results,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return load_scan_config(**values)


def load_scan_config(**values: Any) -> ScanConfig:
    """
    Validate configuration values into a ScanConfig.

    Missing values fall back to defaults; invalid ones raise ConfigurationError.
    """
    cleaned = {k: v for k, v in values.items() if v is not None}
    try:
        return ScanConfig(**cleaned)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid scan configuration: {problems}") from e


# Default scan configuration
DEFAULT_SCAN_CONFIG = ScanConfig()
