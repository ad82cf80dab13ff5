"""Application settings and configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from config.strategy_params import ConfigurationError, StrategyKind


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Node / feed endpoints
    rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com",
        alias="RPC_URL"
    )
    feed_url: Optional[str] = Field(default=None, alias="FEED_URL")
    rpc_rate_limit: int = Field(default=5, alias="RPC_RATE_LIMIT")

    # Scan defaults
    strategy: StrategyKind = Field(default=StrategyKind.ARBITRAGE, alias="STRATEGY")
    target_spread_pct: float = Field(default=0.5, alias="TARGET_SPREAD_PCT")
    poll_interval_seconds: float = Field(default=3.0, alias="POLL_INTERVAL_SECONDS")
    poll_timeout_seconds: float = Field(default=10.0, alias="POLL_TIMEOUT_SECONDS")
    min_victim_amount: float = Field(default=1000.0, alias="MIN_VICTIM_AMOUNT")
    min_profit_threshold: float = Field(default=50.0, alias="MIN_PROFIT_THRESHOLD")
    front_run_fraction: float = Field(default=0.1, alias="FRONT_RUN_FRACTION")
    slippage_factor: float = Field(default=0.7, alias="SLIPPAGE_FACTOR")
    max_results: Optional[int] = Field(default=None, alias="MAX_RESULTS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def log_path(self) -> Optional[Path]:
        """Get the log file path as a Path object."""
        return Path(self.log_file) if self.log_file else None


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Raises:
        ConfigurationError: If an environment value cannot be parsed
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid settings: {problems}") from e
