"""Detection strategies selected once per scan loop."""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from config.strategy_params import ScanConfig, StrategyKind
from src.api.source import MarketSnapshotSource
from src.models.market import PendingTransfer, VenuePrice
from src.scanner.arbitrage import detect_arbitrage
from src.scanner.opportunity import ArbitrageOpportunity, SandwichOpportunity
from src.scanner.sandwich import detect_sandwich


class ScanStrategy(ABC):
    """
    Capability interface for one detection strategy.

    A strategy knows which snapshot it needs, how to turn it into
    opportunities, and which number to rank those opportunities by.
    """

    kind: StrategyKind

    def __init__(self, config: ScanConfig) -> None:
        self._config = config

    @property
    def config(self) -> ScanConfig:
        return self._config

    @abstractmethod
    async def poll(self, source: MarketSnapshotSource) -> Sequence[Any]:
        """Fetch this strategy's snapshot from the source."""
        pass

    @abstractmethod
    def detect(self, snapshot: Sequence[Any]) -> List[Any]:
        """Map a snapshot to opportunities in scan order."""
        pass

    @abstractmethod
    def value_of(self, opportunity: Any) -> float:
        """Ranking metric of an opportunity."""
        pass


class ArbitrageStrategy(ScanStrategy):
    """Cross-venue spread strategy."""

    kind = StrategyKind.ARBITRAGE

    async def poll(self, source: MarketSnapshotSource) -> Sequence[VenuePrice]:
        return await source.fetch_prices()

    def detect(self, snapshot: Sequence[VenuePrice]) -> List[ArbitrageOpportunity]:
        return detect_arbitrage(snapshot, self._config.threshold)

    def value_of(self, opportunity: ArbitrageOpportunity) -> float:
        return opportunity.spread_pct


class SandwichStrategy(ScanStrategy):
    """Pending-transfer front/back-run strategy."""

    kind = StrategyKind.SANDWICH

    async def poll(self, source: MarketSnapshotSource) -> Sequence[PendingTransfer]:
        return await source.fetch_pending_transfers()

    def detect(self, snapshot: Sequence[PendingTransfer]) -> List[SandwichOpportunity]:
        return detect_sandwich(
            snapshot,
            min_amount=self._config.min_victim_amount,
            min_profit=self._config.min_profit_threshold,
            slippage_factor=self._config.slippage_factor,
            front_run_fraction=self._config.front_run_fraction,
        )

    def value_of(self, opportunity: SandwichOpportunity) -> float:
        return opportunity.estimated_profit


_STRATEGIES = {
    StrategyKind.ARBITRAGE: ArbitrageStrategy,
    StrategyKind.SANDWICH: SandwichStrategy,
}


def build_strategy(config: ScanConfig) -> ScanStrategy:
    """Select the strategy named by the configuration."""
    return _STRATEGIES[StrategyKind(config.strategy)](config)
