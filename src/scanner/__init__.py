"""Opportunity detection and ranking."""

from src.scanner.arbitrage import calculate_spread_pct, detect_arbitrage
from src.scanner.opportunity import ArbitrageOpportunity, SandwichOpportunity
from src.scanner.ranker import rank, value_of
from src.scanner.sandwich import detect_sandwich, estimate_profit
from src.scanner.strategy import (
    ArbitrageStrategy,
    SandwichStrategy,
    ScanStrategy,
    build_strategy,
)

__all__ = [
    "ArbitrageOpportunity",
    "ArbitrageStrategy",
    "SandwichOpportunity",
    "SandwichStrategy",
    "ScanStrategy",
    "build_strategy",
    "calculate_spread_pct",
    "detect_arbitrage",
    "detect_sandwich",
    "estimate_profit",
    "rank",
    "value_of",
]
