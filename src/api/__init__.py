"""Snapshot sources and node clients."""

from src.api.feed_source import FeedMessageType, FeedSnapshotSource
from src.api.mock_source import (
    MockSnapshotSource,
    create_sample_prices,
    create_sample_transfers,
)
from src.api.node_source import NodeCheckedSource
from src.api.rate_limiter import RateLimiter
from src.api.rpc_client import NodeRpcClient, RpcError
from src.api.source import BaseSnapshotSource, MarketSnapshotSource, SourceError

__all__ = [
    # Source interface
    "BaseSnapshotSource",
    "MarketSnapshotSource",
    "SourceError",
    # Real sources
    "FeedMessageType",
    "FeedSnapshotSource",
    "NodeCheckedSource",
    "NodeRpcClient",
    "RateLimiter",
    "RpcError",
    # Mock source
    "MockSnapshotSource",
    "create_sample_prices",
    "create_sample_transfers",
]
