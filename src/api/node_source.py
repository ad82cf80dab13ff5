"""Snapshot source gated on node connectivity."""

from typing import List, Optional

from src.api.rpc_client import NodeRpcClient, RpcError
from src.api.source import BaseSnapshotSource, MarketSnapshotSource, SourceError
from src.models.market import PendingTransfer, VenuePrice
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.node_source")


class NodeCheckedSource(BaseSnapshotSource):
    """
    Checks the node is reachable before each fetch, then delegates.

    A failed health check raises SourceError so the scan loop skips the tick.
    """

    name = "node"

    def __init__(
        self,
        inner: MarketSnapshotSource,
        rpc_client: NodeRpcClient,
    ) -> None:
        self._inner = inner
        self._rpc = rpc_client
        self._last_version: Optional[str] = None

    @property
    def last_version(self) -> Optional[str]:
        """Node version seen on the most recent successful check."""
        return self._last_version

    async def _check_node(self) -> None:
        try:
            version = await self._rpc.get_version()
        except RpcError as e:
            logger.warning(f"Cannot reach node at {self._rpc.rpc_url}: {e}")
            raise SourceError(f"node unreachable: {e}", source=self.name) from e

        if version != self._last_version:
            logger.info(f"Connected to node (version: {version})")
        self._last_version = version

    async def fetch_prices(self) -> List[VenuePrice]:
        """Fetch quotes from the wrapped source once the node answers."""
        await self._check_node()
        return await self._inner.fetch_prices()

    async def fetch_pending_transfers(self) -> List[PendingTransfer]:
        """Fetch pending transfers from the wrapped source once the node answers."""
        await self._check_node()
        return await self._inner.fetch_pending_transfers()

    async def close(self) -> None:
        """Close the RPC session and the wrapped source."""
        await self._rpc.close()
        inner_close = getattr(self._inner, "close", None)
        if inner_close is not None:
            await inner_close()
