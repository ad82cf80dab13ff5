"""
Market snapshot source interface.

The scan loop only needs two read-only operations from its data source. How a
source obtains the data (node RPC, websocket feed, canned samples) is up to
the implementation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol

from src.models.market import PendingTransfer, VenuePrice


class SourceError(Exception):
    """Upstream unreachable or returned a malformed snapshot."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.message = message
        self.source = source
        super().__init__(f"[{source}] {message}" if source else message)


class MarketSnapshotSource(Protocol):
    """Protocol defining the expected snapshot source interface."""

    async def fetch_prices(self) -> List[VenuePrice]:
        """
        Fetch current two-venue quotes.

        Returns:
            Quotes sampled at one instant

        Raises:
            SourceError: If the upstream cannot be read
        """
        ...

    async def fetch_pending_transfers(self) -> List[PendingTransfer]:
        """
        Fetch the current batch of pending transfers.

        Returns:
            Pending transfers observed since the last fetch

        Raises:
            SourceError: If the upstream cannot be read
        """
        ...


class BaseSnapshotSource(ABC):
    """Abstract base class for snapshot sources."""

    name: str = "base"

    @abstractmethod
    async def fetch_prices(self) -> List[VenuePrice]:
        """Fetch current two-venue quotes."""
        pass

    @abstractmethod
    async def fetch_pending_transfers(self) -> List[PendingTransfer]:
        """Fetch the current batch of pending transfers."""
        pass

    async def close(self) -> None:
        """Release any resources held by the source."""
        return None
