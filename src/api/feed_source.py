"""WebSocket subscription feed used as a snapshot source."""

import asyncio
import json
from collections import deque
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from src.api.source import BaseSnapshotSource, SourceError
from src.models.market import PendingTransfer, TradeSide, VenuePrice
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.feed")


class FeedMessageType(str, Enum):
    """Feed message types."""
    PRICE = "price"
    PENDING_TRANSFER = "pending_transfer"


class FeedSnapshotSource(BaseSnapshotSource):
    """
    Snapshot source backed by a websocket market feed.

    The feed pushes JSON messages shaped ``{"type": ..., "data": {...}}``.
    The latest quote per pair is kept; pending transfers are buffered and
    handed out once, on the next fetch.
    """

    name = "feed"

    def __init__(
        self,
        feed_url: str,
        channels: Optional[List[str]] = None,
        reconnect_attempts: int = 5,
        reconnect_delay: float = 1.0,
        reconnect_delay_max: float = 60.0,
        max_buffered_transfers: int = 10000,
    ) -> None:
        """
        Initialize the feed source.

        Args:
            feed_url: WebSocket URL of the feed
            channels: Channels to subscribe to (defaults to all message types)
            reconnect_attempts: Max reconnection attempts (0 = infinite)
            reconnect_delay: Initial delay between reconnects
            reconnect_delay_max: Maximum delay between reconnects
            max_buffered_transfers: Oldest transfers are dropped beyond this
        """
        self._feed_url = feed_url
        self._channels = channels or [t.value for t in FeedMessageType]
        self._reconnect_attempts = reconnect_attempts
        self._reconnect_delay = reconnect_delay
        self._reconnect_delay_max = reconnect_delay_max

        self._websocket: Optional[Any] = None
        self._running = False
        self._receive_task: Optional[asyncio.Task] = None
        self._cmd_id = 0

        self._prices: Dict[str, VenuePrice] = {}
        self._transfers: Deque[PendingTransfer] = deque(maxlen=max_buffered_transfers)
        self.dropped_messages = 0

        logger.info(f"Feed source initialized for {self._feed_url}")

    @property
    def is_connected(self) -> bool:
        return self._running and self._websocket is not None

    def _next_cmd_id(self) -> int:
        """Get next command ID."""
        self._cmd_id += 1
        return self._cmd_id

    async def connect(self) -> None:
        """Establish WebSocket connection and subscribe."""
        logger.info("Connecting to feed...")
        self._websocket = await websockets.connect(
            self._feed_url,
            ping_interval=30,
            ping_timeout=10,
        )
        await self._send({
            "id": self._next_cmd_id(),
            "cmd": "subscribe",
            "params": {"channels": self._channels},
        })
        logger.info(f"Feed connected, subscribed to {', '.join(self._channels)}")

    async def disconnect(self) -> None:
        """Close WebSocket connection."""
        self._running = False

        if self._receive_task:
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
            self._receive_task = None

        if self._websocket:
            await self._websocket.close()
            self._websocket = None
            logger.info("Feed disconnected")

    async def _send(self, message: Dict[str, Any]) -> None:
        """Send a message over WebSocket."""
        if not self._websocket:
            raise ConnectionError("Feed not connected")

        await self._websocket.send(json.dumps(message))
        logger.debug(f"Sent: {message}")

    def handle_message(self, message: Dict[str, Any]) -> None:
        """
        Apply one decoded feed message to the current snapshot.

        Unknown types are ignored; malformed payloads are counted and dropped.
        """
        msg_type = message.get("type")
        data = message.get("data")

        if msg_type not in (FeedMessageType.PRICE.value, FeedMessageType.PENDING_TRANSFER.value):
            return

        try:
            if msg_type == FeedMessageType.PRICE.value:
                price = VenuePrice(
                    pair_name=str(data["pair_name"]),
                    price_a=float(data["price_a"]),
                    price_b=float(data["price_b"]),
                    venue_a=str(data.get("venue_a", "DEX-A")),
                    venue_b=str(data.get("venue_b", "DEX-B")),
                )
                self._prices[price.pair_name] = price
            else:
                self._transfers.append(PendingTransfer(
                    id=str(data["id"]),
                    sender=str(data.get("sender", "")),
                    pair_name=str(data["pair_name"]),
                    side=TradeSide(str(data["side"]).lower()),
                    amount=float(data["amount"]),
                    expected_impact=float(data["expected_impact"]),
                ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.dropped_messages += 1
            logger.warning(f"Dropping malformed {msg_type} message: {e}")

    async def _receive_loop(self) -> None:
        """Main receive loop for feed messages."""
        while self._running and self._websocket:
            try:
                raw_message = await self._websocket.recv()
                message = json.loads(raw_message)
                if isinstance(message, dict):
                    self.handle_message(message)

            except ConnectionClosed as e:
                logger.warning(f"Feed connection closed: {e}")
                self._websocket = None
                if self._running:
                    await self._reconnect()

            except json.JSONDecodeError as e:
                self.dropped_messages += 1
                logger.error(f"Failed to parse feed message: {e}")

    async def _reconnect(self) -> None:
        """Handle reconnection with exponential backoff."""
        delay = self._reconnect_delay
        attempts = 0

        while self._running:
            if self._reconnect_attempts > 0 and attempts >= self._reconnect_attempts:
                logger.error("Max feed reconnection attempts reached")
                self._running = False
                break

            attempts += 1
            logger.info(f"Reconnecting to feed (attempt {attempts})...")

            try:
                await self.connect()
                logger.info("Feed reconnected")
                return
            except (WebSocketException, OSError) as e:
                logger.warning(f"Feed reconnection failed: {e}")

            await asyncio.sleep(delay)
            delay = min(delay * 2, self._reconnect_delay_max)

    async def run(self) -> None:
        """Connect and start consuming messages in the background."""
        await self.connect()
        self._running = True
        self._receive_task = asyncio.create_task(self._receive_loop())
        logger.info("Feed source running")

    def _require_connection(self) -> None:
        if not self.is_connected:
            raise SourceError("feed not connected", source=self.name)

    async def fetch_prices(self) -> List[VenuePrice]:
        """Return the latest quote for every pair seen on the feed."""
        self._require_connection()
        return list(self._prices.values())

    async def fetch_pending_transfers(self) -> List[PendingTransfer]:
        """Drain pending transfers buffered since the last fetch."""
        self._require_connection()
        transfers = list(self._transfers)
        self._transfers.clear()
        return transfers

    async def close(self) -> None:
        await self.disconnect()

    async def __aenter__(self) -> "FeedSnapshotSource":
        """Async context manager entry."""
        await self.run()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
