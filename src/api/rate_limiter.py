"""Token bucket rate limiter for node RPC requests."""

import asyncio
import time
from dataclasses import dataclass, field

from src.utils.logger import get_logger

logger = get_logger("mev_scanner.rate_limiter")


@dataclass
class TokenBucket:
    """Token bucket for rate limiting."""

    capacity: float
    refill_rate: float  # tokens per second
    tokens: float = field(default=0.0)
    last_refill: float = field(default_factory=time.monotonic)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        """Initialize bucket with full capacity."""
        if self.capacity <= 0 or self.refill_rate <= 0:
            raise ValueError("capacity and refill_rate must be positive")
        self.tokens = self.capacity

    def _refill(self) -> None:
        """Refill tokens based on elapsed time."""
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    async def acquire(self, tokens: float = 1.0) -> float:
        """
        Acquire tokens, waiting if necessary.

        Args:
            tokens: Number of tokens to acquire

        Returns:
            Time waited in seconds
        """
        async with self._lock:
            self._refill()

            wait_time = 0.0
            if self.tokens < tokens:
                deficit = tokens - self.tokens
                wait_time = deficit / self.refill_rate
                logger.debug(f"Rate limit reached, waiting {wait_time:.3f}s")
                await asyncio.sleep(wait_time)
                self._refill()

            self.tokens -= tokens
            return wait_time

    def try_acquire(self, tokens: float = 1.0) -> bool:
        """
        Try to acquire tokens without waiting.

        Returns:
            True if tokens were acquired, False otherwise
        """
        self._refill()
        if self.tokens >= tokens:
            self.tokens -= tokens
            return True
        return False


class RateLimiter:
    """Rate limiter for node JSON-RPC requests (one shared bucket)."""

    def __init__(self, requests_per_second: int = 5) -> None:
        """
        Initialize rate limiter.

        Args:
            requests_per_second: Maximum RPC requests per second
        """
        self._bucket = TokenBucket(
            capacity=requests_per_second, refill_rate=requests_per_second
        )
        logger.info(f"Rate limiter initialized: {requests_per_second}/s")

    async def acquire(self) -> float:
        """
        Acquire a request slot.

        Returns:
            Time waited in seconds
        """
        wait_time = await self._bucket.acquire()
        if wait_time > 0:
            logger.debug(f"RPC request waited {wait_time:.3f}s due to rate limit")
        return wait_time

    @property
    def tokens_available(self) -> float:
        """Get available request tokens."""
        self._bucket._refill()
        return self._bucket.tokens
