"""Async JSON-RPC client for a blockchain node."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from src.api.rate_limiter import RateLimiter
from src.utils.logger import get_logger

logger = get_logger("mev_scanner.rpc_client")


class RpcError(Exception):
    """Exception for node RPC errors."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        self.message = message
        self.code = code
        super().__init__(f"[{code if code is not None else 'ERROR'}] {message}")


class NodeRpcClient:
    """Async JSON-RPC client used for node health checks."""

    def __init__(
        self,
        rpc_url: str,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        """
        Initialize RPC client.

        Args:
            rpc_url: Node JSON-RPC endpoint
            rate_limiter: Optional request throttle
            session: aiohttp session (creates new if not provided)
            timeout_seconds: Per-request timeout
        """
        self._rpc_url = rpc_url
        self._rate_limiter = rate_limiter
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._request_id = 0
        logger.info(f"RPC client initialized for {self._rpc_url}")

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the client session."""
        if self._session and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("RPC client session closed")

    async def __aenter__(self) -> "NodeRpcClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def _next_request_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            The ``result`` member of the response

        Raises:
            RpcError: On transport, HTTP or RPC-level errors
        """
        session = await self._ensure_session()

        if self._rate_limiter:
            await self._rate_limiter.acquire()

        payload: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": self._next_request_id(),
            "method": method,
        }
        if params is not None:
            payload["params"] = params

        logger.debug(f"RPC request: {method}")

        try:
            async with session.post(self._rpc_url, json=payload) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise RpcError(f"HTTP {response.status}: {text[:200]}", response.status)
                try:
                    data = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise RpcError(f"Non-JSON response: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RpcError(f"Transport error: {e}") from e

        if not isinstance(data, dict):
            raise RpcError(f"Malformed response: {data!r}")

        if "error" in data:
            error = data["error"]
            if not isinstance(error, dict):
                raise RpcError(f"Malformed error member: {error!r}")
            raise RpcError(error.get("message", "Unknown error"), error.get("code"))

        return data.get("result")

    async def get_version(self) -> str:
        """
        Get the node software version.

        Returns:
            Version string reported by the node
        """
        result = await self.call("getVersion")
        if not isinstance(result, dict):
            raise RpcError(f"Unexpected getVersion result: {result!r}")
        return str(result.get("solana-core", result.get("version", "unknown")))
