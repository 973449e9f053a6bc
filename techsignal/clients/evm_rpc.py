"""EVM JSON-RPC client for block numbers and event logs."""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx
import orjson

from techsignal.core.models import LogFilter, LogRecord

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://api.avax.network/ext/bc/C/rpc"


class RpcError(Exception):
    """JSON-RPC level error (error object or malformed response)."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


class EvmRpcClient:
    """Minimal JSON-RPC client implementing the LogSource protocol.

    Errors are raised to the caller; the windowed log walk decides whether to
    skip a failed window.
    """

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "EvmRpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Make a JSON-RPC call and return its result."""
        client = await self._get_client()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        response = await client.post(self.rpc_url, content=orjson.dumps(payload))
        response.raise_for_status()

        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise RpcError(f"{method}: invalid JSON response") from e

        if not isinstance(body, dict):
            raise RpcError(f"{method}: unexpected response type")

        error = body.get("error")
        if error:
            if not isinstance(error, dict):
                raise RpcError(f"{method}: {error}")
            raise RpcError(
                f"{method}: {error.get('message', 'unknown error')}",
                code=error.get("code"),
            )

        return body.get("result")

    async def get_block_number(self) -> int:
        """Get the latest block number."""
        result = await self._call("eth_blockNumber", [])
        try:
            return int(result, 16)
        except (TypeError, ValueError) as e:
            raise RpcError(f"eth_blockNumber: invalid result {result!r}") from e

    async def get_logs(
        self, log_filter: LogFilter, from_block: int, to_block: int
    ) -> list[LogRecord]:
        """
        Fetch logs in an inclusive block range.

        Args:
            log_filter: Address/topic filter
            from_block: First block (inclusive)
            to_block: Last block (inclusive)

        Returns:
            List of LogRecord in node order
        """
        result = await self._call("eth_getLogs", [log_filter.to_params(from_block, to_block)])
        if not isinstance(result, list):
            raise RpcError("eth_getLogs: result is not a list")
        return [LogRecord.from_rpc(item) for item in result]
