from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from keeper_paths.core.config import get_fork_rpc_prefix, get_fork_rpc_url
from keeper_paths.core.constants.base import DEFAULT_HTTP_TIMEOUT


class ForkRpcError(RuntimeError):
    pass


class ForkClient:
    """JSON-RPC client for the dev-only methods of a local anvil/hardhat fork."""

    def __init__(self, rpc_url: str | None = None, rpc_prefix: str | None = None):
        self.rpc_url = rpc_url or get_fork_rpc_url()
        self.rpc_prefix = rpc_prefix or get_fork_rpc_prefix()
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(DEFAULT_HTTP_TIMEOUT))
        self._request_id = 0

    async def send_rpc(self, method: str, params: list) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        resp = await self.client.post(self.rpc_url, json=payload)
        resp.raise_for_status()

        data = resp.json()
        if "error" in data:
            raise ForkRpcError(f"RPC error for {method}: {data['error']}")
        return data.get("result")

    async def impersonate_account(self, address: str) -> None:
        await self.send_rpc(f"{self.rpc_prefix}_impersonateAccount", [address])
        logger.debug(f"Impersonating {address} on fork {self.rpc_url}")

    async def stop_impersonating_account(self, address: str) -> None:
        await self.send_rpc(f"{self.rpc_prefix}_stopImpersonatingAccount", [address])
        logger.debug(f"Stopped impersonating {address} on fork {self.rpc_url}")

    async def set_native_balance(self, wallet: str, amount: int) -> None:
        await self.send_rpc(f"{self.rpc_prefix}_setBalance", [wallet, hex(int(amount))])
        logger.debug(f"Set native balance for {wallet} to {amount} wei")

    async def close(self) -> None:
        await self.client.aclose()
