from __future__ import annotations

import time
from typing import Any, NotRequired, Required, TypedDict

import httpx
from loguru import logger

from keeper_paths.core.config import get_zrx_api_key
from keeper_paths.core.constants.base import DEFAULT_HTTP_TIMEOUT
from keeper_paths.core.constants.chains import CHAIN_ID_ETHEREUM, CHAIN_ID_FANTOM

ZRX_API_BASE_URLS: dict[int, str] = {
    CHAIN_ID_ETHEREUM: "https://api.0x.org",
    CHAIN_ID_FANTOM: "https://fantom.api.0x.org",
}
_QUOTE_PATH = "/swap/v1/quote"


class Quote(TypedDict):
    data: Required[str]
    allowance_target: Required[str]
    to: NotRequired[str]
    value: NotRequired[int]
    buy_amount: NotRequired[int]


class ZeroExClient:
    def __init__(self, api_key: str | None = None):
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(DEFAULT_HTTP_TIMEOUT))
        self.api_key = api_key
        self.headers = {
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.debug(f"Making {method} request to {url}")
        start_time = time.time()

        headers = dict(self.headers)
        api_key = self.api_key or get_zrx_api_key()
        if api_key:
            headers["0x-api-key"] = api_key

        resp = await self.client.request(method, url, headers=headers, **kwargs)

        elapsed = time.time() - start_time
        if resp.status_code >= 400:
            logger.warning(
                f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
            )
        else:
            logger.debug(
                f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
            )

        resp.raise_for_status()
        return resp

    async def get_quote(
        self,
        *,
        chain_id: int,
        sell_token: str,
        buy_token: str,
        sell_amount: int,
        slippage_percentage: float,
    ) -> Quote:
        base_url = ZRX_API_BASE_URLS.get(int(chain_id))
        if base_url is None:
            raise ValueError(f"0x API not available for chain ID {chain_id}")

        params = {
            "sellToken": sell_token,
            "buyToken": buy_token,
            "sellAmount": str(int(sell_amount)),
            "slippagePercentage": str(slippage_percentage),
        }
        response = await self._request("GET", f"{base_url}{_QUOTE_PATH}", params=params)
        payload = response.json()

        data = payload.get("data")
        allowance_target = payload.get("allowanceTarget")
        if not data or not allowance_target:
            raise ValueError(
                f"0x quote missing data/allowanceTarget: keys={list(payload.keys())}"
            )

        quote: Quote = {"data": str(data), "allowance_target": str(allowance_target)}
        if payload.get("to"):
            quote["to"] = str(payload["to"])
        if payload.get("value") is not None:
            quote["value"] = int(payload["value"])
        if payload.get("buyAmount") is not None:
            quote["buy_amount"] = int(payload["buyAmount"])
        return quote

    async def close(self) -> None:
        await self.client.aclose()


ZRX_CLIENT = ZeroExClient()
