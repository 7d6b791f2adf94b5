from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address
from web3 import AsyncWeb3

from keeper_paths.core.adapters.BaseAdapter import BaseAdapter, require_wallet
from keeper_paths.core.adapters.decorators import status_tuple
from keeper_paths.core.config import get_harvest_config
from keeper_paths.core.constants.chains import CHAIN_ID_FANTOM
from keeper_paths.core.constants.harvest_job_abi import HARVEST_V2_DETACHED_JOB_ABI
from keeper_paths.core.utils.transaction import (
    encode_call,
    estimate_gas,
    send_transaction,
)
from keeper_paths.core.utils.web3 import web3_from_chain_id


async def _batched_calls(web3: AsyncWeb3, factories: list[Callable[[], Any]]) -> list:
    """JSON-RPC batch the reads, falling back to concurrent calls."""
    if not factories:
        return []

    batch = None
    try:
        batch = web3.batch_requests()
        for factory in factories:
            batch.add(factory())
        return list(await batch.async_execute())
    except Exception as batch_exc:
        if batch is not None:
            try:
                batch.cancel()
            except Exception:
                pass
        try:
            return list(await asyncio.gather(*(factory() for factory in factories)))
        except Exception as gather_exc:
            raise gather_exc from batch_exc


class HarvestJobAdapter(BaseAdapter):
    """Reads and works a V2 detached harvest keeper job."""

    adapter_type = "HARVEST_JOB"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int = CHAIN_ID_FANTOM,
        address: str | None = None,
        wallet_address: str | None = None,
        sign_callback=None,
    ) -> None:
        super().__init__("harvest_job_adapter", config, chain_id=chain_id)
        self.address = self.resolve_address(
            address,
            self.config.get("job_address"),
            get_harvest_config().get("job_address"),
            missing="harvest job address not configured",
        )
        self.wallet_address: str | None = (
            to_checksum_address(wallet_address) if wallet_address else None
        )
        self.sign_callback = sign_callback

    def _contract(self, web3: AsyncWeb3):
        return web3.eth.contract(address=self.address, abi=HARVEST_V2_DETACHED_JOB_ABI)

    def _work_transaction(self, strategy: str) -> dict[str, Any]:
        if not self.wallet_address:
            raise ValueError("keeper wallet address not configured")
        return encode_call(
            target=self.address,
            abi=HARVEST_V2_DETACHED_JOB_ABI,
            fn_name="work",
            args=[to_checksum_address(strategy)],
            from_address=self.wallet_address,
            chain_id=self.chain_id,
        )

    async def strategies(self) -> list[str]:
        async with web3_from_chain_id(self.chain_id) as web3:
            result = await self._contract(web3).functions.strategies().call(
                block_identifier="latest"
            )
        return [to_checksum_address(s) for s in result]

    async def workable(self, strategy: str) -> bool:
        async with web3_from_chain_id(self.chain_id) as web3:
            result = await self._contract(web3).functions.workable(
                to_checksum_address(strategy)
            ).call(block_identifier="latest")
        return bool(result)

    async def last_work_at(self, strategy: str) -> int:
        async with web3_from_chain_id(self.chain_id) as web3:
            result = await self._contract(web3).functions.lastWorkAt(
                to_checksum_address(strategy)
            ).call(block_identifier="latest")
        return int(result)

    async def last_works_at(self, strategies: list[str]) -> dict[str, int]:
        """``lastWorkAt`` for every strategy, keyed by checksummed address."""
        checksummed = [to_checksum_address(s) for s in strategies]
        async with web3_from_chain_id(self.chain_id) as web3:
            contract = self._contract(web3)
            results = await _batched_calls(
                web3,
                [
                    lambda s=s: contract.functions.lastWorkAt(s).call(
                        block_identifier="latest"
                    )
                    for s in checksummed
                ],
            )
        return {s: int(r) for s, r in zip(checksummed, results, strict=True)}

    async def estimate_work_gas(self, strategy: str) -> int:
        return await estimate_gas(self._work_transaction(strategy))

    @require_wallet
    @status_tuple
    async def work(self, strategy: str, *, gas_limit: int) -> str:
        tx_hash = await send_transaction(
            self._work_transaction(strategy),
            self.sign_callback,
            wait_for_receipt=True,
            gas_limit=gas_limit,
        )
        url = self.explorer_url(tx_hash)
        self.logger.info(f"Worked {strategy}: {url or tx_hash}")
        return tx_hash

