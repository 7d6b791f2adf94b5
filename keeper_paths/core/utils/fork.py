from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from web3 import AsyncWeb3

from keeper_paths.adapters.multicall_adapter.adapter import MulticallCall
from keeper_paths.core.clients.ForkClient import ForkClient, ForkRpcError
from keeper_paths.core.constants.chains import CHAIN_ID_ETHEREUM
from keeper_paths.core.utils.tokens import get_token_allowance, get_token_balance
from keeper_paths.core.utils.transaction import TransactionRevertedError
from keeper_paths.core.utils.web3 import fork_web3

# Impersonated accounts need native balance to pay for simulated gas
_GAS_FUNDING_WEI = AsyncWeb3.to_wei(10, "ether")


class ForkSimulator:
    """Runs calls as impersonated accounts on a local anvil/hardhat fork."""

    def __init__(
        self,
        web3: AsyncWeb3,
        fork_client: ForkClient,
        *,
        chain_id: int = CHAIN_ID_ETHEREUM,
        gas_funding_wei: int = _GAS_FUNDING_WEI,
    ):
        self.web3 = web3
        self.fork_client = fork_client
        self.chain_id = chain_id
        self.gas_funding_wei = gas_funding_wei

    async def _fund_for_gas(self, account: str) -> None:
        balance = await self.web3.eth.get_balance(account)
        if int(balance) < self.gas_funding_wei:
            await self.fork_client.set_native_balance(account, self.gas_funding_wei)

    @asynccontextmanager
    async def impersonating(self, *accounts: str) -> AsyncIterator[None]:
        checksummed = [AsyncWeb3.to_checksum_address(a) for a in accounts]
        started: list[str] = []
        try:
            for account in checksummed:
                await self.fork_client.impersonate_account(account)
                started.append(account)
                await self._fund_for_gas(account)
            yield
        finally:
            for account in started:
                try:
                    await self.fork_client.stop_impersonating_account(account)
                except ForkRpcError as exc:
                    logger.warning(f"Failed to stop impersonating {account}: {exc}")

    async def balance_of(self, token: str, account: str) -> int:
        return await get_token_balance(self.web3, token, account)

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        return await get_token_allowance(self.web3, token, owner, spender)

    async def execute(self, sender: str, call: MulticallCall) -> None:
        transaction = {
            "from": AsyncWeb3.to_checksum_address(sender),
            **call.as_transaction(),
        }
        transaction["to"] = AsyncWeb3.to_checksum_address(transaction["to"])
        tx_hash = await self.web3.eth.send_transaction(transaction)
        receipt = await self.web3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt.get("status") == 0:
            raise TransactionRevertedError(
                tx_hash.hex(),
                dict(receipt),
                message=f"Simulated call to {call.target} reverted: {tx_hash.hex()}",
            )
        logger.debug(f"Simulated call {sender} -> {call.target} ok")


@asynccontextmanager
async def fork_simulator(
    *,
    chain_id: int = CHAIN_ID_ETHEREUM,
    rpc_url: str | None = None,
    rpc_prefix: str | None = None,
) -> AsyncIterator[ForkSimulator]:
    """Connect to the configured fork and yield a simulator bound to it."""
    client = ForkClient(rpc_url=rpc_url, rpc_prefix=rpc_prefix)
    try:
        async with fork_web3(client.rpc_url) as web3:
            yield ForkSimulator(web3, client, chain_id=chain_id)
    finally:
        await client.close()
