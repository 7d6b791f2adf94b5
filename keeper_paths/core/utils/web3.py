from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.middleware import ExtraDataToPOAMiddleware

from keeper_paths.core.config import get_fork_rpc_url, get_rpc_urls
from keeper_paths.core.constants.chains import POA_MIDDLEWARE_CHAIN_IDS


def _get_rpcs_for_chain_id(chain_id: int) -> list[str]:
    """Configured RPC URLs; ``rpc_urls`` keys may be strings or ints."""
    mapping = get_rpc_urls()
    rpcs = mapping.get(str(chain_id), mapping.get(chain_id))
    if not rpcs:
        raise ValueError(f"No RPCs configured for chain ID {chain_id}")
    return [rpcs] if isinstance(rpcs, str) else list(rpcs)


def _get_web3(rpc: str, chain_id: int | None = None) -> AsyncWeb3:
    web3 = AsyncWeb3(
        AsyncHTTPProvider(
            rpc, request_kwargs={"headers": AsyncHTTPProvider.get_request_headers()}
        )
    )
    if chain_id in POA_MIDDLEWARE_CHAIN_IDS:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    return web3


async def _disconnect(*web3s: AsyncWeb3) -> None:
    for web3 in web3s:
        await web3.provider.disconnect()


def get_transaction_chain_id(transaction: dict) -> int:
    if "chainId" not in transaction:
        raise ValueError("Transaction does not contain chainId")
    return int(transaction["chainId"])


@asynccontextmanager
async def web3s_from_chain_id(chain_id: int) -> AsyncIterator[list[AsyncWeb3]]:
    """One client per configured RPC, disconnected on exit."""
    web3s = [_get_web3(rpc, chain_id) for rpc in _get_rpcs_for_chain_id(chain_id)]
    try:
        yield web3s
    finally:
        await _disconnect(*web3s)


@asynccontextmanager
async def web3_from_chain_id(chain_id: int) -> AsyncIterator[AsyncWeb3]:
    web3 = _get_web3(_get_rpcs_for_chain_id(chain_id)[0], chain_id)
    try:
        yield web3
    finally:
        await _disconnect(web3)


@asynccontextmanager
async def fork_web3(rpc_url: str | None = None) -> AsyncIterator[AsyncWeb3]:
    """Client for the local anvil/hardhat fork used by solver simulations."""
    web3 = _get_web3(rpc_url or get_fork_rpc_url())
    try:
        yield web3
    finally:
        await _disconnect(web3)
