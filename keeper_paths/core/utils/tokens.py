from web3 import AsyncWeb3

from keeper_paths.core.constants.contracts import NATIVE_TOKEN_ADDRESS, ZERO_ADDRESS
from keeper_paths.core.constants.erc20_abi import ERC20_ABI

_NATIVE_ALIASES = {NATIVE_TOKEN_ADDRESS.lower(), ZERO_ADDRESS.lower()}


def is_native_token(token_address: str) -> bool:
    return token_address.lower() in _NATIVE_ALIASES


def _erc20(web3: AsyncWeb3, token_address: str):
    return web3.eth.contract(
        address=AsyncWeb3.to_checksum_address(token_address), abi=ERC20_ABI
    )


async def get_token_balance(
    web3: AsyncWeb3,
    token_address: str,
    account: str,
    *,
    block_identifier: str | int = "latest",
) -> int:
    """ERC20 ``balanceOf``, or the native balance for the native placeholder."""
    account = AsyncWeb3.to_checksum_address(account)
    if is_native_token(token_address):
        return int(
            await web3.eth.get_balance(account, block_identifier=block_identifier)
        )
    balance = await _erc20(web3, token_address).functions.balanceOf(account).call(
        block_identifier=block_identifier
    )
    return int(balance)


async def get_token_allowance(
    web3: AsyncWeb3,
    token_address: str,
    owner: str,
    spender: str,
    *,
    block_identifier: str | int = "latest",
) -> int:
    allowance = await _erc20(web3, token_address).functions.allowance(
        AsyncWeb3.to_checksum_address(owner),
        AsyncWeb3.to_checksum_address(spender),
    ).call(block_identifier=block_identifier)
    return int(allowance)
