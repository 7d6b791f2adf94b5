import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from eth_account import Account
from loguru import logger
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from keeper_paths.core.constants.base import (
    DEFAULT_TRANSACTION_TIMEOUT,
    GAS_LIMIT_BUFFER_DENOMINATOR,
    GAS_LIMIT_BUFFER_NUMERATOR,
    MAX_BASE_FEE_GROWTH_MULTIPLIER,
    SUGGESTED_GAS_PRICE_MULTIPLIER,
    SUGGESTED_PRIORITY_FEE_MULTIPLIER,
)
from keeper_paths.core.constants.chains import PRE_EIP_1559_CHAIN_IDS
from keeper_paths.core.utils.abi_caster import cast_args
from keeper_paths.core.utils.web3 import (
    get_transaction_chain_id,
    web3_from_chain_id,
    web3s_from_chain_id,
)

# encode_abi and decode_function_input never touch the provider
_OFFLINE_WEB3 = AsyncWeb3()

# fee_history window used to pick a priority fee
_PRIORITY_FEE_BLOCKS = 10
_PRIORITY_FEE_PERCENTILE = 80


class TransactionRevertedError(RuntimeError):
    def __init__(
        self,
        txn_hash: str,
        receipt: dict[str, Any] | None = None,
        message: str | None = None,
    ):
        self.txn_hash = txn_hash
        self.receipt = receipt or {}
        super().__init__(message or f"Transaction reverted: {txn_hash}")

    @classmethod
    def from_receipt(
        cls, txn_hash: str, receipt: dict[str, Any], gas_limit: int | None
    ) -> "TransactionRevertedError":
        gas_used = int(receipt.get("gasUsed") or 0)
        gas_limit = int(gas_limit or 0)
        message = f"Transaction reverted (status=0): {txn_hash}"
        if gas_used or gas_limit:
            message += f" gasUsed={gas_used} gasLimit={gas_limit}"
        if gas_used and gas_limit and gas_used >= gas_limit:
            message += " (likely out of gas)"
        return cls(txn_hash, receipt, message=message)


def _get_transaction_from_address(transaction: dict) -> str:
    if "from" not in transaction:
        raise ValueError("Transaction does not contain from address")
    return AsyncWeb3.to_checksum_address(transaction["from"])


def _with_0x(txn_hash: str) -> str:
    return txn_hash if txn_hash.startswith("0x") else f"0x{txn_hash}"


def buffered_gas_limit(gas_estimate: int) -> int:
    """Estimated gas plus a 10% margin, in integer arithmetic."""
    buffered = int(gas_estimate) * GAS_LIMIT_BUFFER_NUMERATOR
    return buffered // GAS_LIMIT_BUFFER_DENOMINATOR


async def _read_all_rpcs(
    chain_id: int, read: Callable[[AsyncWeb3], Awaitable[Any]]
) -> list[Any]:
    async with web3s_from_chain_id(chain_id) as web3s:
        return list(await asyncio.gather(*(read(web3) for web3 in web3s)))


async def nonce_transaction(transaction: dict) -> dict:
    """Pending nonce, taking the highest any RPC reports."""
    from_address = _get_transaction_from_address(transaction)
    nonces = await _read_all_rpcs(
        get_transaction_chain_id(transaction),
        lambda web3: web3.eth.get_transaction_count(
            from_address, block_identifier="pending"
        ),
    )
    return {**transaction, "nonce": max(nonces)}


async def _priority_fee(web3: AsyncWeb3) -> int:
    history = await web3.eth.fee_history(
        _PRIORITY_FEE_BLOCKS, "latest", [_PRIORITY_FEE_PERCENTILE]
    )
    tips = [reward[0] for reward in history.reward]
    return sum(tips) // len(tips)


async def _base_fee(web3: AsyncWeb3) -> int:
    block = await web3.eth.get_block("latest")
    return block.baseFeePerGas


async def _legacy_gas_price(web3: AsyncWeb3) -> int:
    return await web3.eth.gas_price


async def gas_price_transaction(transaction: dict) -> dict:
    """Legacy ``gasPrice`` on Fantom, EIP-1559 fees elsewhere."""
    chain_id = get_transaction_chain_id(transaction)
    transaction = dict(transaction)

    if chain_id in PRE_EIP_1559_CHAIN_IDS:
        gas_price = max(await _read_all_rpcs(chain_id, _legacy_gas_price))
        transaction["gasPrice"] = int(gas_price * SUGGESTED_GAS_PRICE_MULTIPLIER)
        return transaction

    base_fee = max(await _read_all_rpcs(chain_id, _base_fee))
    tip = int(
        max(await _read_all_rpcs(chain_id, _priority_fee))
        * SUGGESTED_PRIORITY_FEE_MULTIPLIER
    )
    transaction["maxFeePerGas"] = int(base_fee * MAX_BASE_FEE_GROWTH_MULTIPLIER + tip)
    transaction["maxPriorityFeePerGas"] = tip
    return transaction


async def estimate_gas(transaction: dict) -> int:
    """Highest estimate among the RPCs that could simulate the call."""
    # a stale "gas" field would cap the estimate
    unbounded = {k: v for k, v in transaction.items() if k != "gas"}

    async with web3s_from_chain_id(get_transaction_chain_id(transaction)) as web3s:
        results = await asyncio.gather(
            *(
                web3.eth.estimate_gas(unbounded, block_identifier="latest")
                for web3 in web3s
            ),
            return_exceptions=True,
        )
        estimates = []
        for web3, result in zip(web3s, results, strict=True):
            if isinstance(result, Exception):
                logger.info(
                    f"Failed to estimate gas using {web3.provider.endpoint_uri}. "
                    f"Error: {result}"
                )
            else:
                estimates.append(int(result))

    if not estimates or max(estimates) == 0:
        logger.error("Gas estimation failed on all RPCs")
        raise RuntimeError("Gas estimation failed on all RPCs")
    return max(estimates)


async def gas_limit_transaction(transaction: dict) -> dict:
    return {**transaction, "gas": buffered_gas_limit(await estimate_gas(transaction))}


async def prepare_transaction(
    transaction: dict, *, gas_limit: int | None = None
) -> dict:
    """Fill in gas limit, nonce and fees.

    An explicit *gas_limit* is used verbatim; otherwise the limit is estimated
    and buffered with ``buffered_gas_limit``.
    """
    if gas_limit is None:
        transaction = await gas_limit_transaction(transaction)
    else:
        transaction = {**transaction, "gas": int(gas_limit)}
    transaction = await nonce_transaction(transaction)
    return await gas_price_transaction(transaction)


async def broadcast_transaction(chain_id: int, signed_transaction: bytes) -> str:
    async with web3_from_chain_id(chain_id) as web3:
        tx_hash = await web3.eth.send_raw_transaction(signed_transaction)
        return tx_hash.hex()


async def wait_for_transaction_receipt(
    chain_id: int,
    txn_hash: str,
    poll_interval: float = 0.1,
    timeout: int = DEFAULT_TRANSACTION_TIMEOUT,
) -> dict:
    """First receipt any RPC returns; the remaining waits are cancelled."""
    txn_hash = _with_0x(txn_hash)
    async with web3s_from_chain_id(chain_id) as web3s:
        waiters = [
            asyncio.create_task(
                web3.eth.wait_for_transaction_receipt(
                    txn_hash, poll_latency=poll_interval, timeout=timeout
                )
            )
            for web3 in web3s
        ]
        done, pending = await asyncio.wait(
            waiters, return_when=asyncio.FIRST_COMPLETED
        )
        for waiter in pending:
            waiter.cancel()
        return dict(done.pop().result())


async def send_transaction(
    transaction: dict,
    sign_callback: Callable,
    wait_for_receipt=True,
    *,
    gas_limit: int | None = None,
) -> str:
    """Prepare, sign and broadcast *transaction*, returning its 0x hash.

    With *wait_for_receipt* a reverted receipt raises
    ``TransactionRevertedError``.
    """
    if sign_callback is None:
        raise ValueError("sign_callback must be provided to send transaction")

    chain_id = get_transaction_chain_id(transaction)
    logger.info(f"Broadcasting transaction to {transaction.get('to')} on {chain_id}")
    transaction = await prepare_transaction(transaction, gas_limit=gas_limit)
    signed_transaction = await sign_callback(transaction)
    txn_hash = _with_0x(await broadcast_transaction(chain_id, signed_transaction))
    logger.info(f"Transaction broadcasted: {txn_hash}")

    if wait_for_receipt:
        receipt = await wait_for_transaction_receipt(chain_id, txn_hash)
        if receipt.get("status") == 0:
            raise TransactionRevertedError.from_receipt(
                txn_hash, receipt, transaction.get("gas")
            )
    return txn_hash


def make_sign_callback(private_key: str) -> Callable:
    account = Account.from_key(private_key)

    async def sign_callback(tx: dict) -> bytes:
        return account.sign_transaction(tx).raw_transaction

    return sign_callback


def offline_contract(abi: list[dict[str, Any]]):
    """Contract factory with no address or provider, for building calldata."""
    return _OFFLINE_WEB3.eth.contract(abi=abi)


def encode_calldata(
    abi: list[dict[str, Any]],
    fn_name: str,
    args: list[Any],
    *,
    signature: str | None = None,
) -> str:
    """Calldata for *fn_name*; overloaded functions need their *signature*."""
    contract = offline_contract(abi)
    if signature is None:
        fn = contract.get_function_by_name(fn_name)
    else:
        fn = contract.get_function_by_signature(signature)
    return contract.encode_abi(
        abi_element_identifier=signature or fn_name,
        args=cast_args(list(args), fn.abi.get("inputs", [])),
    )


def encode_call(
    *,
    target: str,
    abi: list[dict[str, Any]],
    fn_name: str,
    args: list[Any],
    from_address: str,
    chain_id: int,
    value: int = 0,
    signature: str | None = None,
) -> dict[str, Any]:
    """Unsigned transaction calling ``fn_name`` on ``target``."""
    try:
        data = encode_calldata(abi, fn_name, args, signature=signature)
    except (ValueError, TypeError, Web3Exception) as exc:
        raise ValueError(f"Failed to encode {fn_name}: {exc}") from exc

    return {
        "chainId": int(chain_id),
        "from": AsyncWeb3.to_checksum_address(from_address),
        "to": AsyncWeb3.to_checksum_address(target),
        "data": data,
        "value": int(value),
    }
