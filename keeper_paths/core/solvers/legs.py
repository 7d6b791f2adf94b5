"""Building blocks of a multicall solver.

Each leg executes its calls on the simulator as the swapper, appends them to
the context so the replayed payload matches what was simulated, and records
how much of its output token is available to the legs after it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from keeper_paths.adapters.multicall_adapter.adapter import MulticallCall
from keeper_paths.core.constants.base import DEFAULT_SLIPPAGE, DUST_WEI, MAX_UINT256
from keeper_paths.core.constants.contracts import (
    NATIVE_TOKEN_ADDRESS,
    ZRX_EXCHANGE_PROXY,
)
from keeper_paths.core.constants.curve_abi import (
    CURVE_CRYPTO_ETH_POOL_ABI,
    CURVE_STABLE_POOL_ABI,
)
from keeper_paths.core.constants.erc20_abi import ERC20_ABI
from keeper_paths.core.constants.weth_abi import WETH_ABI
from keeper_paths.core.constants.yearn_vault_abi import YEARN_VAULT_ABI
from keeper_paths.core.solvers.types import SolveContext
from keeper_paths.core.utils.transaction import encode_calldata


def retain_dust(received: int, balance_after: int) -> int:
    """Amount to forward from a balance delta.

    When the delta is the swapper's entire balance, one wei is left behind so
    the token's storage slot stays non-zero.
    """
    received = max(int(received), 0)
    if received > 0 and int(balance_after) == received:
        return received - DUST_WEI
    return received


class Leg(ABC):
    @abstractmethod
    async def run(self, ctx: SolveContext) -> None: ...


@dataclass(frozen=True)
class RemoveLiquidityOneCoin(Leg):
    pool: str
    lp_token: str
    coin: str
    coin_index: int

    async def run(self, ctx: SolveContext) -> None:
        amount = ctx.amount_of(self.lp_token)
        before = await ctx.simulator.balance_of(self.coin, ctx.swapper)
        await ctx.execute(
            MulticallCall(
                target=self.pool,
                call_data=encode_calldata(
                    CURVE_STABLE_POOL_ABI,
                    "remove_liquidity_one_coin",
                    [amount, self.coin_index, 0],
                ),
            )
        )
        after = await ctx.simulator.balance_of(self.coin, ctx.swapper)
        received = retain_dust(after - before, after)
        ctx.log.info(f"Removed {amount} of {self.lp_token} for {received} {self.coin}")
        ctx.set_amount(self.lp_token, 0)
        ctx.set_amount(self.coin, received)


@dataclass(frozen=True)
class ZrxSwap(Leg):
    sell_token: str
    buy_token: str
    slippage: float = DEFAULT_SLIPPAGE

    async def run(self, ctx: SolveContext) -> None:
        amount = ctx.amount_of(self.sell_token)
        if amount <= 0:
            ctx.log.info(f"No {self.sell_token} to swap, skipping 0x leg")
            return

        quote = await ctx.quote_client.get_quote(
            chain_id=ctx.chain_id,
            sell_token=self.sell_token,
            buy_token=self.buy_token,
            sell_amount=amount,
            slippage_percentage=self.slippage,
        )

        spender = quote["allowance_target"]
        allowance = await ctx.simulator.allowance(
            self.sell_token, ctx.swapper, spender
        )
        if allowance < amount:
            await ctx.execute(
                MulticallCall(
                    target=self.sell_token,
                    call_data=encode_calldata(
                        ERC20_ABI, "approve", [spender, MAX_UINT256]
                    ),
                )
            )

        target = quote.get("to") or ZRX_EXCHANGE_PROXY[ctx.chain_id]
        await ctx.execute(
            MulticallCall(
                target=target,
                call_data=quote["data"],
                value=int(quote.get("value") or 0),
            )
        )

        bought = await ctx.simulator.balance_of(self.buy_token, ctx.swapper)
        ctx.log.info(
            f"Swapped {amount} {self.sell_token} for {bought} {self.buy_token}"
        )
        ctx.set_amount(self.sell_token, 0)
        ctx.set_amount(self.buy_token, bought)


@dataclass(frozen=True)
class UnwrapWeth(Leg):
    weth: str

    async def run(self, ctx: SolveContext) -> None:
        amount = ctx.amount_of(self.weth)
        await ctx.execute(
            MulticallCall(
                target=self.weth,
                call_data=encode_calldata(WETH_ABI, "withdraw", [amount]),
            )
        )
        ctx.set_amount(self.weth, 0)
        native = ctx.amount_of(NATIVE_TOKEN_ADDRESS)
        ctx.set_amount(NATIVE_TOKEN_ADDRESS, native + amount)


@dataclass(frozen=True)
class CurveAddLiquidityEth(Leg):
    """Deposit native ETH into a two-coin crypto pool, minting to the strategy."""

    pool: str
    eth_index: int = 0

    async def run(self, ctx: SolveContext) -> None:
        eth = ctx.amount_of(NATIVE_TOKEN_ADDRESS)
        amounts = [0, 0]
        amounts[self.eth_index] = eth
        await ctx.execute(
            MulticallCall(
                target=self.pool,
                call_data=encode_calldata(
                    CURVE_CRYPTO_ETH_POOL_ABI,
                    "add_liquidity",
                    [amounts, 0, True, ctx.strategy],
                ),
                value=eth,
            )
        )
        ctx.set_amount(NATIVE_TOKEN_ADDRESS, 0)


@dataclass(frozen=True)
class VaultWithdraw(Leg):
    """Redeem every vault share held by the swapper straight to the strategy."""

    vault: str

    async def run(self, ctx: SolveContext) -> None:
        await ctx.execute(
            MulticallCall(
                target=self.vault,
                call_data=encode_calldata(
                    YEARN_VAULT_ABI, "withdraw", [MAX_UINT256, ctx.strategy, 0]
                ),
            )
        )
        ctx.set_amount(self.vault, 0)
