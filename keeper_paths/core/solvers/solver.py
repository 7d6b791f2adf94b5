"""Generic multicall solver driven by a declarative definition.

A solver takes the strategy's input balances to its swapper on a fork, runs
its legs there, measures what the strategy receives, and packs the recorded
calls into a trade factory ``execute`` transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from keeper_paths.adapters.multicall_adapter.adapter import (
    MulticallAdapter,
    MulticallCall,
)
from keeper_paths.adapters.trade_factory_adapter.adapter import trade_details
from keeper_paths.core.clients.ZeroExClient import ZRX_CLIENT, ZeroExClient
from keeper_paths.core.constants.chains import CHAIN_ID_ETHEREUM
from keeper_paths.core.constants.erc20_abi import ERC20_ABI
from keeper_paths.core.solvers.legs import Leg
from keeper_paths.core.solvers.simulator import Simulator
from keeper_paths.core.solvers.types import (
    SolveContext,
    Trade,
    TradeSetup,
    same_address,
)
from keeper_paths.core.utils.transaction import encode_calldata

if TYPE_CHECKING:
    from keeper_paths.adapters.trade_factory_adapter.adapter import (
        TradeFactoryAdapter,
    )


class NothingToSolveError(RuntimeError):
    """The strategy holds none of the trade's input tokens."""


class NoSolverFoundError(LookupError):
    pass


class AmbiguousSolverError(LookupError):
    """More than one solver definition accepts the same trade."""


@dataclass(frozen=True)
class MatchRule:
    strategy: str
    tokens_in: tuple[str, ...]
    tokens_out: tuple[str, ...]

    def matches(self, trade: Trade) -> bool:
        if not same_address(trade.strategy, self.strategy):
            return False
        wanted_in = {t.lower() for t in self.tokens_in}
        if {t.lower() for t in trade.tokens_in} != wanted_in:
            return False
        return trade.token_out.lower() in {t.lower() for t in self.tokens_out}


@dataclass(frozen=True)
class SolverDefinition:
    name: str
    match: MatchRule
    swapper: str
    legs: tuple[Leg, ...]
    chain_id: int = CHAIN_ID_ETHEREUM

    @property
    def batched(self) -> bool:
        return len(self.match.tokens_in) > 1


class MulticallSolver:
    def __init__(
        self,
        definition: SolverDefinition,
        *,
        simulator: Simulator,
        quote_client: ZeroExClient | None = None,
        merger: MulticallAdapter | None = None,
    ):
        self.definition = definition
        self.simulator = simulator
        self.quote_client = quote_client or ZRX_CLIENT
        self.merger = merger or MulticallAdapter()

    @property
    def name(self) -> str:
        return self.definition.name

    def match(self, trade: Trade) -> bool:
        return self.definition.match.matches(trade)

    async def solve(
        self, trade: Trade, trade_factory: TradeFactoryAdapter
    ) -> TradeSetup:
        definition = self.definition
        strategy = definition.match.strategy
        swapper = definition.swapper
        ctx = SolveContext(
            chain_id=definition.chain_id,
            strategy=strategy,
            swapper=swapper,
            simulator=self.simulator,
            quote_client=self.quote_client,
            log=logger.bind(solver=definition.name, strategy=strategy),
        )
        ctx.log.info(f"Solving {definition.name} for trade {trade}")

        async with self.simulator.impersonating(strategy, swapper):
            sources: list[tuple[str, int]] = []
            for token in definition.match.tokens_in:
                balance = await self.simulator.balance_of(token, strategy)
                sources.append((token, balance))
            funded = [(token, amount) for token, amount in sources if amount > 0]
            if not funded:
                raise NothingToSolveError(
                    f"{definition.name}: strategy {strategy} holds none of "
                    f"{list(definition.match.tokens_in)}"
                )

            # the trade factory does these pulls on-chain; they are not replayed
            for token, amount in funded:
                await self.simulator.execute(
                    strategy,
                    MulticallCall(
                        target=token,
                        call_data=encode_calldata(
                            ERC20_ABI, "transfer", [swapper, amount]
                        ),
                    ),
                )
                ctx.set_amount(token, amount)

            out_before = await self.simulator.balance_of(trade.token_out, strategy)
            for leg in definition.legs:
                await leg.run(ctx)
            out_after = await self.simulator.balance_of(trade.token_out, strategy)

        expected_amount_out = max(out_after - out_before, 0)
        data = self.merger.merge(ctx.calls)

        if definition.batched:
            # batched descriptors carry no minAmountOut floor
            details = [
                trade_details(strategy, token, trade.token_out, amount, 0)
                for token, amount in funded
            ]
            transaction = trade_factory.populate_execute(details, swapper, data)
        else:
            token, amount = funded[0]
            transaction = trade_factory.populate_execute(
                trade_details(
                    strategy, token, trade.token_out, amount, expected_amount_out
                ),
                swapper,
                data,
            )

        ctx.log.info(
            f"{definition.name}: {len(ctx.calls)} calls, "
            f"expected {expected_amount_out} of {trade.token_out}"
        )
        return TradeSetup(
            swapper_name=definition.name,
            transaction=transaction,
            calls=tuple(ctx.calls),
            data=data,
            expected_amount_out=expected_amount_out,
        )
