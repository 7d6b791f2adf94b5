from __future__ import annotations

from keeper_paths.core.clients.ZeroExClient import ZeroExClient
from keeper_paths.core.constants.contracts import (
    CRV,
    CRV_SPELL_ETH,
    CURVE_3POOL,
    CURVE_SPELL_ETH_POOL,
    CVX,
    MULTICALL_SWAPPER_SPELL_ETH,
    MULTICALL_SWAPPER_THREE_POOL,
    STRATEGY_CONVEX_SPELL_ETH,
    STRATEGY_YVBOOST_3CRV,
    THREE_CRV,
    USDC,
    WETH,
    YVBOOST,
    YVECRV,
)
from keeper_paths.core.solvers.legs import (
    CurveAddLiquidityEth,
    RemoveLiquidityOneCoin,
    UnwrapWeth,
    VaultWithdraw,
    ZrxSwap,
)
from keeper_paths.core.solvers.simulator import Simulator
from keeper_paths.core.solvers.solver import (
    AmbiguousSolverError,
    MatchRule,
    MulticallSolver,
    NoSolverFoundError,
    SolverDefinition,
)
from keeper_paths.core.solvers.types import Trade

# 3CRV -> USDC (3pool) -> yvBOOST (0x) -> yveCRV (vault withdraw to strategy)
THREE_POOL_CRV_MULTICALL = SolverDefinition(
    name="ThreePoolCrvMulticall",
    match=MatchRule(
        strategy=STRATEGY_YVBOOST_3CRV,
        tokens_in=(THREE_CRV,),
        tokens_out=(YVECRV,),
    ),
    swapper=MULTICALL_SWAPPER_THREE_POOL,
    legs=(
        RemoveLiquidityOneCoin(
            pool=CURVE_3POOL, lp_token=THREE_CRV, coin=USDC, coin_index=1
        ),
        ZrxSwap(sell_token=USDC, buy_token=YVBOOST),
        VaultWithdraw(vault=YVBOOST),
    ),
)

# CRV + CVX -> WETH (0x) -> ETH -> crvSPELLETH LP minted to the strategy
CURVE_SPELL_ETH_MULTICALL = SolverDefinition(
    name="CurveSpellEthMulticall",
    match=MatchRule(
        strategy=STRATEGY_CONVEX_SPELL_ETH,
        tokens_in=(CRV, CVX),
        tokens_out=(CRV_SPELL_ETH,),
    ),
    swapper=MULTICALL_SWAPPER_SPELL_ETH,
    legs=(
        ZrxSwap(sell_token=CRV, buy_token=WETH),
        ZrxSwap(sell_token=CVX, buy_token=WETH),
        UnwrapWeth(weth=WETH),
        CurveAddLiquidityEth(pool=CURVE_SPELL_ETH_POOL, eth_index=0),
    ),
)

SOLVER_DEFINITIONS: tuple[SolverDefinition, ...] = (
    THREE_POOL_CRV_MULTICALL,
    CURVE_SPELL_ETH_MULTICALL,
)


def find_definition(
    trade: Trade,
    definitions: tuple[SolverDefinition, ...] = SOLVER_DEFINITIONS,
) -> SolverDefinition | None:
    """The one definition whose match rule accepts *trade*, if any."""
    matches = [d for d in definitions if d.match.matches(trade)]
    if len(matches) > 1:
        raise AmbiguousSolverError(f"Trade {trade} matches {[d.name for d in matches]}")
    return matches[0] if matches else None


def build_solver(
    trade: Trade,
    *,
    simulator: Simulator,
    quote_client: ZeroExClient | None = None,
    definitions: tuple[SolverDefinition, ...] = SOLVER_DEFINITIONS,
) -> MulticallSolver:
    definition = find_definition(trade, definitions)
    if definition is None:
        raise NoSolverFoundError(f"No solver matches trade {trade}")
    return MulticallSolver(definition, simulator=simulator, quote_client=quote_client)
