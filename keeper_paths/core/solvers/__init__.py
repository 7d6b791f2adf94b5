from keeper_paths.core.solvers.legs import (
    CurveAddLiquidityEth,
    Leg,
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
    NothingToSolveError,
    SolverDefinition,
)
from keeper_paths.core.solvers.types import SolveContext, Trade, TradeSetup

__all__ = [
    "AmbiguousSolverError",
    "CurveAddLiquidityEth",
    "Leg",
    "MatchRule",
    "MulticallSolver",
    "NoSolverFoundError",
    "NothingToSolveError",
    "RemoveLiquidityOneCoin",
    "SolveContext",
    "Simulator",
    "SolverDefinition",
    "Trade",
    "TradeSetup",
    "UnwrapWeth",
    "VaultWithdraw",
    "ZrxSwap",
]
