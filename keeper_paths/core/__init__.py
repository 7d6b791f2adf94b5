from keeper_paths.core.adapters.BaseAdapter import BaseAdapter
from keeper_paths.core.solvers import (
    MulticallSolver,
    SolverDefinition,
    Trade,
    TradeSetup,
)

__all__ = [
    "BaseAdapter",
    "MulticallSolver",
    "SolverDefinition",
    "Trade",
    "TradeSetup",
]
