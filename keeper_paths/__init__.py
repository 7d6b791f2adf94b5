__version__ = "0.1.0"

from keeper_paths.core import (
    BaseAdapter,
    MulticallSolver,
    SolverDefinition,
    Trade,
    TradeSetup,
)

__all__ = [
    "__version__",
    "BaseAdapter",
    "MulticallSolver",
    "SolverDefinition",
    "Trade",
    "TradeSetup",
]
