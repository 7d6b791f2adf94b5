from keeper_paths.solvers.registry import (
    SOLVER_DEFINITIONS,
    build_solver,
    find_definition,
)

__all__ = ["SOLVER_DEFINITIONS", "build_solver", "find_definition"]
