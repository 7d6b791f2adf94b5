#!/usr/bin/env python3

# Allow running as a script: `python keeper_paths/solvers/run_solvers.py`
if __name__ == "__main__" and __package__ is None:
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import asyncio
import json
import sys
from typing import Any

from loguru import logger

from keeper_paths.adapters.trade_factory_adapter.adapter import TradeFactoryAdapter
from keeper_paths.core.clients.ZeroExClient import ZRX_CLIENT
from keeper_paths.core.config import get_yswaps_config
from keeper_paths.core.solvers.solver import NoSolverFoundError
from keeper_paths.core.solvers.types import Trade, TradeSetup
from keeper_paths.core.utils.fork import fork_simulator
from keeper_paths.solvers.registry import build_solver


def load_trades(raw: list[dict[str, Any]] | None = None) -> list[Trade]:
    entries = raw if raw is not None else get_yswaps_config().get("trades", [])
    return [Trade.from_dict(entry) for entry in entries]


def _describe(setup: TradeSetup) -> dict[str, Any]:
    return {
        "swapper": setup.swapper_name,
        "expected_amount_out": str(setup.expected_amount_out),
        "calls": len(setup.calls),
        "transaction": setup.transaction,
    }


async def run_solvers(trades: list[Trade]) -> list[TradeSetup]:
    setups: list[TradeSetup] = []
    trade_factory = TradeFactoryAdapter()
    try:
        async with fork_simulator() as simulator:
            for trade in trades:
                try:
                    solver = build_solver(trade, simulator=simulator)
                except NoSolverFoundError as exc:
                    logger.warning(str(exc))
                    continue
                setup = await solver.solve(trade, trade_factory)
                print(json.dumps(_describe(setup), indent=2))
                setups.append(setup)
    finally:
        await ZRX_CLIENT.close()
    return setups


def main():
    trades = load_trades()
    if not trades:
        logger.info("No yswaps trades configured")
        return
    try:
        asyncio.run(run_solvers(trades))
    except Exception as exc:
        logger.exception(f"Solver run failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
