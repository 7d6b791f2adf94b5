#!/usr/bin/env python3
"""Work every eligible strategy of the V2 detached harvest job once.

Strategies that dump a reward token another strategy dumped within the
cooldown window are skipped, so the same token is not sold into the same
liquidity twice in quick succession.
"""

# Allow running as a script: `python keeper_paths/jobs/harvest_v2_detached.py`
if __name__ == "__main__" and __package__ is None:
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import asyncio
import sys
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from keeper_paths.adapters.harvest_job_adapter.adapter import HarvestJobAdapter
from keeper_paths.core.config import (
    find_wallet_by_label,
    get_harvest_config,
    get_wallets,
)
from keeper_paths.core.constants.base import REWARD_DUMPED_COOLDOWN_SECONDS
from keeper_paths.core.constants.chains import CHAIN_ID_FANTOM
from keeper_paths.core.constants.contracts import HARVEST_DENY_LIST
from keeper_paths.core.utils.transaction import (
    buffered_gas_limit,
    make_sign_callback,
)

KEEPER_WALLET_LABEL = "harvest_keeper"


class HarvestConfigurationMismatchError(RuntimeError):
    pass


@dataclass(frozen=True)
class HarvestConfiguration:
    address: str
    tokens_being_dumped: tuple[str, ...]

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "HarvestConfiguration":
        return cls(
            address=str(raw["address"]),
            tokens_being_dumped=tuple(
                str(t) for t in raw.get("tokensBeingDumped", [])
            ),
        )


@dataclass
class HarvestRunSummary:
    on_cooldown: list[str] = field(default_factory=list)
    not_workable: list[str] = field(default_factory=list)
    worked: list[str] = field(default_factory=list)
    errored: list[str] = field(default_factory=list)

    def lines(self) -> list[str]:
        return [
            f"On liquidity cooldown: {', '.join(self.on_cooldown)}",
            f"Not workable: {', '.join(self.not_workable)}",
            f"Worked: {', '.join(self.worked)}",
            f"Errored: {', '.join(self.errored)}",
        ]


class HarvestJob(Protocol):
    async def strategies(self) -> list[str]: ...

    async def workable(self, strategy: str) -> bool: ...

    async def last_works_at(self, strategies: list[str]) -> dict[str, int]: ...

    async def estimate_work_gas(self, strategy: str) -> int: ...

    async def work(self, strategy: str, *, gas_limit: int) -> tuple[bool, Any]: ...


def find_configuration(
    configurations: Iterable[HarvestConfiguration], strategy: str
) -> HarvestConfiguration | None:
    for configuration in configurations:
        if configuration.address.lower() == strategy.lower():
            return configuration
    return None


def build_last_dumped_map(
    strategies: list[str],
    last_works_at: dict[str, int],
    configurations: list[HarvestConfiguration],
) -> dict[str, int]:
    """Latest ``lastWorkAt`` among the strategies dumping each token.

    Keys are lower-cased token addresses.
    """
    by_strategy = {k.lower(): int(v) for k, v in last_works_at.items()}
    last_dumped: dict[str, int] = {}
    for strategy in strategies:
        configuration = find_configuration(configurations, strategy)
        if configuration is None:
            raise HarvestConfigurationMismatchError(
                f"No harvest configuration for strategy {strategy}"
            )
        worked_at = by_strategy.get(strategy.lower(), 0)
        for token in configuration.tokens_being_dumped:
            key = token.lower()
            last_dumped[key] = max(last_dumped.get(key, 0), worked_at)
    return last_dumped


def is_on_cooldown(
    configuration: HarvestConfiguration,
    last_dumped: dict[str, int],
    now: int,
    cooldown_seconds: int,
) -> bool:
    return any(
        now - cooldown_seconds <= last_dumped.get(token.lower(), 0)
        for token in configuration.tokens_being_dumped
    )


async def run_harvest(
    job: HarvestJob,
    configurations: list[HarvestConfiguration],
    *,
    deny_list: Iterable[str] = HARVEST_DENY_LIST,
    cooldown_seconds: int = REWARD_DUMPED_COOLDOWN_SECONDS,
    clock: Callable[[], float] = time.time,
) -> HarvestRunSummary:
    log = logger.bind(job="harvest_v2_detached")
    denied = {d.lower() for d in deny_list}
    strategies = [s for s in await job.strategies() if s.lower() not in denied]
    log.info(f"Checking {len(strategies)} strategies")

    last_works_at = await job.last_works_at(strategies)
    last_dumped = build_last_dumped_map(strategies, last_works_at, configurations)

    summary = HarvestRunSummary()
    for strategy in strategies:
        try:
            if not await job.workable(strategy):
                summary.not_workable.append(strategy)
                continue

            configuration = find_configuration(configurations, strategy)
            now = int(clock())
            if is_on_cooldown(configuration, last_dumped, now, cooldown_seconds):
                log.info(f"{strategy} dumps a token still on cooldown")
                summary.on_cooldown.append(strategy)
                continue

            gas_limit = buffered_gas_limit(await job.estimate_work_gas(strategy))
            ok, result = await job.work(strategy, gas_limit=gas_limit)
            if not ok:
                log.error(f"Failed to work {strategy}: {result}")
                summary.errored.append(strategy)
                continue

            worked_at = int(clock())
            for token in configuration.tokens_being_dumped:
                last_dumped[token.lower()] = worked_at
            summary.worked.append(strategy)
        except Exception as exc:
            log.error(f"Error working {strategy}: {exc}")
            summary.errored.append(strategy)

    return summary


def load_harvest_configurations(
    raw: list[dict[str, Any]] | None = None,
) -> list[HarvestConfiguration]:
    if raw is None:
        raw = get_harvest_config().get("configurations", [])
    return [HarvestConfiguration.from_dict(entry) for entry in raw]


def _keeper_wallet() -> dict[str, Any]:
    wallet = find_wallet_by_label(KEEPER_WALLET_LABEL)
    if wallet is None:
        wallets = get_wallets()
        if not wallets:
            raise ValueError("No wallets configured for the harvest keeper")
        wallet = wallets[0]
    return wallet


async def _run() -> HarvestRunSummary:
    harvest_config = get_harvest_config()
    wallet = _keeper_wallet()
    pk = wallet.get("private_key") or wallet.get("private_key_hex")
    if not pk:
        raise ValueError(f"Wallet {wallet.get('label')} has no private key")

    job = HarvestJobAdapter(
        chain_id=int(harvest_config.get("chain_id", CHAIN_ID_FANTOM)),
        wallet_address=wallet["address"],
        sign_callback=make_sign_callback(pk),
    )
    return await run_harvest(
        job,
        load_harvest_configurations(),
        deny_list=harvest_config.get("deny_list", HARVEST_DENY_LIST),
    )


def main():
    try:
        summary = asyncio.run(_run())
    except Exception as exc:
        logger.exception(f"Harvest run failed: {exc}")
        sys.exit(1)
    for line in summary.lines():
        print(line)
    sys.exit(0)


if __name__ == "__main__":
    main()
