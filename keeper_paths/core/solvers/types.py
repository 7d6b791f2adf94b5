from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from keeper_paths.adapters.multicall_adapter.adapter import MulticallCall

if TYPE_CHECKING:
    from keeper_paths.core.clients.ZeroExClient import ZeroExClient
    from keeper_paths.core.solvers.simulator import Simulator


def same_address(a: str, b: str) -> bool:
    return str(a).lower() == str(b).lower()


@dataclass(frozen=True)
class Trade:
    """A pending request to convert a strategy's input token(s) into token_out.

    ``token_in`` is one address, or several when the trade sources from
    multiple reward tokens at once.
    """

    strategy: str
    token_in: str | tuple[str, ...]
    token_out: str
    amount: int = 0
    min_amount_out: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.token_in, list):
            object.__setattr__(self, "token_in", tuple(self.token_in))

    @property
    def tokens_in(self) -> tuple[str, ...]:
        if isinstance(self.token_in, str):
            return (self.token_in,)
        return tuple(self.token_in)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Trade:
        token_in = raw["token_in"]
        return cls(
            strategy=raw["strategy"],
            token_in=token_in if isinstance(token_in, str) else tuple(token_in),
            token_out=raw["token_out"],
            amount=int(raw.get("amount") or 0),
            min_amount_out=int(raw.get("min_amount_out") or 0),
        )


@dataclass(frozen=True)
class TradeSetup:
    swapper_name: str
    transaction: dict[str, Any]
    calls: tuple[MulticallCall, ...] = ()
    data: str = "0x"
    expected_amount_out: int = 0


@dataclass
class SolveContext:
    """Mutable state threaded through a solver's legs.

    ``amounts`` tracks how much of each token is currently available to the
    next leg, keyed by lower-cased address.
    """

    chain_id: int
    strategy: str
    swapper: str
    simulator: Simulator
    quote_client: ZeroExClient
    calls: list[MulticallCall] = field(default_factory=list)
    amounts: dict[str, int] = field(default_factory=dict)
    log: Any = None

    def __post_init__(self) -> None:
        if self.log is None:
            self.log = logger.bind(strategy=self.strategy, swapper=self.swapper)

    def amount_of(self, token: str) -> int:
        return self.amounts.get(str(token).lower(), 0)

    def set_amount(self, token: str, amount: int) -> None:
        self.amounts[str(token).lower()] = int(amount)

    async def execute(self, call: MulticallCall) -> None:
        """Run *call* as the swapper and record it for the replay payload."""
        await self.simulator.execute(self.swapper, call)
        self.calls.append(call)
