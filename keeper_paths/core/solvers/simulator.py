from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from keeper_paths.adapters.multicall_adapter.adapter import MulticallCall


class Simulator(Protocol):
    """State a solver reads from and writes to while building a trade.

    Implementations execute calls as the given sender against a scratch copy
    of chain state; nothing done through a simulator is ever broadcast.
    """

    def impersonating(self, *accounts: str) -> AbstractAsyncContextManager[None]: ...

    async def balance_of(self, token: str, account: str) -> int: ...

    async def allowance(self, token: str, owner: str, spender: str) -> int: ...

    async def execute(self, sender: str, call: MulticallCall) -> None: ...
