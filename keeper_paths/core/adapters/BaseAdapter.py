from __future__ import annotations

import functools
from abc import ABC
from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address
from loguru import logger

from keeper_paths.core.constants.chains import CHAIN_EXPLORER_URLS


def require_wallet(fn: Callable) -> Callable:
    """Return ``(False, ...)`` early if the keeper wallet is not set."""

    @functools.wraps(fn)
    async def wrapper(self: BaseAdapter, *args: Any, **kwargs: Any) -> Any:
        if not getattr(self, "wallet_address", None):
            return False, "keeper wallet address not configured"
        return await fn(self, *args, **kwargs)

    return wrapper


class BaseAdapter(ABC):
    """Common state for adapters bound to one contract on one chain."""

    adapter_type: str | None = None

    def __init__(
        self,
        name: str,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int | None = None,
    ):
        self.name = name
        self.config = config or {}
        self.chain_id = int(chain_id) if chain_id is not None else None
        self.logger = logger.bind(adapter=self.__class__.__name__)

    @staticmethod
    def resolve_address(*candidates: str | None, missing: str) -> str:
        """First configured candidate, checksummed; ``missing`` is the error."""
        for candidate in candidates:
            if candidate:
                return to_checksum_address(candidate)
        raise ValueError(missing)

    def explorer_url(self, tx_hash: str) -> str | None:
        base = CHAIN_EXPLORER_URLS.get(self.chain_id or 0)
        return f"{base}tx/{tx_hash}" if base else None

    async def close(self) -> None:
        pass
