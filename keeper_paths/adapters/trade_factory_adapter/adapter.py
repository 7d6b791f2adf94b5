from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypedDict

from eth_utils import to_checksum_address

from keeper_paths.core.adapters.BaseAdapter import BaseAdapter
from keeper_paths.core.config import get_yswaps_config
from keeper_paths.core.constants.chains import CHAIN_ID_ETHEREUM
from keeper_paths.core.constants.contracts import TRADE_FACTORY
from keeper_paths.core.constants.trade_factory_abi import (
    EXECUTE_MULTIPLE_SIGNATURE,
    EXECUTE_SINGLE_SIGNATURE,
    TRADE_FACTORY_ABI,
)
from keeper_paths.core.utils.transaction import encode_calldata


class TradeExecutionDetails(TypedDict):
    _strategy: str
    _tokenIn: str
    _tokenOut: str
    _amount: int
    _minAmountOut: int


def trade_details(
    strategy: str,
    token_in: str,
    token_out: str,
    amount: int,
    min_amount_out: int,
) -> TradeExecutionDetails:
    return {
        "_strategy": to_checksum_address(strategy),
        "_tokenIn": to_checksum_address(token_in),
        "_tokenOut": to_checksum_address(token_out),
        "_amount": int(amount),
        "_minAmountOut": int(min_amount_out),
    }


class TradeFactoryAdapter(BaseAdapter):
    """Populates (never sends) yswaps trade factory ``execute`` transactions."""

    adapter_type = "TRADE_FACTORY"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int = CHAIN_ID_ETHEREUM,
        address: str | None = None,
        from_address: str | None = None,
    ) -> None:
        super().__init__("trade_factory_adapter", config, chain_id=chain_id)
        self.address = self.resolve_address(
            address,
            self.config.get("address"),
            get_yswaps_config().get("trade_factory"),
            TRADE_FACTORY.get(self.chain_id),
            missing=f"No trade factory configured for chain {chain_id}",
        )
        self.from_address = from_address

    def populate_execute(
        self,
        trades: TradeExecutionDetails | Sequence[TradeExecutionDetails],
        swapper: str,
        data: str | bytes,
    ) -> dict[str, Any]:
        """Build the ``execute`` transaction.

        A single descriptor selects the single-trade overload; a list selects
        the batched overload.
        """
        if isinstance(trades, dict):
            signature = EXECUTE_SINGLE_SIGNATURE
            trades_arg: Any = trades
        else:
            signature = EXECUTE_MULTIPLE_SIGNATURE
            trades_arg = list(trades)
            if not trades_arg:
                raise ValueError("populate_execute needs at least one trade")

        call_data = encode_calldata(
            TRADE_FACTORY_ABI,
            "execute",
            [trades_arg, to_checksum_address(swapper), data],
            signature=signature,
        )
        transaction: dict[str, Any] = {
            "chainId": self.chain_id,
            "to": self.address,
            "data": call_data,
            "value": 0,
        }
        if self.from_address:
            transaction["from"] = to_checksum_address(self.from_address)
        self.logger.debug(f"Populated {signature} for swapper {swapper}")
        return transaction
