import pytest

from keeper_paths.adapters.trade_factory_adapter.adapter import (
    TradeFactoryAdapter,
    trade_details,
)
from keeper_paths.core.constants.contracts import (
    CRV,
    CRV_SPELL_ETH,
    CVX,
    MULTICALL_SWAPPER_SPELL_ETH,
    STRATEGY_CONVEX_SPELL_ETH,
    TRADE_FACTORY,
)
from keeper_paths.core.constants.trade_factory_abi import (
    EXECUTE_MULTIPLE_SIGNATURE,
    EXECUTE_SINGLE_SIGNATURE,
    TRADE_FACTORY_ABI,
)
from keeper_paths.testing.fakes import decode_calldata

KEEPER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def _details(token_in: str, amount: int, min_out: int):
    return trade_details(
        STRATEGY_CONVEX_SPELL_ETH, token_in, CRV_SPELL_ETH, amount, min_out
    )


def test_adapter_type():
    adapter = TradeFactoryAdapter(address=TRADE_FACTORY[1])
    assert adapter.adapter_type == "TRADE_FACTORY"


def test_address_from_config(restore_global_config):
    import keeper_paths.core.config as config

    config.set_config({"yswaps": {"trade_factory": KEEPER.lower()}})
    assert TradeFactoryAdapter().address == KEEPER


def test_unknown_chain_without_address_raises(restore_global_config):
    import keeper_paths.core.config as config

    config.set_config({})
    with pytest.raises(ValueError, match="No trade factory configured"):
        TradeFactoryAdapter(chain_id=250)


def test_single_descriptor_uses_single_overload():
    adapter = TradeFactoryAdapter(address=TRADE_FACTORY[1], from_address=KEEPER)
    tx = adapter.populate_execute(
        _details(CRV, 1000, 900), MULTICALL_SWAPPER_SPELL_ETH, "0xabcd"
    )

    assert tx["chainId"] == 1
    assert tx["from"] == KEEPER
    assert tx["value"] == 0
    signature, args = decode_calldata(TRADE_FACTORY_ABI, tx["data"])
    assert signature == EXECUTE_SINGLE_SIGNATURE
    details = args["_tradeExecutionDetails"]
    assert details["_tokenIn"] == CRV
    assert (details["_amount"], details["_minAmountOut"]) == (1000, 900)
    assert args["_swapper"].lower() == MULTICALL_SWAPPER_SPELL_ETH.lower()
    assert args["_data"] == b"\xab\xcd"


def test_list_uses_batched_overload():
    adapter = TradeFactoryAdapter(address=TRADE_FACTORY[1])
    tx = adapter.populate_execute(
        [_details(CRV, 1000, 0), _details(CVX, 500, 0)],
        MULTICALL_SWAPPER_SPELL_ETH,
        b"\x01",
    )

    assert "from" not in tx
    signature, args = decode_calldata(TRADE_FACTORY_ABI, tx["data"])
    assert signature == EXECUTE_MULTIPLE_SIGNATURE
    assert [
        (d["_tokenIn"], d["_amount"]) for d in args["_tradesExecutionDetails"]
    ] == [(CRV, 1000), (CVX, 500)]


def test_empty_batch_raises():
    adapter = TradeFactoryAdapter(address=TRADE_FACTORY[1])
    with pytest.raises(ValueError, match="at least one trade"):
        adapter.populate_execute([], MULTICALL_SWAPPER_SPELL_ETH, "0x")
