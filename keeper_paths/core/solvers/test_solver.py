import pytest

from keeper_paths.adapters.multicall_adapter.adapter import merge_transactions
from keeper_paths.adapters.trade_factory_adapter.adapter import TradeFactoryAdapter
from keeper_paths.core.constants.base import DEFAULT_SLIPPAGE, MAX_UINT256
from keeper_paths.core.constants.contracts import (
    CRV,
    CRV_SPELL_ETH,
    CURVE_3POOL,
    CURVE_SPELL_ETH_POOL,
    CVX,
    MULTICALL_SWAPPER_SPELL_ETH,
    MULTICALL_SWAPPER_THREE_POOL,
    NATIVE_TOKEN_ADDRESS,
    STRATEGY_CONVEX_SPELL_ETH,
    STRATEGY_YVBOOST_3CRV,
    THREE_CRV,
    TRADE_FACTORY,
    USDC,
    WETH,
    YVBOOST,
    YVECRV,
    ZRX_EXCHANGE_PROXY,
)
from keeper_paths.core.constants.curve_abi import (
    CURVE_CRYPTO_ETH_POOL_ABI,
    CURVE_STABLE_POOL_ABI,
)
from keeper_paths.core.constants.erc20_abi import ERC20_ABI
from keeper_paths.core.constants.trade_factory_abi import (
    EXECUTE_MULTIPLE_SIGNATURE,
    EXECUTE_SINGLE_SIGNATURE,
    TRADE_FACTORY_ABI,
)
from keeper_paths.core.constants.weth_abi import WETH_ABI
from keeper_paths.core.constants.yearn_vault_abi import YEARN_VAULT_ABI
from keeper_paths.core.solvers.legs import retain_dust
from keeper_paths.core.solvers.solver import MulticallSolver, NothingToSolveError
from keeper_paths.core.solvers.types import Trade
from keeper_paths.core.utils.transaction import TransactionRevertedError
from keeper_paths.solvers.registry import (
    CURVE_SPELL_ETH_MULTICALL,
    THREE_POOL_CRV_MULTICALL,
)
from keeper_paths.testing.fakes import decode_calldata

ZRX = ZRX_EXCHANGE_PROXY[1]
THREE_POOL_TRADE = Trade(
    strategy=STRATEGY_YVBOOST_3CRV, token_in=THREE_CRV, token_out=YVECRV
)
SPELL_ETH_TRADE = Trade(
    strategy=STRATEGY_CONVEX_SPELL_ETH, token_in=(CRV, CVX), token_out=CRV_SPELL_ETH
)


def _signature(abi, call) -> str:
    return decode_calldata(abi, call.call_data)[0]


def _trade_factory() -> TradeFactoryAdapter:
    return TradeFactoryAdapter(address=TRADE_FACTORY[1])


def _install_zrx(sim, quotes, outputs: dict[str, int]) -> None:
    """Swap effect on the exchange proxy driven by the last quote request."""

    def swap(sim, sender, call):
        request = quotes.requests[-1]
        sim.move(request["sell_token"], sender, None, request["sell_amount"])
        sim.move(request["buy_token"], None, sender, outputs[request["sell_token"]])

    sim.on_call(ZRX, swap)


def _three_pool_world(sim, quotes, *, lp=100, usdc_out=50, yvboost_out=40, out=45):
    sim.set_balance(THREE_CRV, STRATEGY_YVBOOST_3CRV, lp)

    def remove_liquidity(sim, sender, call):
        _, args = decode_calldata(CURVE_STABLE_POOL_ABI, call.call_data)
        assert args["i"] == 1
        sim.move(THREE_CRV, sender, None, args["_token_amount"])
        sim.move(USDC, None, sender, usdc_out)

    def vault_withdraw(sim, sender, call):
        _, args = decode_calldata(YEARN_VAULT_ABI, call.call_data)
        sim.move(YVBOOST, sender, None, yvboost_out)
        sim.move(YVECRV, None, args["recipient"], out)

    sim.on_call(CURVE_3POOL, remove_liquidity)
    sim.on_call(YVBOOST, vault_withdraw)
    quotes.add_quote(
        USDC, YVBOOST, {"data": "0xd9627aa4", "allowance_target": ZRX, "to": ZRX}
    )
    _install_zrx(sim, quotes, {USDC: yvboost_out})


def _spell_eth_world(sim, quotes, *, crv=1000, cvx=500, out=7):
    sim.set_balance(CRV, STRATEGY_CONVEX_SPELL_ETH, crv)
    sim.set_balance(CVX, STRATEGY_CONVEX_SPELL_ETH, cvx)

    def unwrap(sim, sender, call):
        _, args = decode_calldata(WETH_ABI, call.call_data)
        sim.move(WETH, sender, None, args["wad"])
        sim.move(NATIVE_TOKEN_ADDRESS, None, sender, args["wad"])

    def add_liquidity(sim, sender, call):
        _, args = decode_calldata(CURVE_CRYPTO_ETH_POOL_ABI, call.call_data)
        sim.move(NATIVE_TOKEN_ADDRESS, sender, None, call.value)
        sim.move(CRV_SPELL_ETH, None, args["receiver"], out)

    sim.on_call(WETH, unwrap)
    sim.on_call(CURVE_SPELL_ETH_POOL, add_liquidity)
    quotes.add_quote(CRV, WETH, {"data": "0xaaaa0001", "allowance_target": ZRX})
    quotes.add_quote(CVX, WETH, {"data": "0xaaaa0002", "allowance_target": ZRX})
    _install_zrx(sim, quotes, {CRV: 3, CVX: 2})


class TestMatch:
    def test_three_pool_matches_case_insensitively(self, fake_simulator):
        solver = MulticallSolver(THREE_POOL_CRV_MULTICALL, simulator=fake_simulator)
        trade = Trade(
            strategy=STRATEGY_YVBOOST_3CRV.lower(),
            token_in=[THREE_CRV.upper().replace("0X", "0x")],
            token_out=YVECRV.lower(),
        )
        assert solver.match(trade)

    def test_wrong_token_out_does_not_match(self, fake_simulator):
        solver = MulticallSolver(THREE_POOL_CRV_MULTICALL, simulator=fake_simulator)
        trade = Trade(STRATEGY_YVBOOST_3CRV, THREE_CRV, USDC)
        assert not solver.match(trade)

    def test_multi_source_needs_exact_input_set(self, fake_simulator):
        solver = MulticallSolver(CURVE_SPELL_ETH_MULTICALL, simulator=fake_simulator)
        assert solver.match(
            Trade(STRATEGY_CONVEX_SPELL_ETH, (CVX, CRV), CRV_SPELL_ETH)
        )
        assert not solver.match(Trade(STRATEGY_CONVEX_SPELL_ETH, CRV, CRV_SPELL_ETH))
        assert not solver.match(Trade(STRATEGY_YVBOOST_3CRV, (CRV, CVX), CRV_SPELL_ETH))


class TestRetainDust:
    def test_full_balance_keeps_one_wei(self):
        assert retain_dust(50, 50) == 49

    def test_partial_balance_forwards_delta(self):
        assert retain_dust(50, 60) == 50

    def test_zero_delta_stays_zero(self):
        assert retain_dust(0, 0) == 0
        assert retain_dust(-5, 0) == 0


@pytest.mark.asyncio
class TestThreePoolSolver:
    async def test_builds_single_trade_execute(self, fake_simulator, fake_quote_client):
        _three_pool_world(fake_simulator, fake_quote_client)
        solver = MulticallSolver(
            THREE_POOL_CRV_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        setup = await solver.solve(THREE_POOL_TRADE, _trade_factory())

        assert fake_simulator.impersonated == [
            STRATEGY_YVBOOST_3CRV,
            MULTICALL_SWAPPER_THREE_POOL,
        ]
        assert [c.target for c in setup.calls] == [CURVE_3POOL, USDC, ZRX, YVBOOST]
        remove, approve, swap, withdraw = setup.calls
        assert decode_calldata(CURVE_STABLE_POOL_ABI, remove.call_data)[1] == {
            "_token_amount": 100,
            "i": 1,
            "min_amount": 0,
        }
        assert decode_calldata(ERC20_ABI, approve.call_data)[1]["amount"] == MAX_UINT256
        assert swap.call_data == "0xd9627aa4"
        _, args = decode_calldata(YEARN_VAULT_ABI, withdraw.call_data)
        assert (args["maxShares"], args["maxLoss"]) == (MAX_UINT256, 0)
        assert args["recipient"].lower() == STRATEGY_YVBOOST_3CRV.lower()

        # the whole fresh USDC balance was received, so one wei stays behind
        assert fake_quote_client.requests == [
            {
                "chain_id": 1,
                "sell_token": USDC,
                "buy_token": YVBOOST,
                "sell_amount": 49,
                "slippage_percentage": DEFAULT_SLIPPAGE,
            }
        ]
        assert setup.expected_amount_out == 45
        assert setup.swapper_name == "ThreePoolCrvMulticall"
        assert setup.data == merge_transactions(setup.calls)

        tx = setup.transaction
        assert tx["to"].lower() == TRADE_FACTORY[1].lower()
        signature, args = decode_calldata(TRADE_FACTORY_ABI, tx["data"])
        assert signature == EXECUTE_SINGLE_SIGNATURE
        details = args["_tradeExecutionDetails"]
        assert [a.lower() for a in list(details.values())[:3]] == [
            STRATEGY_YVBOOST_3CRV.lower(),
            THREE_CRV.lower(),
            YVECRV.lower(),
        ]
        assert (details["_amount"], details["_minAmountOut"]) == (100, 45)
        assert args["_swapper"].lower() == MULTICALL_SWAPPER_THREE_POOL.lower()
        assert args["_data"] == bytes.fromhex(setup.data[2:])

    async def test_simulated_calls_match_replayed_calls(
        self, fake_simulator, fake_quote_client
    ):
        _three_pool_world(fake_simulator, fake_quote_client)
        solver = MulticallSolver(
            THREE_POOL_CRV_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        setup = await solver.solve(THREE_POOL_TRADE, _trade_factory())

        pull, *swapper_calls = fake_simulator.executed
        assert pull[0] == STRATEGY_YVBOOST_3CRV
        assert _signature(ERC20_ABI, pull[1]) == "transfer(address,uint256)"
        assert [call for _, call in swapper_calls] == list(setup.calls)
        assert {sender for sender, _ in swapper_calls} == {
            MULTICALL_SWAPPER_THREE_POOL
        }

    async def test_skips_approval_when_allowance_suffices(
        self, fake_simulator, fake_quote_client
    ):
        _three_pool_world(fake_simulator, fake_quote_client)
        fake_simulator.set_allowance(
            USDC, MULTICALL_SWAPPER_THREE_POOL, ZRX, MAX_UINT256
        )
        solver = MulticallSolver(
            THREE_POOL_CRV_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        setup = await solver.solve(THREE_POOL_TRADE, _trade_factory())

        assert [c.target for c in setup.calls] == [CURVE_3POOL, ZRX, YVBOOST]

    async def test_existing_swapper_balance_forwards_full_delta(
        self, fake_simulator, fake_quote_client
    ):
        _three_pool_world(fake_simulator, fake_quote_client)
        fake_simulator.set_balance(USDC, MULTICALL_SWAPPER_THREE_POOL, 10)
        solver = MulticallSolver(
            THREE_POOL_CRV_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        await solver.solve(THREE_POOL_TRADE, _trade_factory())

        assert fake_quote_client.requests[0]["sell_amount"] == 50

    async def test_zero_balance_aborts_before_any_call(
        self, fake_simulator, fake_quote_client
    ):
        _three_pool_world(fake_simulator, fake_quote_client, lp=0)
        solver = MulticallSolver(
            THREE_POOL_CRV_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        with pytest.raises(NothingToSolveError):
            await solver.solve(THREE_POOL_TRADE, _trade_factory())

        assert fake_simulator.executed == []
        assert fake_quote_client.requests == []

    async def test_revert_propagates(self, fake_simulator, fake_quote_client):
        _three_pool_world(fake_simulator, fake_quote_client)
        fake_simulator.reverting.add(CURVE_3POOL.lower())
        solver = MulticallSolver(
            THREE_POOL_CRV_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        with pytest.raises(TransactionRevertedError):
            await solver.solve(THREE_POOL_TRADE, _trade_factory())


@pytest.mark.asyncio
class TestSpellEthSolver:
    async def test_builds_batched_execute(self, fake_simulator, fake_quote_client):
        _spell_eth_world(fake_simulator, fake_quote_client)
        solver = MulticallSolver(
            CURVE_SPELL_ETH_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        setup = await solver.solve(SPELL_ETH_TRADE, _trade_factory())

        assert [c.target for c in setup.calls] == [
            CRV,
            ZRX,
            CVX,
            ZRX,
            WETH,
            CURVE_SPELL_ETH_POOL,
        ]
        # quotes without a "to" go to the exchange proxy
        assert setup.calls[1].call_data == "0xaaaa0001"
        assert setup.calls[3].call_data == "0xaaaa0002"
        assert decode_calldata(WETH_ABI, setup.calls[4].call_data)[1] == {"wad": 5}

        add = setup.calls[5]
        assert add.value == 5
        _, args = decode_calldata(CURVE_CRYPTO_ETH_POOL_ABI, add.call_data)
        assert list(args["amounts"]) == [5, 0]
        assert (args["min_mint_amount"], args["use_eth"]) == (0, True)
        assert args["receiver"].lower() == STRATEGY_CONVEX_SPELL_ETH.lower()
        assert setup.expected_amount_out == 7

        signature, args = decode_calldata(TRADE_FACTORY_ABI, setup.transaction["data"])
        assert signature == EXECUTE_MULTIPLE_SIGNATURE
        assert [
            (d["_tokenIn"], d["_amount"], d["_minAmountOut"])
            for d in args["_tradesExecutionDetails"]
        ] == [(CRV, 1000, 0), (CVX, 500, 0)]
        assert args["_swapper"].lower() == MULTICALL_SWAPPER_SPELL_ETH.lower()

    async def test_unfunded_source_is_skipped(self, fake_simulator, fake_quote_client):
        _spell_eth_world(fake_simulator, fake_quote_client, cvx=0)
        solver = MulticallSolver(
            CURVE_SPELL_ETH_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        setup = await solver.solve(SPELL_ETH_TRADE, _trade_factory())

        assert [r["sell_token"] for r in fake_quote_client.requests] == [CRV]
        assert [c.target for c in setup.calls] == [
            CRV,
            ZRX,
            WETH,
            CURVE_SPELL_ETH_POOL,
        ]
        _, args = decode_calldata(TRADE_FACTORY_ABI, setup.transaction["data"])
        assert [d["_tokenIn"] for d in args["_tradesExecutionDetails"]] == [CRV]
        assert decode_calldata(WETH_ABI, setup.calls[2].call_data)[1] == {"wad": 3}

    async def test_all_sources_empty_aborts(self, fake_simulator, fake_quote_client):
        _spell_eth_world(fake_simulator, fake_quote_client, crv=0, cvx=0)
        solver = MulticallSolver(
            CURVE_SPELL_ETH_MULTICALL,
            simulator=fake_simulator,
            quote_client=fake_quote_client,
        )

        with pytest.raises(NothingToSolveError):
            await solver.solve(SPELL_ETH_TRADE, _trade_factory())
