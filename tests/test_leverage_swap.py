"""Tests for scripts/leverage_swap.py — argument defaults and exit status."""

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest

from chain import abis
from config import POOL_FACTORY_ADDRESS
from core.base_types import ZERO_ADDRESS
from core.tokens import LINK, USDC
from executor.engine import Executor, ExecutorConfig

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "leverage_swap.py"
LEVERAGE_CONTRACT = "0x" + "1e" * 20
POOL = "0x" + "5a" * 20
TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

GET_POOL = abis.UNISWAP_V3_FACTORY["getPool"]


def _load_script():
    module_spec = importlib.util.spec_from_file_location("leverage_swap", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture()
def script(monkeypatch):
    module = _load_script()
    monkeypatch.setattr(module, "_setup_logging", lambda: None)
    return module


@pytest.fixture()
def executor(chain, wallet, monkeypatch):
    instance = Executor(chain, wallet, ExecutorConfig(leverage_contract=LEVERAGE_CONTRACT))
    monkeypatch.setattr(Executor, "from_env", lambda: instance)
    return instance


def _register_pool(chain, pool=POOL):
    chain.respond(POOL_FACTORY_ADDRESS, GET_POOL, pool)
    chain.respond(pool, abis.UNISWAP_V3_POOL["token0"], USDC.address.checksum)
    chain.respond(pool, abis.UNISWAP_V3_POOL["token1"], LINK.address.checksum)
    chain.respond(pool, abis.UNISWAP_V3_POOL["fee"], 3000)


def test_successful_run_exits_zero(script, executor, chain, capsys):
    _register_pool(chain)
    assert script.main(["2.5", "3"]) == 0
    assert len(chain.sent) == 3
    assert "LEVERAGED SWAP REPORT" in capsys.readouterr().out


def test_missing_pool_exits_one(script, executor, chain):
    chain.respond(POOL_FACTORY_ADDRESS, GET_POOL, ZERO_ADDRESS)
    assert script.main(["1", "2"]) == 1
    # only the approval went out
    assert len(chain.sent) == 1


def test_defaults_reach_run(script, executor, chain, monkeypatch):
    _register_pool(chain)
    seen = []
    run = executor.run

    async def recording_run(swap_amount, leverage_multiplier):
        seen.append((swap_amount, leverage_multiplier))
        return await run(swap_amount, leverage_multiplier)

    monkeypatch.setattr(executor, "run", recording_run)
    assert script.main([]) == 0
    assert seen == [("1", 2)]


def test_invalid_leverage_contract_exits_one(script):
    env = {
        "RPC_URL": "http://127.0.0.1:8545",
        "PRIVATE_KEY": TEST_KEY,
        "LEVERAGE_CONTRACT_ADDRESS": "0xYourAlphaHomoraAddress",
    }
    with patch.dict("os.environ", env, clear=True):
        assert script.main(["1", "2"]) == 1


def test_invalid_private_key_exits_one(script):
    env = {
        "RPC_URL": "http://127.0.0.1:8545",
        "PRIVATE_KEY": "0xnotakey",
        "LEVERAGE_CONTRACT_ADDRESS": LEVERAGE_CONTRACT,
    }
    with patch.dict("os.environ", env, clear=True):
        assert script.main(["1", "2"]) == 1
