"""Test configuration: import paths plus an in-memory chain client."""

from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest


def _ensure_src_on_path() -> None:
    src_path = Path(__file__).resolve().parents[1] / "src"
    src_value = str(src_path)
    if src_value not in sys.path:
        sys.path.insert(0, src_value)


_ensure_src_on_path()

from eth_abi import decode as abi_decode  # noqa: E402
from eth_abi import encode as abi_encode  # noqa: E402

from chain.client import TxReceipt  # noqa: E402
from chain.contract import ContractFunction  # noqa: E402
from core.base_types import Address, TransactionRequest  # noqa: E402
from core.wallet_manager import WalletManager  # noqa: E402

# Anvil / Hardhat default account #0 — public test key, never funded on mainnet.
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_WALLET_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class FakeChainClient:
    """
    Stands in for ChainClient.

    ``eth_call`` answers are registered per (contract, method) and returned
    ABI-encoded; submitted transactions are recorded and get sequential
    fake hashes.  Failures can be injected per contract.
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, bytes], object] = {}
        self._send_errors: dict[str, Exception] = {}
        self._lock = threading.Lock()
        self.calls: list[TransactionRequest] = []
        self.sent: list[TransactionRequest] = []
        self.chain_id = 11155111

    # ── setup ────────────────────────────────────────────────

    def respond(self, address: str, fn: ContractFunction, *values) -> None:
        key = (Address.from_string(address).lower, fn.selector)
        self._responses[key] = abi_encode(list(fn.outputs), list(values))

    def fail_call(self, address: str, fn: ContractFunction, exc: Exception) -> None:
        self._responses[(Address.from_string(address).lower, fn.selector)] = exc

    def fail_send(self, address: str, exc: Exception) -> None:
        self._send_errors[Address.from_string(address).lower] = exc

    # ── ChainClient surface ──────────────────────────────────

    def call(self, request: TransactionRequest) -> bytes:
        with self._lock:
            self.calls.append(request)
        response = self._responses.get((request.to.lower, request.data[:4]))
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise RuntimeError("execution reverted")
        return response

    def send_and_wait(
        self, request: TransactionRequest, wallet: WalletManager, timeout: float = 120.0
    ) -> TxReceipt:
        with self._lock:
            self.sent.append(request)
            error = self._send_errors.get(request.to.lower)
            if error is not None:
                raise error
            n = len(self.sent)
        return TxReceipt(
            tx_hash=f"0x{n:064x}",
            status=True,
            block_number=1000 + n,
            gas_used=100_000,
        )

    # ── inspection helpers ───────────────────────────────────

    def sent_to(self) -> list[str]:
        return [r.to.checksum for r in self.sent]

    def calls_to(self, fn: ContractFunction) -> list[TransactionRequest]:
        return [r for r in self.calls if r.data[:4] == fn.selector]

    @staticmethod
    def decode_args(fn: ContractFunction, request: TransactionRequest) -> tuple:
        assert request.data[:4] == fn.selector
        return tuple(abi_decode(list(fn.inputs), request.data[4:]))


@pytest.fixture()
def chain() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture()
def wallet() -> WalletManager:
    return WalletManager(TEST_PRIVATE_KEY)
