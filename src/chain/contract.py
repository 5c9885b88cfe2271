"""
Contract proxies: typed handles bound to an address and an interface.

Calldata is built the same way for every contract: 4-byte keccak selector
of the canonical signature followed by the ``eth_abi`` encoding of the
arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import keccak

from core.base_types import Address, TransactionRequest
from core.wallet_manager import WalletManager

from .client import ChainClient, TxReceipt


@dataclass(frozen=True)
class ContractFunction:
    """One method of a contract interface."""

    name: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        return keccak(text=self.signature)[:4]

    def encode(self, *args: Any) -> bytes:
        if len(args) != len(self.inputs):
            raise TypeError(
                f"{self.signature} expects {len(self.inputs)} args, got {len(args)}"
            )
        return self.selector + abi_encode(list(self.inputs), list(args))

    def decode(self, raw: bytes) -> tuple:
        if not self.outputs:
            return ()
        return tuple(abi_decode(list(self.outputs), raw))


class ContractProxy:
    """
    Handle on a deployed contract.

    ``call`` runs a view method and returns the decoded value (a single
    value is unwrapped).  ``transact`` submits a state-changing method and
    blocks until it is confirmed.
    """

    def __init__(
        self,
        client: ChainClient,
        address: Address | str,
        interface: Mapping[str, ContractFunction],
        label: str = "",
    ) -> None:
        self.client = client
        self.address = Address.from_string(address)
        self._interface = dict(interface)
        self.label = label or self.address.checksum

    def function(self, name: str) -> ContractFunction:
        try:
            return self._interface[name]
        except KeyError:
            raise AttributeError(f"{self.label} has no method {name!r}") from None

    def build(self, name: str, *args: Any) -> TransactionRequest:
        return TransactionRequest(
            to=self.address, data=self.function(name).encode(*args)
        )

    def call(self, name: str, *args: Any, from_address: Optional[Address] = None) -> Any:
        fn = self.function(name)
        request = self.build(name, *args)
        request.from_address = from_address
        values = fn.decode(self.client.call(request))
        if len(values) == 1:
            return values[0]
        return values

    def transact(
        self,
        name: str,
        *args: Any,
        wallet: WalletManager,
        timeout: float = 120.0,
    ) -> TxReceipt:
        request = self.build(name, *args)
        request.from_address = wallet.checksum_address
        return self.client.send_and_wait(request, wallet, timeout=timeout)

    def __repr__(self) -> str:
        return f"ContractProxy({self.label}@{self.address.checksum})"
