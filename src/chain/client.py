"""
ChainClient: thin synchronous wrapper around a web3 HTTP provider.

Two kinds of traffic go through it:

  * ``call()`` — read-only ``eth_call`` returning raw ABI bytes.
  * ``send_and_wait()`` — build, sign, broadcast a transaction and block
    until the node returns its receipt.

No retries are attempted.  Timeouts are the provider's request timeout
plus the receipt wait timeout passed by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from web3 import Web3

from core.base_types import TransactionRequest
from core.wallet_manager import WalletManager

logger = logging.getLogger(__name__)

DEFAULT_GAS_BUFFER = 1.2


@dataclass
class TxReceipt:
    """Subset of a transaction receipt consumed by the steps."""

    tx_hash: str
    status: bool
    block_number: int
    gas_used: int

    @classmethod
    def from_web3(cls, raw) -> "TxReceipt":
        tx_hash = raw["transactionHash"]
        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = Web3.to_hex(tx_hash)
        return cls(
            tx_hash=str(tx_hash),
            status=bool(raw.get("status", 0)),
            block_number=int(raw.get("blockNumber") or 0),
            gas_used=int(raw.get("gasUsed") or 0),
        )


class TransactionRevertedError(Exception):
    """
    Raised when the tx was mined with status == 0.
    Gas was already paid; the chain executed and reverted.
    """

    def __init__(self, receipt: TxReceipt, msg: str = "Transaction reverted"):
        super().__init__(f"{msg} (tx={receipt.tx_hash})")
        self.receipt = receipt
        self.tx_hash = receipt.tx_hash


class ChainClient:
    """
    Connection to one JSON-RPC endpoint.

    Usage::

        client = ChainClient("https://sepolia.example/rpc", chain_id=11155111)
        raw = client.call(TransactionRequest(to=pool, data=selector))
        receipt = client.send_and_wait(request, wallet, timeout=120)
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: Optional[int] = None,
        timeout_seconds: float = 30.0,
        gas_buffer: float = DEFAULT_GAS_BUFFER,
    ) -> None:
        if not rpc_url:
            raise ValueError("rpc_url is required")
        self._rpc_url = rpc_url
        self._chain_id = chain_id
        self._gas_buffer = gas_buffer
        self.w3 = Web3(
            Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_seconds})
        )

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(self.w3.eth.chain_id)
        return self._chain_id

    def is_connected(self) -> bool:
        return bool(self.w3.is_connected())

    # ── reads ─────────────────────────────────────────────────

    def call(self, request: TransactionRequest) -> bytes:
        """Execute ``eth_call`` and return the raw return data."""
        return bytes(self.w3.eth.call(request.to_call_params()))

    # ── writes ────────────────────────────────────────────────

    def send_and_wait(
        self,
        request: TransactionRequest,
        wallet: WalletManager,
        timeout: float = 120.0,
    ) -> TxReceipt:
        """
        Sign ``request`` with ``wallet``, broadcast it and wait for the receipt.

        Raises:
            TransactionRevertedError: mined with status == 0.
            Any web3 / transport error: estimation, broadcast or wait failed.
        """
        tx = self._build_tx(request, wallet)
        raw_tx = wallet.sign_transaction(tx)
        tx_hash = Web3.to_hex(self.w3.eth.send_raw_transaction(raw_tx))
        logger.info("Transaction sent: %s", tx_hash)

        raw_receipt = self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=timeout
        )
        receipt = TxReceipt.from_web3(raw_receipt)
        if not receipt.status:
            logger.warning(
                "Transaction reverted: tx=%s gas=%d", receipt.tx_hash, receipt.gas_used
            )
            raise TransactionRevertedError(receipt)
        logger.debug(
            "Transaction confirmed: tx=%s block=%d gas=%d",
            receipt.tx_hash,
            receipt.block_number,
            receipt.gas_used,
        )
        return receipt

    def _build_tx(self, request: TransactionRequest, wallet: WalletManager) -> dict:
        sender = wallet.address
        tx: dict = {
            "from": sender,
            "to": request.to.checksum,
            "data": "0x" + request.data.hex(),
            "value": int(request.value),
            "nonce": self.w3.eth.get_transaction_count(sender),
            "chainId": request.chain_id or self.chain_id,
        }
        if request.gas is not None:
            tx["gas"] = int(request.gas)
        else:
            estimate = int(self.w3.eth.estimate_gas(tx))
            tx["gas"] = int(estimate * self._gas_buffer)
        tx["gasPrice"] = int(self.w3.eth.gas_price)
        return tx
