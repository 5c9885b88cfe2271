"""
Leverage open — borrow against a base amount and open a position on the
leverage contract in a single ``leverage(params)`` call.

    borrow = amount * (multiplier - 1)

A multiplier of 1 borrows nothing and is a plain (unlevered) open.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal

from chain.client import TxReceipt
from chain.contract import ContractProxy
from core.base_types import Address, Token
from core.errors import LeverageError
from core.wallet_manager import WalletManager

logger = logging.getLogger(__name__)


def compute_borrow_amount(amount: int, multiplier: int) -> int:
    """Raw amount to borrow so that amount + borrow == amount * multiplier."""
    if isinstance(multiplier, bool) or not isinstance(multiplier, int):
        raise ValueError(f"leverage multiplier must be an integer, got {multiplier!r}")
    if multiplier < 1:
        raise ValueError(f"leverage multiplier must be >= 1, got {multiplier}")
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    return amount * (multiplier - 1)


@dataclass(frozen=True)
class LeverageParams:
    token: Address  # token to receive
    amount: int
    borrow: int
    min_receive: int
    leverage: int

    @classmethod
    def build(
        cls,
        token: Token,
        amount: int,
        multiplier: int,
        min_receive: int = 0,
    ) -> "LeverageParams":
        if min_receive < 0:
            raise ValueError("min_receive must be non-negative")
        return cls(
            token=token.address,
            amount=amount,
            borrow=compute_borrow_amount(amount, multiplier),
            min_receive=int(min_receive),
            leverage=multiplier,
        )

    def as_tuple(self) -> tuple:
        return (
            self.token.checksum,
            self.amount,
            self.borrow,
            self.min_receive,
            self.leverage,
        )


async def open_leveraged_position(
    leverage_contract: ContractProxy,
    amount: Decimal | int | float | str,
    token_in: Token,
    token_out: Token,
    multiplier: int,
    wallet: WalletManager,
    *,
    min_receive: int = 0,
    timeout: float = 120.0,
) -> TxReceipt:
    """
    Open a ``multiplier``x position of ``amount`` (human units of token_in)
    into token_out.  Any failure is re-raised as ``LeverageError``.
    """
    try:
        raw_amount = token_in.amount(amount)
        params = LeverageParams.build(
            token_out, raw_amount.raw, multiplier, min_receive=min_receive
        )
        logger.info(
            "Opening leveraged position: amount=%s borrow=%d leverage=%dx token=%s",
            raw_amount,
            params.borrow,
            params.leverage,
            token_out.symbol,
        )
        receipt = await asyncio.to_thread(
            leverage_contract.transact,
            "leverage",
            params.as_tuple(),
            wallet=wallet,
            timeout=timeout,
        )
    except Exception as exc:
        logger.error("Leverage position failed: %s", exc)
        raise LeverageError() from exc

    logger.info("Leveraged position opened: tx=%s", receipt.tx_hash)
    return receipt
