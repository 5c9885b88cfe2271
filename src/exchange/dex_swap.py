"""
Single-hop Uniswap V3 swap through SwapRouter02.exactInputSingle.

Two pieces:

  1. ``prepare_swap_params`` — assemble the router argument struct from the
     pool metadata and a pre-scaled input amount.
  2. ``execute_swap`` — submit the swap and block until it is mined.

Slippage protection is opt-in: ``amount_out_minimum`` and
``sqrt_price_limit_x96`` default to zero (accept any output, no price limit).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from chain.client import TxReceipt
from chain.contract import ContractProxy
from core.base_types import Address, Token
from core.errors import SwapExecutionError
from core.wallet_manager import WalletManager
from pricing.pool_lookup import PoolInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapParams:
    """Arguments of ``exactInputSingle``; all amounts are raw integers."""

    token_in: Address
    token_out: Address
    fee: int
    recipient: Address
    amount_in: int
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0

    def as_tuple(self) -> tuple:
        return (
            self.token_in.checksum,
            self.token_out.checksum,
            self.fee,
            self.recipient.checksum,
            self.amount_in,
            self.amount_out_minimum,
            self.sqrt_price_limit_x96,
        )


def prepare_swap_params(
    pool_info: PoolInfo,
    token_in: Token,
    token_out: Token,
    recipient: Address | str,
    amount_in: int,
    *,
    amount_out_minimum: int = 0,
    sqrt_price_limit_x96: int = 0,
) -> SwapParams:
    """
    Build the swap struct for ``amount_in`` (already in token_in's smallest
    unit) using the fee tier read during pool lookup.
    """
    if not isinstance(amount_in, int) or amount_in < 0:
        raise ValueError(f"amount_in must be a non-negative integer, got {amount_in!r}")
    if amount_out_minimum < 0 or sqrt_price_limit_x96 < 0:
        raise ValueError("slippage bounds must be non-negative")
    for token in (token_in, token_out):
        if not pool_info.contains(token):
            raise ValueError(
                f"{token.symbol} is not in pool {pool_info.address.checksum}"
            )

    return SwapParams(
        token_in=token_in.address,
        token_out=token_out.address,
        fee=pool_info.fee,
        recipient=Address.from_string(recipient),
        amount_in=amount_in,
        amount_out_minimum=int(amount_out_minimum),
        sqrt_price_limit_x96=int(sqrt_price_limit_x96),
    )


async def execute_swap(
    router: ContractProxy,
    params: SwapParams,
    wallet: WalletManager,
    timeout: float = 120.0,
) -> TxReceipt:
    """Submit ``exactInputSingle(params)`` and wait for the receipt."""
    logger.info(
        "Sending swap: in=%d %s -> %s fee=%d min_out=%d",
        params.amount_in,
        params.token_in.checksum,
        params.token_out.checksum,
        params.fee,
        params.amount_out_minimum,
    )
    try:
        receipt = await asyncio.to_thread(
            router.transact,
            "exactInputSingle",
            params.as_tuple(),
            wallet=wallet,
            timeout=timeout,
        )
    except Exception as exc:
        logger.error("Swap execution failed: %s", exc)
        raise SwapExecutionError(f"Swap execution failed: {exc}") from exc

    logger.info(
        "Swap confirmed: tx=%s gas=%d", receipt.tx_hash, receipt.gas_used
    )
    return receipt
