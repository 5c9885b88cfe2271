from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

from chain import abis
from chain.client import ChainClient, TxReceipt
from chain.contract import ContractProxy
from core.base_types import Address, Token
from core.errors import ApprovalError
from core.wallet_manager import WalletManager

logger = logging.getLogger(__name__)


async def approve_token(
    client: ChainClient,
    token: Token,
    spender: Address,
    amount: Decimal | int | float | str,
    wallet: WalletManager,
    timeout: float = 120.0,
) -> TxReceipt:
    """
    Grant ``spender`` an allowance of ``amount`` (human units) of ``token``.

    Blocks until the approval is mined.  Every failure, including an amount
    that cannot be expressed at the token's precision, surfaces as
    ``ApprovalError``.
    """
    try:
        raw_amount = token.amount(amount)
        contract = ContractProxy(client, token.address, abis.ERC20, label=token.symbol)
        logger.info(
            "Sending approval: %s for spender %s", raw_amount, spender.checksum
        )
        receipt = await asyncio.to_thread(
            contract.transact,
            "approve",
            spender.checksum,
            raw_amount.raw,
            wallet=wallet,
            timeout=timeout,
        )
    except Exception as exc:
        logger.error("Token approval failed: %s", exc)
        raise ApprovalError() from exc

    logger.info("Approval confirmed: tx=%s", receipt.tx_hash)
    return receipt
