"""
Pool lookup — resolve the Uniswap V3 pool for a token pair and fee tier
and read its basic metadata.

Only needs read access (no private key).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from chain import abis
from chain.client import ChainClient
from chain.contract import ContractProxy
from core.base_types import Address, Token
from core.errors import PoolNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class PoolInfo:
    """Pool handle plus the metadata read at lookup time."""

    pool: ContractProxy
    token0: Address
    token1: Address
    fee: int

    @property
    def address(self) -> Address:
        return self.pool.address

    def contains(self, token: Token) -> bool:
        return token.address in (self.token0, self.token1)


def _is_missing(pool_address) -> bool:
    if not pool_address:
        return True
    return Address.from_string(pool_address).is_zero


async def get_pool_info(
    client: ChainClient,
    factory: ContractProxy,
    token_in: Token,
    token_out: Token,
    fee: int,
) -> PoolInfo:
    """
    Ask ``factory`` for the (token_in, token_out, fee) pool.

    The factory answers with the zero address when no pool exists; that
    case and an empty answer both raise ``PoolNotFoundError``.  The three
    metadata reads are independent and run concurrently.
    """
    pool_address = await asyncio.to_thread(
        factory.call,
        "getPool",
        token_in.address.checksum,
        token_out.address.checksum,
        fee,
    )
    if _is_missing(pool_address):
        logger.error(
            "No pool for %s/%s fee=%d", token_in.symbol, token_out.symbol, fee
        )
        raise PoolNotFoundError()

    pool = ContractProxy(
        client,
        pool_address,
        abis.UNISWAP_V3_POOL,
        label=f"{token_in.symbol}/{token_out.symbol} {fee}",
    )
    token0, token1, pool_fee = await asyncio.gather(
        asyncio.to_thread(pool.call, "token0"),
        asyncio.to_thread(pool.call, "token1"),
        asyncio.to_thread(pool.call, "fee"),
    )

    info = PoolInfo(
        pool=pool,
        token0=Address.from_string(token0),
        token1=Address.from_string(token1),
        fee=int(pool_fee),
    )
    logger.info(
        "Pool loaded: %s token0=%s token1=%s fee=%d",
        info.address.checksum,
        info.token0.checksum,
        info.token1.checksum,
        info.fee,
    )
    return info
