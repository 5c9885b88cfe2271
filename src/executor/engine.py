"""
Executor — runs one leveraged swap end to end.

    IDLE → APPROVING → LOOKING_UP_POOL → SWAPPING → LEVERAGING → DONE
                 ╲            ╲              ╲            ╲
                  └────────────┴──────────────┴────────────┴──→ FAILED

Every phase waits for the previous one to be confirmed on-chain.  The first
failure aborts the run: nothing is retried and nothing already mined is
undone.  ``Executor.run`` never raises; the outcome is on the returned
``ExecutionContext``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum, auto
from typing import Optional

from chain import abis
from chain.client import ChainClient
from chain.contract import ContractProxy
from config import (
    DEFAULT_POOL_FEE,
    POOL_FACTORY_ADDRESS,
    SEPOLIA_CHAIN_ID,
    SEPOLIA_EXPLORER_TX_URL,
    SWAP_ROUTER_ADDRESS,
    get_address_env,
    get_env,
    get_float_env,
    get_int_env,
)
from core.base_types import Address, Token
from core.tokens import LINK, USDC
from core.wallet_manager import WalletManager
from exchange.approval import approve_token
from exchange.dex_swap import execute_swap, prepare_swap_params
from leverage.position import compute_borrow_amount, open_leveraged_position
from pricing.pool_lookup import get_pool_info

logger = logging.getLogger(__name__)


class ExecutorState(Enum):
    IDLE = auto()
    APPROVING = auto()
    LOOKING_UP_POOL = auto()
    SWAPPING = auto()
    LEVERAGING = auto()
    DONE = auto()
    FAILED = auto()


_VALID_TRANSITIONS: dict[ExecutorState, set[ExecutorState]] = {
    ExecutorState.IDLE: {ExecutorState.APPROVING, ExecutorState.FAILED},
    ExecutorState.APPROVING: {ExecutorState.LOOKING_UP_POOL, ExecutorState.FAILED},
    ExecutorState.LOOKING_UP_POOL: {ExecutorState.SWAPPING, ExecutorState.FAILED},
    ExecutorState.SWAPPING: {ExecutorState.LEVERAGING, ExecutorState.FAILED},
    ExecutorState.LEVERAGING: {ExecutorState.DONE, ExecutorState.FAILED},
    ExecutorState.DONE: set(),
    ExecutorState.FAILED: set(),
}


class InvalidTransition(Exception):
    pass


@dataclass
class StateEvent:
    from_state: ExecutorState
    to_state: ExecutorState
    detail: str = ""
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "from": self.from_state.name,
            "to": self.to_state.name,
            "detail": self.detail,
            "ts": self.timestamp,
        }


@dataclass
class ExecutorConfig:
    """Addresses, token pair and risk knobs for a run."""

    leverage_contract: str
    factory: str = POOL_FACTORY_ADDRESS
    swap_router: str = SWAP_ROUTER_ADDRESS
    token_in: Token = USDC
    token_out: Token = LINK
    pool_fee: int = DEFAULT_POOL_FEE
    # Zero means no slippage protection; set explicitly to enable it.
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0
    leverage_min_receive: int = 0
    tx_timeout: float = 120.0
    explorer_tx_url: str = SEPOLIA_EXPLORER_TX_URL

    @classmethod
    def from_env(cls) -> "ExecutorConfig":
        """Build config from environment variables (``.env`` is loaded)."""
        return cls(
            leverage_contract=get_address_env(
                "LEVERAGE_CONTRACT_ADDRESS", required=True
            ),
            factory=get_address_env("POOL_FACTORY_ADDRESS", POOL_FACTORY_ADDRESS),
            swap_router=get_address_env("SWAP_ROUTER_ADDRESS", SWAP_ROUTER_ADDRESS),
            pool_fee=get_int_env("POOL_FEE", DEFAULT_POOL_FEE, minimum=0),
            amount_out_minimum=get_int_env("AMOUNT_OUT_MINIMUM", 0, minimum=0),
            sqrt_price_limit_x96=get_int_env("SQRT_PRICE_LIMIT_X96", 0, minimum=0),
            leverage_min_receive=get_int_env("LEVERAGE_MIN_RECEIVE", 0, minimum=0),
            tx_timeout=get_float_env("TX_TIMEOUT", 120.0),
            explorer_tx_url=get_env("EXPLORER_TX_URL", SEPOLIA_EXPLORER_TX_URL),
        )

    def check_bounds(self) -> None:
        """Slippage bounds are checked before any transaction is sent."""
        for name in ("amount_out_minimum", "sqrt_price_limit_x96", "leverage_min_receive"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass
class ExecutionContext:
    """Mutable record of one run: inputs, phase, tx hashes, outcome."""

    swap_amount: Decimal | int | float | str
    leverage_multiplier: int
    state: ExecutorState = ExecutorState.IDLE
    events: list[StateEvent] = field(default_factory=list)
    amount_in_raw: Optional[int] = None
    pool_address: Optional[str] = None
    pool_fee: Optional[int] = None
    approve_tx_hash: Optional[str] = None
    swap_tx_hash: Optional[str] = None
    leverage_tx_hash: Optional[str] = None
    borrow_raw: Optional[int] = None
    error: Optional[str] = None
    failed_step: Optional[str] = None
    started_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None

    def transition(self, new_state: ExecutorState, detail: str = "") -> None:
        if new_state not in _VALID_TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.name} -> {new_state.name}")
        self.events.append(StateEvent(self.state, new_state, detail))
        logger.debug("State %s -> %s %s", self.state.name, new_state.name, detail)
        self.state = new_state

    @property
    def succeeded(self) -> bool:
        return self.state == ExecutorState.DONE

    @property
    def duration_ms(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at) * 1000

    def fail(self, step: str, error: str) -> None:
        self.failed_step = step
        self.error = error
        self.transition(ExecutorState.FAILED, error)
        self.finished_at = time.time()


def _parse_inputs(swap_amount, leverage_multiplier) -> tuple[Decimal, int]:
    try:
        amount = Decimal(str(swap_amount))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid swap amount: {swap_amount!r}") from exc
    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Swap amount must be positive, got {swap_amount}")
    if isinstance(leverage_multiplier, bool) or not isinstance(leverage_multiplier, int):
        raise ValueError(
            f"Leverage multiplier must be an integer, got {leverage_multiplier!r}"
        )
    if leverage_multiplier < 1:
        raise ValueError(f"Leverage multiplier must be >= 1, got {leverage_multiplier}")
    return amount, leverage_multiplier


_STEP_NAMES = {
    ExecutorState.APPROVING: "approve",
    ExecutorState.LOOKING_UP_POOL: "pool_lookup",
    ExecutorState.SWAPPING: "swap",
    ExecutorState.LEVERAGING: "leverage",
}


class Executor:
    """
    Runs approve → pool lookup → swap → leverage for one wallet.

    Each executor owns its client, wallet and config, so several can run
    side by side against different endpoints or keys.
    """

    def __init__(
        self,
        chain_client: ChainClient,
        wallet: WalletManager,
        config: ExecutorConfig,
    ) -> None:
        self.client = chain_client
        self.wallet = wallet
        self.config = config
        self.factory = ContractProxy(
            chain_client, config.factory, abis.UNISWAP_V3_FACTORY, label="factory"
        )
        self.router = ContractProxy(
            chain_client, config.swap_router, abis.SWAP_ROUTER, label="swap_router"
        )
        self.leverage = ContractProxy(
            chain_client, config.leverage_contract, abis.LEVERAGE, label="leverage"
        )

    @classmethod
    def from_env(cls) -> "Executor":
        client = ChainClient(
            get_env("RPC_URL", required=True),
            chain_id=get_int_env("CHAIN_ID", SEPOLIA_CHAIN_ID),
            timeout_seconds=get_float_env("RPC_TIMEOUT", 30.0),
        )
        return cls(client, WalletManager.from_env(), ExecutorConfig.from_env())

    def explorer_link(self, tx_hash: str) -> str:
        return f"{self.config.explorer_tx_url}{tx_hash}"

    async def run(self, swap_amount, leverage_multiplier) -> ExecutionContext:
        """Execute the full sequence; the outcome is on the returned context."""
        try:
            amount, multiplier = _parse_inputs(swap_amount, leverage_multiplier)
            self.config.check_bounds()
            amount_in_raw = self.config.token_in.amount(amount).raw
        except ValueError as exc:
            logger.error("Invalid run parameters: %s", exc)
            ctx = ExecutionContext(
                swap_amount=swap_amount, leverage_multiplier=leverage_multiplier
            )
            ctx.fail("validate", str(exc))
            return ctx

        ctx = ExecutionContext(
            swap_amount=amount,
            leverage_multiplier=multiplier,
            amount_in_raw=amount_in_raw,
        )
        try:
            await self._execute(ctx)
        except Exception as exc:
            step = getattr(exc, "step", None) or _STEP_NAMES.get(ctx.state, "unknown")
            cause = exc.__cause__
            message = f"{exc}: {cause}" if cause else str(exc)
            logger.error("An error occurred: %s", message)
            ctx.fail(step, message)
            return ctx

        ctx.finished_at = time.time()
        logger.info(
            "Run complete: swap=%s leverage=%s duration=%.0f ms",
            ctx.swap_tx_hash,
            ctx.leverage_tx_hash,
            ctx.duration_ms or 0,
        )
        return ctx

    async def _execute(self, ctx: ExecutionContext) -> None:
        cfg = self.config
        token_in, token_out = cfg.token_in, cfg.token_out

        ctx.transition(ExecutorState.APPROVING, f"{ctx.swap_amount} {token_in.symbol}")
        receipt = await approve_token(
            self.client,
            token_in,
            Address.from_string(cfg.swap_router),
            ctx.swap_amount,
            self.wallet,
            timeout=cfg.tx_timeout,
        )
        ctx.approve_tx_hash = receipt.tx_hash
        logger.info("Approval: %s", self.explorer_link(receipt.tx_hash))

        ctx.transition(ExecutorState.LOOKING_UP_POOL, f"fee={cfg.pool_fee}")
        pool_info = await get_pool_info(
            self.client, self.factory, token_in, token_out, cfg.pool_fee
        )
        ctx.pool_address = pool_info.address.checksum
        ctx.pool_fee = pool_info.fee

        ctx.transition(ExecutorState.SWAPPING, ctx.pool_address)
        params = prepare_swap_params(
            pool_info,
            token_in,
            token_out,
            self.wallet.address,
            ctx.amount_in_raw,
            amount_out_minimum=cfg.amount_out_minimum,
            sqrt_price_limit_x96=cfg.sqrt_price_limit_x96,
        )
        receipt = await execute_swap(
            self.router, params, self.wallet, timeout=cfg.tx_timeout
        )
        ctx.swap_tx_hash = receipt.tx_hash
        logger.info("Swap receipt: %s", self.explorer_link(receipt.tx_hash))

        ctx.transition(ExecutorState.LEVERAGING, f"{ctx.leverage_multiplier}x")
        ctx.borrow_raw = compute_borrow_amount(
            ctx.amount_in_raw, ctx.leverage_multiplier
        )
        receipt = await open_leveraged_position(
            self.leverage,
            ctx.swap_amount,
            token_in,
            token_out,
            ctx.leverage_multiplier,
            self.wallet,
            min_receive=cfg.leverage_min_receive,
            timeout=cfg.tx_timeout,
        )
        ctx.leverage_tx_hash = receipt.tx_hash
        logger.info("Leveraged position: %s", self.explorer_link(receipt.tx_hash))

        ctx.transition(ExecutorState.DONE)
