from .base_types import Address, Token, TokenAmount, TransactionRequest
from .errors import (
    ApprovalError,
    LeverageError,
    PoolNotFoundError,
    StepError,
    SwapExecutionError,
)
from .wallet_manager import WalletManager

__all__ = [
    "Address",
    "Token",
    "TokenAmount",
    "TransactionRequest",
    "WalletManager",
    "StepError",
    "ApprovalError",
    "PoolNotFoundError",
    "SwapExecutionError",
    "LeverageError",
]
