from .client import ChainClient, TransactionRevertedError, TxReceipt
from .contract import ContractFunction, ContractProxy

__all__ = [
    "ChainClient",
    "TxReceipt",
    "TransactionRevertedError",
    "ContractFunction",
    "ContractProxy",
]
