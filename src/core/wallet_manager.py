from __future__ import annotations

from eth_account import Account

from config import get_env

from .base_types import Address


class WalletManager:
    """
    Holds the single signing key used for a run.

    The key never leaves this object; callers only get the address and
    signed raw transactions.
    """

    def __init__(self, private_key: str):
        if not private_key:
            raise ValueError("private key is required")
        self._account = Account.from_key(private_key)

    @classmethod
    def from_env(cls, name: str = "PRIVATE_KEY") -> "WalletManager":
        try:
            return cls(get_env(name, required=True))
        except Exception as exc:
            raise SystemExit(f"{name} is not a valid private key") from exc

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def checksum_address(self) -> Address:
        return Address.from_string(self._account.address)

    def sign_transaction(self, tx: dict) -> bytes:
        signed = self._account.sign_transaction(tx)
        return bytes(signed.raw_transaction)

    def __repr__(self) -> str:
        return f"WalletManager(address={self.address})"
