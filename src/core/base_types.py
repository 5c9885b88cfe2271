"""
Value types shared by the chain layer and the execution steps.

All on-chain amounts are raw integers in the token's smallest unit.
Human-readable amounts only exist at the edges (CLI input, logs) and are
converted through ``TokenAmount.from_human``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from eth_utils import is_address, to_checksum_address

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class Address:
    """Checksummed EVM address."""

    value: str

    @classmethod
    def from_string(cls, raw: str) -> "Address":
        if isinstance(raw, Address):
            return raw
        if not isinstance(raw, str) or not is_address(raw):
            raise ValueError(f"Invalid address: {raw!r}")
        return cls(to_checksum_address(raw))

    @property
    def checksum(self) -> str:
        return self.value

    @property
    def lower(self) -> str:
        return self.value.lower()

    @property
    def is_zero(self) -> bool:
        return self.lower == ZERO_ADDRESS

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """Static description of an ERC-20 token."""

    address: Address
    decimals: int
    symbol: str
    name: str = ""
    chain_id: Optional[int] = None

    @classmethod
    def create(
        cls,
        address: str,
        decimals: int,
        symbol: str,
        name: str = "",
        chain_id: Optional[int] = None,
    ) -> "Token":
        if decimals < 0:
            raise ValueError("decimals must be >= 0")
        return cls(
            address=Address.from_string(address),
            decimals=int(decimals),
            symbol=symbol,
            name=name or symbol,
            chain_id=chain_id,
        )

    def amount(self, human: Decimal | int | float | str) -> "TokenAmount":
        """Scale a human-readable amount to this token's smallest unit."""
        return TokenAmount.from_human(human, self.decimals, self.symbol)


@dataclass(frozen=True)
class TokenAmount:
    """Raw integer amount plus the precision needed to display it."""

    raw: int
    decimals: int
    symbol: str = ""

    def __post_init__(self) -> None:
        if self.raw < 0:
            raise ValueError(f"raw amount must be >= 0, got {self.raw}")

    @classmethod
    def from_human(
        cls,
        amount: Decimal | int | float | str,
        decimals: int,
        symbol: str = "",
    ) -> "TokenAmount":
        """
        Convert ``amount`` to ``round(amount * 10**decimals)``.

        Floats go through ``str()`` first so ``0.1`` scales to exactly
        ``100000`` at 6 decimals.  Amounts with more fractional digits than
        the token supports are rejected rather than silently truncated.
        """
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValueError(f"Invalid amount: {amount!r}")
        if value < 0:
            raise ValueError(f"Amount must be non-negative, got {amount}")

        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(
                f"Amount {amount} has more than {decimals} decimal places"
            )
        return cls(raw=int(scaled), decimals=decimals, symbol=symbol)

    @property
    def human(self) -> Decimal:
        return Decimal(self.raw).scaleb(-self.decimals)

    def __str__(self) -> str:
        return f"{self.human} {self.symbol}".strip()


@dataclass
class TransactionRequest:
    """Unsigned call or transaction against a contract."""

    to: Address
    data: bytes
    value: int = 0
    from_address: Optional[Address] = None
    chain_id: Optional[int] = None
    gas: Optional[int] = None

    def to_call_params(self) -> dict:
        """Params for ``eth_call`` / ``eth_estimateGas``."""
        params: dict = {
            "to": self.to.checksum,
            "data": "0x" + self.data.hex(),
            "value": int(self.value),
        }
        if self.from_address is not None:
            params["from"] = self.from_address.checksum
        return params
