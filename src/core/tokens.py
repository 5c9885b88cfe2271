from config import SEPOLIA_CHAIN_ID

from .base_types import Token

USDC = Token.create(
    address="0x1c7D4B196Cb0C7B01d743Fbc6116a902379C7238",
    decimals=6,
    symbol="USDC",
    name="USD//C",
    chain_id=SEPOLIA_CHAIN_ID,
)

LINK = Token.create(
    address="0x779877A7B0D9E8603169DdbD7836e478b4624789",
    decimals=18,
    symbol="LINK",
    name="Chainlink",
    chain_id=SEPOLIA_CHAIN_ID,
)
