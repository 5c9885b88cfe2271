import importlib
import os

from eth_utils import is_address

_ENV_LOADED = False


def _load_env() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    try:
        dotenv = importlib.import_module("dotenv")
    except Exception as exc:  # pragma: no cover - defensive
        raise SystemExit(
            "python-dotenv is required (pip install -e .)"
        ) from exc
    dotenv.load_dotenv()
    _ENV_LOADED = True


def get_env(
    name: str, default: str | None = None, required: bool = False
) -> str | None:
    _load_env()
    value = os.environ.get(name, default)
    if required and (value is None or value == ""):
        raise SystemExit(f"{name} env var is required")
    return value


def get_int_env(name: str, default: int, minimum: int | None = None) -> int:
    raw = get_env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise SystemExit(f"{name} must be an integer, got {raw!r}") from exc
    if minimum is not None and value < minimum:
        raise SystemExit(f"{name} must be >= {minimum}, got {value}")
    return value


def get_address_env(
    name: str, default: str | None = None, required: bool = False
) -> str | None:
    raw = get_env(name, default, required=required)
    if raw is None:
        return None
    if not is_address(raw.strip()):
        raise SystemExit(f"{name} is not a valid address, got {raw!r}")
    return raw.strip()


def get_float_env(name: str, default: float) -> float:
    raw = get_env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise SystemExit(f"{name} must be a number, got {raw!r}") from exc


SEPOLIA_CHAIN_ID = 11155111
SEPOLIA_EXPLORER_TX_URL = "https://sepolia.etherscan.io/tx/"

POOL_FACTORY_ADDRESS = "0x0227628f3F023bb0B980b67D528571c95c6DaC1c"
SWAP_ROUTER_ADDRESS = "0x3bFA4769FB09eefC5a80d6E87c3B9C650f7Ae48E"
DEFAULT_POOL_FEE = 3000
