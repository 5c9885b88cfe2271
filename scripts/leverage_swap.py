"""
Leveraged swap — approve, swap and open a leveraged position in one run.

Steps (each waits for the previous one to be mined):
  1. approve the swap router for the input token
  2. look up the Uniswap V3 pool for the token pair and fee tier
  3. build exactInputSingle params
  4. swap
  5. open the leveraged position

Configuration comes from the environment / .env (RPC_URL, PRIVATE_KEY,
LEVERAGE_CONTRACT_ADDRESS, ...).

Usage:
  python scripts/leverage_swap.py              # swap 1 USDC, 2x leverage
  python scripts/leverage_swap.py 2.5 3
"""

# flake8: noqa

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Ensure src/ is on sys.path so bare imports work from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from executor.engine import Executor  # noqa: E402
from executor.execution_report import format_run_report  # noqa: E402

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)
    log_file = log_dir / f"leverage_swap_{datetime.now():%Y%m%d}.log"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s |%(levelname)s |%(name)s |%(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(),
        ],
    )
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Approve, swap and open a leveraged position",
    )
    parser.add_argument(
        "swap_amount",
        nargs="?",
        default="1",
        help="Amount of the input token to swap, in human units (default: 1)",
    )
    parser.add_argument(
        "leverage",
        nargs="?",
        type=int,
        default=2,
        help="Leverage multiplier, integer >= 1 (default: 2)",
    )
    args = parser.parse_args(argv)

    _setup_logging()

    try:
        executor = Executor.from_env()
    except SystemExit as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    ctx = asyncio.run(executor.run(args.swap_amount, args.leverage))
    print(format_run_report(ctx, executor.config.explorer_tx_url))
    return 0 if ctx.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
