"""Command line driver for the swap calculator.

Usage:
    # Live: read the pool over RPC and quote through QuoterV2
    SWAPCALC_RPC_URL=https://arb1.arbitrum.io/rpc swapcalc \\
        --pool 0x92e305a63646e76bdd3681f7ece7529cd4e8ed5b \\
        --amount 10000000000000000000000 --range 0.1

    # Offline: recorded pool state and simulated quotes
    swapcalc --snapshot tests/fixtures/pools/arbitrum_307f.json \\
        --amount 1000000000000000000 --tick-lower -126200 --tick-upper -123000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from swapcalc.config import RpcConfig
from swapcalc.errors import SwapCalcError
from swapcalc.pool import PoolState
from swapcalc.pool_reader import PoolReader, StaticPoolReader, Web3PoolReader
from swapcalc.quoter import Quoter, SimulatedQuoter, Web3Quoter
from swapcalc.ranges import ticks_for_range
from swapcalc.snapshot import PoolSnapshot, dump_snapshot, load_snapshot
from swapcalc.solver import SwapCalculator
from swapcalc.types import is_valid_address

logger = structlog.get_logger()

STRATEGIES = ("balanced", "dust", "static")


def range_fraction(value: str) -> float:
    """argparse type for --range: a fraction strictly between 0 and 1."""
    try:
        fraction = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None
    if not 0 < fraction < 1:
        raise argparse.ArgumentTypeError(f"must be in (0, 1), got {value}")
    return fraction


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="swapcalc",
        description="Compute how much of one token to swap before a single-sided range deposit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  SWAPCALC_RPC_URL         RPC endpoint for live runs
  SWAPCALC_QUOTER_ADDRESS  QuoterV2 address (default: canonical deployment)
  SWAPCALC_BLOCK           Block number to pin reads and quotes to
        """,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--pool", type=str, help="Pool address (live mode)")
    source.add_argument("--snapshot", type=Path, help="Pool snapshot JSON (offline mode)")

    parser.add_argument("--amount", type=int, required=True, help="Input amount in smallest units")
    parser.add_argument(
        "--one-for-zero",
        action="store_true",
        help="Input is token1 (default: input is token0)",
    )
    parser.add_argument(
        "--range",
        type=range_fraction,
        default=0.1,
        dest="range_fraction",
        help="Half-width of the price band around the current price (default: 0.1)",
    )
    parser.add_argument("--tick-lower", type=int, default=None, help="Explicit lower tick")
    parser.add_argument("--tick-upper", type=int, default=None, help="Explicit upper tick")
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default="balanced",
        help="Search strategy (default: balanced)",
    )
    parser.add_argument("--rpc-url", type=str, default=None, help="Overrides SWAPCALC_RPC_URL")
    parser.add_argument(
        "--save-snapshot",
        type=Path,
        default=None,
        help="Write the pool state read in live mode to this file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    """Console logging to stderr; stdout carries the JSON result."""
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_collaborators(
    args: argparse.Namespace, rpc: RpcConfig
) -> tuple[PoolState, Quoter, PoolReader]:
    """Pick live or offline collaborators and read the pool once."""
    if args.snapshot is not None:
        pool = load_snapshot(args.snapshot).to_pool_state()
        return pool, SimulatedQuoter(pool), StaticPoolReader([pool])

    if not is_valid_address(args.pool):
        raise SystemExit(f"Error: invalid pool address {args.pool}")
    rpc_url = args.rpc_url or rpc.rpc_url
    if not rpc_url:
        raise SystemExit("Error: live mode needs --rpc-url or SWAPCALC_RPC_URL")

    reader = Web3PoolReader(rpc_url, block_identifier=rpc.block)
    quoter = Web3Quoter(rpc_url, quoter_address=rpc.quoter_address, block_identifier=rpc.block)
    pool = reader.read_pool(args.pool)
    if args.save_snapshot is not None:
        block = rpc.block if isinstance(rpc.block, int) else None
        args.save_snapshot.write_text(dump_snapshot(PoolSnapshot.from_pool_state(pool, block)))
        logger.info("snapshot_saved", path=str(args.save_snapshot))
    # Serve the solver the same read the range was derived from
    return pool, quoter, StaticPoolReader([pool])


def run(args: argparse.Namespace) -> dict[str, object]:
    """Run one calculation and return the JSON-ready result."""
    pool, quoter, reader = build_collaborators(args, RpcConfig.from_env())
    zero_for_one = not args.one_for_zero

    if args.tick_lower is not None and args.tick_upper is not None:
        tick_lower, tick_upper = args.tick_lower, args.tick_upper
    elif args.tick_lower is None and args.tick_upper is None:
        tick_lower, tick_upper = ticks_for_range(pool.tick, pool.tick_spacing, args.range_fraction)
    else:
        raise SystemExit("Error: give both --tick-lower and --tick-upper, or neither")

    logger.info(
        "swap_calculation_start",
        pool=pool.address,
        tick=pool.tick,
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        amount_in=args.amount,
        zero_for_one=zero_for_one,
        strategy=args.strategy,
    )

    calculator = SwapCalculator(quoter=quoter, pool_reader=reader)
    liquidity: int | None = None
    if args.strategy == "balanced":
        swap_amount = calculator.solve_balanced_swap(
            pool.address, tick_lower, tick_upper, args.amount, zero_for_one
        )
    elif args.strategy == "dust":
        liquidity, swap_amount = calculator.solve_dust_bounded_swap(
            pool.address, tick_lower, tick_upper, args.amount, zero_for_one
        )
    else:
        swap_amount = calculator.estimate_swap_static(
            pool.address, tick_lower, tick_upper, args.amount, zero_for_one
        )

    # Report what the answer actually leaves behind
    allocation = calculator.evaluate_swap(
        pool.address, tick_lower, tick_upper, args.amount, swap_amount, zero_for_one
    )

    return {
        "pool": pool.address,
        "tickLower": tick_lower,
        "tickUpper": tick_upper,
        "amountIn": str(args.amount),
        "zeroForOne": zero_for_one,
        "strategy": args.strategy,
        "swapAmount": str(swap_amount),
        "liquidity": str(liquidity if liquidity is not None else allocation.liquidity),
        "leftover0": str(allocation.leftover0),
        "leftover1": str(allocation.leftover1),
    }


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        result = run(args)
    except (SwapCalcError, ValidationError) as e:
        logger.error("swap_calculation_failed", error_type=type(e).__name__, error=str(e))
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
