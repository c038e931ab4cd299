"""Optimal swap sizing for single-sided concentrated liquidity deposits.

This package provides:
- SwapCalculator with three strategies (balanced, dust-bounded, static)
- Quoter implementations (QuoterV2 over RPC, mock, single-range simulation)
- Pool readers (RPC and in-memory) and pool snapshots
- Integer-exact tick and liquidity math (swapcalc.math)

Typical use:
    from swapcalc import SwapCalculator, Web3Quoter, Web3PoolReader

    calc = SwapCalculator(quoter=Web3Quoter(rpc), pool_reader=Web3PoolReader(rpc))
    swap = calc.solve_balanced_swap(pool, -126200, -123000, 10**18, zero_for_one=True)
"""

from swapcalc.config import DEFAULT_SEARCH_CONFIG, RpcConfig, SearchConfig
from swapcalc.errors import (
    InvalidAmount,
    InvalidRange,
    InvalidSqrtPrice,
    InvalidTick,
    InvalidTickSpacing,
    OracleFailure,
    Overflow,
    PoolReadFailure,
    SwapCalcError,
)
from swapcalc.pool import PoolState
from swapcalc.pool_reader import PoolReader, StaticPoolReader, Web3PoolReader
from swapcalc.quoter import MockQuoter, Quoter, QuoteKey, SimulatedQuoter, SwapQuote, Web3Quoter
from swapcalc.ranges import ticks_for_range
from swapcalc.snapshot import PoolSnapshot, load_snapshot
from swapcalc.solver import LiquidityAllocation, SearchState, SwapCalculator

__all__ = [
    # Solver
    "SwapCalculator",
    "LiquidityAllocation",
    "SearchState",
    # Config
    "SearchConfig",
    "DEFAULT_SEARCH_CONFIG",
    "RpcConfig",
    # Quoters
    "Quoter",
    "SwapQuote",
    "QuoteKey",
    "MockQuoter",
    "SimulatedQuoter",
    "Web3Quoter",
    # Pools
    "PoolState",
    "PoolReader",
    "StaticPoolReader",
    "Web3PoolReader",
    "PoolSnapshot",
    "load_snapshot",
    "ticks_for_range",
    # Errors
    "SwapCalcError",
    "InvalidTick",
    "InvalidSqrtPrice",
    "InvalidTickSpacing",
    "InvalidRange",
    "InvalidAmount",
    "Overflow",
    "OracleFailure",
    "PoolReadFailure",
]
