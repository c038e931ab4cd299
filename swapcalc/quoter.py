"""Quoter implementations: the price oracle consulted by the solver.

A quote answers "if I swapped exactly amount_in right now, how much would
come out and where would the price end up?". Quotes are never cached: the
post-swap price depends on the swap size, so every candidate needs its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog

from swapcalc.constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO, QUOTER_V2_ADDRESS
from swapcalc.errors import OracleFailure, SwapCalcError
from swapcalc.math.swap_math import compute_swap_step
from swapcalc.pool import PoolState
from swapcalc.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Result of one exact-input quote."""

    amount_out: int
    sqrt_price_x96_after: int


class Quoter(Protocol):
    """Protocol for quoter implementations.

    This allows swapping between the RPC-backed QuoterV2 and in-memory
    quoters for offline runs and tests.
    """

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        sqrt_price_limit_x96: int = 0,
    ) -> SwapQuote:
        """Quote an exact-input swap through a single pool.

        Args:
            token_in: Input token address
            token_out: Output token address
            fee: Pool fee tier (e.g., 3000)
            amount_in: Input amount
            sqrt_price_limit_x96: Price the swap may not pass; 0 means no limit

        Returns:
            SwapQuote with output amount and post-swap price

        Raises:
            OracleFailure: If the quote cannot be produced
        """
        ...


@dataclass
class QuoteKey:
    """Key for looking up quotes in MockQuoter."""

    token_in: str
    token_out: str
    fee: int
    amount_in: int

    def __hash__(self) -> int:
        return hash(
            (
                normalize_address(self.token_in),
                normalize_address(self.token_out),
                self.fee,
                self.amount_in,
            )
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuoteKey):
            return False
        return (
            normalize_address(self.token_in) == normalize_address(other.token_in)
            and normalize_address(self.token_out) == normalize_address(other.token_out)
            and self.fee == other.fee
            and self.amount_in == other.amount_in
        )


class MockQuoter:
    """Mock quoter with no price impact.

    Configure with explicit quotes and/or a fixed exchange rate, and track
    calls for assertions. The reported post-swap price is always the
    configured pool price, so the quoted swap never moves the market.
    """

    def __init__(
        self,
        quotes: dict[QuoteKey, SwapQuote] | None = None,
        default_rate: tuple[int, int] | None = None,
        sqrt_price_x96: int = 0,
    ):
        """Initialize mock quoter.

        Args:
            quotes: Mapping of QuoteKey -> SwapQuote for specific quotes
            default_rate: If set, (numerator, denominator) ratio for any unconfigured quote:
                         amount_out = amount_in * num // denom
            sqrt_price_x96: Post-swap price reported with default-rate quotes
        """
        self.quotes = quotes or {}
        self.default_rate = default_rate
        self.sqrt_price_x96 = sqrt_price_x96
        self.calls: list[tuple[str, str, int, int, int]] = []  # (in, out, fee, amount, limit)

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        sqrt_price_limit_x96: int = 0,
    ) -> SwapQuote:
        """Return the configured quote for this input."""
        self.calls.append((token_in, token_out, fee, amount_in, sqrt_price_limit_x96))

        key = QuoteKey(token_in, token_out, fee, amount_in)
        if key in self.quotes:
            return self.quotes[key]

        if self.default_rate is not None:
            num, denom = self.default_rate
            # Floor division for output amount (conservative for receiver)
            return SwapQuote(
                amount_out=amount_in * num // denom,
                sqrt_price_x96_after=self.sqrt_price_x96,
            )

        raise OracleFailure(
            f"No quote configured for {token_in} -> {token_out} fee={fee} amount={amount_in}"
        )


class SimulatedQuoter:
    """Quoter that simulates swaps against a single liquidity range.

    Uses the exact integer swap step against the pool's active liquidity,
    with the pool's fee and the QuoterV2 price-limit rules. Ticks are not
    crossed, so results are exact only while the swap stays inside the
    current initialized range. Deterministic: the same pool state and input
    always produce the same quote.
    """

    def __init__(self, pool: PoolState):
        self.pool = pool
        self.calls: list[tuple[str, int, int]] = []  # (token_in, amount, limit)

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        sqrt_price_limit_x96: int = 0,
    ) -> SwapQuote:
        """Simulate the swap and return the output and post-swap price."""
        self.calls.append((token_in, amount_in, sqrt_price_limit_x96))
        pool = self.pool

        if fee != pool.fee:
            raise OracleFailure(f"No pool with fee {fee} for {token_in} -> {token_out}")
        try:
            expected_out = pool.get_token_out(token_in)
        except ValueError as e:
            raise OracleFailure(str(e)) from e
        if normalize_address(expected_out) != normalize_address(token_out):
            raise OracleFailure(f"Token {token_out} is not the counterpart of {token_in}")
        if pool.liquidity <= 0:
            raise OracleFailure(f"Pool {pool.address} has no active liquidity")

        zero_for_one = pool.is_token0(token_in)
        current = pool.sqrt_price_x96

        if sqrt_price_limit_x96 == 0:
            limit = MIN_SQRT_RATIO + 1 if zero_for_one else MAX_SQRT_RATIO - 1
        else:
            limit = sqrt_price_limit_x96
        # Same check the pool performs before swapping ('SPL' revert)
        if zero_for_one:
            valid_limit = MIN_SQRT_RATIO < limit < current
        else:
            valid_limit = current < limit < MAX_SQRT_RATIO
        if not valid_limit:
            raise OracleFailure(f"Price limit {limit} invalid for current price {current}")

        try:
            sqrt_next, _, amount_out, _ = compute_swap_step(
                current, limit, pool.liquidity, amount_in, pool.fee
            )
        except (SwapCalcError, ZeroDivisionError) as e:
            raise OracleFailure(f"Swap simulation failed: {e}") from e

        return SwapQuote(amount_out=amount_out, sqrt_price_x96_after=sqrt_next)


# QuoterV2 ABI - minimal, just the function we need
QUOTER_V2_ABI = [
    {
        "name": "quoteExactInputSingle",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    {"name": "tokenIn", "type": "address"},
                    {"name": "tokenOut", "type": "address"},
                    {"name": "amountIn", "type": "uint256"},
                    {"name": "fee", "type": "uint24"},
                    {"name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
            }
        ],
        "outputs": [
            {"name": "amountOut", "type": "uint256"},
            {"name": "sqrtPriceX96After", "type": "uint160"},
            {"name": "initializedTicksCrossed", "type": "uint32"},
            {"name": "gasEstimate", "type": "uint256"},
        ],
    },
]


class Web3Quoter:
    """Real quoter that calls the QuoterV2 contract via RPC.

    QuoterV2 is not a view function: it executes the swap and reverts with
    the result. An eth_call gives the answer without changing chain state.
    """

    def __init__(
        self,
        web3_provider: str,
        quoter_address: str = QUOTER_V2_ADDRESS,
        block_identifier: int | str = "latest",
    ):
        """Initialize quoter with web3 provider.

        Args:
            web3_provider: HTTP RPC URL (e.g., "https://arb1.arbitrum.io/rpc")
            quoter_address: QuoterV2 contract address
            block_identifier: Block to quote against; pin it to keep a run consistent
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3Quoter. Install with: pip install web3"
            ) from e

        self.w3 = Web3(Web3.HTTPProvider(web3_provider))
        self.block_identifier = block_identifier
        self.quoter = self.w3.eth.contract(
            address=Web3.to_checksum_address(quoter_address),
            abi=QUOTER_V2_ABI,
        )

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        sqrt_price_limit_x96: int = 0,
    ) -> SwapQuote:
        """Get output amount and post-swap price via RPC call."""
        from web3 import Web3

        try:
            result = self.quoter.functions.quoteExactInputSingle(
                (
                    Web3.to_checksum_address(token_in),
                    Web3.to_checksum_address(token_out),
                    amount_in,
                    fee,
                    sqrt_price_limit_x96,
                )
            ).call(block_identifier=self.block_identifier)
        except Exception as e:
            logger.warning(
                "quote_exact_input_single_failed",
                token_in=token_in,
                token_out=token_out,
                fee=fee,
                amount_in=amount_in,
                sqrt_price_limit_x96=sqrt_price_limit_x96,
                error=str(e),
            )
            raise OracleFailure(f"QuoterV2 call failed: {e}") from e

        # Result is (amountOut, sqrtPriceX96After, initializedTicksCrossed, gasEstimate)
        return SwapQuote(amount_out=int(result[0]), sqrt_price_x96_after=int(result[1]))


__all__ = [
    "SwapQuote",
    "Quoter",
    "QuoteKey",
    "MockQuoter",
    "SimulatedQuoter",
    "Web3Quoter",
    "QUOTER_V2_ABI",
]
