"""Optimal single-sided swap search.

Given one token and a tick range, find how much of it to swap into the
counterpart so that both balances fit the range with the least left over.

Three strategies are provided. They are deliberately separate: their bracket
updates and stopping rules differ and so do their results.

- solve_balanced_swap: bisection on the sign of (leftover0 - leftover1),
  stopping when the candidate stalls (moves by less than min_delta).
- solve_dust_bounded_swap: price-limited quotes, leftovers trimmed to
  trim_unit, stopping once both leftovers are within dust_threshold.
- estimate_swap_static: closed form at the current price, no quoter calls.

Each quoted run reads the pool once and then makes at most max_iterations
blocking quoter calls. Quoter errors propagate; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from swapcalc.config import DEFAULT_SEARCH_CONFIG, SearchConfig
from swapcalc.constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO, PRECISION, Q96
from swapcalc.errors import InvalidAmount, InvalidRange
from swapcalc.math.full_math import mul_div, to_uint256
from swapcalc.math.liquidity_amounts import (
    get_amount0_for_liquidity,
    get_amount1_for_liquidity,
    get_amounts_for_liquidity,
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_liquidity_for_amounts,
)
from swapcalc.math.tick_math import get_sqrt_ratio_at_tick
from swapcalc.pool import PoolState
from swapcalc.pool_reader import PoolReader
from swapcalc.quoter import Quoter

logger = structlog.get_logger()


@dataclass(frozen=True)
class LiquidityAllocation:
    """How a pair of balances fits a range at a given price.

    amount0/amount1 are what minting `liquidity` actually consumes;
    balance0/balance1 are what was available. Floor rounding guarantees
    amount <= balance for both tokens.
    """

    liquidity: int
    amount0: int
    amount1: int
    balance0: int
    balance1: int
    sqrt_price_x96: int

    @property
    def leftover0(self) -> int:
        return self.balance0 - self.amount0

    @property
    def leftover1(self) -> int:
        return self.balance1 - self.amount1

    def leftovers(self, zero_for_one: bool) -> tuple[int, int]:
        """Return (input-token leftover, output-token leftover)."""
        if zero_for_one:
            return self.leftover0, self.leftover1
        return self.leftover1, self.leftover0


@dataclass
class SearchState:
    """Bracket and candidate of one search run."""

    low: int
    high: int
    candidate: int
    previous: int
    iterations: int = 0

    @classmethod
    def start(cls, amount_in: int) -> SearchState:
        """Bracket [0, amount_in] with the candidate in the middle."""
        half = amount_in // 2
        return cls(low=0, high=amount_in, candidate=half, previous=half)


def allocate(
    sqrt_price_x96: int,
    sqrt_lower_x96: int,
    sqrt_upper_x96: int,
    balance0: int,
    balance1: int,
) -> LiquidityAllocation:
    """Fit two balances into a range at a price.

    Liquidity is the most the balances can fund; converting it back gives
    the amounts actually used.
    """
    liquidity = get_liquidity_for_amounts(
        sqrt_price_x96, sqrt_lower_x96, sqrt_upper_x96, balance0, balance1
    )
    amount0, amount1 = get_amounts_for_liquidity(
        sqrt_price_x96, sqrt_lower_x96, sqrt_upper_x96, liquidity
    )
    return LiquidityAllocation(
        liquidity=liquidity,
        amount0=amount0,
        amount1=amount1,
        balance0=balance0,
        balance1=balance1,
        sqrt_price_x96=sqrt_price_x96,
    )


class SwapCalculator:
    """Finds the swap amount for a single-sided range deposit.

    Collaborators are injected so the same searches run against the live
    QuoterV2 or against in-memory quoters.
    """

    def __init__(
        self,
        quoter: Quoter,
        pool_reader: PoolReader,
        config: SearchConfig = DEFAULT_SEARCH_CONFIG,
    ):
        """Initialize calculator.

        Args:
            quoter: Source of post-swap amounts and prices
            pool_reader: Source of pool fee, spacing, tokens and current price
            config: Search tuning constants
        """
        self.quoter = quoter
        self.pool_reader = pool_reader
        self.config = config

    # --- Shared steps ---

    def _prepare(
        self,
        pool_address: str,
        tick_lower: int,
        tick_upper: int,
        amount_in: int,
    ) -> tuple[PoolState, int, int]:
        """Validate inputs, read the pool and convert the range to prices.

        All checks happen before the first quote.

        Raises:
            InvalidAmount: If amount_in is not positive
            InvalidRange: If tick_lower >= tick_upper
            InvalidTickSpacing: If a tick is not a multiple of the pool's spacing
            InvalidTick: If a tick is outside [MIN_TICK, MAX_TICK]
        """
        if amount_in <= 0:
            raise InvalidAmount(f"amount_in must be positive, got {amount_in}")
        to_uint256(amount_in)
        if tick_lower >= tick_upper:
            raise InvalidRange(f"tick_lower {tick_lower} must be below tick_upper {tick_upper}")

        pool = self.pool_reader.read_pool(pool_address)
        pool.check_tick_alignment(tick_lower, tick_upper)

        sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
        sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)
        return pool, sqrt_lower, sqrt_upper

    def _quote_and_allocate(
        self,
        pool: PoolState,
        sqrt_lower: int,
        sqrt_upper: int,
        amount_in: int,
        swap_amount: int,
        zero_for_one: bool,
        sqrt_price_limit_x96: int,
    ) -> LiquidityAllocation:
        """Quote swap_amount and fit the resulting balances into the range."""
        token_in, token_out = pool.tokens_for_direction(zero_for_one)
        quote = self.quoter.quote_exact_input_single(
            token_in=token_in,
            token_out=token_out,
            fee=pool.fee,
            amount_in=swap_amount,
            sqrt_price_limit_x96=sqrt_price_limit_x96,
        )

        kept = amount_in - swap_amount
        if zero_for_one:
            balance0, balance1 = kept, quote.amount_out
        else:
            balance0, balance1 = quote.amount_out, kept

        return allocate(quote.sqrt_price_x96_after, sqrt_lower, sqrt_upper, balance0, balance1)

    def evaluate_swap(
        self,
        pool_address: str,
        tick_lower: int,
        tick_upper: int,
        amount_in: int,
        swap_amount: int,
        zero_for_one: bool,
        sqrt_price_limit_x96: int = 0,
    ) -> LiquidityAllocation:
        """Quote one swap amount and report how its balances fit the range.

        Use this to check the residual leftover of a best-effort result.

        Raises:
            InvalidAmount: If swap_amount is outside [0, amount_in]
        """
        pool, sqrt_lower, sqrt_upper = self._prepare(pool_address, tick_lower, tick_upper, amount_in)
        if swap_amount < 0 or swap_amount > amount_in:
            raise InvalidAmount(f"swap_amount {swap_amount} outside [0, {amount_in}]")
        return self._quote_and_allocate(
            pool, sqrt_lower, sqrt_upper, amount_in, swap_amount, zero_for_one, sqrt_price_limit_x96
        )

    # --- Strategies ---

    def solve_balanced_swap(
        self,
        pool_address: str,
        tick_lower: int,
        tick_upper: int,
        amount_in: int,
        zero_for_one: bool,
    ) -> int:
        """Bisect on which token has more left over.

        Each step trusts a single comparison of leftover0 against leftover1,
        which is not strictly monotonic near the optimum. The search stops
        when the candidate moves by less than min_delta, or after
        max_iterations quotes.

        Args:
            pool_address: Pool to deposit into
            tick_lower: Lower range tick, a multiple of the pool's spacing
            tick_upper: Upper range tick, a multiple of the pool's spacing
            amount_in: Total amount of the input token
            zero_for_one: True if token0 is the input token

        Returns:
            Amount of the input token to swap
        """
        pool, sqrt_lower, sqrt_upper = self._prepare(pool_address, tick_lower, tick_upper, amount_in)
        config = self.config
        state = SearchState.start(amount_in)

        while state.iterations < config.max_iterations:
            state.iterations += 1
            allocation = self._quote_and_allocate(
                pool, sqrt_lower, sqrt_upper, amount_in, state.candidate, zero_for_one, 0
            )

            token0_heavier = allocation.leftover0 > allocation.leftover1
            # Excess of the input token means the swap was too small
            swapped_too_little = token0_heavier if zero_for_one else not token0_heavier
            if swapped_too_little:
                state.low = state.candidate
            else:
                state.high = state.candidate

            state.previous = state.candidate
            state.candidate = (state.low + state.high) // 2

            logger.debug(
                "balanced_search_step",
                iteration=state.iterations,
                low=state.low,
                high=state.high,
                candidate=state.candidate,
                leftover0=allocation.leftover0,
                leftover1=allocation.leftover1,
            )

            if abs(state.candidate - state.previous) < config.min_delta:
                break

        logger.info(
            "balanced_search_done",
            pool=pool.address,
            swap_amount=state.candidate,
            iterations=state.iterations,
        )
        return state.candidate

    def solve_dust_bounded_swap(
        self,
        pool_address: str,
        tick_lower: int,
        tick_upper: int,
        amount_in: int,
        input_is_token0: bool,
    ) -> tuple[int, int]:
        """Search until both trimmed leftovers are within the dust threshold.

        Quotes are price-limited to the extreme price in the swap direction.
        If max_iterations is reached first the last evaluated candidate is
        returned anyway; this is best effort, not an error. Callers that need
        exactness should check it with evaluate_swap.

        Args:
            pool_address: Pool to deposit into
            tick_lower: Lower range tick, a multiple of the pool's spacing
            tick_upper: Upper range tick, a multiple of the pool's spacing
            amount_in: Total amount of the input token
            input_is_token0: True if token0 is the input token

        Returns:
            (liquidity, swap_amount) of the last evaluated candidate
        """
        pool, sqrt_lower, sqrt_upper = self._prepare(pool_address, tick_lower, tick_upper, amount_in)
        config = self.config
        state = SearchState.start(amount_in)
        price_limit = MIN_SQRT_RATIO + 1 if input_is_token0 else MAX_SQRT_RATIO - 1

        liquidity = 0
        swap_amount = state.candidate
        converged = False

        while state.iterations < config.max_iterations:
            state.iterations += 1
            swap_amount = state.candidate
            allocation = self._quote_and_allocate(
                pool,
                sqrt_lower,
                sqrt_upper,
                amount_in,
                swap_amount,
                input_is_token0,
                price_limit,
            )
            liquidity = allocation.liquidity

            leftover_in, leftover_out = allocation.leftovers(input_is_token0)
            leftover_in -= leftover_in % config.trim_unit
            leftover_out -= leftover_out % config.trim_unit

            logger.debug(
                "dust_search_step",
                iteration=state.iterations,
                low=state.low,
                high=state.high,
                candidate=swap_amount,
                leftover_in=leftover_in,
                leftover_out=leftover_out,
            )

            # Both zero (an exact match) is the tightest case of this
            if leftover_in <= config.dust_threshold and leftover_out <= config.dust_threshold:
                converged = True
                break

            state.previous = state.candidate
            if leftover_in > 0:
                state.low = state.candidate
                state.candidate = (state.high + state.candidate) // 2
            else:
                state.high = state.candidate
                state.candidate = (state.low + state.candidate) // 2

        if converged:
            logger.info(
                "dust_search_done",
                pool=pool.address,
                swap_amount=swap_amount,
                liquidity=liquidity,
                iterations=state.iterations,
            )
        else:
            logger.warning(
                "dust_search_iteration_cap",
                pool=pool.address,
                swap_amount=swap_amount,
                liquidity=liquidity,
                iterations=state.iterations,
            )
        return liquidity, swap_amount

    def estimate_swap_static(
        self,
        pool_address: str,
        tick_lower: int,
        tick_upper: int,
        amount_in: int,
        zero_for_one: bool,
    ) -> int:
        """Estimate the swap at the current price without quoting.

        Treats the price as fixed for the whole swap and ignores fees, so its
        error grows with the price impact of the swap itself. Useful as a
        seed or when no quoter is reachable.

        Returns:
            Amount of the input token to swap
        """
        pool, sqrt_lower, sqrt_upper = self._prepare(pool_address, tick_lower, tick_upper, amount_in)
        price = pool.sqrt_price_x96

        # Out of range the position is single-sided
        if price <= sqrt_lower:
            swap_amount = 0 if zero_for_one else amount_in
        elif price >= sqrt_upper:
            swap_amount = amount_in if zero_for_one else 0
        elif zero_for_one:
            # token1 needed alongside all of amount_in, valued in token0
            liquidity = get_liquidity_for_amount0(price, sqrt_upper, amount_in)
            counterpart = get_amount1_for_liquidity(sqrt_lower, price, liquidity)
            counterpart_in_input = mul_div(mul_div(counterpart, Q96, price), Q96, price)
            swap_amount = _swap_share(amount_in, counterpart_in_input)
        else:
            # token0 needed alongside all of amount_in, valued in token1
            liquidity = get_liquidity_for_amount1(sqrt_lower, price, amount_in)
            counterpart = get_amount0_for_liquidity(price, sqrt_upper, liquidity)
            counterpart_in_input = mul_div(mul_div(counterpart, price, Q96), price, Q96)
            swap_amount = _swap_share(amount_in, counterpart_in_input)

        logger.info("static_estimate_done", pool=pool.address, swap_amount=swap_amount)
        return swap_amount


def _swap_share(amount_in: int, counterpart_in_input: int) -> int:
    """Split amount_in so the swapped part buys the counterpart it needs.

    Keeping x and swapping s = amount_in - x must give s / x equal to
    counterpart / amount_in, hence s = amount_in * c / (amount_in + c).
    """
    fraction = mul_div(counterpart_in_input, PRECISION, amount_in + counterpart_in_input)
    return mul_div(amount_in, fraction, PRECISION)


__all__ = [
    "LiquidityAllocation",
    "SearchState",
    "SwapCalculator",
    "allocate",
]
