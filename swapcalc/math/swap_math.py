"""Exact-input swap step within a single liquidity range.

Integer-exact port of the parts of Uniswap V3 SqrtPriceMath and SwapMath that
an exact-input swap touches. No tick crossing: liquidity is constant between
the current price and the target, which is enough to model a pool locally or
to drive deterministic fixtures.
"""

from __future__ import annotations

from swapcalc.constants import FEE_DENOMINATOR, Q96, RESOLUTION, UINT160_MAX, UINT256_MAX
from swapcalc.errors import InvalidSqrtPrice
from swapcalc.math.full_math import (
    div_rounding_up,
    mul_div,
    mul_div_rounding_up,
    to_uint160,
)


def get_next_sqrt_price_from_amount0_rounding_up(
    sqrt_price_x96: int, liquidity: int, amount: int
) -> int:
    """Price after adding amount of token0 (price moves down).

    Always rounds up so the price never overshoots the exact result.
    """
    if amount == 0:
        return sqrt_price_x96
    numerator1 = liquidity << RESOLUTION
    denominator = numerator1 + amount * sqrt_price_x96
    if denominator <= UINT256_MAX:
        return to_uint160(mul_div_rounding_up(numerator1, sqrt_price_x96, denominator))
    return to_uint160(div_rounding_up(numerator1, numerator1 // sqrt_price_x96 + amount))


def get_next_sqrt_price_from_amount1_rounding_down(
    sqrt_price_x96: int, liquidity: int, amount: int
) -> int:
    """Price after adding amount of token1 (price moves up)."""
    if amount <= UINT160_MAX:
        quotient = (amount << RESOLUTION) // liquidity
    else:
        quotient = mul_div(amount, Q96, liquidity)
    return to_uint160(sqrt_price_x96 + quotient)


def get_next_sqrt_price_from_input(
    sqrt_price_x96: int, liquidity: int, amount_in: int, zero_for_one: bool
) -> int:
    """Price after swapping amount_in (net of fee) into the range.

    Raises:
        InvalidSqrtPrice: If the price or liquidity is zero
    """
    if sqrt_price_x96 <= 0:
        raise InvalidSqrtPrice(f"sqrtPriceX96 must be positive: {sqrt_price_x96}")
    if liquidity <= 0:
        raise InvalidSqrtPrice("Cannot move price through zero liquidity")
    if zero_for_one:
        return get_next_sqrt_price_from_amount0_rounding_up(sqrt_price_x96, liquidity, amount_in)
    return get_next_sqrt_price_from_amount1_rounding_down(sqrt_price_x96, liquidity, amount_in)


def get_amount0_delta(
    sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, liquidity: int, round_up: bool
) -> int:
    """token0 between two prices for a liquidity amount."""
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_a_x96 <= 0:
        raise InvalidSqrtPrice(f"sqrtPriceX96 must be positive: {sqrt_ratio_a_x96}")

    numerator1 = liquidity << RESOLUTION
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96
    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96), sqrt_ratio_a_x96
        )
    return mul_div(numerator1, numerator2, sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, liquidity: int, round_up: bool
) -> int:
    """token1 between two prices for a liquidity amount."""
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)
    return mul_div(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)


def compute_swap_step(
    sqrt_ratio_current_x96: int,
    sqrt_ratio_target_x96: int,
    liquidity: int,
    amount_remaining: int,
    fee_pips: int,
) -> tuple[int, int, int, int]:
    """Swap as much of amount_remaining as fits before the target price.

    Args:
        sqrt_ratio_current_x96: Price before the step
        sqrt_ratio_target_x96: Price the step may not pass (direction is implied)
        liquidity: Active liquidity, constant over the step
        amount_remaining: Exact input still to swap, fee included
        fee_pips: Fee in hundredths of a basis point

    Returns:
        (sqrt_ratio_next_x96, amount_in, amount_out, fee_amount)
    """
    zero_for_one = sqrt_ratio_current_x96 >= sqrt_ratio_target_x96

    amount_remaining_less_fee = mul_div(
        amount_remaining, FEE_DENOMINATOR - fee_pips, FEE_DENOMINATOR
    )
    if zero_for_one:
        amount_in = get_amount0_delta(
            sqrt_ratio_target_x96, sqrt_ratio_current_x96, liquidity, True
        )
    else:
        amount_in = get_amount1_delta(
            sqrt_ratio_current_x96, sqrt_ratio_target_x96, liquidity, True
        )

    if amount_remaining_less_fee >= amount_in:
        sqrt_ratio_next_x96 = sqrt_ratio_target_x96
    else:
        sqrt_ratio_next_x96 = get_next_sqrt_price_from_input(
            sqrt_ratio_current_x96, liquidity, amount_remaining_less_fee, zero_for_one
        )

    reached_target = sqrt_ratio_next_x96 == sqrt_ratio_target_x96

    if zero_for_one:
        if not reached_target:
            amount_in = get_amount0_delta(
                sqrt_ratio_next_x96, sqrt_ratio_current_x96, liquidity, True
            )
        amount_out = get_amount1_delta(
            sqrt_ratio_next_x96, sqrt_ratio_current_x96, liquidity, False
        )
    else:
        if not reached_target:
            amount_in = get_amount1_delta(
                sqrt_ratio_current_x96, sqrt_ratio_next_x96, liquidity, True
            )
        amount_out = get_amount0_delta(
            sqrt_ratio_current_x96, sqrt_ratio_next_x96, liquidity, False
        )

    if not reached_target:
        # The whole remainder was consumed; whatever is not input is fee
        fee_amount = amount_remaining - amount_in
    else:
        fee_amount = mul_div_rounding_up(amount_in, fee_pips, FEE_DENOMINATOR - fee_pips)

    return sqrt_ratio_next_x96, amount_in, amount_out, fee_amount


__all__ = [
    "get_next_sqrt_price_from_amount0_rounding_up",
    "get_next_sqrt_price_from_amount1_rounding_down",
    "get_next_sqrt_price_from_input",
    "get_amount0_delta",
    "get_amount1_delta",
    "compute_swap_step",
]
