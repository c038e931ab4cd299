"""Liquidity <-> token amounts for a price range.

Integer-exact port of the Uniswap V3 periphery LiquidityAmounts library.
All prices are sqrtPriceX96 values and all results are floor-rounded, so
converting amounts to liquidity and back never returns more than was put in.

Which formula applies depends on where the current price sits:

    price <= lower          position is all token0
    lower < price < upper   both tokens, each over its partial interval
    price >= upper          position is all token1
"""

from __future__ import annotations

from swapcalc.constants import Q96, RESOLUTION
from swapcalc.errors import InvalidRange, InvalidSqrtPrice
from swapcalc.math.full_math import mul_div, to_uint128


def _check_range(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int) -> None:
    if sqrt_ratio_a_x96 >= sqrt_ratio_b_x96:
        raise InvalidRange(
            f"Lower sqrt price {sqrt_ratio_a_x96} must be below upper {sqrt_ratio_b_x96}"
        )
    if sqrt_ratio_a_x96 <= 0:
        raise InvalidSqrtPrice(f"sqrtPriceX96 must be positive: {sqrt_ratio_a_x96}")


def get_liquidity_for_amount0(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, amount0: int) -> int:
    """Liquidity supplied by amount0 over [a, b].

    L = amount0 * (sqrt(a) * sqrt(b)) / (sqrt(b) - sqrt(a))

    Raises:
        InvalidRange: If a >= b
        Overflow: If the liquidity does not fit in uint128
    """
    _check_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    intermediate = mul_div(sqrt_ratio_a_x96, sqrt_ratio_b_x96, Q96)
    return to_uint128(mul_div(amount0, intermediate, sqrt_ratio_b_x96 - sqrt_ratio_a_x96))


def get_liquidity_for_amount1(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, amount1: int) -> int:
    """Liquidity supplied by amount1 over [a, b].

    L = amount1 / (sqrt(b) - sqrt(a))

    Raises:
        InvalidRange: If a >= b
        Overflow: If the liquidity does not fit in uint128
    """
    _check_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    return to_uint128(mul_div(amount1, Q96, sqrt_ratio_b_x96 - sqrt_ratio_a_x96))


def get_liquidity_for_amounts(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int,
) -> int:
    """Maximum liquidity that amount0 and amount1 can fund at the current price.

    Args:
        sqrt_ratio_x96: Current pool price
        sqrt_ratio_a_x96: Lower bound of the range
        sqrt_ratio_b_x96: Upper bound of the range
        amount0: Available token0
        amount1: Available token1

    Returns:
        Liquidity, bounded by whichever token runs out first

    Raises:
        InvalidRange: If a >= b
        Overflow: If the liquidity does not fit in uint128
    """
    _check_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)

    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        liquidity0 = get_liquidity_for_amount0(sqrt_ratio_x96, sqrt_ratio_b_x96, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_x96, amount1)
        return min(liquidity0, liquidity1)

    return get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)


def get_amount0_for_liquidity(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, liquidity: int) -> int:
    """token0 held by liquidity over [a, b].

    Raises:
        InvalidRange: If a >= b
        Overflow: If liquidity is not a uint128
    """
    _check_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    to_uint128(liquidity)
    return (
        mul_div(liquidity << RESOLUTION, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, sqrt_ratio_b_x96)
        // sqrt_ratio_a_x96
    )


def get_amount1_for_liquidity(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, liquidity: int) -> int:
    """token1 held by liquidity over [a, b].

    Raises:
        InvalidRange: If a >= b
        Overflow: If liquidity is not a uint128
    """
    _check_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    to_uint128(liquidity)
    return mul_div(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)


def get_amounts_for_liquidity(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
) -> tuple[int, int]:
    """Token amounts required to mint liquidity at the current price.

    Returns:
        (amount0, amount1); amount1 is 0 below the range, amount0 is 0 above it

    Raises:
        InvalidRange: If a >= b
        Overflow: If liquidity is not a uint128
    """
    _check_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_amount0_for_liquidity(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity), 0

    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        amount0 = get_amount0_for_liquidity(sqrt_ratio_x96, sqrt_ratio_b_x96, liquidity)
        amount1 = get_amount1_for_liquidity(sqrt_ratio_a_x96, sqrt_ratio_x96, liquidity)
        return amount0, amount1

    return 0, get_amount1_for_liquidity(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity)


__all__ = [
    "get_liquidity_for_amount0",
    "get_liquidity_for_amount1",
    "get_liquidity_for_amounts",
    "get_amount0_for_liquidity",
    "get_amount1_for_liquidity",
    "get_amounts_for_liquidity",
]
