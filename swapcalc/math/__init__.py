"""Fixed-point math for concentrated liquidity.

This package provides integer-exact primitives (floor rounding throughout):
- full_math: checked mul/div and integer width casts
- tick_math: tick <-> sqrtPriceX96
- liquidity_amounts: liquidity <-> token amounts for a range
- swap_math: exact-input swap step within a single range
"""

from swapcalc.math.full_math import mul_div, mul_div_rounding_up, to_uint128, to_uint160
from swapcalc.math.liquidity_amounts import (
    get_amount0_for_liquidity,
    get_amount1_for_liquidity,
    get_amounts_for_liquidity,
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_liquidity_for_amounts,
)
from swapcalc.math.swap_math import compute_swap_step
from swapcalc.math.tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    max_usable_tick,
    min_usable_tick,
)

__all__ = [
    "mul_div",
    "mul_div_rounding_up",
    "to_uint128",
    "to_uint160",
    "get_sqrt_ratio_at_tick",
    "get_tick_at_sqrt_ratio",
    "min_usable_tick",
    "max_usable_tick",
    "get_liquidity_for_amount0",
    "get_liquidity_for_amount1",
    "get_liquidity_for_amounts",
    "get_amount0_for_liquidity",
    "get_amount1_for_liquidity",
    "get_amounts_for_liquidity",
    "compute_swap_step",
]
