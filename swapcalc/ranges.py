"""Derive a tick range from a percentage band around the current price."""

from __future__ import annotations

import math

from swapcalc.errors import InvalidRange
from swapcalc.math.tick_math import max_usable_tick, min_usable_tick

TICK_BASE = 1.0001


def floor_to_spacing(tick: float, tick_spacing: int) -> int:
    """Round a (possibly fractional) tick down to a multiple of tick_spacing."""
    return math.floor(tick / tick_spacing) * tick_spacing


def ticks_for_range(current_tick: int, tick_spacing: int, range_fraction: float) -> tuple[int, int]:
    """Ticks bounding prices (1 - r) * p and (1 + r) * p around the current price.

    Both bounds are rounded down to the tick spacing and clamped to the
    usable tick range. The band is computed in float: it only picks the
    range, all downstream math is integer.

    Args:
        current_tick: The pool's current tick
        tick_spacing: The pool's tick spacing
        range_fraction: Half-width of the band, e.g. 0.1 for +/-10%

    Returns:
        (tick_lower, tick_upper)

    Raises:
        ValueError: If range_fraction is not in (0, 1) or tick_spacing is not positive
        InvalidRange: If the band is narrower than one tick spacing
    """
    if not 0 < range_fraction < 1:
        raise ValueError(f"range_fraction must be in (0, 1), got {range_fraction}")
    if tick_spacing <= 0:
        raise ValueError(f"tick_spacing must be positive, got {tick_spacing}")

    # log_1.0001((1 +/- r) * 1.0001^t) = t + log_1.0001(1 +/- r)
    log_base = math.log(TICK_BASE)
    upper = current_tick + math.log(1 + range_fraction) / log_base
    lower = current_tick + math.log(1 - range_fraction) / log_base

    tick_upper = min(floor_to_spacing(upper, tick_spacing), max_usable_tick(tick_spacing))
    tick_lower = max(floor_to_spacing(lower, tick_spacing), min_usable_tick(tick_spacing))

    if tick_lower >= tick_upper:
        raise InvalidRange(
            f"Range +/-{range_fraction} around tick {current_tick} collapses "
            f"at tick spacing {tick_spacing}"
        )
    return tick_lower, tick_upper


__all__ = ["TICK_BASE", "floor_to_spacing", "ticks_for_range"]
