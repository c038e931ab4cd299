"""Error classes for swap calculation.

Every error is fatal for the run that raised it. Callers may re-invoke the
whole search; nothing inside the package retries.
"""


class SwapCalcError(Exception):
    """Base error for swap calculation."""

    pass


class InvalidTick(SwapCalcError):
    """Tick is outside [MIN_TICK, MAX_TICK]."""

    pass


class InvalidSqrtPrice(SwapCalcError):
    """sqrtPriceX96 is outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO)."""

    pass


class InvalidTickSpacing(SwapCalcError):
    """A range bound is not a multiple of the pool's tick spacing."""

    pass


class InvalidRange(SwapCalcError):
    """Lower bound is not strictly below the upper bound."""

    pass


class InvalidAmount(SwapCalcError):
    """Input amount must be positive."""

    pass


class Overflow(SwapCalcError):
    """A fixed-point intermediate or result exceeds its integer width."""

    pass


class OracleFailure(SwapCalcError):
    """The quoter call failed or reverted."""

    pass


class PoolReadFailure(SwapCalcError):
    """Pool metadata could not be read."""

    pass


__all__ = [
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
