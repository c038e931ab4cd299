"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token and pool addresses, common amounts
- factories: Pool and calculator factory functions
- quoters: Synthetic quoters with known price impact
"""

from tests.helpers.constants import (
    FIXTURE_POOL,
    FIXTURE_TICK_LOWER,
    FIXTURE_TICK_UPPER,
    ONE,
    POOL_AT_PAR,
    SQRT_PRICE_AT_PAR,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    UNKNOWN_POOL,
)
from tests.helpers.factories import make_calculator, make_pool
from tests.helpers.quoters import LinearImpactQuoter

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "POOL_AT_PAR",
    "UNKNOWN_POOL",
    "FIXTURE_POOL",
    "FIXTURE_TICK_LOWER",
    "FIXTURE_TICK_UPPER",
    "SQRT_PRICE_AT_PAR",
    "ONE",
    # Factories
    "make_pool",
    "make_calculator",
    # Quoters
    "LinearImpactQuoter",
]
