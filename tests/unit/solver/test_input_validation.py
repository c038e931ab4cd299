"""Tests for argument checks shared by all strategies.

Every check happens before the first quote, so a rejected call never costs
a quoter round trip.
"""

import pytest

from swapcalc.constants import UINT256_MAX
from swapcalc.errors import (
    InvalidAmount,
    InvalidRange,
    InvalidTick,
    InvalidTickSpacing,
    OracleFailure,
    Overflow,
    PoolReadFailure,
)
from swapcalc.math.tick_math import get_sqrt_ratio_at_tick
from swapcalc.quoter import MockQuoter
from swapcalc.solver import LiquidityAllocation, SearchState, allocate
from tests.helpers import (
    ONE,
    POOL_AT_PAR,
    SQRT_PRICE_AT_PAR,
    UNKNOWN_POOL,
    make_calculator,
    make_pool,
)

STRATEGIES = ["solve_balanced_swap", "solve_dust_bounded_swap", "estimate_swap_static"]


@pytest.fixture
def calc(flat_quoter):
    return make_calculator(flat_quoter, make_pool())


def run(calc, strategy, tick_lower, tick_upper, amount_in, pool=POOL_AT_PAR):
    return getattr(calc, strategy)(pool, tick_lower, tick_upper, amount_in, True)


@pytest.mark.parametrize("strategy", STRATEGIES)
class TestRejectedBeforeQuoting:
    """Invalid arguments raise without reading quotes."""

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amount(self, calc, flat_quoter, strategy, amount):
        with pytest.raises(InvalidAmount):
            run(calc, strategy, -600, 600, amount)
        assert flat_quoter.calls == []
        assert calc.pool_reader.calls == []

    def test_amount_wider_than_uint256(self, calc, flat_quoter, strategy):
        with pytest.raises(Overflow):
            run(calc, strategy, -600, 600, UINT256_MAX + 1)
        assert flat_quoter.calls == []

    @pytest.mark.parametrize("tick_lower,tick_upper", [(600, -600), (600, 600)])
    def test_inverted_range(self, calc, flat_quoter, strategy, tick_lower, tick_upper):
        with pytest.raises(InvalidRange):
            run(calc, strategy, tick_lower, tick_upper, ONE)
        assert flat_quoter.calls == []
        assert calc.pool_reader.calls == []

    @pytest.mark.parametrize("tick_lower,tick_upper", [(-590, 600), (-600, 610)])
    def test_misaligned_ticks(self, calc, flat_quoter, strategy, tick_lower, tick_upper):
        """Ticks must be multiples of the pool's spacing (60)."""
        with pytest.raises(InvalidTickSpacing):
            run(calc, strategy, tick_lower, tick_upper, ONE)
        assert flat_quoter.calls == []

    def test_tick_out_of_bounds(self, calc, flat_quoter, strategy):
        """-887280 is a multiple of 60 but below MIN_TICK."""
        with pytest.raises(InvalidTick):
            run(calc, strategy, -887280, 600, ONE)
        assert flat_quoter.calls == []

    def test_unknown_pool(self, calc, flat_quoter, strategy):
        with pytest.raises(PoolReadFailure):
            run(calc, strategy, -600, 600, ONE, pool=UNKNOWN_POOL)
        assert flat_quoter.calls == []


class TestPoolReads:
    """Each run reads the pool exactly once."""

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_single_read(self, calc, strategy):
        run(calc, strategy, -600, 600, ONE)
        assert calc.pool_reader.calls == [POOL_AT_PAR]


class TestOracleFailure:
    """Quoter errors propagate unchanged."""

    @pytest.mark.parametrize("strategy", ["solve_balanced_swap", "solve_dust_bounded_swap"])
    def test_propagates(self, strategy):
        quoter = MockQuoter()
        calc = make_calculator(quoter, make_pool())
        with pytest.raises(OracleFailure):
            run(calc, strategy, -600, 600, ONE)
        assert len(quoter.calls) == 1


class TestEvaluateSwap:
    """Tests for evaluate_swap."""

    @pytest.mark.parametrize("swap_amount", [-1, ONE + 1])
    def test_swap_outside_input_raises(self, calc, flat_quoter, swap_amount):
        with pytest.raises(InvalidAmount):
            calc.evaluate_swap(POOL_AT_PAR, -600, 600, ONE, swap_amount, True)
        assert flat_quoter.calls == []

    def test_no_swap_keeps_input(self, calc):
        """Swapping nothing leaves no token1, so no liquidity can be minted in range."""
        allocation = calc.evaluate_swap(POOL_AT_PAR, -600, 600, ONE, 0, True)
        assert allocation.balance0 == ONE
        assert allocation.balance1 == 0
        assert allocation.liquidity == 0
        assert allocation.leftover0 == ONE

    def test_passes_price_limit(self, calc, flat_quoter):
        calc.evaluate_swap(POOL_AT_PAR, -600, 600, ONE, 10, True, sqrt_price_limit_x96=12345)
        assert flat_quoter.calls[0][4] == 12345


class TestAllocation:
    """Tests for allocate and LiquidityAllocation."""

    def test_used_never_exceeds_balance(self):
        allocation = allocate(
            SQRT_PRICE_AT_PAR,
            get_sqrt_ratio_at_tick(-600),
            get_sqrt_ratio_at_tick(1200),
            ONE,
            3 * ONE,
        )
        assert 0 <= allocation.leftover0 <= ONE
        assert 0 <= allocation.leftover1 <= 3 * ONE
        assert allocation.liquidity > 0

    def test_leftovers_by_direction(self):
        allocation = LiquidityAllocation(
            liquidity=1, amount0=10, amount1=20, balance0=15, balance1=27, sqrt_price_x96=1
        )
        assert allocation.leftovers(True) == (5, 7)
        assert allocation.leftovers(False) == (7, 5)


class TestSearchState:
    def test_start_brackets_input(self):
        state = SearchState.start(101)
        assert (state.low, state.high, state.candidate, state.previous) == (0, 101, 50, 50)
        assert state.iterations == 0
