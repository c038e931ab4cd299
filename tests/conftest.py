"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from swapcalc.pool import PoolState
from swapcalc.pool_reader import StaticPoolReader
from swapcalc.quoter import MockQuoter, SimulatedQuoter
from swapcalc.snapshot import PoolSnapshot, load_snapshot
from swapcalc.solver import SwapCalculator
from tests.helpers import SQRT_PRICE_AT_PAR, make_pool

FIXTURES_DIR = Path(__file__).parent / "fixtures"
POOLS_DIR = FIXTURES_DIR / "pools"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


def load_pool_fixture(name: str) -> PoolSnapshot:
    """Load a pool snapshot fixture by name.

    Args:
        name: Fixture name without extension (e.g., "arbitrum_307f")

    Returns:
        Validated PoolSnapshot
    """
    return load_snapshot(POOLS_DIR / f"{name}.json")


@pytest.fixture
def fixture_snapshot() -> PoolSnapshot:
    """Recorded 0.05% pool at block 127502248."""
    return load_pool_fixture("arbitrum_307f")


@pytest.fixture
def fixture_pool(fixture_snapshot: PoolSnapshot) -> PoolState:
    """PoolState of the recorded pool."""
    return fixture_snapshot.to_pool_state()


# =============================================================================
# Pools and collaborators
# =============================================================================


@pytest.fixture
def pool_at_par() -> PoolState:
    """0.3% pool at price 1 (tick 0) with spacing 60."""
    return make_pool()


@pytest.fixture
def pool_reader(pool_at_par: PoolState) -> StaticPoolReader:
    """In-memory reader serving pool_at_par."""
    return StaticPoolReader([pool_at_par])


@pytest.fixture
def flat_quoter() -> MockQuoter:
    """1:1 quoter that never moves the price off par."""
    return MockQuoter(default_rate=(1, 1), sqrt_price_x96=SQRT_PRICE_AT_PAR)


@pytest.fixture
def simulated_calculator(fixture_pool: PoolState) -> SwapCalculator:
    """Calculator running offline against the recorded pool."""
    return SwapCalculator(
        quoter=SimulatedQuoter(fixture_pool),
        pool_reader=StaticPoolReader([fixture_pool]),
    )
