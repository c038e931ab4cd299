"""Pool metadata readers."""

from __future__ import annotations

from typing import Protocol

import structlog

from swapcalc.errors import PoolReadFailure
from swapcalc.pool import PoolState
from swapcalc.types import normalize_address

logger = structlog.get_logger()


class PoolReader(Protocol):
    """Protocol for reading a pool's current state."""

    def read_pool(self, pool_address: str) -> PoolState:
        """Read fee, tick spacing, tokens and current price of a pool.

        Raises:
            PoolReadFailure: If the pool cannot be read
        """
        ...


class StaticPoolReader:
    """In-memory pool reader for offline runs and tests."""

    def __init__(self, pools: list[PoolState] | None = None):
        self.pools: dict[str, PoolState] = {}
        self.calls: list[str] = []  # Track calls for assertions
        for pool in pools or []:
            self.add_pool(pool)

    def add_pool(self, pool: PoolState) -> None:
        """Register (or replace) a pool by address."""
        self.pools[normalize_address(pool.address)] = pool

    def read_pool(self, pool_address: str) -> PoolState:
        """Return the registered pool state."""
        self.calls.append(pool_address)
        pool = self.pools.get(normalize_address(pool_address))
        if pool is None:
            raise PoolReadFailure(f"Unknown pool {pool_address}")
        return pool


# Minimal UniswapV3Pool ABI
POOL_ABI = [
    {
        "name": "slot0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "sqrtPriceX96", "type": "uint160"},
            {"name": "tick", "type": "int24"},
            {"name": "observationIndex", "type": "uint16"},
            {"name": "observationCardinality", "type": "uint16"},
            {"name": "observationCardinalityNext", "type": "uint16"},
            {"name": "feeProtocol", "type": "uint8"},
            {"name": "unlocked", "type": "bool"},
        ],
    },
    {
        "name": "fee",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint24"}],
    },
    {
        "name": "tickSpacing",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "int24"}],
    },
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "liquidity",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint128"}],
    },
]


class Web3PoolReader:
    """Reads pool state from chain via RPC view calls."""

    def __init__(self, web3_provider: str, block_identifier: int | str = "latest"):
        """Initialize reader with web3 provider.

        Args:
            web3_provider: HTTP RPC URL
            block_identifier: Block to read at; pin it to match the quoter
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3PoolReader. Install with: pip install web3"
            ) from e

        self.w3 = Web3(Web3.HTTPProvider(web3_provider))
        self.block_identifier = block_identifier

    def read_pool(self, pool_address: str) -> PoolState:
        """Read slot0, fee, tick spacing, tokens and liquidity in one pass."""
        from web3 import Web3

        block = self.block_identifier
        try:
            pool = self.w3.eth.contract(
                address=Web3.to_checksum_address(pool_address),
                abi=POOL_ABI,
            )
            slot0 = pool.functions.slot0().call(block_identifier=block)
            fee = pool.functions.fee().call(block_identifier=block)
            tick_spacing = pool.functions.tickSpacing().call(block_identifier=block)
            token0 = pool.functions.token0().call(block_identifier=block)
            token1 = pool.functions.token1().call(block_identifier=block)
            liquidity = pool.functions.liquidity().call(block_identifier=block)
        except Exception as e:
            logger.warning("pool_read_failed", pool=pool_address, block=block, error=str(e))
            raise PoolReadFailure(f"Could not read pool {pool_address}: {e}") from e

        state = PoolState(
            address=normalize_address(pool_address),
            token0=normalize_address(token0),
            token1=normalize_address(token1),
            fee=int(fee),
            tick_spacing=int(tick_spacing),
            sqrt_price_x96=int(slot0[0]),
            tick=int(slot0[1]),
            liquidity=int(liquidity),
        )
        logger.debug(
            "pool_read",
            pool=state.address,
            fee=state.fee,
            tick=state.tick,
            tick_spacing=state.tick_spacing,
        )
        return state


__all__ = ["PoolReader", "StaticPoolReader", "Web3PoolReader", "POOL_ABI"]
