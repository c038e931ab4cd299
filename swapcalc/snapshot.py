"""Pydantic model for recorded pool state.

A snapshot is the JSON form of one PoolState read, e.g.:

    {
        "address": "0x307f...b640",
        "token0": "0x...", "token1": "0x...",
        "fee": 500, "tickSpacing": 10,
        "sqrtPriceX96": "158...", "tick": -124300,
        "liquidity": "184...", "blockNumber": 127502248
    }

Snapshots let the solver run offline against a StaticPoolReader and a
SimulatedQuoter, and serve as regression fixtures.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from swapcalc.constants import MAX_TICK, MIN_TICK, TICK_SPACINGS
from swapcalc.pool import PoolState
from swapcalc.types import Address, Uint256, normalize_address


class PoolSnapshot(BaseModel):
    """Point-in-time pool state as recorded from chain."""

    address: Address
    token0: Address
    token1: Address
    fee: int = Field(ge=0, lt=1_000_000, description="Fee in hundredths of a basis point.")
    tick_spacing: int | None = Field(
        default=None,
        gt=0,
        alias="tickSpacing",
        description="Defaults to the standard spacing for the fee tier.",
    )
    sqrt_price_x96: Uint256 = Field(alias="sqrtPriceX96")
    tick: int = Field(ge=MIN_TICK, le=MAX_TICK)
    liquidity: Uint256 = 0
    block_number: int | None = Field(default=None, ge=0, alias="blockNumber")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _fill_tick_spacing(self) -> PoolSnapshot:
        if self.tick_spacing is None:
            if self.fee not in TICK_SPACINGS:
                raise ValueError(f"tickSpacing is required for non-standard fee tier {self.fee}")
            self.tick_spacing = TICK_SPACINGS[self.fee]
        return self

    def to_pool_state(self) -> PoolState:
        """Convert to the PoolState consumed by the solver."""
        assert self.tick_spacing is not None
        return PoolState(
            address=normalize_address(self.address),
            token0=normalize_address(self.token0),
            token1=normalize_address(self.token1),
            fee=self.fee,
            tick_spacing=self.tick_spacing,
            sqrt_price_x96=self.sqrt_price_x96,
            tick=self.tick,
            liquidity=self.liquidity,
        )

    @classmethod
    def from_pool_state(cls, pool: PoolState, block_number: int | None = None) -> PoolSnapshot:
        """Record a PoolState, e.g. one read live over RPC."""
        return cls(
            address=pool.address,
            token0=pool.token0,
            token1=pool.token1,
            fee=pool.fee,
            tick_spacing=pool.tick_spacing,
            sqrt_price_x96=pool.sqrt_price_x96,
            tick=pool.tick,
            liquidity=pool.liquidity,
            block_number=block_number,
        )


def load_snapshot(path: str | Path) -> PoolSnapshot:
    """Load and validate a snapshot JSON file."""
    with open(path) as f:
        data = json.load(f)
    return PoolSnapshot.model_validate(data)


def dump_snapshot(snapshot: PoolSnapshot) -> str:
    """Serialize a snapshot with camelCase keys and uint256 values as strings."""
    data = snapshot.model_dump(by_alias=True)
    data["sqrtPriceX96"] = str(data["sqrtPriceX96"])
    data["liquidity"] = str(data["liquidity"])
    return json.dumps(data, indent=2)


__all__ = ["PoolSnapshot", "load_snapshot", "dump_snapshot"]
