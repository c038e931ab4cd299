"""PoolState dataclass for a point-in-time pool read."""

from __future__ import annotations

from dataclasses import dataclass

from swapcalc.errors import InvalidTickSpacing
from swapcalc.types import normalize_address


@dataclass
class PoolState:
    """Snapshot of a concentrated liquidity pool.

    The solver reads this once per run and never observes later changes;
    the effect of each hypothetical swap is modelled by the quoter alone.
    """

    address: str
    token0: str
    token1: str
    fee: int  # Fee in hundredths of a basis point (e.g., 3000 for 0.3%)
    tick_spacing: int
    sqrt_price_x96: int  # Current sqrt(price) * 2^96
    tick: int  # Current tick index
    liquidity: int = 0  # Active liquidity at the current tick

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.token1
        elif token_in_norm == normalize_address(self.token1):
            return self.token0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def is_token0(self, token: str) -> bool:
        """Check if token is token0 (determines swap direction)."""
        return normalize_address(token) == normalize_address(self.token0)

    def tokens_for_direction(self, zero_for_one: bool) -> tuple[str, str]:
        """Return (token_in, token_out) for a swap direction."""
        if zero_for_one:
            return self.token0, self.token1
        return self.token1, self.token0

    def check_tick_alignment(self, *ticks: int) -> None:
        """Raise InvalidTickSpacing unless every tick is a multiple of the spacing."""
        for tick in ticks:
            if tick % self.tick_spacing != 0:
                raise InvalidTickSpacing(
                    f"Tick {tick} is not a multiple of tick spacing {self.tick_spacing} "
                    f"for pool {self.address}"
                )


__all__ = ["PoolState"]
