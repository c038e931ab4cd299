"""Configuration for the swap search and the RPC adapters."""

from __future__ import annotations

import os
from dataclasses import dataclass

from swapcalc.constants import QUOTER_V2_ADDRESS


@dataclass(frozen=True)
class SearchConfig:
    """Tuning constants for the swap searches.

    Changing any of these changes solver output, so regression fixtures are
    pinned to DEFAULT_SEARCH_CONFIG.

    Attributes:
        min_delta: Balanced search stops once the candidate moves by less
            than this many smallest units (default: 100)
        max_iterations: Hard cap on quoter round trips per run (default: 128)
        dust_threshold: Dust search stops once both leftovers are at or
            below this many smallest units (default: 1,000,000)
        trim_unit: Dust search floors leftovers to a multiple of this before
            comparing them, to ignore rounding noise (default: 100)
    """

    min_delta: int = 100
    max_iterations: int = 128
    dust_threshold: int = 1_000_000
    trim_unit: int = 100

    def __post_init__(self) -> None:
        if self.min_delta <= 0:
            raise ValueError(f"min_delta must be positive, got {self.min_delta}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.dust_threshold < 0:
            raise ValueError(f"dust_threshold cannot be negative, got {self.dust_threshold}")
        if self.trim_unit <= 0:
            raise ValueError(f"trim_unit must be positive, got {self.trim_unit}")


# Default configuration instance
DEFAULT_SEARCH_CONFIG = SearchConfig()


@dataclass(frozen=True)
class RpcConfig:
    """Connection settings for the live quoter and pool reader.

    Attributes:
        rpc_url: HTTP JSON-RPC endpoint, or None when running offline
        quoter_address: QuoterV2 contract address
        block: Block number to pin every read to, or "latest"
    """

    rpc_url: str | None = None
    quoter_address: str = QUOTER_V2_ADDRESS
    block: int | str = "latest"

    @classmethod
    def from_env(cls) -> RpcConfig:
        """Build from environment variables.

        - SWAPCALC_RPC_URL: RPC endpoint (default: unset, offline)
        - SWAPCALC_QUOTER_ADDRESS: QuoterV2 address (default: canonical deployment)
        - SWAPCALC_BLOCK: block number or tag (default: latest)
        """
        block: int | str = os.environ.get("SWAPCALC_BLOCK", "latest")
        if isinstance(block, str) and block.isdigit():
            block = int(block)
        return cls(
            rpc_url=os.environ.get("SWAPCALC_RPC_URL") or None,
            quoter_address=os.environ.get("SWAPCALC_QUOTER_ADDRESS", QUOTER_V2_ADDRESS),
            block=block,
        )


__all__ = ["SearchConfig", "DEFAULT_SEARCH_CONFIG", "RpcConfig"]
