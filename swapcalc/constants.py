"""Fixed-point bounds, fee tiers and contract addresses."""

# Q64.96 scaling factor for square-root prices
Q96 = 1 << 96
RESOLUTION = 96

# Tick bounds from TickMath (log base sqrt(1.0001) of 2^128)
MIN_TICK = -887272
MAX_TICK = 887272

# sqrtPriceX96 at MIN_TICK and MAX_TICK
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

UINT128_MAX = 2**128 - 1
UINT160_MAX = 2**160 - 1
UINT256_MAX = 2**256 - 1

# Fee tiers in hundredths of a basis point (3000 = 0.3%)
FEE_LOWEST = 100
FEE_LOW = 500
FEE_MEDIUM = 3000
FEE_HIGH = 10000

FEE_DENOMINATOR = 1_000_000

TICK_SPACINGS = {
    FEE_LOWEST: 1,
    FEE_LOW: 10,
    FEE_MEDIUM: 60,
    FEE_HIGH: 200,
}

# Precision used by the static estimator for the swap fraction
PRECISION = 10**18

# QuoterV2 is deployed at the same address on mainnet and Arbitrum
QUOTER_V2_ADDRESS = "0x61fFE014bA17989E743c5F6cB21bF9697530B21e"

__all__ = [
    "Q96",
    "RESOLUTION",
    "MIN_TICK",
    "MAX_TICK",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "UINT128_MAX",
    "UINT160_MAX",
    "UINT256_MAX",
    "FEE_LOWEST",
    "FEE_LOW",
    "FEE_MEDIUM",
    "FEE_HIGH",
    "FEE_DENOMINATOR",
    "TICK_SPACINGS",
    "PRECISION",
    "QUOTER_V2_ADDRESS",
]
