"""Checked fixed-point integer helpers.

Python integers never overflow, so the on-chain width limits are enforced
explicitly: every result that the EVM would store in a uint128/uint160/uint256
is range-checked and raises Overflow instead of wrapping.

Rounding is floor unless the function name says otherwise:
    mul_div(a, b, d)              -> floor(a * b / d)
    mul_div_rounding_up(a, b, d)  -> ceil(a * b / d)
    div_rounding_up(a, d)         -> ceil(a / d)
"""

from __future__ import annotations

from swapcalc.constants import UINT128_MAX, UINT160_MAX, UINT256_MAX
from swapcalc.errors import Overflow


def _check_width(value: int, maximum: int, bits: int) -> int:
    if value < 0:
        raise Overflow(f"Negative value cannot be uint{bits}: {value}")
    if value > maximum:
        raise Overflow(f"Value exceeds uint{bits} max: {value}")
    return value


def to_uint128(value: int) -> int:
    """Validate that value fits in uint128.

    Raises:
        Overflow: If value is negative or exceeds 2^128-1
    """
    return _check_width(value, UINT128_MAX, 128)


def to_uint160(value: int) -> int:
    """Validate that value fits in uint160.

    Raises:
        Overflow: If value is negative or exceeds 2^160-1
    """
    return _check_width(value, UINT160_MAX, 160)


def to_uint256(value: int) -> int:
    """Validate that value fits in uint256.

    Raises:
        Overflow: If value is negative or exceeds 2^256-1
    """
    return _check_width(value, UINT256_MAX, 256)


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) with a 512-bit intermediate.

    The product may exceed 256 bits; only the quotient must fit.

    Raises:
        ZeroDivisionError: If denominator is zero
        Overflow: If an operand or the result is not a uint256
    """
    to_uint256(a)
    to_uint256(b)
    to_uint256(denominator)
    if denominator == 0:
        raise ZeroDivisionError(f"mul_div by zero: {a} * {b} // 0")
    return to_uint256((a * b) // denominator)


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator) with a 512-bit intermediate.

    Raises:
        ZeroDivisionError: If denominator is zero
        Overflow: If an operand or the result is not a uint256
    """
    result = mul_div(a, b, denominator)
    if (a * b) % denominator:
        result = to_uint256(result + 1)
    return result


def div_rounding_up(a: int, denominator: int) -> int:
    """ceil(a / denominator) for uint256 operands.

    Raises:
        ZeroDivisionError: If denominator is zero
    """
    to_uint256(a)
    to_uint256(denominator)
    if denominator == 0:
        raise ZeroDivisionError(f"div_rounding_up by zero: {a} // 0")
    return -(-a // denominator)


__all__ = [
    "to_uint128",
    "to_uint160",
    "to_uint256",
    "mul_div",
    "mul_div_rounding_up",
    "div_rounding_up",
]
