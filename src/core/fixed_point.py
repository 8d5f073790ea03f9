"""
Fixed-point price values at the canonical precision.

All prices inside the monitor are non-negative integers scaled by
10**CANONICAL_DECIMALS. Arithmetic is checked against the 256-bit unsigned
range so a pathological input fails loudly with ArithmeticOverflow instead of
producing a value no on-chain consumer could represent.
"""

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Union

from config import CANONICAL_DECIMALS, MAX_UINT256
from .errors import ArithmeticOverflow, InvalidPrice, UnsupportedPrecision

SCALE = 10**CANONICAL_DECIMALS


def checked_add(a: int, b: int) -> int:
    result = a + b
    if result > MAX_UINT256:
        raise ArithmeticOverflow(f"addition overflow: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflow(f"subtraction underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    result = a * b
    if result > MAX_UINT256:
        raise ArithmeticOverflow(f"multiplication overflow: {a} * {b}")
    return result


@dataclass(frozen=True, order=True)
class FixedPointPrice:
    """Non-negative quantity with CANONICAL_DECIMALS fractional digits"""
    value: int

    def __post_init__(self):
        if self.value < 0:
            raise InvalidPrice(f"fixed-point value must be non-negative, got {self.value}")
        if self.value > MAX_UINT256:
            raise ArithmeticOverflow(f"fixed-point value out of range: {self.value}")

    @classmethod
    def from_raw(cls, value: int, source_decimals: int) -> "FixedPointPrice":
        """
        Rescale an integer quoted with `source_decimals` fractional digits.

        Only upscaling is allowed; a source more precise than the canonical
        precision is rejected rather than truncated.
        """
        if source_decimals < 0 or source_decimals > CANONICAL_DECIMALS:
            raise UnsupportedPrecision(
                f"source decimals {source_decimals} outside 0..{CANONICAL_DECIMALS}"
            )
        factor = 10 ** (CANONICAL_DECIMALS - source_decimals)
        return cls(checked_mul(value, factor))

    @classmethod
    def from_decimal(cls, amount: Union[str, int, Decimal]) -> "FixedPointPrice":
        """Parse a human amount such as "3000" or "0.25" """
        with localcontext() as ctx:
            ctx.prec = 100
            scaled = Decimal(amount) * SCALE
        if scaled != scaled.to_integral_value():
            raise UnsupportedPrecision(
                f"{amount} has more than {CANONICAL_DECIMALS} fractional digits"
            )
        return cls(int(scaled))

    @classmethod
    def zero(cls) -> "FixedPointPrice":
        return cls(0)

    def is_zero(self) -> bool:
        return self.value == 0

    def add(self, other: "FixedPointPrice") -> "FixedPointPrice":
        return FixedPointPrice(checked_add(self.value, other.value))

    def sub(self, other: "FixedPointPrice") -> "FixedPointPrice":
        return FixedPointPrice(checked_sub(self.value, other.value))

    def mul(self, factor: int) -> "FixedPointPrice":
        return FixedPointPrice(checked_mul(self.value, factor))

    def mul_fixed(self, other: "FixedPointPrice") -> "FixedPointPrice":
        """Product of two fixed-point values, truncated to canonical precision"""
        return FixedPointPrice(checked_mul(self.value, other.value) // SCALE)

    def to_decimal(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = 100
            return Decimal(self.value) / SCALE

    def __str__(self) -> str:
        return format(self.to_decimal().normalize(), "f")
