"""
Spread between two canonical prices, in basis points.

The difference is always divided by the lower price: the spread is the
percentage gain relative to what you would pay to acquire the asset.
Integer division truncates, so the result is a lower bound of the true
percentage.
"""

from dataclasses import dataclass
from enum import Enum

from config import BASIS_POINTS
from .errors import DivisionByZero
from .fixed_point import FixedPointPrice, checked_mul


class Side(str, Enum):
    """Which source reports the higher price"""
    A = "A"
    B = "B"
    EQUAL = "EQUAL"


@dataclass(frozen=True)
class SpreadResult:
    basis_points: int
    higher_side: Side

    def low_price(self, a: FixedPointPrice, b: FixedPointPrice) -> FixedPointPrice:
        """Buy leg"""
        return b if self.higher_side == Side.A else a

    def high_price(self, a: FixedPointPrice, b: FixedPointPrice) -> FixedPointPrice:
        """Sell leg"""
        return a if self.higher_side == Side.A else b


def _basis_points(high: int, low: int) -> int:
    if low == 0:
        raise DivisionByZero("spread denominator is zero")
    return checked_mul(high - low, BASIS_POINTS) // low


def compare(a: FixedPointPrice, b: FixedPointPrice) -> SpreadResult:
    if a == b:
        return SpreadResult(basis_points=0, higher_side=Side.EQUAL)
    if a > b:
        return SpreadResult(basis_points=_basis_points(a.value, b.value), higher_side=Side.A)
    return SpreadResult(basis_points=_basis_points(b.value, a.value), higher_side=Side.B)
