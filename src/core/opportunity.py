"""
Data classes for price snapshots, arbitrage opportunities and engine events.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from config import DEFAULT_GAS_ESTIMATE, DEFAULT_GAS_PRICE, DEFAULT_MIN_PROFIT_BASIS_POINTS
from .fixed_point import FixedPointPrice
from .spread import Side


def _iso(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _price_dict(price: FixedPointPrice) -> dict:
    # Raw value as a string so JSON consumers keep full precision
    return {"raw": str(price.value), "value": str(price)}


class Direction(str, Enum):
    """Where to buy and where to sell"""
    A_TO_B = "A_TO_B"  # Buy on A, sell on B
    B_TO_A = "B_TO_A"  # Buy on B, sell on A


@dataclass(frozen=True)
class Thresholds:
    """Profitability parameters for one asset"""
    min_profit_basis_points: int = DEFAULT_MIN_PROFIT_BASIS_POINTS
    # Cost per unit of execution effort in the native token at 18 decimals
    # (gas price in wei). Converted to price terms at the buy-side price.
    execution_cost_rate: FixedPointPrice = field(default_factory=lambda: FixedPointPrice(DEFAULT_GAS_PRICE))
    # Units of effort for one arbitrage cycle (gas units)
    execution_effort_estimate: int = DEFAULT_GAS_ESTIMATE

    def __post_init__(self):
        if self.min_profit_basis_points < 0:
            raise ValueError("min_profit_basis_points must be non-negative")
        if self.execution_effort_estimate < 0:
            raise ValueError("execution_effort_estimate must be non-negative")

    def to_dict(self) -> dict:
        return {
            "min_profit_basis_points": self.min_profit_basis_points,
            "execution_cost_rate": str(self.execution_cost_rate.value),
            "execution_effort_estimate": self.execution_effort_estimate,
        }


@dataclass(frozen=True)
class PriceSnapshot:
    """
    Latest validated prices for an asset. Replaced whole on every update.

    `spread_basis_points` truncates toward zero, so two prices that differ
    by less than one basis point give 0 while `higher_side` still names the
    strictly greater price. Only identical prices give `Side.EQUAL`.
    """
    asset: str
    price_a: FixedPointPrice
    price_b: FixedPointPrice
    observed_at: int
    spread_basis_points: int
    higher_side: Side

    @property
    def is_a_higher(self) -> bool:
        return self.higher_side == Side.A

    def to_dict(self) -> dict:
        return {
            "asset": self.asset,
            "price_a": _price_dict(self.price_a),
            "price_b": _price_dict(self.price_b),
            "spread_basis_points": self.spread_basis_points,
            "higher_side": self.higher_side.value,
            "observed_at": _iso(self.observed_at),
        }


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """Point-in-time profitability verdict, derived from a snapshot"""
    asset: str
    spread_basis_points: int
    estimated_profit: FixedPointPrice
    execution_cost_estimate: FixedPointPrice
    is_profitable: bool
    direction: Optional[Direction]  # None when prices are equal or unknown

    def to_dict(self) -> dict:
        return {
            "asset": self.asset,
            "spread_basis_points": self.spread_basis_points,
            "estimated_profit": _price_dict(self.estimated_profit),
            "execution_cost_estimate": _price_dict(self.execution_cost_estimate),
            "is_profitable": self.is_profitable,
            "direction": self.direction.value if self.direction else None,
        }


@dataclass(frozen=True)
class PriceUpdatedEvent:
    asset: str
    price_a: FixedPointPrice
    price_b: FixedPointPrice
    basis_points: int
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "asset": self.asset,
            "price_a": _price_dict(self.price_a),
            "price_b": _price_dict(self.price_b),
            "basis_points": self.basis_points,
            "timestamp": _iso(self.timestamp),
        }


@dataclass(frozen=True)
class OpportunityDetectedEvent:
    asset: str
    basis_points: int
    estimated_profit: FixedPointPrice
    execution_cost_estimate: FixedPointPrice
    direction: Direction
    timestamp: int

    @classmethod
    def from_opportunity(cls, opportunity: ArbitrageOpportunity, timestamp: int) -> "OpportunityDetectedEvent":
        return cls(
            asset=opportunity.asset,
            basis_points=opportunity.spread_basis_points,
            estimated_profit=opportunity.estimated_profit,
            execution_cost_estimate=opportunity.execution_cost_estimate,
            direction=opportunity.direction,
            timestamp=timestamp,
        )

    def to_dict(self) -> dict:
        return {
            "asset": self.asset,
            "basis_points": self.basis_points,
            "estimated_profit": _price_dict(self.estimated_profit),
            "execution_cost_estimate": _price_dict(self.execution_cost_estimate),
            "direction": self.direction.value,
            "timestamp": _iso(self.timestamp),
        }


@dataclass(frozen=True)
class ThresholdsUpdatedEvent:
    """Execution cost rate changed (gas price update)"""
    asset: str
    old_rate: FixedPointPrice
    new_rate: FixedPointPrice
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "asset": self.asset,
            "old_rate": str(self.old_rate.value),
            "new_rate": str(self.new_rate.value),
            "timestamp": _iso(self.timestamp),
        }
