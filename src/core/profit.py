"""
Profit-after-cost estimation.

Buying at the low price and selling at the high price earns the gross
difference; one arbitrage cycle costs `cost_rate * effort`, with `cost_rate`
already in price terms (see `cost_rate_in_price`). Profit is
clamped at zero: a cost-dominated spread is "not profitable", not an error.
"""

from .fixed_point import FixedPointPrice
from .opportunity import ArbitrageOpportunity, Direction
from .spread import Side, SpreadResult


def cost_rate_in_price(native_rate: FixedPointPrice, native_price: FixedPointPrice) -> FixedPointPrice:
    """
    Convert a per-unit cost paid in the native token (gas price in wei) into
    price terms: 20 gwei at $3000 is 0.00006 per gas unit.
    """
    return native_rate.mul_fixed(native_price)


def empty_opportunity(asset: str) -> ArbitrageOpportunity:
    """Sentinel returned while no snapshot exists for the asset"""
    return ArbitrageOpportunity(
        asset=asset,
        spread_basis_points=0,
        estimated_profit=FixedPointPrice.zero(),
        execution_cost_estimate=FixedPointPrice.zero(),
        is_profitable=False,
        direction=None,
    )


def estimate(
    spread: SpreadResult,
    low_price: FixedPointPrice,
    high_price: FixedPointPrice,
    cost_rate: FixedPointPrice,
    effort: int,
    min_basis_points: int,
    asset: str = "",
) -> ArbitrageOpportunity:
    execution_cost = cost_rate.mul(effort)
    total_cost = low_price.add(execution_cost)

    if high_price > total_cost:
        estimated_profit = high_price.sub(total_cost)
    else:
        estimated_profit = FixedPointPrice.zero()

    if spread.higher_side == Side.A:
        direction = Direction.B_TO_A
    elif spread.higher_side == Side.B:
        direction = Direction.A_TO_B
    else:
        direction = None

    is_profitable = (
        direction is not None
        and not estimated_profit.is_zero()
        and spread.basis_points >= min_basis_points
    )

    return ArbitrageOpportunity(
        asset=asset,
        spread_basis_points=spread.basis_points,
        estimated_profit=estimated_profit,
        execution_cost_estimate=execution_cost,
        is_profitable=is_profitable,
        direction=direction,
    )
