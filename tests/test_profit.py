"""
Tests for profit-after-cost estimation.
"""

import pytest

from src.core.errors import ArithmeticOverflow
from src.core.fixed_point import FixedPointPrice
from src.core.opportunity import Direction
from src.core.profit import cost_rate_in_price, empty_opportunity, estimate
from src.core.spread import compare

ZERO = FixedPointPrice.zero()


def usd(amount) -> FixedPointPrice:
    return FixedPointPrice.from_decimal(str(amount))


def run(a, b, cost_rate=ZERO, effort=300_000, min_bps=50):
    spread = compare(a, b)
    return estimate(
        spread,
        low_price=spread.low_price(a, b),
        high_price=spread.high_price(a, b),
        cost_rate=cost_rate,
        effort=effort,
        min_basis_points=min_bps,
        asset="eth",
    )


class TestEstimate:
    """Tests for estimate"""

    def test_zero_cost_profit_is_gross_spread(self):
        opportunity = run(usd(3000), usd(3100))
        assert opportunity.estimated_profit == usd(100)
        assert opportunity.spread_basis_points == 333
        assert opportunity.is_profitable
        assert opportunity.direction == Direction.A_TO_B

    def test_cost_above_spread_clamps_to_zero(self):
        """$150 execution cost against a $100 spread"""
        cost_rate = FixedPointPrice(5 * 10**14)  # * 300000 = $150
        opportunity = run(usd(3000), usd(3100), cost_rate=cost_rate)
        assert opportunity.execution_cost_estimate == usd(150)
        assert opportunity.estimated_profit == ZERO
        assert not opportunity.is_profitable

    def test_cost_equal_to_spread_not_profitable(self):
        cost_rate = FixedPointPrice(10**15)  # * 100000 = $100
        opportunity = run(usd(3000), usd(3100), cost_rate=cost_rate, effort=100_000)
        assert opportunity.execution_cost_estimate == usd(100)
        assert opportunity.estimated_profit == ZERO
        assert not opportunity.is_profitable

    def test_below_min_basis_points_not_profitable(self):
        """$10 profit but only 33 bps"""
        opportunity = run(usd(3000), usd(3010), min_bps=50)
        assert opportunity.estimated_profit == usd(10)
        assert opportunity.spread_basis_points == 33
        assert not opportunity.is_profitable

    def test_min_basis_points_is_inclusive(self):
        opportunity = run(usd(3000), usd(3100), min_bps=333)
        assert opportunity.is_profitable

    def test_a_higher_means_buy_on_b(self):
        opportunity = run(usd(3100), usd(3000))
        assert opportunity.direction == Direction.B_TO_A
        assert opportunity.estimated_profit == usd(100)

    def test_equal_prices_never_profitable(self):
        opportunity = run(usd(3000), usd(3000), min_bps=0)
        assert opportunity.spread_basis_points == 0
        assert opportunity.estimated_profit == ZERO
        assert opportunity.direction is None
        assert not opportunity.is_profitable

    def test_pathological_cost_rate_overflows(self):
        with pytest.raises(ArithmeticOverflow):
            run(usd(3000), usd(3100), cost_rate=FixedPointPrice(2**255), effort=2)

    def test_total_cost_overflow(self):
        huge = FixedPointPrice(2**256 - 10)
        with pytest.raises(ArithmeticOverflow):
            run(huge, FixedPointPrice(2**256 - 1), cost_rate=FixedPointPrice(100), effort=1, min_bps=0)


class TestEmptyOpportunity:
    def test_zero_sentinel(self):
        opportunity = empty_opportunity("eth")
        assert opportunity.spread_basis_points == 0
        assert opportunity.estimated_profit == ZERO
        assert opportunity.execution_cost_estimate == ZERO
        assert not opportunity.is_profitable
        assert opportunity.direction is None


class TestCostRateInPrice:
    def test_gas_price_valued_at_asset_price(self):
        """500 gwei per gas at $3000 is $0.0015 per gas unit"""
        rate = cost_rate_in_price(FixedPointPrice(500 * 10**9), usd(3000))
        assert rate == usd("0.0015")
        assert rate.mul(300_000) == usd(450)

    def test_zero_gas_price(self):
        assert cost_rate_in_price(ZERO, usd(3000)) == ZERO
