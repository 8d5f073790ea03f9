"""
Pytest configuration and fixtures for price monitor tests.
"""

import pytest

from config import ETH_ADDRESS, ETHEREUM_CHAIN_ID, ARBITRUM_CHAIN_ID
from engine import ArbitrageEngine
from feeds.simulator import MockPriceFeed
from src.core.fixed_point import FixedPointPrice
from src.core.opportunity import Thresholds
from src.sources.registry import SourceRegistry

OWNER = "owner"
START_TIME = 1_700_000_000

# $3000 and $3050 with 8 decimals
PRICE_3000 = 300000000000
PRICE_3050 = 305000000000
PRICE_3100 = 310000000000


class FakeClock:
    """Settable unix-seconds clock"""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int):
        self.now += seconds


def usd(amount) -> FixedPointPrice:
    return FixedPointPrice.from_decimal(str(amount))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def feed_a(clock) -> MockPriceFeed:
    return MockPriceFeed("Ethereum-MOCK", price=PRICE_3000, clock=clock)


@pytest.fixture
def feed_b(clock) -> MockPriceFeed:
    return MockPriceFeed("Arbitrum-MOCK", price=PRICE_3050, clock=clock)


@pytest.fixture
def registry(feed_a, feed_b) -> SourceRegistry:
    registry = SourceRegistry(owner=OWNER)
    registry.initialize_oracles(OWNER, feed_a, feed_b, max_staleness=3600)
    return registry


@pytest.fixture
def thresholds() -> Thresholds:
    """Zero execution cost, 50 bps minimum"""
    return Thresholds(
        min_profit_basis_points=50,
        execution_cost_rate=FixedPointPrice.zero(),
        execution_effort_estimate=300_000,
    )


@pytest.fixture
def engine(registry, clock, thresholds) -> ArbitrageEngine:
    return ArbitrageEngine(registry, default_thresholds=thresholds, clock=clock)


@pytest.fixture
def asset() -> str:
    return ETH_ADDRESS.lower()


@pytest.fixture
def chain_ids():
    return ETHEREUM_CHAIN_ID, ARBITRUM_CHAIN_ID
