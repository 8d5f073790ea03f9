"""Simulated price feeds for tests and for running without an RPC endpoint"""
import logging
import random
import time
from typing import Callable, Optional

from .base import BaseFeed, RawReading

logger = logging.getLogger(__name__)


# ETH/USD with 8 decimals, as Chainlink reports it
BASE_PRICE = 3250_00000000
FEED_DECIMALS = 8


class MockPriceFeed(BaseFeed):
    """
    Feed whose answer is set by hand.

    Mirrors a mock aggregator: `set_price` also refreshes `updated_at`
    unless a timestamp has been pinned with `set_updated_at`.
    """

    def __init__(
        self,
        name: str = "mock",
        price: int = BASE_PRICE,
        decimals: int = FEED_DECIMALS,
        clock: Optional[Callable[[], int]] = None,
    ):
        super().__init__(name)
        self._clock = clock or (lambda: int(time.time()))
        self.price = price
        self.decimals = decimals
        self.updated_at = self._clock()
        self._pinned = False
        self.calls = 0

    def set_price(self, price: int):
        self.price = price
        if not self._pinned:
            self.updated_at = self._clock()

    def set_updated_at(self, updated_at: int):
        self.updated_at = updated_at
        self._pinned = True

    def get_latest(self) -> RawReading:
        self.calls += 1
        updated_at = self.updated_at if self._pinned else self._clock()
        return RawReading(price=self.price, decimals=self.decimals, updated_at=updated_at)


class SimulatedPriceFeed(BaseFeed):
    """
    Random-walk feed with realistic ETH/USD movement.
    Useful when network restrictions block real RPC connections.
    """

    def __init__(self, name: str, price_offset_percent: float = 0.0, seed: Optional[int] = None):
        """
        Args:
            name: Feed name for display
            price_offset_percent: Base price offset to simulate different chain prices
                                  e.g., 0.5 means prices are 0.5% higher than base
        """
        super().__init__(name)
        self.price_offset = price_offset_percent / 100
        self.current_price = float(BASE_PRICE)
        self._random = random.Random(seed)

    def get_latest(self) -> RawReading:
        # Small random movement (-0.1% to +0.1%)
        movement = self._random.uniform(-0.001, 0.001)
        self.current_price *= 1 + movement

        adjusted_price = int(self.current_price * (1 + self.price_offset))
        logger.debug(f"[{self.name}] simulated answer {adjusted_price}")
        return RawReading(price=adjusted_price, decimals=FEED_DECIMALS, updated_at=int(time.time()))


def create_simulated_feeds() -> tuple[SimulatedPriceFeed, SimulatedPriceFeed]:
    """
    Create the two simulated sides with a slight price difference.
    The offset creates opportunities for the engine to detect.
    """
    return (
        SimulatedPriceFeed("Ethereum-SIM", price_offset_percent=0.0),
        SimulatedPriceFeed("Arbitrum-SIM", price_offset_percent=0.8),
    )
