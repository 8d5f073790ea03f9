"""Price feeds (reading providers)"""
from .base import BaseFeed, FeedError, RawReading
from .chainlink import ChainlinkFeed
from .simulator import MockPriceFeed, SimulatedPriceFeed, create_simulated_feeds

__all__ = [
    "BaseFeed",
    "FeedError",
    "RawReading",
    "ChainlinkFeed",
    "MockPriceFeed",
    "SimulatedPriceFeed",
    "create_simulated_feeds",
]
