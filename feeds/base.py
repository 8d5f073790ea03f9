"""Base price feed (reading provider)"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """Transport-level failure while fetching a reading"""

    def __init__(self, feed: str, message: str):
        super().__init__(f"[{feed}] {message}")
        self.feed = feed


@dataclass(frozen=True)
class RawReading:
    """Latest answer reported by a price source, in its native precision"""
    price: int  # Signed: sources may report zero or negative answers
    decimals: int
    updated_at: int  # Unix seconds


class BaseFeed(ABC):
    """Base class for price sources polled by the engine"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get_latest(self) -> RawReading:
        """Fetch the latest reading. Raises FeedError on transport failure."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
