"""
Core comparison and decision logic: fixed-point prices, reading validation,
spread and profit calculation.
"""

from .errors import (
    PriceMonitorError, ReadingError, OracleInactive, InvalidPrice, StaleData,
    UnsupportedPrecision, ArithmeticOverflow, DivisionByZero,
    ConfigurationMissing, Unauthorized,
)
from .fixed_point import FixedPointPrice
from .spread import Side, SpreadResult, compare
from .opportunity import (
    ArbitrageOpportunity, Direction, PriceSnapshot, Thresholds,
    PriceUpdatedEvent, OpportunityDetectedEvent, ThresholdsUpdatedEvent,
)
from .profit import cost_rate_in_price, estimate, empty_opportunity
from .oracle import validate_reading

__all__ = [
    "PriceMonitorError",
    "ReadingError",
    "OracleInactive",
    "InvalidPrice",
    "StaleData",
    "UnsupportedPrecision",
    "ArithmeticOverflow",
    "DivisionByZero",
    "ConfigurationMissing",
    "Unauthorized",
    "FixedPointPrice",
    "Side",
    "SpreadResult",
    "compare",
    "ArbitrageOpportunity",
    "Direction",
    "PriceSnapshot",
    "Thresholds",
    "PriceUpdatedEvent",
    "OpportunityDetectedEvent",
    "ThresholdsUpdatedEvent",
    "estimate",
    "empty_opportunity",
    "cost_rate_in_price",
    "validate_reading",
]
