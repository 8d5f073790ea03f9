"""
Error kinds raised by the price monitor core.

Every failure of an update is terminal for that call and carries enough
context for an operator to tell a quiet oracle (StaleData) from a broken one
(InvalidPrice) from a misconfigured threshold (ArithmeticOverflow).
"""

from typing import Optional


class PriceMonitorError(Exception):
    """Base class for all price monitor errors"""

    kind = "error"


class ReadingError(PriceMonitorError):
    """A raw reading was rejected by validation"""

    kind = "reading_error"

    def __init__(self, message: str, source_id: Optional[int] = None, asset: Optional[str] = None):
        super().__init__(message)
        self.source_id = source_id
        self.asset = asset


class OracleInactive(ReadingError):
    kind = "oracle_inactive"


class InvalidPrice(ReadingError):
    """Non-positive price"""

    kind = "invalid_price"


class StaleData(ReadingError):
    kind = "stale_data"

    def __init__(
        self,
        message: str,
        source_id: Optional[int] = None,
        asset: Optional[str] = None,
        age: Optional[int] = None,
        max_staleness: Optional[int] = None,
    ):
        super().__init__(message, source_id=source_id, asset=asset)
        self.age = age
        self.max_staleness = max_staleness


class UnsupportedPrecision(ReadingError):
    """Source precision above canonical; upscaling only"""

    kind = "unsupported_precision"


class ArithmeticOverflow(PriceMonitorError):
    kind = "arithmetic_overflow"


class DivisionByZero(PriceMonitorError):
    kind = "division_by_zero"


class ConfigurationMissing(PriceMonitorError):
    kind = "configuration_missing"

    def __init__(self, message: str, source_id: Optional[int] = None, asset: Optional[str] = None):
        super().__init__(message)
        self.source_id = source_id
        self.asset = asset


class Unauthorized(PriceMonitorError):
    """Caller is not allowed to change configuration"""

    kind = "unauthorized"
