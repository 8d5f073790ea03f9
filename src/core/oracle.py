"""Validation of raw readings coming from a single price source"""

from feeds.base import RawReading
from src.sources.models import SourceConfig
from .errors import InvalidPrice, OracleInactive, StaleData
from .fixed_point import FixedPointPrice


def validate_reading(raw: RawReading, config: SourceConfig, now: int) -> FixedPointPrice:
    """
    Turn a raw reading into a canonical price or raise a ReadingError.

    Checks, in order: the source is active, the price is positive, the
    reading is no older than `config.max_staleness` (an age equal to the
    bound is accepted). Pure: no retries, no state.
    """
    if not config.is_active:
        raise OracleInactive(
            f"source {config.source_id} is inactive for {config.asset}",
            source_id=config.source_id,
            asset=config.asset,
        )

    if raw.price <= 0:
        raise InvalidPrice(
            f"invalid price {raw.price} from source {config.source_id}",
            source_id=config.source_id,
            asset=config.asset,
        )

    # Readings stamped ahead of our clock count as fresh
    age = max(0, now - raw.updated_at)
    if age > config.max_staleness:
        raise StaleData(
            f"price data too stale: {age}s old, limit {config.max_staleness}s "
            f"(source {config.source_id})",
            source_id=config.source_id,
            asset=config.asset,
            age=age,
            max_staleness=config.max_staleness,
        )

    return FixedPointPrice.from_raw(raw.price, raw.decimals)
