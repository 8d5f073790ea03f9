"""
Tests for raw reading validation.
"""

import pytest

from feeds.base import RawReading
from feeds.simulator import MockPriceFeed
from src.core.errors import InvalidPrice, OracleInactive, StaleData, UnsupportedPrecision
from src.core.fixed_point import FixedPointPrice
from src.core.oracle import validate_reading
from src.sources.models import SourceConfig

NOW = 1_700_000_000


@pytest.fixture
def source():
    return SourceConfig(
        source_id=1,
        asset="ETH",
        feed=MockPriceFeed("mock"),
        max_staleness=3600,
    )


class TestValidateReading:
    """Tests for validate_reading"""

    def test_valid_reading_rescaled(self, source):
        raw = RawReading(price=300000000000, decimals=8, updated_at=NOW - 10)
        assert validate_reading(raw, source, NOW) == FixedPointPrice.from_decimal("3000")

    def test_inactive_source_rejected_first(self, source):
        """Inactive wins even over an invalid price"""
        inactive = source.model_copy(update={"is_active": False})
        raw = RawReading(price=0, decimals=8, updated_at=NOW)
        with pytest.raises(OracleInactive) as exc_info:
            validate_reading(raw, inactive, NOW)
        assert exc_info.value.source_id == 1

    @pytest.mark.parametrize("price", [0, -1, -300000000000])
    def test_non_positive_price_rejected(self, source, price):
        raw = RawReading(price=price, decimals=8, updated_at=NOW)
        with pytest.raises(InvalidPrice):
            validate_reading(raw, source, NOW)

    def test_stale_reading_rejected(self, source):
        raw = RawReading(price=300000000000, decimals=8, updated_at=NOW - 3601)
        with pytest.raises(StaleData) as exc_info:
            validate_reading(raw, source, NOW)
        assert exc_info.value.age == 3601
        assert exc_info.value.max_staleness == 3600

    def test_age_equal_to_bound_accepted(self, source):
        raw = RawReading(price=300000000000, decimals=8, updated_at=NOW - 3600)
        assert validate_reading(raw, source, NOW).value == 3000 * 10**18

    def test_future_timestamp_accepted(self, source):
        raw = RawReading(price=300000000000, decimals=8, updated_at=NOW + 30)
        assert validate_reading(raw, source, NOW).value == 3000 * 10**18

    def test_too_many_decimals_rejected(self, source):
        raw = RawReading(price=3000 * 10**19, decimals=19, updated_at=NOW)
        with pytest.raises(UnsupportedPrecision):
            validate_reading(raw, source, NOW)
