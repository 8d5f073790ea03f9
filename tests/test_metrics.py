"""
Tests for Prometheus metrics collection.
"""

import pytest

from engine_metrics import MetricsEngine
from src.core.fixed_point import FixedPointPrice

from conftest import PRICE_3100


@pytest.fixture
def metrics(engine) -> MetricsEngine:
    metrics = MetricsEngine()
    metrics.attach(engine)
    return metrics


def sample(metrics, name, **labels):
    return metrics.registry.get_sample_value(name, labels)


class TestMetricsEngine:
    """Tests for MetricsEngine"""

    def test_records_committed_update(self, metrics, engine, clock, asset):
        engine.update_prices(asset)

        assert sample(metrics, "pm_price_updates_total", asset=asset) == 1
        assert sample(metrics, "pm_spread_basis_points", asset=asset) == 166
        assert sample(metrics, "pm_last_update_timestamp_seconds", asset=asset) == clock.now
        assert sample(metrics, "pm_opportunities_detected_total", asset=asset, direction="A_TO_B") == 1
        assert sample(metrics, "pm_estimated_profit", asset=asset) == 50.0

    def test_records_failure_kind(self, metrics, engine, feed_a, clock, asset):
        feed_a.set_updated_at(clock.now - 7200)
        with pytest.raises(Exception):
            engine.update_prices(asset)

        assert sample(metrics, "pm_update_failures_total", asset=asset, kind="stale_data") == 1
        assert sample(metrics, "pm_price_updates_total", asset=asset) is None

    def test_records_cost_rate(self, metrics, engine, asset):
        engine.update_execution_cost_rate(asset, FixedPointPrice(30 * 10**9))
        assert sample(metrics, "pm_execution_cost_rate", asset=asset) == 30 * 10**9

    def test_summary(self, metrics, engine, feed_a, feed_b, asset):
        feed_b.set_price(PRICE_3100)
        engine.update_prices(asset)
        feed_a.set_price(0)
        with pytest.raises(Exception):
            engine.update_prices(asset)

        summary = metrics.get_metrics_summary()[asset]
        assert summary["updates"] == 1
        assert summary["opportunities"] == 1
        assert summary["failures"] == {"invalid_price": 1}
        assert summary["last_spread_basis_points"] == 333

    def test_prometheus_export(self, metrics, engine, asset):
        engine.update_prices(asset)
        body = metrics.get_prometheus_metrics().decode()
        assert "pm_price_updates_total" in body
        assert metrics.get_prometheus_content_type().startswith("text/plain")

    def test_instances_are_independent(self):
        first = MetricsEngine()
        second = MetricsEngine()
        assert first.registry is not second.registry
