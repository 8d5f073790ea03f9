"""
Prometheus Metrics Engine

Provides metrics for:
- Price updates committed and rejected (by error kind)
- Spread and estimated profit per asset
- Arbitrage opportunity detection rates

Exposes metrics in Prometheus format for Grafana dashboards.
"""

import logging
from collections import defaultdict
from typing import Dict, Optional

from prometheus_client import (
    CollectorRegistry, Counter, Gauge, Histogram, Info,
    generate_latest, CONTENT_TYPE_LATEST,
)

from src.core.opportunity import (
    OpportunityDetectedEvent, PriceUpdatedEvent, ThresholdsUpdatedEvent,
)

logger = logging.getLogger(__name__)


class MetricsEngine:
    """
    Central metrics collection and export engine.

    Each instance owns its CollectorRegistry so several engines (or tests)
    can coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._setup_prometheus_metrics()

        # Plain counters for the JSON summary
        self._updates: Dict[str, int] = defaultdict(int)
        self._failures: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._opportunities: Dict[str, int] = defaultdict(int)
        self._last_spread: Dict[str, int] = {}
        self._last_update_at: Dict[str, int] = {}

    def _setup_prometheus_metrics(self):
        """Initialize Prometheus metrics"""

        # ===== PRICE UPDATE METRICS =====
        self.price_updates_total = Counter(
            'pm_price_updates_total',
            'Total committed price updates',
            ['asset'],
            registry=self.registry,
        )

        self.update_failures_total = Counter(
            'pm_update_failures_total',
            'Total rejected price updates',
            ['asset', 'kind'],  # kind: stale_data, invalid_price, arithmetic_overflow, ...
            registry=self.registry,
        )

        self.last_update_timestamp = Gauge(
            'pm_last_update_timestamp_seconds',
            'Unix time of the last committed snapshot',
            ['asset'],
            registry=self.registry,
        )

        # ===== SPREAD METRICS =====
        self.spread_basis_points = Gauge(
            'pm_spread_basis_points',
            'Current spread between source A and source B',
            ['asset'],
            registry=self.registry,
        )

        self.spread_distribution = Histogram(
            'pm_spread_basis_points_distribution',
            'Distribution of observed spreads',
            ['asset'],
            buckets=[0, 5, 10, 25, 50, 100, 200, 500, 1000],
            registry=self.registry,
        )

        # ===== ARBITRAGE METRICS =====
        self.opportunities_detected_total = Counter(
            'pm_opportunities_detected_total',
            'Total profitable updates',
            ['asset', 'direction'],
            registry=self.registry,
        )

        self.estimated_profit = Gauge(
            'pm_estimated_profit',
            'Estimated profit of the last detected opportunity',
            ['asset'],
            registry=self.registry,
        )

        self.execution_cost_rate = Gauge(
            'pm_execution_cost_rate',
            'Execution cost rate (gas price, wei)',
            ['asset'],
            registry=self.registry,
        )

        self.monitor_info = Info(
            'pm_monitor',
            'Price monitor information',
            registry=self.registry,
        )
        self.monitor_info.info({'version': '1.0.0'})

    def attach(self, engine):
        """Register for engine events"""
        engine.on_price_update(self.record_price_update)
        engine.on_opportunity(self.record_opportunity)
        engine.on_thresholds_update(self.record_thresholds_update)
        engine.on_update_failure(self.record_update_failure)

    def record_price_update(self, event: PriceUpdatedEvent):
        self.price_updates_total.labels(asset=event.asset).inc()
        self.spread_basis_points.labels(asset=event.asset).set(event.basis_points)
        self.spread_distribution.labels(asset=event.asset).observe(event.basis_points)
        self.last_update_timestamp.labels(asset=event.asset).set(event.timestamp)

        self._updates[event.asset] += 1
        self._last_spread[event.asset] = event.basis_points
        self._last_update_at[event.asset] = event.timestamp

    def record_opportunity(self, event: OpportunityDetectedEvent):
        self.opportunities_detected_total.labels(asset=event.asset, direction=event.direction.value).inc()
        self.estimated_profit.labels(asset=event.asset).set(float(event.estimated_profit.to_decimal()))
        self._opportunities[event.asset] += 1

    def record_thresholds_update(self, event: ThresholdsUpdatedEvent):
        self.execution_cost_rate.labels(asset=event.asset).set(event.new_rate.value)

    def record_update_failure(self, asset: str, error: Exception):
        kind = getattr(error, 'kind', type(error).__name__)
        self.update_failures_total.labels(asset=asset, kind=kind).inc()
        self._failures[asset][kind] += 1

    def get_prometheus_metrics(self) -> bytes:
        """Get metrics in Prometheus text format"""
        return generate_latest(self.registry)

    def get_prometheus_content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def get_metrics_summary(self) -> dict:
        """Get metrics summary for the JSON API"""
        assets = set(self._updates) | set(self._failures)
        return {
            asset: {
                "updates": self._updates.get(asset, 0),
                "failures": dict(self._failures.get(asset, {})),
                "opportunities": self._opportunities.get(asset, 0),
                "last_spread_basis_points": self._last_spread.get(asset),
                "last_update_at": self._last_update_at.get(asset),
            }
            for asset in sorted(assets)
        }
