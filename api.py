"""JSON query API for downstream consumers of the price monitor"""
import logging
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import Response

from engine import ArbitrageEngine
from engine_metrics import MetricsEngine
from src.notifications import NotificationService
from src.sources.models import asset_key

logger = logging.getLogger(__name__)

app = FastAPI(title="Cross-Chain Price Monitor", version="1.0.0")


class ApiManager:
    """Holds the components the routes read from"""

    def __init__(self):
        self.engine: Optional[ArbitrageEngine] = None
        self.metrics: Optional[MetricsEngine] = None
        self.notifications: Optional[NotificationService] = None

    def set_components(
        self,
        engine: ArbitrageEngine,
        metrics: Optional[MetricsEngine] = None,
        notifications: Optional[NotificationService] = None,
    ):
        self.engine = engine
        self.metrics = metrics
        self.notifications = notifications


manager = ApiManager()

ENGINE_MISSING = {"error": "Engine not initialized"}


@app.get("/api/state")
async def get_state():
    """Get current monitor state"""
    if not manager.engine:
        return ENGINE_MISSING

    state = manager.engine.get_state()
    state["sources"] = manager.engine.registry.get_state()
    if manager.notifications:
        state["notifications"] = manager.notifications.get_statistics()
    return state


@app.get("/api/snapshot/{asset}")
async def get_snapshot(asset: str):
    """Latest price snapshot, null while the asset is uninitialized"""
    if not manager.engine:
        return ENGINE_MISSING

    snapshot = manager.engine.get_snapshot(asset)
    return {
        "asset": asset_key(asset),
        "snapshot": snapshot.to_dict() if snapshot else None,
    }


@app.get("/api/opportunity/{asset}")
async def get_opportunity(asset: str):
    if not manager.engine:
        return ENGINE_MISSING
    return manager.engine.current_opportunity(asset).to_dict()


@app.get("/api/profitable/{asset}")
async def get_profitable(asset: str):
    if not manager.engine:
        return ENGINE_MISSING

    is_profitable, spread_bps = manager.engine.is_currently_profitable(asset)
    return {
        "asset": asset_key(asset),
        "is_profitable": is_profitable,
        "spread_basis_points": spread_bps,
    }


@app.get("/api/fresh/{asset}")
async def get_freshness(asset: str, max_age: int = Query(300, ge=0)):
    """Whether the snapshot is at most `max_age` seconds old"""
    if not manager.engine:
        return ENGINE_MISSING
    return {
        "asset": asset_key(asset),
        "max_age": max_age,
        "fresh": manager.engine.is_snapshot_fresh(asset, max_age),
    }


@app.get("/api/notifications")
async def get_notifications(limit: int = Query(50, ge=1, le=100)):
    if not manager.notifications:
        return []
    return [
        n.model_dump(mode="json")
        for n in manager.notifications.get_notification_history(limit)
    ]


@app.get("/api/metrics")
async def api_metrics():
    """JSON metrics endpoint"""
    if not manager.metrics:
        return {}
    return manager.metrics.get_metrics_summary()


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    if not manager.metrics:
        return Response(content=b"", media_type="text/plain")
    return Response(
        content=manager.metrics.get_prometheus_metrics(),
        media_type=manager.metrics.get_prometheus_content_type(),
    )
