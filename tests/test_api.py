"""
Tests for the JSON query API.
"""

import pytest
from fastapi.testclient import TestClient

from api import app, manager
from engine_metrics import MetricsEngine
from src.core.errors import ArithmeticOverflow
from src.core.fixed_point import FixedPointPrice
from src.core.opportunity import Thresholds
from src.notifications import NotificationService


@pytest.fixture
def client(engine):
    metrics = MetricsEngine()
    notifications = NotificationService(telegram_bot_token="", telegram_chat_id="", discord_webhook_url="")
    metrics.attach(engine)
    notifications.attach(engine)
    manager.set_components(engine, metrics, notifications)
    yield TestClient(app)
    manager.set_components(None)


class TestApi:
    """Tests for API routes"""

    def test_uninitialized_snapshot_is_null(self, client, asset):
        response = client.get(f"/api/snapshot/{asset}")
        assert response.status_code == 200
        assert response.json() == {"asset": asset, "snapshot": None}

    def test_snapshot_and_opportunity(self, client, engine, asset):
        engine.update_prices(asset)

        snapshot = client.get(f"/api/snapshot/{asset.upper()}").json()["snapshot"]
        assert snapshot["spread_basis_points"] == 166
        assert snapshot["higher_side"] == "B"
        assert snapshot["price_a"]["raw"] == str(3000 * 10**18)

        opportunity = client.get(f"/api/opportunity/{asset}").json()
        assert opportunity["is_profitable"] is True
        assert opportunity["direction"] == "A_TO_B"
        assert opportunity["estimated_profit"]["value"] == "50"

    def test_profitable(self, client, engine, asset):
        assert client.get(f"/api/profitable/{asset}").json()["is_profitable"] is False
        engine.update_prices(asset)
        body = client.get(f"/api/profitable/{asset}").json()
        assert body == {"asset": asset, "is_profitable": True, "spread_basis_points": 166}

    def test_freshness(self, client, engine, clock, asset):
        engine.update_prices(asset)
        assert client.get(f"/api/fresh/{asset}", params={"max_age": 60}).json()["fresh"] is True
        clock.advance(61)
        assert client.get(f"/api/fresh/{asset}", params={"max_age": 60}).json()["fresh"] is False

    def test_negative_max_age_rejected(self, client, asset):
        assert client.get(f"/api/fresh/{asset}", params={"max_age": -1}).status_code == 422

    def test_state(self, client, engine, asset):
        engine.update_prices(asset)
        state = client.get("/api/state").json()
        assert asset in state["snapshots"]
        assert len(state["sources"]["sources"]) == 2
        assert state["notifications"]["history_count"] == 2

    def test_notifications_and_metrics(self, client, engine, asset):
        engine.update_prices(asset)

        notifications = client.get("/api/notifications", params={"limit": 10}).json()
        assert [n["type"] for n in notifications] == ["prices_updated", "arbitrage_opportunity"]

        assert client.get("/api/metrics").json()[asset]["updates"] == 1
        assert "pm_spread_basis_points" in client.get("/metrics").text

    def test_rejected_thresholds_leave_routes_working(self, client, engine, asset):
        engine.update_prices(asset)
        with pytest.raises(ArithmeticOverflow):
            engine.set_thresholds(asset, Thresholds(execution_cost_rate=FixedPointPrice(2**255), execution_effort_estimate=2))

        assert client.get("/api/state").status_code == 200
        response = client.get(f"/api/opportunity/{asset}")
        assert response.status_code == 200
        assert response.json()["spread_basis_points"] == 166


class TestApiWithoutEngine:
    def test_routes_report_missing_engine(self):
        manager.set_components(None)
        client = TestClient(app)
        assert client.get("/api/state").json() == {"error": "Engine not initialized"}
        assert client.get("/api/opportunity/eth").json() == {"error": "Engine not initialized"}
        assert client.get("/api/notifications").json() == []
