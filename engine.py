"""Cross-source price comparison engine"""
import dataclasses
import logging
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Optional

from config import ETH_ADDRESS, HISTORY_SIZE, SOURCE_A, SOURCE_B
from src.core.fixed_point import FixedPointPrice
from src.core.opportunity import (
    ArbitrageOpportunity, OpportunityDetectedEvent, PriceSnapshot,
    PriceUpdatedEvent, Thresholds, ThresholdsUpdatedEvent,
)
from src.core.oracle import validate_reading
from src.core.profit import cost_rate_in_price, empty_opportunity, estimate
from src.core.spread import SpreadResult, compare
from src.sources.models import asset_key
from src.sources.registry import SourceRegistry

logger = logging.getLogger(__name__)


class ArbitrageEngine:
    """
    Compares one asset's price across two sources and judges profitability.

    Per asset the engine is either uninitialized (no snapshot) or live. A
    successful `update_prices` replaces the whole snapshot; a failed one
    leaves the previous snapshot untouched and re-raises the first error:

    spread_bps = (high - low) * 10000 // low
    cost       = gas_price * low // 10**18 * gas_units
    profit     = max(0, high - (low + cost))

    A threshold change that cannot be evaluated against the current snapshot
    is rejected, so queries for a live asset always answer.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        source_a: int = SOURCE_A,
        source_b: int = SOURCE_B,
        default_thresholds: Optional[Thresholds] = None,
        clock: Optional[Callable[[], int]] = None,
        history_size: int = HISTORY_SIZE,
    ):
        self.registry = registry
        self.source_a = source_a
        self.source_b = source_b
        self.default_thresholds = default_thresholds or Thresholds()
        self._clock = clock or (lambda: int(time.time()))
        # snapshots[asset] = PriceSnapshot
        self.snapshots: dict[str, PriceSnapshot] = {}
        self._thresholds: dict[str, Thresholds] = {}
        # Historical opportunities
        self.history: deque[ArbitrageOpportunity] = deque(maxlen=history_size)
        self._lock = threading.Lock()
        # Reentrant: listeners run under the asset lock and may query or reconfigure
        self._asset_locks: dict[str, threading.RLock] = defaultdict(threading.RLock)
        # Callbacks for downstream consumers
        self._on_price_update_callbacks: list = []
        self._on_opportunity_callbacks: list = []
        self._on_thresholds_update_callbacks: list = []
        self._on_update_failure_callbacks: list = []

    def on_price_update(self, callback: Callable[[PriceUpdatedEvent], None]):
        """Register callback for committed price updates"""
        self._on_price_update_callbacks.append(callback)

    def on_opportunity(self, callback: Callable[[OpportunityDetectedEvent], None]):
        """Register callback for profitable updates"""
        self._on_opportunity_callbacks.append(callback)

    def on_thresholds_update(self, callback: Callable[[ThresholdsUpdatedEvent], None]):
        """Register callback for execution cost rate changes"""
        self._on_thresholds_update_callbacks.append(callback)

    def on_update_failure(self, callback: Callable[[str, Exception], None]):
        """Register callback for rejected updates"""
        self._on_update_failure_callbacks.append(callback)

    def _fire(self, callbacks: list, *args):
        for callback in callbacks:
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Callback error in {getattr(callback, '__name__', callback)}: {e}")

    def _asset_lock(self, asset: str) -> threading.RLock:
        with self._lock:
            return self._asset_locks[asset]

    # ===== UPDATES =====

    def update_prices(self, asset: str, now: Optional[int] = None) -> PriceSnapshot:
        """
        Read both sources, validate, and commit a new snapshot.

        All or nothing: any error (reading, arithmetic, missing config, or the
        feed's own transport error) is raised unchanged and nothing is stored.
        Events are delivered under the asset lock, in commit order.
        """
        asset = asset_key(asset)
        now = self._clock() if now is None else now

        with self._asset_lock(asset):
            try:
                price_a = self._read_source(self.source_a, asset, now)
                price_b = self._read_source(self.source_b, asset, now)
                spread = compare(price_a, price_b)
                snapshot = PriceSnapshot(
                    asset=asset,
                    price_a=price_a,
                    price_b=price_b,
                    observed_at=now,
                    spread_basis_points=spread.basis_points,
                    higher_side=spread.higher_side,
                )
                opportunity = self._evaluate(snapshot, self.get_thresholds(asset))
            except Exception as e:
                logger.warning(
                    f"Update rejected for {asset}: {getattr(e, 'kind', type(e).__name__)}: {e}"
                )
                self._fire(self._on_update_failure_callbacks, asset, e)
                raise

            with self._lock:
                self.snapshots[asset] = snapshot

            logger.info(
                f"Prices updated for {asset} | A=${snapshot.price_a} B=${snapshot.price_b} | "
                f"spread {snapshot.spread_basis_points} bps ({snapshot.higher_side.value} higher)"
            )
            self._fire(
                self._on_price_update_callbacks,
                PriceUpdatedEvent(
                    asset=asset,
                    price_a=price_a,
                    price_b=price_b,
                    basis_points=snapshot.spread_basis_points,
                    timestamp=now,
                ),
            )

            if opportunity.is_profitable:
                logger.info(
                    f"🎯 ARBITRAGE: {asset} | {opportunity.direction.value} | "
                    f"{opportunity.spread_basis_points} bps | profit ${opportunity.estimated_profit}"
                )
                with self._lock:
                    self.history.append(opportunity)
                self._fire(
                    self._on_opportunity_callbacks,
                    OpportunityDetectedEvent.from_opportunity(opportunity, now),
                )

        return snapshot

    def update_eth_prices(self, now: Optional[int] = None) -> PriceSnapshot:
        return self.update_prices(ETH_ADDRESS, now)

    def _read_source(self, source_id: int, asset: str, now: int) -> FixedPointPrice:
        source = self.registry.get(source_id, asset)
        raw = source.feed.get_latest()
        logger.debug(f"[{source.feed.name}] raw reading {raw}")
        return validate_reading(raw, source, now)

    def _evaluate(self, snapshot: PriceSnapshot, thresholds: Thresholds) -> ArbitrageOpportunity:
        spread = SpreadResult(snapshot.spread_basis_points, snapshot.higher_side)
        low_price = spread.low_price(snapshot.price_a, snapshot.price_b)
        return estimate(
            spread,
            low_price=low_price,
            high_price=spread.high_price(snapshot.price_a, snapshot.price_b),
            # Gas is paid in the asset, valued where it is bought
            cost_rate=cost_rate_in_price(thresholds.execution_cost_rate, low_price),
            effort=thresholds.execution_effort_estimate,
            min_basis_points=thresholds.min_profit_basis_points,
            asset=snapshot.asset,
        )

    # ===== QUERIES =====

    def get_snapshot(self, asset: str) -> Optional[PriceSnapshot]:
        return self.snapshots.get(asset_key(asset))

    def current_opportunity(self, asset: str) -> ArbitrageOpportunity:
        """Fresh verdict from the latest snapshot and current thresholds"""
        asset = asset_key(asset)
        snapshot = self.snapshots.get(asset)
        if snapshot is None:
            return empty_opportunity(asset)
        return self._evaluate(snapshot, self.get_thresholds(asset))

    def get_arbitrage_opportunity(self) -> ArbitrageOpportunity:
        return self.current_opportunity(ETH_ADDRESS)

    def is_currently_profitable(self, asset: str) -> tuple[bool, int]:
        opportunity = self.current_opportunity(asset)
        return opportunity.is_profitable, opportunity.spread_basis_points

    def is_snapshot_fresh(self, asset: str, max_age: int, now: Optional[int] = None) -> bool:
        snapshot = self.get_snapshot(asset)
        if snapshot is None:
            return False
        now = self._clock() if now is None else now
        return now - snapshot.observed_at <= max_age

    # ===== THRESHOLDS =====

    def get_thresholds(self, asset: str) -> Thresholds:
        return self._thresholds.get(asset_key(asset), self.default_thresholds)

    def _check_thresholds(self, asset: str, thresholds: Thresholds):
        """Raise ArithmeticOverflow if the thresholds cannot be evaluated"""
        thresholds.execution_cost_rate.mul(thresholds.execution_effort_estimate)
        snapshot = self.snapshots.get(asset)
        if snapshot is not None:
            self._evaluate(snapshot, thresholds)

    def set_thresholds(self, asset: str, thresholds: Thresholds):
        """Replace the whole threshold set for an asset"""
        asset = asset_key(asset)
        with self._asset_lock(asset):
            self._check_thresholds(asset, thresholds)
            with self._lock:
                self._thresholds[asset] = thresholds
        logger.info(f"Thresholds for {asset} set to {thresholds.to_dict()}")

    def update_execution_cost_rate(self, asset: str, new_rate: FixedPointPrice) -> FixedPointPrice:
        """Swap the cost rate (gas price in wei), returning the previous one"""
        asset = asset_key(asset)
        with self._asset_lock(asset):
            current = self.get_thresholds(asset)
            updated = dataclasses.replace(current, execution_cost_rate=new_rate)
            self._check_thresholds(asset, updated)
            with self._lock:
                self._thresholds[asset] = updated

            old_rate = current.execution_cost_rate
            logger.info(f"Execution cost rate for {asset}: {old_rate.value} -> {new_rate.value}")
            self._fire(
                self._on_thresholds_update_callbacks,
                ThresholdsUpdatedEvent(asset=asset, old_rate=old_rate, new_rate=new_rate, timestamp=self._clock()),
            )
        return old_rate

    def get_state(self) -> dict:
        """Get current state for the API"""
        with self._lock:
            snapshots = dict(self.snapshots)
            thresholds = dict(self._thresholds)
            history = list(self.history)[-20:]  # Last 20

        return {
            "snapshots": {asset: snap.to_dict() for asset, snap in snapshots.items()},
            "opportunities": {asset: self.current_opportunity(asset).to_dict() for asset in snapshots},
            "thresholds": {
                asset: thresholds.get(asset, self.default_thresholds).to_dict()
                for asset in set(snapshots) | set(thresholds)
            },
            "history": [o.to_dict() for o in history],
            "config": {
                "source_a": self.source_a,
                "source_b": self.source_b,
                "default_thresholds": self.default_thresholds.to_dict(),
            },
        }
