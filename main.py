"""
Cross-Chain Price Monitor - Main Entry Point

Polls the ETH/USD price reported on Ethereum and on Arbitrum, keeps the
latest validated snapshot, and flags spreads that stay profitable after
execution costs.

Features:
- Chainlink aggregators over JSON-RPC, or simulated feeds
- Opportunity notifications (Telegram / Discord)
- Prometheus metrics export
- JSON query API
"""
import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from config import (
    ARB_RPC_URL, ETH_ADDRESS, ETH_RPC_URL, MODE, NETWORK, OWNER,
    POLL_INTERVAL, WEB_HOST, WEB_PORT,
)
from engine import ArbitrageEngine
from engine_metrics import MetricsEngine
from feeds.base import FeedError
from feeds.simulator import create_simulated_feeds
from src.core.errors import PriceMonitorError
from src.notifications import NotificationService
from src.sources.networks import create_rpc_feeds
from src.sources.registry import SourceRegistry

from api import app, manager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

# Reduce noise from libraries
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)


class PriceMonitorBot:
    """Wires feeds, registry, engine, metrics and notifications together"""

    def __init__(self, mode: str = "simulation", asset: str = ETH_ADDRESS, poll_interval: float = POLL_INTERVAL):
        self.mode = mode
        self.asset = asset
        self.poll_interval = poll_interval

        if mode == "rpc":
            ethereum_feed, arbitrum_feed = create_rpc_feeds(NETWORK, ETH_RPC_URL, ARB_RPC_URL)
            logger.info(f"🔗 Reading Chainlink feeds on {NETWORK}")
        else:
            ethereum_feed, arbitrum_feed = create_simulated_feeds()
            logger.info("🎮 Running in SIMULATION MODE with mock data")

        self.registry = SourceRegistry(owner=OWNER)
        self.registry.initialize_oracles(OWNER, ethereum_feed, arbitrum_feed, asset=asset)

        self.engine = ArbitrageEngine(self.registry)
        self.metrics = MetricsEngine()
        self.notifications = NotificationService()

        self._task: Optional[asyncio.Task] = None
        self.running = False

    def setup(self):
        """Register callbacks and expose components to the API"""
        self.metrics.attach(self.engine)
        self.notifications.attach(self.engine)
        manager.set_components(self.engine, self.metrics, self.notifications)
        logger.info(f"Monitoring {self.asset} every {self.poll_interval}s")

    async def poll_once(self):
        """One update cycle followed by remote notification delivery"""
        try:
            await asyncio.to_thread(self.engine.update_prices, self.asset)
        except (PriceMonitorError, FeedError) as e:
            # Already logged by the engine; the next cycle retries
            logger.debug(f"Cycle skipped: {e}")
        await self.notifications.flush()

    async def _run(self):
        while self.running:
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Poll cycle error: {e}")
            await asyncio.sleep(self.poll_interval)

    async def start(self):
        self.running = True
        self.setup()
        logger.info("=" * 60)
        logger.info("🚀 PRICE MONITOR STARTING")
        logger.info("=" * 60)
        self._task = asyncio.create_task(self._run())
        logger.info(f"API available at http://localhost:{WEB_PORT}/api/state")
        logger.info(f"Prometheus metrics at http://localhost:{WEB_PORT}/metrics")

    async def stop(self):
        self.running = False
        logger.info("Shutting down...")
        if self._task:
            self._task.cancel()
        logger.info("Monitor stopped")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan handler"""
    bot = PriceMonitorBot(mode=MODE)
    await bot.start()
    yield
    await bot.stop()


def handle_sigint(sig, frame):
    """Handle Ctrl+C gracefully"""
    logger.info("Received SIGINT, shutting down...")
    sys.exit(0)


def main():
    """Main entry point"""
    signal.signal(signal.SIGINT, handle_sigint)

    app.router.lifespan_context = lifespan
    uvicorn.run(
        app,
        host=WEB_HOST,
        port=WEB_PORT,
        log_level="warning"
    )


if __name__ == "__main__":
    main()
