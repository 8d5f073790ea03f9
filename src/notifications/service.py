"""
Notification service: turns engine events into notifications.

Local subscribers are called synchronously as events arrive. Remote
channels (Telegram, Discord) are queued and delivered by `flush()` so the
engine never waits on the network.
"""

import os
import logging
from typing import Optional, Dict, List, Callable, Any
from collections import deque
import uuid

import aiohttp

from src.core.opportunity import (
    Direction, OpportunityDetectedEvent, PriceUpdatedEvent, ThresholdsUpdatedEvent,
)
from .models import (
    Notification, NotificationChannel, NotificationPriority, NotificationType,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Event delivery for the price monitor.

    Supports:
    - Local subscribers (in-process callbacks)
    - Telegram bot
    - Discord webhook
    """

    def __init__(
        self,
        telegram_bot_token: Optional[str] = None,
        telegram_chat_id: Optional[str] = None,
        discord_webhook_url: Optional[str] = None,
        history_size: int = 100,
    ):
        # Configuration from environment unless given
        self.telegram_bot_token = telegram_bot_token if telegram_bot_token is not None else os.getenv("TELEGRAM_BOT_TOKEN", "")
        self.telegram_chat_id = telegram_chat_id if telegram_chat_id is not None else os.getenv("TELEGRAM_CHAT_ID", "")
        self.discord_webhook_url = discord_webhook_url if discord_webhook_url is not None else os.getenv("DISCORD_WEBHOOK_URL", "")

        self._subscribers: List[Callable[[Notification], None]] = []
        self._history: deque = deque(maxlen=history_size)
        self._outbox: deque = deque()

        # Statistics
        self.notifications_sent = 0
        self.notifications_failed = 0

    def attach(self, engine):
        """Register for all engine events"""
        engine.on_price_update(self.handle_price_update)
        engine.on_opportunity(self.handle_opportunity)
        engine.on_thresholds_update(self.handle_thresholds_update)

    def subscribe(self, callback: Callable[[Notification], None]):
        self._subscribers.append(callback)

    def _remote_channels(self) -> List[NotificationChannel]:
        channels = []
        if self.telegram_bot_token and self.telegram_chat_id:
            channels.append(NotificationChannel.TELEGRAM)
        if self.discord_webhook_url:
            channels.append(NotificationChannel.DISCORD)
        return channels

    def publish(
        self,
        notification_type: NotificationType,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.LOW,
        data: Optional[Dict[str, Any]] = None,
        channels: Optional[List[NotificationChannel]] = None,
    ) -> Notification:
        """Record a notification, call local subscribers, queue remote delivery"""
        notification = Notification(
            id=str(uuid.uuid4()),
            type=notification_type,
            title=title,
            message=message,
            priority=priority,
            data=data,
            channels=channels or [NotificationChannel.LOCAL],
        )

        delivery_errors = {}
        if NotificationChannel.LOCAL in notification.channels:
            for callback in self._subscribers:
                try:
                    callback(notification)
                except Exception as e:
                    logger.error(f"Local subscriber failed for {notification.title}: {e}")
                    delivery_errors[NotificationChannel.LOCAL.value] = str(e)

        notification.delivery_errors = delivery_errors or None
        if any(c != NotificationChannel.LOCAL for c in notification.channels):
            self._outbox.append(notification)
        else:
            notification.delivered = not delivery_errors

        self._history.append(notification)
        return notification

    # Engine event handlers

    def handle_price_update(self, event: PriceUpdatedEvent):
        self.publish(
            notification_type=NotificationType.PRICES_UPDATED,
            title=f"Prices updated: {event.asset}",
            message=f"A ${event.price_a} | B ${event.price_b} | spread {event.basis_points} bps",
            data=event.to_dict(),
        )

    def handle_opportunity(self, event: OpportunityDetectedEvent):
        priority = NotificationPriority.LOW
        if event.basis_points >= 100:
            priority = NotificationPriority.HIGH
        elif event.basis_points >= 50:
            priority = NotificationPriority.MEDIUM

        buy, sell = ("A", "B") if event.direction == Direction.A_TO_B else ("B", "A")
        self.publish(
            notification_type=NotificationType.ARBITRAGE_OPPORTUNITY,
            title=f"Arbitrage: {event.asset}",
            message=(
                f"Buy on {buy} → Sell on {sell}\n"
                f"Spread: {event.basis_points} bps | Est. profit: ${event.estimated_profit}"
            ),
            priority=priority,
            data=event.to_dict(),
            channels=[NotificationChannel.LOCAL] + self._remote_channels(),
        )

    def handle_thresholds_update(self, event: ThresholdsUpdatedEvent):
        self.publish(
            notification_type=NotificationType.THRESHOLDS_UPDATED,
            title=f"Execution cost rate updated: {event.asset}",
            message=f"{event.old_rate.value} -> {event.new_rate.value}",
            data=event.to_dict(),
        )

    # Remote delivery

    async def flush(self) -> int:
        """Deliver queued notifications to remote channels. Returns count delivered."""
        delivered = 0
        if not self._outbox:
            return delivered

        async with aiohttp.ClientSession() as session:
            while self._outbox:
                notification = self._outbox.popleft()
                errors = dict(notification.delivery_errors or {})
                for channel in notification.channels:
                    try:
                        if channel == NotificationChannel.TELEGRAM:
                            await self._send_telegram(session, notification)
                        elif channel == NotificationChannel.DISCORD:
                            await self._send_discord(session, notification)
                    except Exception as e:
                        logger.error(f"Failed to send notification via {channel.value}: {e}")
                        errors[channel.value] = str(e)

                notification.delivery_errors = errors or None
                notification.delivered = not errors
                if notification.delivered:
                    self.notifications_sent += 1
                    delivered += 1
                else:
                    self.notifications_failed += 1
        return delivered

    async def _send_telegram(self, session: aiohttp.ClientSession, notification: Notification):
        """Send notification via Telegram bot"""
        text = f"*{notification.title}*\n\n{notification.message}"
        url = f"https://api.telegram.org/bot{self.telegram_bot_token}/sendMessage"
        payload = {
            "chat_id": self.telegram_chat_id,
            "text": text,
            "parse_mode": "Markdown",
        }
        async with session.post(url, json=payload) as resp:
            if resp.status != 200:
                raise RuntimeError(f"Telegram API error: {await resp.text()}")
        logger.info(f"Sent Telegram notification to {self.telegram_chat_id}")

    async def _send_discord(self, session: aiohttp.ClientSession, notification: Notification):
        """Send notification via Discord webhook"""
        color_map = {
            NotificationPriority.LOW: 0x6c757d,
            NotificationPriority.MEDIUM: 0x0d6efd,
            NotificationPriority.HIGH: 0xfd7e14,
        }
        embed = {
            "title": notification.title,
            "description": notification.message,
            "color": color_map[notification.priority],
            "timestamp": notification.timestamp.isoformat(),
            "footer": {"text": "Price Monitor"},
        }
        async with session.post(self.discord_webhook_url, json={"embeds": [embed]}) as resp:
            if resp.status not in [200, 204]:
                raise RuntimeError(f"Discord webhook error: {await resp.text()}")
        logger.info("Sent Discord notification")

    def get_notification_history(self, limit: int = 50) -> List[Notification]:
        """Get recent notification history"""
        return list(self._history)[-limit:]

    def pending_count(self) -> int:
        return len(self._outbox)

    def get_statistics(self) -> Dict[str, Any]:
        """Get notification statistics"""
        return {
            "notifications_sent": self.notifications_sent,
            "notifications_failed": self.notifications_failed,
            "history_count": len(self._history),
            "pending": len(self._outbox),
            "channels_configured": {
                "telegram": bool(self.telegram_bot_token and self.telegram_chat_id),
                "discord": bool(self.discord_webhook_url),
            },
        }
