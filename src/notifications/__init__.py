"""
Notification system for the price monitor.

Supports multiple channels:
- Local subscribers (in-process)
- Telegram bot
- Discord webhook
"""

from .models import Notification, NotificationChannel, NotificationPriority, NotificationType
from .service import NotificationService

__all__ = [
    "Notification",
    "NotificationChannel",
    "NotificationPriority",
    "NotificationType",
    "NotificationService",
]
