"""
Notification data models.
"""

from datetime import datetime
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field
from enum import Enum


class NotificationChannel(str, Enum):
    """Notification delivery channels"""
    LOCAL = "local"  # In-process subscribers (API, metrics)
    TELEGRAM = "telegram"
    DISCORD = "discord"


class NotificationPriority(str, Enum):
    """Notification priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationType(str, Enum):
    """Types of notifications"""
    PRICES_UPDATED = "prices_updated"
    ARBITRAGE_OPPORTUNITY = "arbitrage_opportunity"
    THRESHOLDS_UPDATED = "thresholds_updated"


class Notification(BaseModel):
    """Notification message"""
    id: str
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.LOW
    data: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    # Delivery tracking
    channels: List[NotificationChannel] = [NotificationChannel.LOCAL]
    delivered: bool = False
    delivery_errors: Optional[Dict[str, str]] = None
