"""Realtime notification helpers for the infrastructure layer."""

from .feed import NotificationChangeFeed, notification_feed
from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    DigestPublisher,
    serialize_digest,
    serialize_digest_item,
    serialize_notification,
)
from .store import SqlNotificationStore

__all__ = [
    "NotificationChangeFeed",
    "notification_feed",
    "NotificationConnectionManager",
    "notification_manager",
    "DigestPublisher",
    "serialize_digest",
    "serialize_digest_item",
    "serialize_notification",
    "SqlNotificationStore",
]
