"""Interfaces the application layer expects from infrastructure."""

from .notification_store import (
    DeleteHandler,
    EventHandler,
    NotificationStore,
    Unsubscribe,
)

__all__ = ["DeleteHandler", "EventHandler", "NotificationStore", "Unsubscribe"]
