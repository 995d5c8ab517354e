"""Aggregate application use cases."""

from .notifications import NotificationDigest, aggregate_notifications

__all__ = ["NotificationDigest", "aggregate_notifications"]
