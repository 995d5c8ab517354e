"""SQLAlchemy models for the infrastructure layer."""

from .notification import NotificationModel

__all__ = ["NotificationModel"]
