"""Domain entities exposed by the application."""

from .digest_item import DigestItem
from .feed_change import FeedChange, FeedChangeKind
from .notification import (
    Kind,
    NotificationEvent,
    NotificationKind,
    OpaqueKind,
    parse_kind,
)
from .session import SessionContext

__all__ = [
    "DigestItem",
    "FeedChange",
    "FeedChangeKind",
    "Kind",
    "NotificationEvent",
    "NotificationKind",
    "OpaqueKind",
    "parse_kind",
    "SessionContext",
]
