"""Notification digest logic and helpers for emitting notifications."""

from .aggregation import aggregate_notifications, badge_count, format_badge, is_foldable
from .digest import NotificationDigest
from .events import notify_follow, notify_post_interaction, notify_withdrawal_decision
from .navigation import resolve_navigation_target

__all__ = [
    "aggregate_notifications",
    "badge_count",
    "format_badge",
    "is_foldable",
    "NotificationDigest",
    "notify_follow",
    "notify_post_interaction",
    "notify_withdrawal_decision",
    "resolve_navigation_target",
]
