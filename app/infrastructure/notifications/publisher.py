"""Serialize notification digests and push them to websocket subscribers."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

from fastapi import WebSocket

from app.application.use_cases.notifications import (
    NotificationDigest,
    format_badge,
    resolve_navigation_target,
)
from app.config import get_settings
from app.domain.entities import DigestItem, NotificationEvent
from app.utils import format_relative_time

from .manager import NotificationConnectionManager, notification_manager


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_notification(notification: NotificationEvent) -> dict[str, Any]:
    """Return the JSON representation for a raw ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "actor_id": notification.actor_id,
        "type": notification.type,
        "reference_id": notification.reference_id,
        "title": notification.title,
        "message": notification.message,
        "is_read": notification.is_read,
        "is_clicked": notification.is_clicked,
        "created_at": _iso_or_none(notification.created_at),
    }


def serialize_digest_item(item: DigestItem, *, now: datetime | None = None) -> dict[str, Any]:
    """Return the JSON representation for a digest ``item``."""

    return {
        "key": item.key,
        "type": item.type,
        "reference_id": item.reference_id,
        "member_ids": list(item.member_ids),
        "count": item.count,
        "latest_created_at": _iso_or_none(item.latest_created_at),
        "relative_time": format_relative_time(item.latest_created_at, now),
        "has_unread": item.has_unread,
        "has_unseen": item.has_unseen,
        "distinct_actor_count": item.distinct_actor_count,
        "display_title": item.display_title,
        "display_message": item.display_message,
        "target": resolve_navigation_target(item),
    }


def serialize_digest(digest: NotificationDigest, *, now: datetime | None = None) -> dict[str, Any]:
    """Snapshot of ``digest`` as delivered to clients."""

    count = digest.badge_count
    return {
        "items": [serialize_digest_item(item, now=now) for item in digest.items],
        "badge_count": count,
        "badge_label": format_badge(count, get_settings().badge_cap),
        "is_open": digest.is_open,
    }


class DigestPublisher:
    """Push a fresh digest snapshot to one websocket after every change."""

    def __init__(
        self,
        websocket: WebSocket,
        manager: NotificationConnectionManager = notification_manager,
    ) -> None:
        self._websocket = websocket
        self._manager = manager

    def __call__(self, digest: NotificationDigest) -> None:
        message = {"type": "digest", "data": serialize_digest(digest)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Listeners are marshalled onto the websocket loop; nothing to send to.
            return
        loop.create_task(self._manager.send(digest.user_id, self._websocket, message))


__all__ = [
    "DigestPublisher",
    "serialize_digest",
    "serialize_digest_item",
    "serialize_notification",
]
