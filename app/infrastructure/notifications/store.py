"""SQL-backed implementation of the notification store port."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence

from sqlalchemy.orm import Session

from app.application.ports import (
    DeleteHandler,
    EventHandler,
    NotificationStore,
    Unsubscribe,
)
from app.domain.entities import NotificationEvent
from app.infrastructure.repositories import NotificationRepository

from .feed import NotificationChangeFeed, notification_feed


class SqlNotificationStore(NotificationStore):
    """Persist through :class:`NotificationRepository` and publish every write."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        feed: NotificationChangeFeed = notification_feed,
    ) -> None:
        self._session_factory = session_factory
        self._feed = feed

    def list(self, user_id: str, *, limit: int = 50) -> Sequence[NotificationEvent]:
        session = self._session_factory()
        try:
            return NotificationRepository(session).list_for_user(user_id, limit=limit)
        finally:
            session.close()

    def insert(self, event: NotificationEvent) -> NotificationEvent:
        session = self._session_factory()
        try:
            saved = NotificationRepository(session).create(event)
        finally:
            session.close()
        self._feed.publish_insert(saved)
        return saved

    def bulk_update(
        self, ids: Iterable[str], patch: Mapping[str, bool], *, user_id: str
    ) -> int:
        session = self._session_factory()
        try:
            changed = NotificationRepository(session).bulk_update(
                ids, patch, user_id=user_id
            )
        finally:
            session.close()
        self._feed.publish_updates(changed)
        return len(changed)

    def mark_all_read(self, user_id: str) -> int:
        session = self._session_factory()
        try:
            repository = NotificationRepository(session)
            changed = repository.bulk_update(
                repository.list_unread_ids(user_id), {"is_read": True}, user_id=user_id
            )
        finally:
            session.close()
        self._feed.publish_updates(changed)
        return len(changed)

    def delete(self, event_id: str, *, user_id: str) -> NotificationEvent | None:
        session = self._session_factory()
        try:
            deleted = NotificationRepository(session).delete(event_id, user_id=user_id)
        finally:
            session.close()
        if deleted is not None:
            self._feed.publish_delete(deleted.id or event_id, deleted.user_id)
        return deleted

    def subscribe(
        self,
        user_id: str,
        on_insert: EventHandler,
        on_update: EventHandler,
        on_delete: DeleteHandler,
    ) -> Unsubscribe:
        return self._feed.subscribe(user_id, on_insert, on_update, on_delete)


__all__ = ["SqlNotificationStore"]
