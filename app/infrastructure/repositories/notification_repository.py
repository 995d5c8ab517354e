"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import NotificationEvent
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_utc_naive_datetime,
    from_utc_naive_datetime,
    now_in_app_timezone,
)

_PATCHABLE_FLAGS = {"is_read", "is_clicked"}


class NotificationRepository:
    """Provide CRUD operations for :class:`NotificationEvent` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
    ) -> Sequence[NotificationEvent]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: NotificationEvent) -> NotificationEvent:
        model = NotificationModel()
        if notification.id is not None:
            model.id = notification.id
        model.user_id = notification.user_id
        model.actor_id = notification.actor_id
        model.type = notification.type or "info"
        model.reference_id = notification.reference_id
        model.title = notification.title
        model.message = notification.message
        model.is_read = notification.is_read
        model.is_clicked = notification.is_clicked
        model.created_at = ensure_utc_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def bulk_update(
        self,
        notification_ids: Iterable[str],
        patch: Mapping[str, bool],
        *,
        user_id: str,
    ) -> Sequence[NotificationEvent]:
        """Raise the flags in ``patch`` and return the rows that changed."""

        unknown = set(patch) - _PATCHABLE_FLAGS
        if unknown:
            msg = f"Unsupported notification fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        if any(value is not True for value in patch.values()):
            raise ValueError("Notification flags can only be set to true")

        ids = list(dict.fromkeys(i for i in notification_ids if i))
        if not ids or not patch:
            return []

        query = self.session.query(NotificationModel).filter(
            NotificationModel.id.in_(ids),
            NotificationModel.user_id == user_id,
        )
        changed: list[NotificationModel] = []
        for model in query.all():
            dirty = False
            for field in patch:
                if not getattr(model, field):
                    setattr(model, field, True)
                    dirty = True
            if dirty:
                changed.append(model)
        self.session.commit()
        return [self._to_entity(model) for model in changed]

    def list_unread_ids(self, user_id: str) -> list[str]:
        rows = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .all()
        )
        return [row[0] for row in rows]

    def delete(self, notification_id: str, *, user_id: str) -> NotificationEvent | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None or model.user_id != user_id:
            return None
        entity = self._to_entity(model)
        self.session.delete(model)
        self.session.commit()
        return entity

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationEvent:
        return NotificationEvent(
            id=model.id,
            user_id=model.user_id,
            actor_id=model.actor_id,
            type=model.type,
            reference_id=model.reference_id,
            title=model.title,
            message=model.message,
            is_read=bool(model.is_read),
            is_clicked=bool(model.is_clicked),
            created_at=from_utc_naive_datetime(model.created_at),
        )


__all__ = ["NotificationRepository"]
