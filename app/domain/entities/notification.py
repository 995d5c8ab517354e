"""Domain entity representing a user notification event."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Union


class NotificationKind(str, Enum):
    """Notification kinds that may be folded into a single digest item."""

    LIKE = "like"
    COMMENT = "comment"
    REPLY = "reply"
    MENTION = "mention"
    SHARE = "share"
    FOLLOW = "follow"


@dataclass(frozen=True)
class OpaqueKind:
    """Any other notification kind (``success``, ``error``, free-form...)."""

    raw: str | None

    @property
    def value(self) -> str:
        return self.raw or ""


Kind = Union[NotificationKind, OpaqueKind]


def parse_kind(raw: str | None) -> Kind:
    """Map a stored ``type`` string to :data:`Kind`."""

    if raw:
        try:
            return NotificationKind(raw)
        except ValueError:
            pass
    return OpaqueKind(raw)


@dataclass(frozen=True)
class NotificationEvent:
    """Notification delivered to ``user_id``.

    Everything except ``is_read`` and ``is_clicked`` is immutable after
    creation; both flags only ever move from ``False`` to ``True``.
    """

    id: str | None
    user_id: str
    type: str | None
    title: str
    message: str
    actor_id: str | None = None
    reference_id: str | None = None
    is_read: bool = False
    is_clicked: bool = False
    created_at: datetime | None = None

    @property
    def kind(self) -> Kind:
        return parse_kind(self.type)

    def with_flags(
        self, *, is_read: bool | None = None, is_clicked: bool | None = None
    ) -> "NotificationEvent":
        """Return a copy with the given flags raised; ``False`` never lowers one."""

        return replace(
            self,
            is_read=self.is_read or bool(is_read),
            is_clicked=self.is_clicked or bool(is_clicked),
        )


__all__ = ["Kind", "NotificationEvent", "NotificationKind", "OpaqueKind", "parse_kind"]
