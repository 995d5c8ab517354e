"""Change notifications emitted by the notification store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .notification import NotificationEvent

FeedChangeKind = Literal["insert", "update", "delete"]


@dataclass(frozen=True)
class FeedChange:
    """Insert, update or delete of a single persisted notification."""

    kind: FeedChangeKind
    user_id: str | None
    event: NotificationEvent | None = None
    event_id: str | None = None

    @property
    def target_id(self) -> str | None:
        if self.event is not None:
            return self.event.id
        return self.event_id


__all__ = ["FeedChange", "FeedChangeKind"]
