"""Port describing persistence and change feed for notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence

from app.domain.entities import NotificationEvent

EventHandler = Callable[[NotificationEvent], None]
DeleteHandler = Callable[[str, "str | None"], None]
Unsubscribe = Callable[[], None]


class NotificationStore(ABC):
    """Persistence service backing a user's notification digest."""

    @abstractmethod
    def list(self, user_id: str, *, limit: int = 50) -> Sequence[NotificationEvent]:
        """Return the newest ``limit`` events for ``user_id``, newest first."""

    @abstractmethod
    def insert(self, event: NotificationEvent) -> NotificationEvent:
        """Persist ``event`` and return it with its assigned id."""

    @abstractmethod
    def bulk_update(
        self, ids: Iterable[str], patch: Mapping[str, bool], *, user_id: str
    ) -> int:
        """Apply an ``is_read``/``is_clicked`` patch to ``ids`` owned by ``user_id``."""

    @abstractmethod
    def subscribe(
        self,
        user_id: str,
        on_insert: EventHandler,
        on_update: EventHandler,
        on_delete: DeleteHandler,
    ) -> Unsubscribe:
        """Register feed callbacks and return the handle that removes them."""


__all__ = ["DeleteHandler", "EventHandler", "NotificationStore", "Unsubscribe"]
