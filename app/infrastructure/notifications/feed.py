"""In-process change feed for persisted notifications."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from itertools import count
from typing import DefaultDict, Iterable

from app.application.ports import DeleteHandler, EventHandler, Unsubscribe
from app.domain.entities import FeedChange, NotificationEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Subscription:
    token: int
    user_id: str
    on_insert: EventHandler
    on_update: EventHandler
    on_delete: DeleteHandler


class NotificationChangeFeed:
    """Fan out notification inserts, updates and deletes to subscribers.

    Inserts and updates only reach subscribers of the event's user. Deletes
    are broadcast to everyone; consumers filter them by user.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tokens = count(1)
        self._subscriptions: DefaultDict[str, dict[int, _Subscription]] = defaultdict(dict)

    def subscribe(
        self,
        user_id: str,
        on_insert: EventHandler,
        on_update: EventHandler,
        on_delete: DeleteHandler,
    ) -> Unsubscribe:
        """Register callbacks for ``user_id`` and return the removal handle."""

        with self._lock:
            token = next(self._tokens)
            self._subscriptions[user_id][token] = _Subscription(
                token, user_id, on_insert, on_update, on_delete
            )

        def unsubscribe() -> None:
            with self._lock:
                subscriptions = self._subscriptions.get(user_id)
                if subscriptions is None:
                    return
                subscriptions.pop(token, None)
                if not subscriptions:
                    self._subscriptions.pop(user_id, None)

        return unsubscribe

    def publish(self, change: FeedChange) -> None:
        """Deliver ``change`` to the matching subscribers."""

        if change.kind == "delete":
            targets = self._all_subscriptions()
        else:
            targets = self._subscriptions_for(change.user_id)

        for subscription in targets:
            try:
                if change.kind == "insert" and change.event is not None:
                    subscription.on_insert(change.event)
                elif change.kind == "update" and change.event is not None:
                    subscription.on_update(change.event)
                elif change.kind == "delete" and change.target_id is not None:
                    subscription.on_delete(change.target_id, change.user_id)
            except Exception:
                logger.exception(
                    "Notification feed subscriber failed handling %s", change.kind
                )

    def publish_insert(self, event: NotificationEvent) -> None:
        self.publish(FeedChange(kind="insert", user_id=event.user_id, event=event))

    def publish_updates(self, events: Iterable[NotificationEvent]) -> None:
        for event in events:
            self.publish(FeedChange(kind="update", user_id=event.user_id, event=event))

    def publish_delete(self, event_id: str, user_id: str | None) -> None:
        self.publish(FeedChange(kind="delete", user_id=user_id, event_id=event_id))

    def _subscriptions_for(self, user_id: str | None) -> list[_Subscription]:
        if not user_id:
            return []
        with self._lock:
            return list(self._subscriptions.get(user_id, {}).values())

    def _all_subscriptions(self) -> list[_Subscription]:
        with self._lock:
            return [sub for subs in self._subscriptions.values() for sub in subs.values()]


notification_feed = NotificationChangeFeed()


__all__ = ["NotificationChangeFeed", "notification_feed"]
