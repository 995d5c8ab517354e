"""Per-session view model over a user's notification feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from anyio import to_thread

from app.application.ports import NotificationStore, Unsubscribe
from app.domain.entities import DigestItem, NotificationEvent, SessionContext

from .aggregation import aggregate_notifications, badge_count
from .navigation import resolve_navigation_target

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_POLL_INTERVAL = 2.0

ChangeListener = Callable[["NotificationDigest"], None]


class NotificationDigest:
    """Hold the newest events of one user and expose the folded digest.

    The in-memory list is only mutated through the methods of this class:
    the change feed handlers, :meth:`refresh`, and the two flag transitions.
    """

    def __init__(
        self,
        session: SessionContext,
        store: NotificationStore,
        *,
        limit: int = DEFAULT_LIMIT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        on_change: ChangeListener | None = None,
    ) -> None:
        self.session = session
        self._store = store
        self._limit = limit
        self._poll_interval = poll_interval
        self._on_change = on_change
        self._events: list[NotificationEvent] = []
        self._is_open = False
        self._reconcile_task: asyncio.Task[None] | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def user_id(self) -> str:
        return self.session.user_id

    @property
    def events(self) -> tuple[NotificationEvent, ...]:
        return tuple(self._events)

    @property
    def items(self) -> list[DigestItem]:
        return aggregate_notifications(self._events)

    @property
    def badge_count(self) -> int:
        return badge_count(self._events)

    @property
    def is_open(self) -> bool:
        return self._is_open

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Subscribe to the change feed and load the initial list.

        Returns the result of the initial :meth:`refresh`.
        """

        self._subscribe()
        return self.refresh()

    async def start_async(self) -> bool:
        """Same as :meth:`start` but loads the list off the event loop."""

        self._subscribe()
        return await self.refresh_async()

    def _subscribe(self) -> None:
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None

        if self._unsubscribe is None:
            try:
                self._unsubscribe = self._store.subscribe(
                    self.user_id,
                    lambda event: self._marshal(self.apply_insert, event),
                    lambda event: self._marshal(self.apply_update, event),
                    lambda event_id, user_id: self._marshal(
                        self.apply_delete, event_id, user_id
                    ),
                )
            except Exception:
                logger.exception(
                    "Could not subscribe to notification feed for user %s",
                    self.user_id,
                )

    async def open(self) -> None:
        """Handle the closed to open transition of the digest UI."""

        if self._is_open:
            return
        self._is_open = True
        unread_ids = self._read_loaded()
        if unread_ids:
            await self._write_async(unread_ids, {"is_read": True})
        await self.refresh_async()
        self._reconcile_task = asyncio.create_task(self._reconcile_forever())

    async def close(self) -> None:
        """Stop the reconciliation loop; no refetch is scheduled afterwards."""

        self._is_open = False
        task, self._reconcile_task = self._reconcile_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def shutdown(self) -> None:
        """Close the digest and drop the change feed subscription."""

        await self.close()
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    async def _reconcile_forever(self) -> None:
        while self._is_open:
            await asyncio.sleep(self._poll_interval)
            if not self._is_open:
                break
            await self.refresh_async()

    # ------------------------------------------------------------------
    # Full refetch
    # ------------------------------------------------------------------
    def refresh(self) -> bool:
        """Replace the list with the store's current state.

        On failure the last known good list is kept and ``False`` returned.
        """

        try:
            events = self._store.list(self.user_id, limit=self._limit)
        except Exception:
            logger.exception("Failed to fetch notifications for user %s", self.user_id)
            return False
        self._replace(events)
        return True

    async def refresh_async(self) -> bool:
        """Same as :meth:`refresh` but runs the store query in a worker thread."""

        try:
            events = await to_thread.run_sync(
                lambda: self._store.list(self.user_id, limit=self._limit)
            )
        except Exception:
            logger.exception("Failed to fetch notifications for user %s", self.user_id)
            return False
        self._replace(events)
        return True

    def _replace(self, events: Sequence[NotificationEvent]) -> None:
        self._events = list(events)[: self._limit]
        logger.debug(
            "Loaded %d notifications for user %s", len(self._events), self.user_id
        )
        self._changed()

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------
    def mark_all_read_on_open(self) -> list[str]:
        """Mark every loaded unread event as read; returns the affected ids."""

        unread_ids = self._read_loaded()
        if unread_ids:
            self._write(unread_ids, {"is_read": True})
        return unread_ids

    def mark_group_clicked(self, member_ids: Iterable[str]) -> str | None:
        """Mark the members of a digest item as clicked and resolve its target."""

        ids = list(dict.fromkeys(str(i) for i in member_ids))
        if not ids:
            return None
        target = self._click_loaded(ids)
        self._write(ids, {"is_clicked": True})
        return target

    async def mark_group_clicked_async(self, member_ids: Iterable[str]) -> str | None:
        """Same as :meth:`mark_group_clicked` with the write done in a worker thread."""

        ids = list(dict.fromkeys(str(i) for i in member_ids))
        if not ids:
            return None
        target = self._click_loaded(ids)
        await self._write_async(ids, {"is_clicked": True})
        return target

    def _read_loaded(self) -> list[str]:
        unread_ids = [str(e.id) for e in self._events if not e.is_read]
        if unread_ids:
            self._events = [e.with_flags(is_read=True) for e in self._events]
            self._changed()
        return unread_ids

    def _click_loaded(self, ids: list[str]) -> str | None:
        # Resolve before the flags change so the key lookup matches the item shown.
        item = self._find_item(ids)
        wanted = set(ids)
        self._events = [
            e.with_flags(is_clicked=True) if e.id in wanted else e for e in self._events
        ]
        self._changed()
        return resolve_navigation_target(item) if item is not None else None

    def _find_item(self, ids: list[str]) -> DigestItem | None:
        wanted = set(ids)
        for item in self.items:
            if wanted.intersection(item.member_ids):
                return item
        return None

    def _write(self, ids: list[str], patch: dict[str, bool]) -> None:
        try:
            self._store.bulk_update(ids, patch, user_id=self.user_id)
        except Exception:
            # The optimistic state stays until the next successful refetch.
            self._log_failed_write(ids, patch)

    async def _write_async(self, ids: list[str], patch: dict[str, bool]) -> None:
        try:
            await to_thread.run_sync(
                lambda: self._store.bulk_update(ids, patch, user_id=self.user_id)
            )
        except Exception:
            self._log_failed_write(ids, patch)

    def _log_failed_write(self, ids: list[str], patch: dict[str, bool]) -> None:
        logger.exception(
            "Failed to persist %s for %d notifications of user %s",
            ", ".join(patch),
            len(ids),
            self.user_id,
        )

    # ------------------------------------------------------------------
    # Change feed
    # ------------------------------------------------------------------
    def apply_insert(self, event: NotificationEvent) -> None:
        if event.user_id != self.user_id:
            logger.warning(
                "Dropping notification %s addressed to another user", event.id
            )
            return
        for index, current in enumerate(self._events):
            if current.id == event.id:
                self._events[index] = event
                break
        else:
            self._events.insert(0, event)
            del self._events[self._limit :]
        self._changed()

    def apply_update(self, event: NotificationEvent) -> None:
        if event.user_id != self.user_id:
            return
        for index, current in enumerate(self._events):
            if current.id == event.id:
                # Echo of a change already applied in memory.
                if current == event:
                    return
                self._events[index] = event
                self._changed()
                return

    def apply_delete(self, event_id: str, user_id: str | None = None) -> None:
        if user_id and user_id != self.user_id:
            logger.warning("Ignoring misrouted delete for notification %s", event_id)
            return
        remaining = [e for e in self._events if e.id != event_id]
        if len(remaining) != len(self._events):
            self._events = remaining
            self._changed()

    def _marshal(self, callback: Callable[..., None], *args: Any) -> None:
        """Run feed callbacks on the loop owning this digest."""

        loop = self._loop
        if loop is None or loop.is_closed():
            callback(*args)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            callback(*args)
        else:
            loop.call_soon_threadsafe(callback, *args)

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self)
        except Exception:
            logger.exception("Notification digest listener failed")


__all__ = ["NotificationDigest", "DEFAULT_LIMIT", "DEFAULT_POLL_INTERVAL"]
