"""Fold raw notification events into digest items."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Final

from app.domain.entities import (
    DigestItem,
    NotificationEvent,
    NotificationKind,
    OpaqueKind,
)
from app.utils import sort_key_for

# (title, message) templates used when a group has more than one distinct actor.
_AGGREGATE_TEMPLATES: Final[dict[NotificationKind, tuple[str, str]]] = {
    NotificationKind.LIKE: (
        "{count} users liked your post",
        "{count} people liked your post ❤️",
    ),
    NotificationKind.COMMENT: (
        "{count} users commented on your post",
        "{count} new comments on your post 💬",
    ),
    NotificationKind.SHARE: (
        "{count} users shared your post",
        "{count} people shared your post 🔁",
    ),
    NotificationKind.REPLY: (
        "{count} users replied to your comment",
        "{count} new replies 💬",
    ),
    NotificationKind.MENTION: (
        "{count} users mentioned you",
        "You were mentioned {count} times",
    ),
    NotificationKind.FOLLOW: (
        "{count} new followers",
        "{count} people started following you",
    ),
}


def is_foldable(event: NotificationEvent) -> bool:
    """Return whether ``event`` may be merged with same-type, same-reference events."""

    if isinstance(event.kind, OpaqueKind):
        return False
    return bool(event.reference_id) and event.created_at is not None


def aggregate_notifications(events: Sequence[NotificationEvent]) -> list[DigestItem]:
    """Return digest items for ``events`` ordered by latest activity.

    Ties keep the order in which the items first appear in ``events``.
    """

    groups: dict[str, list[NotificationEvent]] = {}
    # Each entry is (first input position, item or group key).
    slots: list[tuple[int, DigestItem | str]] = []

    for position, event in enumerate(events):
        if is_foldable(event):
            key = f"{event.type}:{event.reference_id}"
            if key not in groups:
                groups[key] = []
                slots.append((position, key))
            groups[key].append(event)
        else:
            slots.append((position, _single_item(event)))

    items: list[tuple[int, DigestItem]] = []
    for position, slot in slots:
        if isinstance(slot, str):
            items.append((position, _group_item(slot, groups[slot])))
        else:
            items.append((position, slot))

    items.sort(key=lambda entry: (_descending(entry[1]), entry[0]))
    return [item for _, item in items]


def badge_count(events: Iterable[NotificationEvent]) -> int:
    """Number of unread raw events; never computed over digest items."""

    return sum(1 for event in events if not event.is_read)


def format_badge(count: int, cap: int = 9) -> str:
    """Render ``count`` for the bell badge (``""`` when nothing is unread)."""

    if count <= 0:
        return ""
    if count > cap:
        return f"{cap}+"
    return str(count)


def _descending(item: DigestItem) -> float:
    return -sort_key_for(item.latest_created_at).timestamp()


def _single_item(event: NotificationEvent) -> DigestItem:
    return DigestItem(
        key=str(event.id),
        type=event.type,
        reference_id=event.reference_id,
        member_ids=(str(event.id),),
        latest_created_at=event.created_at,
        has_unread=not event.is_read,
        has_unseen=not event.is_clicked,
        distinct_actor_count=1,
        display_title=event.title,
        display_message=event.message,
        latest_actor_id=event.actor_id,
    )


def _group_item(key: str, members: list[NotificationEvent]) -> DigestItem:
    ordered = sorted(members, key=lambda e: sort_key_for(e.created_at), reverse=True)
    latest = ordered[0]

    actors = {event.actor_id for event in ordered if event.actor_id is not None}
    distinct_actor_count = len(actors) or len(ordered)

    title, message = latest.title, latest.message
    template = _AGGREGATE_TEMPLATES.get(latest.kind)  # type: ignore[arg-type]
    if distinct_actor_count > 1 and template is not None:
        title = template[0].format(count=distinct_actor_count)
        message = template[1].format(count=distinct_actor_count)

    return DigestItem(
        key=key,
        type=latest.type,
        reference_id=latest.reference_id,
        member_ids=tuple(str(event.id) for event in ordered),
        latest_created_at=latest.created_at,
        has_unread=any(not event.is_read for event in ordered),
        has_unseen=any(not event.is_clicked for event in ordered),
        distinct_actor_count=distinct_actor_count,
        display_title=title,
        display_message=message,
        latest_actor_id=latest.actor_id,
    )


__all__ = [
    "aggregate_notifications",
    "badge_count",
    "format_badge",
    "is_foldable",
]
