"""Resolve where the client should go when a digest item is activated."""

from __future__ import annotations

from urllib.parse import quote

from app.domain.entities import DigestItem, NotificationKind, parse_kind

_POST_KINDS = frozenset(
    {NotificationKind.LIKE, NotificationKind.COMMENT, NotificationKind.SHARE}
)


def post_url(post_id: str) -> str:
    return f"/community?post={quote(post_id, safe='')}"


def profile_url(user_id: str) -> str:
    return f"/profile/{quote(user_id, safe='')}"


def resolve_navigation_target(item: DigestItem) -> str | None:
    """Return the client route for ``item`` or ``None`` when nothing applies."""

    kind = parse_kind(item.type)
    if kind in _POST_KINDS and item.reference_id:
        return post_url(item.reference_id)
    if kind is NotificationKind.FOLLOW:
        # Followers are reached through the newest member's actor.
        if item.latest_actor_id:
            return profile_url(item.latest_actor_id)
        return None
    if item.reference_id:
        return post_url(item.reference_id)
    return None


__all__ = ["post_url", "profile_url", "resolve_navigation_target"]
