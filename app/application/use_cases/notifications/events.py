"""Utility helpers to generate notifications for social and wallet events."""

from __future__ import annotations

from decimal import Decimal

from app.application.ports import NotificationStore
from app.domain.entities import NotificationEvent, NotificationKind
from app.utils import now_in_app_timezone

_INTERACTION_COPY: dict[NotificationKind, tuple[str, str]] = {
    NotificationKind.LIKE: ("New like ❤️", "{actor} liked your post"),
    NotificationKind.COMMENT: ("New comment 💬", "{actor} commented on your post"),
    NotificationKind.SHARE: ("Your post was shared 🔁", "{actor} shared your post"),
    NotificationKind.REPLY: ("New reply 💬", "{actor} replied to your comment"),
    NotificationKind.MENTION: ("You were mentioned", "{actor} mentioned you in a post"),
}


def _persist_notification(
    store: NotificationStore,
    *,
    user_id: str,
    notification_type: str,
    title: str,
    message: str,
    actor_id: str | None = None,
    reference_id: str | None = None,
) -> NotificationEvent:
    notification = NotificationEvent(
        id=None,
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
        actor_id=actor_id,
        reference_id=reference_id,
        created_at=now_in_app_timezone(),
    )
    return store.insert(notification)


def notify_follow(
    store: NotificationStore,
    *,
    follower_id: str,
    followed_id: str,
    follower_name: str,
    muted: bool = False,
) -> NotificationEvent | None:
    """Tell ``followed_id`` that ``follower_id`` started following them.

    ``muted`` is true when ``followed_id`` has muted the follower; nothing is
    recorded in that case.
    """

    if follower_id == followed_id or muted:
        return None

    return _persist_notification(
        store,
        user_id=followed_id,
        notification_type=NotificationKind.FOLLOW.value,
        title="New follower 👋",
        message=f"{follower_name} started following you",
        actor_id=follower_id,
        reference_id=follower_id,
    )


def notify_post_interaction(
    store: NotificationStore,
    *,
    kind: NotificationKind,
    actor_id: str,
    actor_name: str,
    post_owner_id: str,
    post_id: str,
) -> NotificationEvent | None:
    """Notify the owner of ``post_id`` about a like, comment, share, reply or mention."""

    if actor_id == post_owner_id:
        return None
    copy = _INTERACTION_COPY.get(kind)
    if copy is None:
        raise ValueError(f"'{kind.value}' is not a post interaction")

    title, message = copy
    return _persist_notification(
        store,
        user_id=post_owner_id,
        notification_type=kind.value,
        title=title,
        message=message.format(actor=actor_name),
        actor_id=actor_id,
        reference_id=post_id,
    )


def notify_withdrawal_decision(
    store: NotificationStore,
    *,
    user_id: str,
    request_id: str,
    amount: Decimal | int | float,
    approved: bool,
    admin_notes: str | None = None,
) -> NotificationEvent:
    """Inform an artist about the outcome of a withdrawal request."""

    formatted_amount = f"฿{Decimal(str(amount)):,.2f}"
    if approved:
        return _persist_notification(
            store,
            user_id=user_id,
            notification_type="success",
            title="Withdrawal completed ✅",
            message=f"Your withdrawal request of {formatted_amount} was approved",
            reference_id=request_id,
        )

    message = f"Your withdrawal request of {formatted_amount} was not approved"
    if admin_notes:
        message = f"{message} - {admin_notes}"
    return _persist_notification(
        store,
        user_id=user_id,
        notification_type="error",
        title="Withdrawal rejected ❌",
        message=message,
        reference_id=request_id,
    )


__all__ = [
    "notify_follow",
    "notify_post_interaction",
    "notify_withdrawal_decision",
]
