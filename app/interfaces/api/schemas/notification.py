"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class NotificationIdsRequest(BaseModel):
    """Payload identifying the members of a digest item."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[str] = []
        seen: set[str] = set()
        for notification_id in self.ids:
            if notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationCreate(BaseModel):
    """Notification emitted by the authenticated user towards ``user_id``."""

    user_id: str = Field(..., min_length=1, max_length=36)
    type: str = Field(default="info", min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    reference_id: str | None = Field(default=None, max_length=64)


class NotificationRead(BaseModel):
    """Representation of a raw notification delivered to the client."""

    id: str
    user_id: str
    actor_id: str | None = None
    type: str | None = None
    reference_id: str | None = None
    title: str
    message: str
    is_read: bool
    is_clicked: bool
    created_at: datetime | None = None


class DigestItemRead(BaseModel):
    """A possibly merged group of notifications."""

    key: str
    type: str | None = None
    reference_id: str | None = None
    member_ids: list[str]
    count: int
    latest_created_at: datetime | None = None
    relative_time: str
    has_unread: bool
    has_unseen: bool
    distinct_actor_count: int
    display_title: str
    display_message: str
    target: str | None = None


class DigestRead(BaseModel):
    """Digest snapshot with the raw unread count for the badge."""

    items: list[DigestItemRead]
    badge_count: int
    badge_label: str
    is_open: bool = False


class MarkReadResponse(BaseModel):
    updated: int


class ClickResponse(BaseModel):
    target: str | None = None


__all__ = [
    "ClickResponse",
    "DigestItemRead",
    "DigestRead",
    "MarkReadResponse",
    "NotificationCreate",
    "NotificationIdsRequest",
    "NotificationRead",
]
