"""Derived view model grouping one or more notification events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DigestItem:
    """User facing, possibly merged, representation of notifications."""

    key: str
    type: str | None
    reference_id: str | None
    member_ids: tuple[str, ...]
    latest_created_at: datetime | None
    has_unread: bool
    has_unseen: bool
    distinct_actor_count: int
    display_title: str
    display_message: str
    latest_actor_id: str | None = None

    @property
    def count(self) -> int:
        return len(self.member_ids)


__all__ = ["DigestItem"]
