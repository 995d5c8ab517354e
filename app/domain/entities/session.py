"""Explicit authenticated session passed to per-user services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Identity of the user owning a digest or issuing a request."""

    user_id: str


__all__ = ["SessionContext"]
