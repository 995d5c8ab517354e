from .notification import (
    ClickResponse,
    DigestItemRead,
    DigestRead,
    MarkReadResponse,
    NotificationCreate,
    NotificationIdsRequest,
    NotificationRead,
)

__all__ = [
    "ClickResponse",
    "DigestItemRead",
    "DigestRead",
    "MarkReadResponse",
    "NotificationCreate",
    "NotificationIdsRequest",
    "NotificationRead",
]
