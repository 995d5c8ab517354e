"""Endpoints and websocket handler for the notification digest."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from app.application.use_cases.notifications import NotificationDigest
from app.config import get_settings
from app.domain.entities import NotificationEvent, SessionContext
from app.infrastructure.notifications import (
    DigestPublisher,
    SqlNotificationStore,
    notification_manager,
    serialize_digest,
    serialize_notification,
)
from app.interfaces.api.dependencies import (
    get_current_session,
    get_notification_store,
    resolve_session,
)
from app.interfaces.api.schemas import (
    ClickResponse,
    DigestRead,
    MarkReadResponse,
    NotificationCreate,
    NotificationIdsRequest,
    NotificationRead,
)
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: NotificationEvent) -> NotificationRead:
    return NotificationRead(**serialize_notification(notification))


def _build_digest(
    session: SessionContext, store: SqlNotificationStore
) -> NotificationDigest:
    settings = get_settings()
    return NotificationDigest(
        session,
        store,
        limit=settings.notification_fetch_limit,
        poll_interval=settings.notification_poll_interval_seconds,
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    session: SessionContext = Depends(get_current_session),
    store: SqlNotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    notifications = store.list(
        session.user_id, limit=get_settings().notification_fetch_limit
    )
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/digest", response_model=DigestRead)
def get_digest(
    session: SessionContext = Depends(get_current_session),
    store: SqlNotificationStore = Depends(get_notification_store),
) -> DigestRead:
    """Return the folded digest and the raw unread count."""

    digest = _build_digest(session, store)
    if not digest.refresh():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notifications are temporarily unavailable",
        )
    return DigestRead(**serialize_digest(digest, now=now_in_app_timezone()))


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    session: SessionContext = Depends(get_current_session),
    store: SqlNotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    """Record a notification for ``payload.user_id`` triggered by the caller."""

    saved = store.insert(
        NotificationEvent(
            id=None,
            user_id=payload.user_id,
            actor_id=session.user_id,
            type=payload.type,
            reference_id=payload.reference_id,
            title=payload.title,
            message=payload.message,
            created_at=now_in_app_timezone(),
        )
    )
    return _notification_to_schema(saved)


@router.post("/read-all", response_model=MarkReadResponse)
def mark_all_read(
    session: SessionContext = Depends(get_current_session),
    store: SqlNotificationStore = Depends(get_notification_store),
) -> MarkReadResponse:
    """Mark every unread notification of the caller as read."""

    return MarkReadResponse(updated=store.mark_all_read(session.user_id))


@router.post("/click", response_model=ClickResponse)
def click_notifications(
    payload: NotificationIdsRequest,
    session: SessionContext = Depends(get_current_session),
    store: SqlNotificationStore = Depends(get_notification_store),
) -> ClickResponse:
    """Mark the members of a digest item as clicked and return where to go."""

    digest = _build_digest(session, store)
    digest.refresh()
    return ClickResponse(target=digest.mark_group_clicked(payload.unique_ids()))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    session: SessionContext = Depends(get_current_session),
    store: SqlNotificationStore = Depends(get_notification_store),
) -> Response:
    """Delete one of the caller's notifications."""

    if store.delete(notification_id, user_id=session.user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams the digest of the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        session = resolve_session(token)
    except HTTPException:
        await websocket.close(code=1008)
        return

    await notification_manager.connect(session.user_id, websocket)
    settings = get_settings()
    digest = NotificationDigest(
        session,
        get_notification_store(),
        limit=settings.notification_fetch_limit,
        poll_interval=settings.notification_poll_interval_seconds,
        on_change=DigestPublisher(websocket, notification_manager),
    )
    if not await digest.start_async():
        # Listeners only fire on changes; still give the client its badge.
        await websocket.send_json({"type": "digest", "data": serialize_digest(digest)})

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "open":
                await digest.open()
            elif message_type == "close":
                await digest.close()
            elif message_type == "click":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    target = await digest.mark_group_clicked_async(str(i) for i in ids)
                    await websocket.send_json({"type": "navigate", "data": {"target": target}})
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", session.user_id)
    finally:
        await digest.shutdown()
        notification_manager.disconnect(session.user_id, websocket)
