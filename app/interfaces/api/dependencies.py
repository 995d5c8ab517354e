"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.domain.entities import SessionContext
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import SqlNotificationStore, notification_feed
from app.infrastructure.security import session_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def resolve_session(token: str) -> SessionContext:
    """Resolve the authenticated session for the provided token."""

    try:
        return session_from_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_session(token: str = Depends(oauth2_scheme)) -> SessionContext:
    """Return the authenticated session from the bearer token."""

    return resolve_session(token)


def get_notification_store() -> SqlNotificationStore:
    """Return the store bound to the application database and change feed."""

    return SqlNotificationStore(SessionLocal, notification_feed)
