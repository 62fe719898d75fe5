"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from kosthub.application.use_cases.notifications import NotificationPipeline
from kosthub.domain.entities import User
from kosthub.infrastructure.database import get_db
from kosthub.infrastructure.repositories import UserRepository
from kosthub.infrastructure.security import verify_credential

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

INVALID_CREDENTIALS = "Invalid credentials"


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the active user behind ``token``.

    Every failure (bad signature, expiry, unknown or inactive user) yields
    the same 401 response.
    """

    try:
        subject = verify_credential(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    user = UserRepository(db).get(subject.subject_id)
    if user is None or not user.is_active:
        raise _unauthorized()
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise _unauthorized()
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def get_notification_pipeline(request: Request) -> NotificationPipeline:
    return request.app.state.pipeline
