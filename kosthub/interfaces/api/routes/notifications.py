"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from kosthub.application.use_cases.notifications import (
    NotificationPipeline,
    ReminderSweepResult,
    count_unread_notifications,
    list_notifications as list_notifications_uc,
    list_unread_notifications as list_unread_notifications_uc,
    mark_all_notifications_read,
    mark_notification_read,
    send_payment_reminders,
)
from kosthub.domain.entities import Notification, NotificationKind, User
from kosthub.domain.exceptions import DomainError
from kosthub.infrastructure.database import SessionLocal, get_db
from kosthub.infrastructure.notifications import UNREAD_COUNT_EVENT
from kosthub.interfaces.api.dependencies import (
    get_current_active_user,
    get_notification_pipeline,
    require_admin,
    resolve_current_user,
)
from kosthub.interfaces.api.routes_helpers import to_http_error
from kosthub.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationRead,
    ReminderSweepRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.user_id,
        kind=notification.kind.value,
        title=notification.title,
        message=notification.message,
        is_read=notification.is_read,
        billing_month=notification.billing_month,
        billing_year=notification.billing_year,
        created_at=notification.created_at,
    )


def _sweep_to_schema(result: ReminderSweepResult) -> ReminderSweepRead:
    return ReminderSweepRead(
        run_date=result.run_date,
        billing_month=result.period.month,
        billing_year=result.period.year,
        examined=result.examined,
        sent=result.sent,
        not_due=result.not_due,
        already_paid=result.already_paid,
        already_notified=result.already_notified,
        failed=result.failed,
        notified_user_ids=result.notified_user_ids,
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return every notification of the authenticated user, newest first."""

    notifications = list_notifications_uc(db, current_user.id)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread", response_model=list[NotificationRead])
def list_unread_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    notifications = list_unread_notifications_uc(db, current_user.id)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread/count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    return UnreadCountRead(count=count_unread_notifications(db, current_user.id))


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> MarkAllReadResponse:
    """Mark every unread notification of the authenticated user as read."""

    updated = mark_all_notifications_read(db, user_id=current_user.id, pipeline=pipeline)
    return MarkAllReadResponse(updated=updated, count=0)


@router.patch("/{notification_id}/read", response_model=UnreadCountRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> UnreadCountRead:
    """Mark one notification as read and return the remaining unread count."""

    try:
        count = mark_notification_read(
            db,
            notification_id=notification_id,
            user_id=current_user.id,
            pipeline=pipeline,
        )
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return UnreadCountRead(count=count)


@router.post("/trigger-payment-reminders", response_model=ReminderSweepRead)
def trigger_payment_reminders(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> ReminderSweepRead:
    """Run the payment reminder sweep now instead of waiting for the schedule."""

    logger.info("Payment reminder sweep triggered manually by admin %s", current_user.id)
    result = send_payment_reminders(db, pipeline=pipeline)
    return _sweep_to_schema(result)


@router.post(
    "/test", response_model=NotificationRead, status_code=status.HTTP_201_CREATED
)
def send_test_notification(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> NotificationRead:
    """Create a notification for the caller to check the realtime channel."""

    notification = pipeline.create_notification(
        db,
        user_id=current_user.id,
        kind=NotificationKind.PAYMENT_REMINDER,
        title="Test Notification",
        message="This is a test notification from the server",
    )
    return _notification_to_schema(notification)


def _authenticate_websocket(websocket: WebSocket, token: str) -> tuple[User, int]:
    factory = getattr(websocket.app.state, "session_factory", None) or SessionLocal
    session = factory()
    try:
        user = resolve_current_user(token, session)
        return user, count_unread_notifications(session, user.id)
    finally:
        session.close()


async def _handle_client_message(
    websocket: WebSocket,
    message: dict[str, Any],
    *,
    user: User,
    pipeline: NotificationPipeline,
) -> None:
    message_type = message.get("type")
    if message_type == "ping":
        await websocket.send_json({"type": "pong"})
        return

    if message_type not in {"mark_as_read", "mark_all_as_read"}:
        return

    factory = getattr(websocket.app.state, "session_factory", None) or SessionLocal
    session = factory()
    try:
        if message_type == "mark_as_read":
            try:
                notification_id = int(message.get("id"))
            except (TypeError, ValueError):
                await websocket.send_json(
                    {"type": "error", "data": {"detail": "Notification id is required"}}
                )
                return
            count = mark_notification_read(
                session, notification_id=notification_id, user_id=user.id
            )
        else:
            mark_all_notifications_read(session, user_id=user.id)
            count = 0
    except DomainError as exc:
        await websocket.send_json({"type": "error", "data": {"detail": str(exc)}})
        return
    finally:
        session.close()

    # every tab of the user, this one included, learns the new count
    await pipeline.publisher.hub.push(user.id, UNREAD_COUNT_EVENT, {"count": count})


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=POLICY_VIOLATION)
        return

    try:
        user, unread = _authenticate_websocket(websocket, token)
    except HTTPException:
        await websocket.close(code=POLICY_VIOLATION)
        return
    except Exception:
        logger.exception("Websocket authentication failed unexpectedly")
        await websocket.close(code=INTERNAL_ERROR)
        return

    pipeline: NotificationPipeline = websocket.app.state.pipeline
    hub = pipeline.publisher.hub
    handle = await hub.connect(user.id, websocket)
    try:
        await websocket.send_json({"type": "connected", "data": {"user_id": user.id}})
        await websocket.send_json({"type": UNREAD_COUNT_EVENT, "data": {"count": unread}})
        while True:
            try:
                message = await websocket.receive_json()
            except (KeyError, ValueError):
                continue
            if not isinstance(message, dict):
                continue
            await _handle_client_message(websocket, message, user=user, pipeline=pipeline)
    except WebSocketDisconnect:
        logger.debug("Websocket closed by user %s", user.id)
    finally:
        hub.unregister(handle)


__all__ = ["router"]
