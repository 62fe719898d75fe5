"""Shared fixtures: an in-memory database, seed helpers and fakes."""

from __future__ import annotations

import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["APP_TIMEZONE"] = "Asia/Jakarta"
for _name in (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "AZURE_STORAGE_CONNECTION_STRING",
    "AZURE_STORAGE_CONTAINER_NAME",
):
    os.environ.pop(_name, None)

from kosthub.application.use_cases.notifications import NotificationPipeline
from kosthub.config import reset_settings_cache
from kosthub.domain.entities import ROLE_ADMIN, ROLE_TENANT
from kosthub.infrastructure import storage
from kosthub.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from kosthub.infrastructure.models import (
    PaymentReceiptModel,
    RoleModel,
    RoomModel,
    UserModel,
)
from kosthub.infrastructure.security import create_access_token

reset_settings_cache()


class RecordingPublisher:
    """Publisher double that keeps every event instead of pushing it."""

    def __init__(self, *, fail: bool = False) -> None:
        self.events: list[tuple[int, str, object]] = []
        self.fail = fail
        self.hub = None

    def publish_notification(self, notification) -> None:
        self.send(notification.user_id, "notification", notification)

    def publish_unread_count(self, user_id: int, count: int) -> None:
        self.send(user_id, "unread_count", {"count": count})

    def send(self, user_id, event, payload) -> None:
        if self.fail:
            raise RuntimeError("hub unavailable")
        self.events.append((user_id, event, payload))

    def of_type(self, event: str) -> list[tuple[int, str, object]]:
        return [item for item in self.events if item[1] == event]


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def pipeline(publisher) -> NotificationPipeline:
    return NotificationPipeline(publisher)


@pytest.fixture()
def blob_store(monkeypatch: pytest.MonkeyPatch) -> dict[str, bytes]:
    """Replace the Azure blob calls with an in-memory dictionary."""

    blobs: dict[str, bytes] = {}

    def _store(path: str, data: bytes) -> None:
        blobs[path] = data

    def _load(path: str) -> bytes:
        if path not in blobs:
            raise FileNotFoundError(path)
        return blobs[path]

    def _delete(path: str) -> None:
        blobs.pop(path, None)

    monkeypatch.setattr(storage, "store_receipt", _store)
    monkeypatch.setattr(storage, "load_receipt", _load)
    monkeypatch.setattr(storage, "delete_receipt", _delete)
    return blobs


def _role(session, alias: str) -> RoleModel:
    role = session.query(RoleModel).filter(RoleModel.alias == alias).first()
    if role is None:
        role = RoleModel(name=alias.title(), alias=alias)
        session.add(role)
        session.flush()
    return role


def create_user(
    session,
    *,
    name: str = "Tenant",
    email: str | None = None,
    role: str = ROLE_TENANT,
    is_active: bool = True,
) -> UserModel:
    user = UserModel(
        role_id=_role(session, role).id,
        name=name,
        email=email or f"{name.lower().replace(' ', '.')}@example.com",
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    return user


def create_room(
    session,
    *,
    name: str = "A1",
    price: Decimal | str = Decimal("1500000"),
    tenant_id: int | None = None,
    rent_start_date: date | None = None,
    is_active: bool = True,
) -> RoomModel:
    room = RoomModel(
        name=name,
        price=Decimal(str(price)),
        tenant_id=tenant_id,
        rent_start_date=rent_start_date,
        is_active=is_active,
    )
    session.add(room)
    session.commit()
    return room


def create_receipt(
    session,
    *,
    tenant_id: int,
    room_id: int,
    month: int = 10,
    year: int = 2025,
    amount: Decimal | str = Decimal("1500000"),
    status: str = "pending",
    description: str | None = None,
) -> PaymentReceiptModel:
    receipt = PaymentReceiptModel(
        tenant_id=tenant_id,
        room_id=room_id,
        billing_month=month,
        billing_year=year,
        amount=Decimal(str(amount)),
        receipt_path=f"payment-receipts/receipt-{tenant_id}-{month}-{year}.png",
        status=status,
        description=description,
    )
    session.add(receipt)
    session.commit()
    return receipt


def auth_headers(user: UserModel) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def admin(session) -> UserModel:
    return create_user(session, name="Admin", email="admin@example.com", role=ROLE_ADMIN)


@pytest.fixture()
def tenant(session) -> UserModel:
    return create_user(session, name="Budi", email="budi@example.com")


@pytest.fixture()
def tenant_room(session, tenant) -> RoomModel:
    return create_room(
        session,
        name="A1",
        tenant_id=tenant.id,
        rent_start_date=date(2025, 1, 5),
    )


@pytest.fixture()
def app(session_factory):
    from main import create_app

    return create_app(session_factory=session_factory, start_scheduler=False)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
