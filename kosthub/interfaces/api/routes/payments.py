"""Routes for the payment receipt workflow and the income ledger."""

import logging

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from kosthub.application.use_cases.notifications import NotificationPipeline
from kosthub.application.use_cases.payments import (
    approve_receipt,
    delete_receipt as delete_receipt_uc,
    get_latest_room_receipt,
    get_receipt,
    income_report as income_report_uc,
    income_summary as income_summary_uc,
    list_all_receipts,
    list_pending_receipts,
    list_room_receipts,
    list_user_receipts,
    reject_receipt,
    submit_receipt,
)
from kosthub.domain.entities import IncomeEntry, IncomeSummary, PaymentReceipt, User
from kosthub.domain.exceptions import DomainError
from kosthub.infrastructure import storage
from kosthub.infrastructure.database import get_db
from kosthub.interfaces.api.dependencies import (
    get_current_active_user,
    get_notification_pipeline,
    require_admin,
)
from kosthub.interfaces.api.routes_helpers import to_http_error
from kosthub.interfaces.api.schemas import (
    IncomeEntryRead,
    IncomeSummaryRead,
    MonthlyIncomeRead,
    PaymentReceiptRead,
    RejectPaymentRequest,
)

router = APIRouter(prefix="/payments", tags=["payments"])
logger = logging.getLogger(__name__)


def _receipt_to_read_model(receipt: PaymentReceipt) -> PaymentReceiptRead:
    return PaymentReceiptRead(
        id=receipt.id,
        tenant_id=receipt.tenant_id,
        room_id=receipt.room_id,
        billing_month=receipt.billing_month,
        billing_year=receipt.billing_year,
        amount=receipt.amount,
        receipt_path=receipt.receipt_path,
        status=receipt.status.value,
        description=receipt.description,
        rejection_reason=receipt.rejection_reason,
        confirmed_by=receipt.confirmed_by,
        confirmed_at=receipt.confirmed_at,
        created_at=receipt.created_at,
        updated_at=receipt.updated_at,
    )


def _income_to_read_model(entry: IncomeEntry) -> IncomeEntryRead:
    return IncomeEntryRead.model_validate(entry)


def _summary_to_read_model(summary: IncomeSummary) -> IncomeSummaryRead:
    return IncomeSummaryRead(
        total_income=summary.total_income,
        income_by_month=[
            MonthlyIncomeRead.model_validate(item) for item in summary.income_by_month
        ],
    )


def _tenant_scope(user: User) -> int | None:
    return None if user.is_admin() else user.id


@router.post(
    "/upload-receipt",
    response_model=PaymentReceiptRead,
    status_code=status.HTTP_201_CREATED,
)
def upload_receipt(
    month: int = Form(...),
    year: int = Form(...),
    amount: str = Form(...),
    description: str | None = Form(None),
    receipt: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PaymentReceiptRead:
    """Upload proof of payment for a billing period of the tenant's room."""

    content = receipt.file.read()
    try:
        created = submit_receipt(
            db,
            tenant_id=current_user.id,
            month=month,
            year=year,
            amount=amount,
            file_name=receipt.filename or "",
            content=content,
            description=description,
        )
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return _receipt_to_read_model(created)


@router.get("/my-payments", response_model=list[PaymentReceiptRead])
def read_my_payments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[PaymentReceiptRead]:
    return [_receipt_to_read_model(item) for item in list_user_receipts(db, current_user.id)]


@router.get("/pending", response_model=list[PaymentReceiptRead])
def read_pending_payments(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[PaymentReceiptRead]:
    return [_receipt_to_read_model(item) for item in list_pending_receipts(db)]


@router.get("/all", response_model=list[PaymentReceiptRead])
def read_all_payments(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[PaymentReceiptRead]:
    return [_receipt_to_read_model(item) for item in list_all_receipts(db)]


@router.get("/income/report", response_model=list[IncomeEntryRead])
def read_income_report(
    year: int | None = Query(None, ge=2020),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[IncomeEntryRead]:
    """Return ledger entries, optionally for one year, newest period first."""

    return [_income_to_read_model(entry) for entry in income_report_uc(db, year=year)]


@router.get("/income/summary", response_model=IncomeSummaryRead)
def read_income_summary(
    year: int | None = Query(None, ge=2020),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> IncomeSummaryRead:
    return _summary_to_read_model(income_summary_uc(db, year=year))


@router.get("/receipts/room/{room_id}", response_model=list[PaymentReceiptRead])
def read_room_receipts(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[PaymentReceiptRead]:
    """Return receipts for a room; tenants only see their own."""

    try:
        receipts = list_room_receipts(db, room_id, tenant_id=_tenant_scope(current_user))
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return [_receipt_to_read_model(item) for item in receipts]


@router.get("/receipts/room/{room_id}/latest", response_model=PaymentReceiptRead)
def read_latest_room_receipt(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PaymentReceiptRead:
    try:
        receipt = get_latest_room_receipt(
            db, room_id, tenant_id=_tenant_scope(current_user)
        )
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return _receipt_to_read_model(receipt)


@router.get("/receipt/{receipt_id}/image")
def read_receipt_image(
    receipt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    """Stream the stored receipt image to its owner or an administrator."""

    try:
        receipt = get_receipt(db, receipt_id)
    except DomainError as exc:
        raise to_http_error(exc) from exc
    if not current_user.is_admin() and not receipt.is_owned_by(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    try:
        content = storage.load_receipt(receipt.receipt_path)
    except FileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Receipt image not found"
        ) from exc
    return Response(content=content, media_type=storage.content_type_for(receipt.receipt_path))


@router.delete("/receipt/{receipt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_receipt(
    receipt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    """Delete a receipt that has not been approved."""

    try:
        delete_receipt_uc(
            db,
            receipt_id,
            requester_id=current_user.id,
            requester_is_admin=current_user.is_admin(),
        )
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{receipt_id}", response_model=PaymentReceiptRead)
def read_payment(
    receipt_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PaymentReceiptRead:
    try:
        receipt = get_receipt(db, receipt_id)
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return _receipt_to_read_model(receipt)


@router.post("/{receipt_id}/approve", response_model=PaymentReceiptRead)
def approve_payment(
    receipt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> PaymentReceiptRead:
    """Approve a pending receipt and record it in the income ledger."""

    try:
        receipt = approve_receipt(db, receipt_id, current_user.id, pipeline=pipeline)
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return _receipt_to_read_model(receipt)


@router.post("/{receipt_id}/reject", response_model=PaymentReceiptRead)
def reject_payment(
    receipt_id: int,
    payload: RejectPaymentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
) -> PaymentReceiptRead:
    """Reject a pending receipt; the reason is sent to the tenant."""

    try:
        receipt = reject_receipt(
            db,
            receipt_id,
            current_user.id,
            payload.rejection_reason,
            pipeline=pipeline,
        )
    except DomainError as exc:
        raise to_http_error(exc) from exc
    return _receipt_to_read_model(receipt)


__all__ = ["router"]
