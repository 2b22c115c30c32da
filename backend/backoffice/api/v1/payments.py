# backoffice/api/v1/payments.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from backoffice.api.deps.services import get_payment_manager
from backoffice.core.statuses import ReceiptKind
from backoffice.schemas.payment import PaymentDraft, PaymentEdit, PaymentFilters, PaymentOut, PaymentPageOut
from backoffice.services.payment_lifecycle import PaymentLifecycleManager, ReceiptFile
from backoffice.storage.receipt_store import guess_content_type

router = APIRouter(prefix="/payments", tags=["payments"])


async def _read_upload(upload: Optional[UploadFile]) -> Optional[ReceiptFile]:
    if upload is None:
        return None
    content = await upload.read()
    return ReceiptFile(filename=upload.filename or "", content=content, content_type=upload.content_type)


@router.post("", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
async def submit_payment(
    receipt: Optional[UploadFile] = File(None),
    payer_name: Optional[str] = Form(None),
    project: Optional[str] = Form(None),
    block_lot: Optional[str] = Form(None),
    amount: Optional[Decimal] = Form(None),
    penalty_amount: Optional[Decimal] = Form(None),
    payment_date: Optional[date] = Form(None),
    payment_period: Optional[str] = Form(None),
    due_date: Optional[str] = Form(None),
    reference_number: Optional[str] = Form(None),
    vat: Optional[str] = Form(None),
    manager: PaymentLifecycleManager = Depends(get_payment_manager),
):
    """
    Client receipt upload (multipart). The receipt is stored first, then the
    payment row is created as Pending.
    """
    draft = PaymentDraft(
        payer_name=payer_name,
        project=project,
        block_lot=block_lot,
        amount=amount,
        penalty_amount=penalty_amount,
        payment_date=payment_date,
        payment_period=payment_period,
        due_date=due_date,
        reference_number=reference_number,
        vat=vat,
    )
    return await manager.submit_payment(draft, await _read_upload(receipt))


@router.get("", response_model=PaymentPageOut)
async def list_payments(
    payer_name: Optional[str] = Query(None),
    project: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    missing_ack_receipt: bool = Query(False),
    page: int = Query(1, ge=1),
    manager: PaymentLifecycleManager = Depends(get_payment_manager),
):
    filters = PaymentFilters(
        payer_name=payer_name,
        project=project,
        status=status_filter,
        missing_ack_receipt=missing_ack_receipt,
    )
    result = await manager.list_payments(filters, page=page)
    return PaymentPageOut(
        items=[PaymentOut.model_validate(p) for p in result.items],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        total_pages=result.total_pages,
    )


@router.get("/{payment_id}", response_model=PaymentOut)
async def get_payment(payment_id: int, manager: PaymentLifecycleManager = Depends(get_payment_manager)):
    return await manager.get_payment(payment_id)


@router.get("/{payment_id}/receipt")
async def download_receipt(
    payment_id: int,
    kind: ReceiptKind = Query(ReceiptKind.PAYER),
    manager: PaymentLifecycleManager = Depends(get_payment_manager),
):
    path, content = await manager.get_receipt(payment_id, kind)
    return Response(content=content, media_type=guess_content_type(path))


@router.patch("/{payment_id}", response_model=PaymentOut)
async def edit_payment(
    payment_id: int,
    payload: PaymentEdit,
    manager: PaymentLifecycleManager = Depends(get_payment_manager),
):
    return await manager.edit_details(payment_id, payload)


@router.post("/{payment_id}/approve", response_model=PaymentOut)
async def approve_payment(payment_id: int, manager: PaymentLifecycleManager = Depends(get_payment_manager)):
    return await manager.approve(payment_id)


@router.post("/{payment_id}/reject", response_model=PaymentOut)
async def reject_payment(payment_id: int, manager: PaymentLifecycleManager = Depends(get_payment_manager)):
    return await manager.reject(payment_id)


@router.post("/{payment_id}/ack-receipt", response_model=PaymentOut)
async def attach_ack_receipt(
    payment_id: int,
    receipt: Optional[UploadFile] = File(None),
    manager: PaymentLifecycleManager = Depends(get_payment_manager),
):
    return await manager.attach_acknowledgment_receipt(payment_id, await _read_upload(receipt))


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(payment_id: int, manager: PaymentLifecycleManager = Depends(get_payment_manager)):
    await manager.delete_payment(payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
