# backoffice/schemas/payment.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class PaymentDraft(BaseModel):
    """
    Raw submission as typed by the client or an admin.
    Required-field checks happen in the lifecycle manager so that every
    caller (HTTP or not) gets the same ValidationError.
    """
    payer_name: Optional[str] = None
    project: Optional[str] = None
    block_lot: Optional[str] = None

    amount: Optional[Decimal] = None
    penalty_amount: Optional[Decimal] = None

    payment_date: Optional[date] = None
    # a date, or "YYYY-MM"
    payment_period: Optional[Union[date, str]] = None
    due_date: Optional[str] = None

    reference_number: Optional[str] = None
    vat: Optional[str] = None


class PaymentEdit(BaseModel):
    # Only the fields that are set get written.
    payer_name: Optional[str] = None
    project: Optional[str] = None
    block_lot: Optional[str] = None

    amount: Optional[Decimal] = None
    penalty_amount: Optional[Decimal] = None

    payment_date: Optional[date] = None
    payment_period: Optional[Union[date, str]] = None
    due_date: Optional[str] = None

    reference_number: Optional[str] = None
    vat: Optional[str] = None


class PaymentFilters(BaseModel):
    payer_name: Optional[str] = None  # case-insensitive substring
    project: Optional[str] = None
    status: Optional[str] = None
    missing_ack_receipt: bool = False


class PaymentOut(BaseModel):
    id: int

    payer_name: str
    project: str
    block_lot: str

    amount: Decimal
    penalty_amount: Optional[Decimal] = None

    due_date: str
    payment_date: date
    payment_period: date

    reference_number: str
    vat: str
    status: str

    receipt_path: str
    ack_receipt_path: Optional[str] = None

    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaymentPageOut(BaseModel):
    items: List[PaymentOut]
    page: int
    page_size: int
    total: int
    total_pages: int = Field(ge=0)
