# backoffice/models/payment.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from backoffice.db.base import Base


class Payment(Base):
    """
    Client-submitted proof of a periodic payment against a property balance.

    Stores:
      - receipt_path: payer receipt, in the payer-receipt bucket (required)
      - ack_receipt_path: acknowledgment receipt, in its own bucket,
        attached by an admin once the payment is Approved
      - version: optimistic-concurrency counter, bumped on every write
      - deleted_at: soft delete marker (status is "Deleted" as well)
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index("ix_payments_status_created", "status", "created_at"),
        Index("ix_payments_payer_project", "payer_name", "project"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    payer_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    project: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    # rendered as "Block {block} Lot {lot}"
    block_lot: Mapped[str] = mapped_column(String(100), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    penalty_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

    # 15th | 30th
    due_date: Mapped[str] = mapped_column(String(10), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    # always the first day of the month being paid
    payment_period: Mapped[date] = mapped_column(Date, nullable=False)

    reference_number: Mapped[str] = mapped_column(String(100), nullable=False)
    vat: Mapped[str] = mapped_column(String(20), nullable=False, default="Non Vat", server_default="Non Vat")

    # Pending | Approved | Rejected | Deleted
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending", server_default="Pending", index=True)

    receipt_path: Mapped[str] = mapped_column(String(500), nullable=False)
    ack_receipt_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
