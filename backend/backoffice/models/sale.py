# backoffice/models/sale.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from backoffice.db.base import Base


class Sale(Base):
    __tablename__ = "sales"
    __table_args__ = (
        Index("ix_sales_status_agent", "status", "agent_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Captured at creation. Legacy rows only carry seller_name.
    agent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    seller_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    buyer_name: Mapped[str] = mapped_column(String(200), nullable=False)

    total_contract_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    project: Mapped[str] = mapped_column(String(200), nullable=False)
    block: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    lot: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    reservation_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    receipt_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    secondary_receipt_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # pending | confirmed | rejected
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", server_default="pending", index=True)

    # bumped on every status write (optimistic concurrency)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
