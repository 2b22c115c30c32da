# backoffice/models/balance.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.db.base import Base


class Balance(Base):
    # Per-property ledger snapshot. Read-only input for this service.
    __tablename__ = "balances"
    __table_args__ = (
        Index("ix_balances_client_project_block_lot", "client_name", "project", "block", "lot"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    client_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    project: Mapped[str] = mapped_column(String(200), nullable=False)
    block: Mapped[str] = mapped_column(String(20), nullable=False)
    lot: Mapped[str] = mapped_column(String(20), nullable=False)

    total_contract_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    amount_paid: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    remaining_balance: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    monthly_amortization: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

    months_paid: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    terms: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    due_date: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    sqm: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    price_per_sqm: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

    @property
    def block_lot(self) -> str:
        return self.block_lot_label(self.block, self.lot)

    @staticmethod
    def block_lot_label(block: str, lot: str) -> str:
        # Canonical rendering shared with Payment.block_lot
        return f"Block {block} Lot {lot}"
