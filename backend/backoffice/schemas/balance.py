# backoffice/schemas/balance.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class BalanceOut(BaseModel):
    id: int
    client_name: str
    project: str
    block: str
    lot: str
    block_lot: str

    total_contract_price: Optional[Decimal] = None
    amount_paid: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None
    monthly_amortization: Optional[Decimal] = None

    months_paid: Optional[str] = None
    terms: Optional[str] = None
    due_date: Optional[str] = None

    sqm: Optional[Decimal] = None
    price_per_sqm: Optional[Decimal] = None

    class Config:
        from_attributes = True
