# backoffice/schemas/sale.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class SaleCreate(BaseModel):
    """
    Either agent_id (preferred) or seller_name must identify the seller.
    A bare seller_name is matched exactly against active agents.
    """
    agent_id: Optional[int] = None
    seller_name: Optional[str] = None
    buyer_name: Optional[str] = None

    total_contract_price: Optional[Decimal] = None

    project: Optional[str] = None
    block: Optional[str] = None
    lot: Optional[str] = None
    reservation_date: Optional[date] = None

    receipt_path: Optional[str] = None
    secondary_receipt_path: Optional[str] = None


class SaleOut(BaseModel):
    id: int
    agent_id: Optional[int] = None
    seller_name: str
    buyer_name: str

    total_contract_price: Decimal

    project: str
    block: Optional[str] = None
    lot: Optional[str] = None
    reservation_date: Optional[date] = None

    receipt_path: Optional[str] = None
    secondary_receipt_path: Optional[str] = None

    status: str
    version: int
    created_at: datetime

    class Config:
        from_attributes = True
