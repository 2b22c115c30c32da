# backoffice/api/v1/clients.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from backoffice.api.deps.services import get_payment_manager, get_record_store
from backoffice.crud.record_store import RecordStore
from backoffice.schemas.balance import BalanceOut
from backoffice.schemas.payment import PaymentOut
from backoffice.services.balances import list_client_balances
from backoffice.services.payment_lifecycle import PaymentLifecycleManager

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/{client_name}/payments", response_model=List[PaymentOut])
async def list_client_payments(
    client_name: str,
    manager: PaymentLifecycleManager = Depends(get_payment_manager),
):
    return await manager.list_client_payments(client_name)


@router.get("/{client_name}/balances", response_model=List[BalanceOut])
async def get_client_balances(
    client_name: str,
    records: RecordStore = Depends(get_record_store),
):
    """Properties a client may submit payments against."""
    return await list_client_balances(records, client_name)
