# backoffice/api/v1/sales.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from backoffice.api.deps.services import get_sales_service
from backoffice.schemas.sale import SaleCreate, SaleOut
from backoffice.services.sales import SalesService

router = APIRouter(prefix="/sales", tags=["sales"])


@router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
async def create_sale(payload: SaleCreate, service: SalesService = Depends(get_sales_service)):
    return await service.create_sale(payload)


@router.get("", response_model=List[SaleOut])
async def list_sales(
    status_filter: Optional[str] = Query(None, alias="status"),
    agent_id: Optional[int] = Query(None),
    service: SalesService = Depends(get_sales_service),
):
    return await service.list_sales(status=status_filter, agent_id=agent_id)


@router.get("/{sale_id}", response_model=SaleOut)
async def get_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    return await service.get_sale(sale_id)


@router.post("/{sale_id}/confirm", response_model=SaleOut)
async def confirm_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    return await service.confirm_sale(sale_id)


@router.post("/{sale_id}/reject", response_model=SaleOut)
async def reject_sale(sale_id: int, service: SalesService = Depends(get_sales_service)):
    return await service.reject_sale(sale_id)
