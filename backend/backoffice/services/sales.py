# backoffice/services/sales.py
from __future__ import annotations

import logging
from typing import Optional

from backoffice.core.errors import InvalidTransition, ValidationError
from backoffice.core.statuses import AgentStatus, SaleStatus
from backoffice.crud.record_store import RecordStore
from backoffice.models.agent import Agent
from backoffice.models.sale import Sale
from backoffice.schemas.sale import SaleCreate

logger = logging.getLogger(__name__)


class SalesService:
    """
    Agent-recorded sales. Status moves pending -> confirmed | rejected,
    admin-driven, once. Confirmed sales are never updated again.
    """

    def __init__(self, records: RecordStore) -> None:
        self.records = records

    async def _resolve_seller(self, payload: SaleCreate) -> tuple[Optional[int], str]:
        if payload.agent_id is not None:
            agent = await self.records.get(Agent, payload.agent_id)
            return agent.id, agent.full_name

        seller_name = payload.seller_name
        if seller_name is None or not seller_name.strip():
            raise ValidationError("seller_name", "seller_name or agent_id is required.")

        # Legacy matching: exact full name, case and whitespace included.
        matches = await self.records.query_exact(
            Agent,
            {"full_name": seller_name, "status": AgentStatus.ACTIVE.value},
            order_by=(Agent.id,),
        )
        if not matches:
            return None, seller_name
        if len(matches) > 1:
            # Same tie-break as the leaderboard: first agent in enumeration order.
            logger.warning("Seller name %r matches %d active agents; using agent %s", seller_name, len(matches), matches[0].id)
        return matches[0].id, seller_name

    async def create_sale(self, payload: SaleCreate) -> Sale:
        if payload.buyer_name is None or not payload.buyer_name.strip():
            raise ValidationError("buyer_name", "buyer_name is required.")
        if payload.total_contract_price is None:
            raise ValidationError("total_contract_price", "total_contract_price is required.")
        if payload.total_contract_price <= 0:
            raise ValidationError("total_contract_price", "total_contract_price must be greater than zero.")
        if payload.project is None or not payload.project.strip():
            raise ValidationError("project", "project is required.")

        agent_id, seller_name = await self._resolve_seller(payload)

        sale = Sale(
            agent_id=agent_id,
            seller_name=seller_name,
            buyer_name=payload.buyer_name.strip(),
            total_contract_price=payload.total_contract_price,
            project=payload.project.strip(),
            block=payload.block,
            lot=payload.lot,
            reservation_date=payload.reservation_date,
            receipt_path=payload.receipt_path,
            secondary_receipt_path=payload.secondary_receipt_path,
            status=SaleStatus.PENDING.value,
        )
        sale = await self.records.insert(sale)
        logger.info("Sale %s recorded for %s (agent %s)", sale.id, seller_name, agent_id)
        return sale

    async def _decide(self, sale_id: int, action: str, target: SaleStatus) -> Sale:
        sale = await self.records.get(Sale, sale_id)
        if sale.status != SaleStatus.PENDING.value:
            raise InvalidTransition(action, sale.status)
        updated = await self.records.update_by_id(
            Sale,
            sale_id,
            {"status": target.value},
            expected_version=sale.version,
            action=action,
        )
        logger.info("Sale %s %s", sale_id, target.value)
        return updated

    async def confirm_sale(self, sale_id: int) -> Sale:
        return await self._decide(sale_id, "confirm", SaleStatus.CONFIRMED)

    async def reject_sale(self, sale_id: int) -> Sale:
        return await self._decide(sale_id, "reject", SaleStatus.REJECTED)

    async def get_sale(self, sale_id: int) -> Sale:
        return await self.records.get(Sale, sale_id)

    async def list_sales(self, status: Optional[str] = None, agent_id: Optional[int] = None) -> list[Sale]:
        filters: dict = {}
        if status:
            filters["status"] = status
        if agent_id is not None:
            filters["agent_id"] = agent_id
        return await self.records.query_exact(Sale, filters, order_by=(Sale.created_at.desc(), Sale.id.desc()))
