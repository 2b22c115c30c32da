from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.crud.record_store import RecordStore
from backoffice.db.session import get_db
from backoffice.services.leaderboard import LeaderboardAggregator
from backoffice.services.payment_lifecycle import PaymentLifecycleManager
from backoffice.services.sales import SalesService
from backoffice.storage.receipt_store import ReceiptStore, build_receipt_store


@lru_cache
def get_receipt_store() -> ReceiptStore:
    # One storage client per process; tests override this dependency.
    return build_receipt_store()


async def get_record_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


async def get_payment_manager(
    records: RecordStore = Depends(get_record_store),
    receipts: ReceiptStore = Depends(get_receipt_store),
) -> PaymentLifecycleManager:
    return PaymentLifecycleManager(records, receipts)


async def get_sales_service(records: RecordStore = Depends(get_record_store)) -> SalesService:
    return SalesService(records)


async def get_leaderboard(records: RecordStore = Depends(get_record_store)) -> LeaderboardAggregator:
    return LeaderboardAggregator(records)
