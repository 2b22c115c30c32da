from __future__ import annotations

import os

# Settings are read at import time; tests never touch the configured databases.
os.environ.setdefault("DATABASE_URL_ASYNC", "sqlite+aiosqlite:///./backoffice-test.db")
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite:///./backoffice-test.db")

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from backoffice.api.deps.services import get_receipt_store  # noqa: E402
from backoffice.core.errors import NotFound, StoreError  # noqa: E402
from backoffice.crud.record_store import RecordStore  # noqa: E402
from backoffice.db.session import get_db  # noqa: E402

# Ensure Base + models are registered before create_all
from backoffice.db.base import Base  # noqa: E402
import backoffice.models  # noqa: E402,F401
from backoffice.models.agent import Agent  # noqa: E402
from backoffice.models.balance import Balance  # noqa: E402
from backoffice.models.sale import Sale  # noqa: E402
from backoffice.services.payment_lifecycle import PaymentLifecycleManager  # noqa: E402

PAYER_BUCKET = "Payment Receipt"
ACK_BUCKET = "ar-receipt"


class InMemoryReceiptStore:
    """
    Receipt store double. `fail_uploads` / `fail_removes` make the next calls
    raise StoreError, to exercise the failure paths.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.fail_uploads = False
        self.fail_removes = False
        self.removed: list[tuple[str, str]] = []

    async def upload(self, bucket, path, content, *, overwrite=False, content_type=None):
        if self.fail_uploads:
            raise StoreError(f"upload to {bucket} refused")
        if (bucket, path) in self.objects and not overwrite:
            raise StoreError(f"{bucket}/{path} already exists")
        self.objects[(bucket, path)] = content
        return path

    async def download(self, bucket, path):
        try:
            return self.objects[(bucket, path)]
        except KeyError:
            raise NotFound(f"Receipt {path} not found in {bucket}") from None

    async def remove(self, bucket, path):
        if self.fail_removes:
            raise StoreError(f"remove from {bucket} refused")
        self.objects.pop((bucket, path), None)
        self.removed.append((bucket, path))


# ---------------------------------------------------------
# Database: one fresh SQLite file per test
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'backoffice.db'}",
        future=True,
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture()
async def db(sessionmaker):
    """
    Session for test setup & assertions.
    """
    async with sessionmaker() as session:
        yield session
        await session.rollback()


@pytest.fixture()
def records(db) -> RecordStore:
    return RecordStore(db)


@pytest.fixture()
def receipt_store() -> InMemoryReceiptStore:
    return InMemoryReceiptStore()


@pytest.fixture()
def manager(records, receipt_store) -> PaymentLifecycleManager:
    return PaymentLifecycleManager(
        records,
        receipt_store,
        payer_bucket=PAYER_BUCKET,
        ack_bucket=ACK_BUCKET,
        page_size=2,
    )


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker, receipt_store):
    from backoffice.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    fastapi_app.dependency_overrides[get_receipt_store] = lambda: receipt_store
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------
# HTTP client
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------
async def create_agent(db, full_name: str, status: str = "active", email: str | None = None) -> Agent:
    agent = Agent(
        full_name=full_name,
        email=email or f"{full_name.lower().replace(' ', '.').replace('..', '.')}@example.com",
        status=status,
    )
    db.add(agent)
    await db.commit()
    await db.refresh(agent)
    return agent


async def create_sale(
    db,
    seller_name: str,
    amount,
    status: str = "confirmed",
    agent_id: int | None = None,
) -> Sale:
    sale = Sale(
        agent_id=agent_id,
        seller_name=seller_name,
        buyer_name="Buyer",
        total_contract_price=Decimal(str(amount)),
        project="Living Water Subdivision",
        status=status,
    )
    db.add(sale)
    await db.commit()
    await db.refresh(sale)
    return sale


async def create_balance(db, client_name: str, project: str, block: str, lot: str) -> Balance:
    balance = Balance(
        client_name=client_name,
        project=project,
        block=block,
        lot=lot,
        total_contract_price=Decimal("1500000.00"),
        amount_paid=Decimal("300000.00"),
        remaining_balance=Decimal("1200000.00"),
        terms="60",
        due_date="15th",
    )
    db.add(balance)
    await db.commit()
    await db.refresh(balance)
    return balance


def receipt_form(**overrides) -> dict:
    form = {
        "payer_name": "Maria Santos",
        "project": "Living Water Subdivision",
        "block_lot": "Block 3 Lot 12",
        "amount": "15000.00",
        "payment_date": date(2026, 10, 5).isoformat(),
        "payment_period": "2026-10",
        "due_date": "15th",
        "reference_number": "GC-778812",
        "vat": "Non Vat",
    }
    form.update(overrides)
    return form
