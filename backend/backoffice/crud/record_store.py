# backoffice/crud/record_store.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Iterable, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import ConcurrentModification, NotFound, StoreError
from backoffice.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _where(model: type[Base], filters: Optional[Mapping[str, Any]], extra: Iterable[Any]) -> list[Any]:
    clauses = [getattr(model, name) == value for name, value in (filters or {}).items()]
    clauses.extend(extra)
    return clauses


class RecordStore:
    """
    Thin adapter over one request-scoped AsyncSession.

    Every write commits on its own (single-shot, no cross-record transactions).
    Any SQLAlchemy failure rolls the session back and surfaces as StoreError;
    nothing is retried.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @asynccontextmanager
    async def _translate_errors(self, action: str, model: type[Base]):
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("Record store %s on %s failed", action, model.__tablename__)
            await self.db.rollback()
            raise StoreError(f"Record store {action} on {model.__tablename__} failed: {exc}") from exc

    async def insert(self, record: ModelT) -> ModelT:
        model = type(record)
        async with self._translate_errors("insert", model):
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        return record

    async def get_or_none(self, model: type[ModelT], record_id: int) -> ModelT | None:
        async with self._translate_errors("get", model):
            return await self.db.get(model, record_id, populate_existing=True)

    async def get(self, model: type[ModelT], record_id: int) -> ModelT:
        record = await self.get_or_none(model, record_id)
        if record is None:
            raise NotFound(f"{model.__name__} {record_id} not found", id=record_id)
        return record

    async def update_by_id(
        self,
        model: type[ModelT],
        record_id: int,
        fields: Mapping[str, Any],
        *,
        expected_version: int | None = None,
        action: str = "update",
    ) -> ModelT:
        """
        Partial update by primary key.

        With expected_version the row is only written if its version still
        matches; a miss on an existing row raises ConcurrentModification.
        Versioned models always get their version bumped.
        """
        values = dict(fields)
        has_version = hasattr(model, "version")
        if has_version:
            values["version"] = model.version + 1

        stmt = update(model).where(model.id == record_id)
        if expected_version is not None:
            if not has_version:
                raise TypeError(f"{model.__name__} has no version column")
            stmt = stmt.where(model.version == expected_version)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        async with self._translate_errors(action, model):
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                current = await self.db.get(model, record_id, populate_existing=True)
            else:
                await self.db.commit()
                current = None

        if result.rowcount == 0:
            if current is None:
                raise NotFound(f"{model.__name__} {record_id} not found", id=record_id)
            logger.warning(
                "Version conflict on %s %s: expected %s, found %s",
                model.__tablename__,
                record_id,
                expected_version,
                current.version,
            )
            raise ConcurrentModification(action, getattr(current, "status", ""), expected_version)

        return await self.get(model, record_id)

    async def delete_by_id(self, model: type[ModelT], record_id: int) -> None:
        async with self._translate_errors("delete", model):
            result = await self.db.execute(delete(model).where(model.id == record_id))
            await self.db.commit()
        if result.rowcount == 0:
            raise NotFound(f"{model.__name__} {record_id} not found", id=record_id)

    async def query_exact(
        self,
        model: type[ModelT],
        filters: Optional[Mapping[str, Any]] = None,
        *,
        extra: Iterable[Any] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ModelT]:
        """
        Conjunctive exact-match filters (column name -> value), plus optional
        extra SQLAlchemy predicates for the few non-exact cases (substring, IS NULL).
        """
        stmt = select(model).where(*_where(model, filters, extra))
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)

        async with self._translate_errors("query", model):
            rows = (await self.db.execute(stmt)).scalars().all()
        return list(rows)

    async def count(
        self,
        model: type[ModelT],
        filters: Optional[Mapping[str, Any]] = None,
        *,
        extra: Iterable[Any] = (),
    ) -> int:
        stmt = select(func.count()).select_from(model).where(*_where(model, filters, extra))
        async with self._translate_errors("count", model):
            total = await self.db.scalar(stmt)
        return int(total or 0)
