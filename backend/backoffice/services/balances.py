# backoffice/services/balances.py
from __future__ import annotations

from typing import Optional

from backoffice.crud.record_store import RecordStore
from backoffice.models.balance import Balance


async def list_client_balances(
    records: RecordStore,
    client_name: str,
    project: Optional[str] = None,
) -> list[Balance]:
    """
    Properties on file for a client (exact name match), optionally narrowed to one project.
    These are the only (project, block & lot) pairs a client may pay against.
    """
    filters = {"client_name": client_name}
    if project is not None:
        filters["project"] = project
    return await records.query_exact(
        Balance,
        filters,
        order_by=(Balance.project, Balance.block, Balance.lot, Balance.id),
    )
