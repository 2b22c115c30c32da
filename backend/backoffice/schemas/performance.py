# backoffice/schemas/performance.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class CommissionTierOut(BaseModel):
    threshold: Decimal
    allowance: Decimal
    label: str

    class Config:
        from_attributes = True


class LeaderboardEntryOut(BaseModel):
    rank: int
    agent_id: int
    full_name: str
    total_confirmed: Decimal
    confirmed_sales: int

    class Config:
        from_attributes = True


class LeaderboardOut(BaseModel):
    items: List[LeaderboardEntryOut]
    total_agents: int


class AgentStandingOut(BaseModel):
    agent_id: int
    full_name: str
    status: str

    total_confirmed: Decimal
    confirmed_sales: int
    # None for agents that are not active (they are not ranked)
    rank: Optional[int] = None

    current_tier: CommissionTierOut
    next_tier: Optional[CommissionTierOut] = None
    progress_percent: Decimal
    remaining_to_next_tier: Decimal

    class Config:
        from_attributes = True
