# backoffice/services/leaderboard.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from backoffice.core.commission_tiers import CommissionTier, TierSchedule, default_schedule
from backoffice.core.statuses import AgentStatus, SaleStatus
from backoffice.crud.record_store import RecordStore
from backoffice.models.agent import Agent
from backoffice.models.sale import Sale

# The one predicate shared by the leaderboard and every per-agent total.
PARTICIPATING_AGENT = {"status": AgentStatus.ACTIVE.value}
COUNTED_SALE = {"status": SaleStatus.CONFIRMED.value}


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    agent_id: int
    full_name: str
    total_confirmed: Decimal
    confirmed_sales: int


@dataclass(frozen=True)
class AgentStanding:
    agent_id: int
    full_name: str
    status: str
    total_confirmed: Decimal
    confirmed_sales: int
    rank: Optional[int]
    current_tier: CommissionTier
    next_tier: Optional[CommissionTier]
    progress_percent: Decimal
    remaining_to_next_tier: Decimal


def rank_agents(agents: Sequence[Agent], confirmed_sales: Sequence[Sale]) -> list[LeaderboardEntry]:
    """
    Rank active agents by confirmed sales total.

    - every agent starts at zero, so agents without sales are still listed
    - a sale counts for the agent whose id it captured; legacy sales without an
      agent_id count for the first agent whose full_name equals seller_name exactly
    - sales that match no agent are dropped
    - ties keep the agents' enumeration order (sorted() is stable)
    """
    totals: dict[int, Decimal] = {}
    counts: dict[int, int] = {}
    by_name: dict[str, int] = {}
    for agent in agents:
        totals[agent.id] = Decimal("0")
        counts[agent.id] = 0
        by_name.setdefault(agent.full_name, agent.id)

    for sale in confirmed_sales:
        if sale.agent_id is not None:
            agent_id = sale.agent_id if sale.agent_id in totals else None
        else:
            agent_id = by_name.get(sale.seller_name)
        if agent_id is None:
            continue
        totals[agent_id] += Decimal(sale.total_contract_price)
        counts[agent_id] += 1

    ordered = sorted(agents, key=lambda a: totals[a.id], reverse=True)
    return [
        LeaderboardEntry(
            rank=position,
            agent_id=agent.id,
            full_name=agent.full_name,
            total_confirmed=totals[agent.id],
            confirmed_sales=counts[agent.id],
        )
        for position, agent in enumerate(ordered, start=1)
    ]


class LeaderboardAggregator:
    """
    Reads agents and confirmed sales fresh on every call; nothing is cached
    and store failures propagate instead of yielding an empty ranking.
    """

    def __init__(self, records: RecordStore, schedule: TierSchedule = default_schedule) -> None:
        self.records = records
        self.schedule = schedule

    async def leaderboard(self, limit: Optional[int] = None) -> list[LeaderboardEntry]:
        agents = await self.records.query_exact(Agent, PARTICIPATING_AGENT, order_by=(Agent.id,))
        sales = await self.records.query_exact(Sale, COUNTED_SALE, order_by=(Sale.id,))
        ranked = rank_agents(agents, sales)
        return ranked if limit is None else ranked[:limit]

    async def cumulative_confirmed_sales(self, agent_id: int) -> Decimal:
        for entry in await self.leaderboard():
            if entry.agent_id == agent_id:
                return entry.total_confirmed
        return Decimal("0")

    async def agent_standing(self, agent_id: int) -> AgentStanding:
        agent = await self.records.get(Agent, agent_id)

        entry = next((e for e in await self.leaderboard() if e.agent_id == agent_id), None)
        total = entry.total_confirmed if entry else Decimal("0")

        return AgentStanding(
            agent_id=agent.id,
            full_name=agent.full_name,
            status=agent.status,
            total_confirmed=total,
            confirmed_sales=entry.confirmed_sales if entry else 0,
            rank=entry.rank if entry else None,
            current_tier=self.schedule.tier_for(total),
            next_tier=self.schedule.next_tier(total),
            progress_percent=self.schedule.progress_to_next_tier(total),
            remaining_to_next_tier=self.schedule.remaining_to_next_tier(total),
        )
