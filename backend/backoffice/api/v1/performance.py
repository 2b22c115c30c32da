# backoffice/api/v1/performance.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from backoffice.api.deps.services import get_leaderboard
from backoffice.core.commission_tiers import default_schedule
from backoffice.schemas.performance import AgentStandingOut, CommissionTierOut, LeaderboardEntryOut, LeaderboardOut
from backoffice.services.leaderboard import LeaderboardAggregator

router = APIRouter(tags=["performance"])


@router.get("/leaderboard", response_model=LeaderboardOut)
async def get_leaderboard_view(
    limit: Optional[int] = Query(None, ge=1, le=500),
    aggregator: LeaderboardAggregator = Depends(get_leaderboard),
):
    """
    Full ranking of active agents by confirmed sales; `limit` truncates for
    dashboard widgets while total_agents still reports the full size.
    """
    ranked = await aggregator.leaderboard()
    shown = ranked if limit is None else ranked[:limit]
    return LeaderboardOut(
        items=[LeaderboardEntryOut.model_validate(e) for e in shown],
        total_agents=len(ranked),
    )


@router.get("/agents/{agent_id}/standing", response_model=AgentStandingOut)
async def get_agent_standing(agent_id: int, aggregator: LeaderboardAggregator = Depends(get_leaderboard)):
    return await aggregator.agent_standing(agent_id)


@router.get("/commission/tiers", response_model=List[CommissionTierOut])
async def list_commission_tiers():
    return list(default_schedule.tiers)
