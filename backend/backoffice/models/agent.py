# backoffice/models/agent.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from backoffice.db.base import Base


class Agent(Base):
    """
    Sales agent. Provisioned by administrators; only `active` agents take part
    in commission and leaderboard computation.

    NOTE:
      - full_name is also the legacy join key for Sale.seller_name
        (exact, case- and whitespace-sensitive).
      - no running totals are stored here; everything is recomputed from sales.
    """

    __tablename__ = "agents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)

    # active | inactive
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active", server_default="active")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
