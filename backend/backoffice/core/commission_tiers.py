# ============================
# FILE: backoffice/core/commission_tiers.py
# Canonical commission allowance tiers
# ============================
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CommissionTier:
    threshold: Decimal
    allowance: Decimal
    label: str


# Cumulative confirmed sales (PHP) -> monthly allowance:
# - below 3M: nothing
# - 3M: 5,000
# - 6M: 10,000
# - 10M: 20,000
DEFAULT_TIERS: tuple[CommissionTier, ...] = (
    CommissionTier(threshold=Decimal("0"), allowance=Decimal("0"), label="No Allowance"),
    CommissionTier(threshold=Decimal("3000000"), allowance=Decimal("5000"), label="Bronze Tier"),
    CommissionTier(threshold=Decimal("6000000"), allowance=Decimal("10000"), label="Silver Tier"),
    CommissionTier(threshold=Decimal("10000000"), allowance=Decimal("20000"), label="Gold Tier"),
)


def to_decimal(value) -> Decimal:
    """
    Accepts Decimal, int, float or numeric strings.
    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class TierSchedule:
    """
    Ordered tiers with inclusive lower bounds.

    Thresholds must start at zero and be strictly increasing, so the span
    between two neighbouring tiers is always positive.
    """

    def __init__(self, tiers: Iterable[CommissionTier] = DEFAULT_TIERS) -> None:
        tiers = tuple(tiers)
        if not tiers:
            raise ValueError("A tier schedule needs at least one tier.")
        if tiers[0].threshold != 0:
            raise ValueError("The lowest tier threshold must be 0.")
        for prev, cur in zip(tiers, tiers[1:]):
            if cur.threshold <= prev.threshold:
                raise ValueError(
                    f"Tier thresholds must be strictly increasing: {prev.threshold} then {cur.threshold}."
                )
        self.tiers = tiers

    def tier_for(self, cumulative_sales) -> CommissionTier:
        """Highest tier whose threshold does not exceed the amount."""
        amount = to_decimal(cumulative_sales)
        for tier in reversed(self.tiers):
            if amount >= tier.threshold:
                return tier
        return self.tiers[0]

    def next_tier(self, cumulative_sales) -> CommissionTier | None:
        """
        Smallest tier whose threshold is strictly above the amount.
        Returns None if already at/above the top tier.
        """
        amount = to_decimal(cumulative_sales)
        for tier in self.tiers:
            if amount < tier.threshold:
                return tier
        return None

    def progress_to_next_tier(self, cumulative_sales) -> Decimal:
        """Percent of the way from the current tier to the next, clamped to [0, 100]."""
        amount = to_decimal(cumulative_sales)
        nxt = self.next_tier(amount)
        if nxt is None:
            return HUNDRED

        current = self.tier_for(amount)
        progress = (amount - current.threshold) / (nxt.threshold - current.threshold) * HUNDRED
        progress = min(max(progress, Decimal("0")), HUNDRED)
        return progress.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    def remaining_to_next_tier(self, cumulative_sales) -> Decimal:
        amount = to_decimal(cumulative_sales)
        nxt = self.next_tier(amount)
        if nxt is None:
            return Decimal("0")
        return nxt.threshold - amount


default_schedule = TierSchedule()


def tier_for(cumulative_sales) -> CommissionTier:
    return default_schedule.tier_for(cumulative_sales)


def next_tier(cumulative_sales) -> CommissionTier | None:
    return default_schedule.next_tier(cumulative_sales)


def progress_to_next_tier(cumulative_sales) -> Decimal:
    return default_schedule.progress_to_next_tier(cumulative_sales)
