# utils/field_activity/commission.py
"""
Tiered Commission Calculator

Commission rate comes from the revenue tier (3% at $3,000 up to 9% at
$9,000) plus a prepay bonus:
- +3% when at least 40% of sales are Prepay
- +2% when at least 25% are Prepay
The bonus only applies once a tier has been reached.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from .constants import (
    COMMISSION_TIERS,
    PAYMENT_PREPAY,
    PAYMENT_TYPES,
    PREPAY_BONUS_STEPS,
)


@dataclass(frozen=True)
class Sale:
    """A single closed sale entered in the calculator."""
    id: Any
    amount: float
    payment_type: str

    def __post_init__(self):
        if not self.amount or self.amount <= 0:
            raise ValueError("Sale amount must be greater than zero")
        if self.payment_type not in PAYMENT_TYPES:
            raise ValueError(f"Unknown payment type: {self.payment_type}")


@dataclass(frozen=True)
class CommissionSummary:
    total_revenue: float
    tier_rate: float
    prepay_bonus: float
    total_rate: float
    commission: float
    prepay_percent: float
    tier_threshold: Optional[float] = None


def total_revenue(sales: Sequence[Sale]) -> float:
    return sum(s.amount for s in sales)


def current_tier(revenue: float) -> Optional[Tuple[float, float]]:
    """Highest (threshold, rate) tier reached by ``revenue``, or None."""
    for threshold, rate in reversed(COMMISSION_TIERS):
        if revenue >= threshold:
            return threshold, rate
    return None


def prepay_percentage(sales: Sequence[Sale]) -> float:
    if not sales:
        return 0.0
    prepay_count = sum(1 for s in sales if s.payment_type == PAYMENT_PREPAY)
    return prepay_count / len(sales) * 100


def prepay_bonus(sales: Sequence[Sale], revenue: float) -> float:
    if current_tier(revenue) is None:
        return 0.0

    percent = prepay_percentage(sales)
    for minimum, bonus in PREPAY_BONUS_STEPS:
        if percent >= minimum:
            return bonus
    return 0.0


def summarize(sales: Sequence[Sale]) -> CommissionSummary:
    """Totals shown on the calculator page."""
    revenue = total_revenue(sales)
    tier = current_tier(revenue)
    tier_rate = tier[1] if tier else 0.0
    bonus = prepay_bonus(sales, revenue)
    rate = tier_rate + bonus

    return CommissionSummary(
        total_revenue=revenue,
        tier_rate=tier_rate,
        prepay_bonus=bonus,
        total_rate=rate,
        commission=revenue * rate,
        prepay_percent=prepay_percentage(sales),
        tier_threshold=tier[0] if tier else None,
    )


def remove_sale(sales: Sequence[Sale], sale_id: Any) -> List[Sale]:
    return [s for s in sales if s.id != sale_id]
