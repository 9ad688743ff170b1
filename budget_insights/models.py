"""Record and value types shared by every calculator.

Transactions and categories are the inputs supplied by the caller; the
remaining dataclasses are derived, ephemeral results that are recomputed
from scratch on every call and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

NEEDS = 'needs'
WANTS = 'wants'
SAVINGS = 'savings'
BUCKETS = (NEEDS, WANTS, SAVINGS)

STATUS_UNDER = 'under'
STATUS_OVER = 'over'
STATUS_ON_TRACK = 'on-track'


@dataclass(frozen=True)
class Category:
    """A spending category; ``parent_id`` makes it a subcategory."""
    id: str
    name: str
    bucket: str
    icon: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None

    @property
    def is_subcategory(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True)
class Income:
    id: str
    amount: float
    date: date
    period: str  # YYYY-MM, derived from ``date`` at creation/update
    source: str = ''


@dataclass(frozen=True)
class Expense:
    """An expense with its bucket cached at write time.

    ``bucket`` is a point-in-time snapshot of the referenced category's
    bucket. It is re-stamped only when the category reference or the
    category's own bucket changes, so historical periods keep the
    classification they were recorded with.
    """
    id: str
    amount: float
    date: date
    period: str
    category_id: str
    bucket: str
    description: str = ''
    subcategory_id: Optional[str] = None


@dataclass(frozen=True)
class RecurringTransaction:
    """Template that materialises one income or expense per month."""
    id: str
    kind: str  # 'income' or 'expense'
    amount: float
    day_of_month: int  # 1-28
    frequency: str = 'monthly'
    is_active: bool = True
    last_applied_period: Optional[str] = None
    source: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class BudgetSummary:
    total_income: float
    total_expenses: float
    net_savings: float
    recommended_needs: float
    recommended_wants: float
    recommended_savings: float
    actual_needs: float
    actual_wants: float
    actual_savings: float
    needs_percentage: float
    wants_percentage: float
    savings_percentage: float
    unallocated_cash: float
    is_over_budget: bool
    needs_status: str
    wants_status: str
    savings_status: str

    def recommended(self, bucket: str) -> float:
        return getattr(self, f"recommended_{bucket}")

    def actual(self, bucket: str) -> float:
        return getattr(self, f"actual_{bucket}")


@dataclass
class TrendPoint:
    """Aggregate for one period.

    ``savings`` is net cash growth (income minus needs and wants), not the
    savings-bucket total.
    """
    period: str
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0
    needs: float = 0.0
    wants: float = 0.0


@dataclass
class CategoryExpense:
    category_id: str
    category_name: str
    category_icon: str
    bucket: str
    amount: float
    percentage: float
    color: str


@dataclass
class GoalTimeline:
    months: int
    is_achievable: bool
    message: str
    completion_date: Optional[date] = None


@dataclass
class CategoryCoverage:
    name: str
    icon: str
    months_covered: float


@dataclass
class TimeMetrics:
    months_of_living_expenses: float
    top_categories_covered: List[CategoryCoverage] = field(default_factory=list)
    emergency_buffer_status: str = 'Basic'


@dataclass
class ProjectionResult:
    average_income: float
    average_expenses: float
    average_savings: float
    average_needs: float
    yearly_projection: float
    headline: str  # contains ##AMOUNT## for the caller to fill in
    months_analyzed: int
    time_metrics: TimeMetrics


@dataclass
class JourneyStats:
    total_income: float
    total_needs: float
    total_wants: float
    total_savings: float
    needs_percentage: float
    wants_percentage: float
    savings_percentage: float


@dataclass(frozen=True)
class Persona:
    title: str
    description: str
    icon: str
    color: str
    recommendation: str


@dataclass(frozen=True)
class VarianceRecord:
    bucket: str
    direction: str  # 'over' or 'under'
    amount: float  # absolute currency variance


@dataclass(frozen=True)
class SummaryCandidate:
    """One possible narrative bullet before selection."""
    priority: int
    kind: str
    text: str
    magnitude: float = 0.0
    group: Optional[str] = None
    variance: Optional[VarianceRecord] = None

