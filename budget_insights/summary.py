"""Budget summary for one period against the 50/30/20 split.

Savings-bucket expenses are transfers, not consumption: they are left out
of ``total_expenses`` and show up in ``net_savings`` instead, so
``total_expenses == actual_needs + actual_wants`` always holds and
``unallocated_cash == net_savings - actual_savings``.
"""

from __future__ import annotations

from typing import Dict, Sequence

from .config import get_rule
from .models import (
    BUCKETS,
    NEEDS,
    SAVINGS,
    STATUS_ON_TRACK,
    STATUS_OVER,
    STATUS_UNDER,
    WANTS,
    BudgetSummary,
    Expense,
    Income,
)
from .periods import filter_by_period

DEFAULT_SPLIT = {NEEDS: 0.5, WANTS: 0.3, SAVINGS: 0.2}


def calculate_50_30_20(total_income: float) -> Dict[str, float]:
    """Recommended amount per bucket for a given income.

    Example:
        >>> calculate_50_30_20(5000)
        {'needs': 2500.0, 'wants': 1500.0, 'savings': 1000.0}
    """
    split = get_rule('split', default=DEFAULT_SPLIT)
    return {bucket: total_income * float(split[bucket]) for bucket in BUCKETS}


def calculate_actual_breakdown(expenses: Sequence[Expense]) -> Dict[str, float]:
    """Sum expense amounts per bucket.

    Expenses carrying an unknown bucket are left out rather than failing
    the whole period.
    """
    breakdown = {bucket: 0.0 for bucket in BUCKETS}
    for expense in expenses:
        if expense.bucket in breakdown:
            breakdown[expense.bucket] += expense.amount
    return breakdown


def bucket_status(actual: float, recommended: float) -> str:
    """Classify actual spend against the recommendation with a 5% band."""
    if recommended == 0:
        return STATUS_ON_TRACK
    tolerance = float(get_rule('status', 'tolerance', default=0.05))
    ratio = actual / recommended
    if ratio < 1 - tolerance:
        return STATUS_UNDER
    if ratio > 1 + tolerance:
        return STATUS_OVER
    return STATUS_ON_TRACK


def calculate_savings_rate(total_income: float, total_expenses: float) -> float:
    if total_income == 0:
        return 0.0
    return (total_income - total_expenses) / total_income * 100


def calculate_budget_summary(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    selector: str,
) -> BudgetSummary:
    """Summarise one month (``YYYY-MM``) or one year (``YYYY-ALL``)."""
    period_incomes = filter_by_period(incomes, selector)
    period_expenses = filter_by_period(expenses, selector)

    total_income = sum(income.amount for income in period_incomes)
    recommended = calculate_50_30_20(total_income)
    actual = calculate_actual_breakdown(period_expenses)

    total_expenses = actual[NEEDS] + actual[WANTS]
    net_savings = total_income - total_expenses

    def _pct(value: float) -> float:
        return value / total_income * 100 if total_income > 0 else 0.0

    return BudgetSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=net_savings,
        recommended_needs=recommended[NEEDS],
        recommended_wants=recommended[WANTS],
        recommended_savings=recommended[SAVINGS],
        actual_needs=actual[NEEDS],
        actual_wants=actual[WANTS],
        actual_savings=actual[SAVINGS],
        needs_percentage=_pct(actual[NEEDS]),
        wants_percentage=_pct(actual[WANTS]),
        savings_percentage=_pct(actual[SAVINGS]),
        unallocated_cash=net_savings - actual[SAVINGS],
        is_over_budget=total_expenses > total_income,
        needs_status=bucket_status(actual[NEEDS], recommended[NEEDS]),
        wants_status=bucket_status(actual[WANTS], recommended[WANTS]),
        savings_status=bucket_status(actual[SAVINGS], recommended[SAVINGS]),
    )
