"""Savings goal planning from historical cash-balance growth."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional, Sequence

import pandas as pd

from .models import SAVINGS, Expense, GoalTimeline, Income
from .periods import current_period
from .trends import calculate_monthly_trends

GOAL_MIN_COMPLETED_MONTHS = 3

MSG_ALREADY_REACHED = "You've already reached this goal!"
MSG_NOT_BUILDING = (
    "You're not currently building cash balance. "
    "Reduce spending or increase income to make progress toward this goal."
)


def completed_month_count(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    today: Optional[date] = None,
) -> int:
    """Number of distinct periods with activity strictly before the current one."""
    this_period = current_period(today)
    periods = {r.period for r in incomes} | {r.period for r in expenses}
    return sum(1 for p in periods if p < this_period)


def is_goal_planner_unlocked(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    today: Optional[date] = None,
) -> bool:
    return completed_month_count(incomes, expenses, today) >= GOAL_MIN_COMPLETED_MONTHS


def calculate_average_monthly_cash_balance(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    exclude_current: bool = True,
    today: Optional[date] = None,
) -> float:
    """Average of ``income - (needs + wants) - savings contributions`` per month.

    The savings-bucket contribution is summed from the raw expenses for
    each period because a trend point's ``savings`` field already nets it
    in differently.
    """
    points = calculate_monthly_trends(incomes, expenses)
    if exclude_current:
        this_period = current_period(today)
        points = [p for p in points if p.period != this_period]
    if not points:
        return 0.0

    contributions = (
        pd.DataFrame(
            {
                'period': [e.period for e in expenses if e.bucket == SAVINGS],
                'amount': [float(e.amount) for e in expenses if e.bucket == SAVINGS],
            },
            columns=['period', 'amount'],
        )
        .groupby('period')['amount']
        .sum()
    )

    balances = pd.Series(
        [p.income - p.expenses - float(contributions.get(p.period, 0.0)) for p in points],
        dtype=float,
    )
    return float(balances.mean())


def calculate_goal_timeline(
    goal_amount: float,
    starting_balance: float,
    average_monthly_balance: float,
    today: Optional[date] = None,
) -> GoalTimeline:
    """Project how many months it takes to reach ``goal_amount``.

    ``months`` is 0 when the goal is already met and -1 when the balance is
    not growing.
    """
    if starting_balance >= goal_amount:
        return GoalTimeline(months=0, is_achievable=True, message=MSG_ALREADY_REACHED)

    if average_monthly_balance <= 0:
        return GoalTimeline(months=-1, is_achievable=False, message=MSG_NOT_BUILDING)

    months = math.ceil((goal_amount - starting_balance) / average_monthly_balance)
    start = pd.Timestamp(today or date.today())
    completion = (start + pd.DateOffset(months=months)).date()
    unit = 'month' if months == 1 else 'months'
    return GoalTimeline(
        months=months,
        is_achievable=True,
        message=f"At your current pace, you'll reach this goal in {months} {unit}.",
        completion_date=completion,
    )
