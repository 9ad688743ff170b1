"""Monthly and yearly trend series.

Each point carries income, expenses (needs + wants only), needs, wants and
``savings = income - expenses``. The savings figure is net cash growth, so
it includes both savings-bucket contributions and unallocated cash.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import pandas as pd

from .models import NEEDS, SAVINGS, WANTS, Expense, Income, TrendPoint

TREND_COLUMNS = ['income', 'expenses', 'savings', 'needs', 'wants']


def _income_frame(incomes: Sequence[Income]) -> pd.DataFrame:
    return pd.DataFrame(
        {'period': [i.period for i in incomes], 'amount': [float(i.amount) for i in incomes]},
        columns=['period', 'amount'],
    )


def _expense_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            'period': [e.period for e in expenses],
            'amount': [float(e.amount) for e in expenses],
            'bucket': [e.bucket for e in expenses],
        },
        columns=['period', 'amount', 'bucket'],
    )


def calculate_monthly_trends(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
) -> List[TrendPoint]:
    """Build one point per period key present in either list, oldest first."""
    income_df = _income_frame(incomes)
    expense_df = _expense_frame(expenses)

    periods = sorted(set(income_df['period']) | set(expense_df['period']))
    if not periods:
        return []

    frame = pd.DataFrame(0.0, index=pd.Index(periods, name='period'), columns=TREND_COLUMNS)

    if not income_df.empty:
        frame['income'] = income_df.groupby('period')['amount'].sum().reindex(periods, fill_value=0.0)

    if not expense_df.empty:
        # Savings-bucket transfers are not consumption
        expense_df['counted'] = np.where(expense_df['bucket'] != SAVINGS, expense_df['amount'], 0.0)
        frame['expenses'] = expense_df.groupby('period')['counted'].sum().reindex(periods, fill_value=0.0)
        by_bucket = expense_df.pivot_table(
            index='period', columns='bucket', values='amount', aggfunc='sum', fill_value=0.0
        )
        for bucket in (NEEDS, WANTS):
            if bucket in by_bucket.columns:
                frame[bucket] = by_bucket[bucket].reindex(periods, fill_value=0.0)

    frame['savings'] = frame['income'] - frame['expenses']

    return [
        TrendPoint(
            period=str(period),
            income=float(row['income']),
            expenses=float(row['expenses']),
            savings=float(row['savings']),
            needs=float(row['needs']),
            wants=float(row['wants']),
        )
        for period, row in frame.iterrows()
    ]


def calculate_yearly_trends(monthly: Sequence[TrendPoint]) -> List[TrendPoint]:
    """Fold monthly points into per-year sums keyed by ``YYYY``."""
    if not monthly:
        return []
    frame = trends_frame(monthly)
    frame['year'] = frame['period'].str.slice(0, 4)
    yearly = frame.groupby('year')[TREND_COLUMNS].sum().sort_index()
    return [
        TrendPoint(period=str(year), **{col: float(row[col]) for col in TREND_COLUMNS})
        for year, row in yearly.iterrows()
    ]


def trends_frame(points: Sequence[TrendPoint]) -> pd.DataFrame:
    """DataFrame view of a trend series (one row per period)."""
    return pd.DataFrame(
        [
            {
                'period': p.period,
                'income': p.income,
                'expenses': p.expenses,
                'savings': p.savings,
                'needs': p.needs,
                'wants': p.wants,
            }
            for p in points
        ],
        columns=['period', *TREND_COLUMNS],
    )


def find_period_index(points: Sequence[TrendPoint], period: str) -> int:
    """Index of ``period`` in a trend series, or -1 when absent."""
    return next((i for i, p in enumerate(points) if p.period == period), -1)
