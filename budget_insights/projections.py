"""'If this continues' projections from recent monthly averages.

The analysis window is the most recent completed months before the
selected period that had some income. Fewer than three such months means
there is nothing to project and ``calculate_projections`` returns None.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd

from .categories import category_index
from .config import get_rule
from .formatting import format_currency
from .models import (
    Category,
    CategoryCoverage,
    Expense,
    ProjectionResult,
    TimeMetrics,
    TrendPoint,
)
from .trends import trends_frame

AMOUNT_PLACEHOLDER = '##AMOUNT##'

HEADLINE_GROWS = f"Savings grow by ~{AMOUNT_PLACEHOLDER}."
HEADLINE_SHRINKS = f"Spending exceeds income by ~{AMOUNT_PLACEHOLDER}."
HEADLINE_UNCHANGED = "Savings remain unchanged."

BUFFER_STRONG = 'Strong'
BUFFER_HEALTHY = 'Healthy'
BUFFER_BASIC = 'Basic'


def get_analysis_months(
    history: Sequence[TrendPoint],
    selector: str,
    limit: Optional[int] = None,
) -> List[TrendPoint]:
    """Completed months before ``selector`` with income, newest first.

    A ``YYYY-ALL`` selector sorts after every month of its year, so the
    window then ends with that year's December.
    """
    if limit is None:
        limit = int(get_rule('projections', 'analysis_window', default=6))
    completed = [p for p in history if p.period < selector and p.income > 0]
    completed.sort(key=lambda p: p.period, reverse=True)
    return completed[:limit]


def generate_projection_headline(yearly_projection: float) -> str:
    if yearly_projection > 0:
        return HEADLINE_GROWS
    if yearly_projection < 0:
        return HEADLINE_SHRINKS
    return HEADLINE_UNCHANGED


def buffer_status(months_covered: float) -> str:
    strong = float(get_rule('projections', 'strong_buffer_months', default=6))
    healthy = float(get_rule('projections', 'healthy_buffer_months', default=3))
    if months_covered > strong:
        return BUFFER_STRONG
    if months_covered >= healthy:
        return BUFFER_HEALTHY
    return BUFFER_BASIC


def _coverage(yearly_projection: float, monthly_spend: float) -> float:
    if monthly_spend > 0 and yearly_projection > 0:
        return yearly_projection / monthly_spend
    return 0.0


def calculate_projections(
    analysis_months: Sequence[TrendPoint],
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    min_months: Optional[int] = None,
    top_n: Optional[int] = None,
) -> Optional[ProjectionResult]:
    """Average the analysis window and extrapolate it over twelve months.

    Returns:
        ProjectionResult, or None when fewer than ``min_months`` months are
        available.
    """
    if min_months is None:
        min_months = int(get_rule('projections', 'min_months', default=3))
    if top_n is None:
        top_n = int(get_rule('projections', 'top_categories', default=3))
    if len(analysis_months) < min_months:
        return None

    count = len(analysis_months)
    averages = trends_frame(analysis_months)[['income', 'expenses', 'savings', 'needs']].mean()
    average_income = float(averages['income'])
    average_expenses = float(averages['expenses'])
    average_savings = float(averages['savings'])
    average_needs = float(averages['needs'])

    yearly_projection = average_savings * 12

    month_keys = {p.period for p in analysis_months}
    relevant = [e for e in expenses if e.period in month_keys]
    top_categories: List[CategoryCoverage] = []
    if relevant:
        totals = (
            pd.DataFrame({
                'category_id': [e.category_id for e in relevant],
                'amount': [float(e.amount) for e in relevant],
            })
            .groupby('category_id', sort=False)['amount']
            .sum()
            .sort_values(ascending=False, kind='stable')
            .head(top_n)
        )
        lookup = category_index(categories)
        fallback_icon = get_rule('icons', 'coverage', default='💰')
        for category_id, total in totals.items():
            category = lookup.get(category_id)
            top_categories.append(CategoryCoverage(
                name=category.name if category else 'Unknown',
                icon=(category.icon if category and category.icon else fallback_icon),
                months_covered=_coverage(yearly_projection, float(total) / count),
            ))

    months_of_living = _coverage(yearly_projection, average_expenses)

    return ProjectionResult(
        average_income=average_income,
        average_expenses=average_expenses,
        average_savings=average_savings,
        average_needs=average_needs,
        yearly_projection=yearly_projection,
        headline=generate_projection_headline(yearly_projection),
        months_analyzed=count,
        time_metrics=TimeMetrics(
            months_of_living_expenses=months_of_living,
            top_categories_covered=top_categories,
            emergency_buffer_status=buffer_status(months_of_living),
        ),
    )


def render_headline(result: ProjectionResult, currency: str = 'USD') -> str:
    """Fill the amount placeholder using the caller's currency label."""
    amount = format_currency(abs(result.yearly_projection), currency)
    return result.headline.replace(AMOUNT_PLACEHOLDER, amount)
