"""Expense breakdown by category for one period."""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from .categories import category_index
from .config import get_rule
from .models import Category, CategoryExpense, Expense
from .periods import filter_by_period

DEFAULT_PALETTE = {
    'needs': '#F59E0B',  # Amber
    'wants': '#A855F7',  # Purple
    'savings': '#3B82F6',  # Blue
    'fallback': '#94A3B8',  # Grey
}
DEFAULT_ICON = '📌'


def get_category_color(bucket: str) -> str:
    palette = get_rule('palette', default=DEFAULT_PALETTE)
    return palette.get(bucket, palette.get('fallback', DEFAULT_PALETTE['fallback']))


def calculate_category_breakdown(
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    selector: str,
) -> List[CategoryExpense]:
    """Group a period's expenses by category, largest first.

    A subcategory, when present, is the grouping key, so amounts are never
    counted twice into the parent. Groups whose category can't be resolved
    are dropped from the result but still count towards the period total.

    Returns:
        List of CategoryExpense entries sorted by amount descending; empty
        when the period has no expenses.
    """
    scoped = filter_by_period(expenses, selector)
    if not scoped:
        return []

    df = pd.DataFrame({
        'key': [e.subcategory_id or e.category_id for e in scoped],
        'amount': [float(e.amount) for e in scoped],
    })
    total = float(df['amount'].sum())
    grouped = df.groupby('key', sort=False)['amount'].sum()

    lookup = category_index(categories)
    icon = get_rule('icons', 'category', default=DEFAULT_ICON)
    entries: List[CategoryExpense] = []
    for key, amount in grouped.items():
        category = lookup.get(key)
        if category is None:
            continue
        entries.append(CategoryExpense(
            category_id=category.id,
            category_name=category.name,
            category_icon=category.icon or icon,
            bucket=category.bucket,
            amount=float(amount),
            percentage=float(amount) / total * 100 if total > 0 else 0.0,
            color=category.color or get_category_color(category.bucket),
        ))

    return sorted(entries, key=lambda entry: entry.amount, reverse=True)


def get_top_categories(breakdown: Sequence[CategoryExpense], limit: int = 5) -> List[CategoryExpense]:
    return list(breakdown[:limit])
