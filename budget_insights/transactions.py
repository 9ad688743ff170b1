"""Creating, editing and scheduling income and expense records.

The period key and the expense bucket are derived here, once, at write
time. Nothing else in the engine recomputes them.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from .categories import find_category
from .exceptions import InvalidReferenceError
from .log import get_logger
from .models import Category, Expense, Income, RecurringTransaction
from .periods import days_in_period, period_key

logger = get_logger(__name__)

DateLike = Union[date, datetime, str]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def _check_amount(amount: float) -> float:
    amount = float(amount)
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    return amount


def create_income(
    amount: float,
    when: DateLike,
    source: str = '',
    *,
    income_id: Optional[str] = None,
) -> Income:
    day = _to_date(when)
    return Income(
        id=income_id or f"income-{uuid.uuid4().hex}",
        amount=_check_amount(amount),
        date=day,
        period=period_key(day),
        source=source,
    )


def _resolve_expense_category(
    categories: Sequence[Category],
    category_id: str,
    subcategory_id: Optional[str],
) -> Category:
    category = find_category(categories, category_id)
    if category is None:
        logger.warning("expense_rejected", reason="missing_category", category_id=category_id)
        raise InvalidReferenceError('Category', category_id)
    if subcategory_id is not None:
        sub = find_category(categories, subcategory_id)
        if sub is None or sub.parent_id != category.id:
            logger.warning(
                "expense_rejected",
                reason="missing_subcategory",
                category_id=category_id,
                subcategory_id=subcategory_id,
            )
            raise InvalidReferenceError('Subcategory', subcategory_id)
    return category


def create_expense(
    categories: Sequence[Category],
    amount: float,
    when: DateLike,
    category_id: str,
    description: str = '',
    subcategory_id: Optional[str] = None,
    *,
    expense_id: Optional[str] = None,
) -> Expense:
    """Build an expense, stamping its period and bucket.

    Raises:
        InvalidReferenceError: If the category or subcategory doesn't exist
        ValueError: If the amount is negative
    """
    category = _resolve_expense_category(categories, category_id, subcategory_id)
    day = _to_date(when)
    return Expense(
        id=expense_id or f"expense-{uuid.uuid4().hex}",
        amount=_check_amount(amount),
        date=day,
        period=period_key(day),
        category_id=category.id,
        bucket=category.bucket,
        description=description,
        subcategory_id=subcategory_id,
    )


def update_income(income: Income, **changes) -> Income:
    if 'amount' in changes:
        changes['amount'] = _check_amount(changes['amount'])
    if 'date' in changes:
        changes['date'] = _to_date(changes['date'])
        changes['period'] = period_key(changes['date'])
    changes.pop('id', None)
    return replace(income, **changes)


def update_expense(categories: Sequence[Category], expense: Expense, **changes) -> Expense:
    """Apply edits, re-deriving the period or bucket only when their source changed."""
    changes.pop('id', None)
    changes.pop('bucket', None)
    if 'amount' in changes:
        changes['amount'] = _check_amount(changes['amount'])
    if 'date' in changes:
        changes['date'] = _to_date(changes['date'])
        changes['period'] = period_key(changes['date'])

    if 'category_id' in changes or 'subcategory_id' in changes:
        category_id = changes.get('category_id', expense.category_id)
        if 'category_id' in changes and 'subcategory_id' not in changes:
            changes['subcategory_id'] = None
        category = _resolve_expense_category(
            categories, category_id, changes.get('subcategory_id', expense.subcategory_id)
        )
        if 'category_id' in changes:
            changes['bucket'] = category.bucket
    return replace(expense, **changes)


def replace_record(records: Sequence, updated) -> List:
    return [updated if r.id == updated.id else r for r in records]


def delete_record(records: Sequence, record_id: str) -> List:
    return [r for r in records if r.id != record_id]


# ---------------------------------------------------------------------------
# Recurring templates
# ---------------------------------------------------------------------------


def pending_recurring(
    templates: Sequence[RecurringTransaction],
    period: str,
) -> List[RecurringTransaction]:
    """Active templates that have not been applied to ``period`` yet."""
    return [
        t for t in templates
        if t.is_active and t.last_applied_period != period
    ]


def apply_recurring(
    templates: Sequence[RecurringTransaction],
    categories: Sequence[Category],
    period: str,
) -> Tuple[List[Income], List[Expense], List[RecurringTransaction], int, int]:
    """Materialise pending templates for ``period``.

    The day of month is clamped to the length of the month. Every pending
    template is marked as applied, including the ones that had to be
    skipped because their category no longer exists.

    Returns:
        Tuple of (new incomes, new expenses, updated templates, applied, skipped)
    """
    pending_ids = {t.id for t in pending_recurring(templates, period)}
    month_length = days_in_period(period)
    incomes: List[Income] = []
    expenses: List[Expense] = []
    updated: List[RecurringTransaction] = []
    applied = skipped = 0

    for template in templates:
        if template.id not in pending_ids:
            updated.append(template)
            continue

        day = min(template.day_of_month, month_length)
        when = f"{period}-{day:02d}"

        if template.kind == 'income' and template.source:
            incomes.append(create_income(template.amount, when, template.source))
            applied += 1
        elif template.kind == 'expense' and template.category_id:
            try:
                expenses.append(create_expense(
                    categories,
                    template.amount,
                    when,
                    template.category_id,
                    template.description or '',
                    template.subcategory_id,
                ))
                applied += 1
            except InvalidReferenceError:
                skipped += 1
        else:
            skipped += 1

        updated.append(replace(template, last_applied_period=period))

    logger.info("recurring_applied", period=period, applied=applied, skipped=skipped)
    return incomes, expenses, updated, applied, skipped
