"""JSON persistence for the household store and conversion to records.

The store is kept on disk as one JSON document with camelCase keys. Only
this module and ``migrations`` look inside it; everything else works on
the record dataclasses returned by ``records_from_store``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from . import config
from .categories import DEFAULT_CATEGORIES, category_to_record
from .exceptions import StoreFormatError
from .log import get_logger
from .migrations import CURRENT_DATA_VERSION, migrate_store
from .models import BUCKETS, Category, Expense, Income, RecurringTransaction
from .periods import current_period, period_key

logger = get_logger(__name__)

Store = Dict[str, Any]


@dataclass
class Ledger:
    """Record view of a store."""
    categories: List[Category] = field(default_factory=list)
    incomes: List[Income] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    recurring: List[RecurringTransaction] = field(default_factory=list)
    currency: str = 'USD'
    current_month: Optional[str] = None
    version: int = CURRENT_DATA_VERSION
    is_onboarded: bool = False


def default_store(today: Optional[date] = None) -> Store:
    return {
        'incomes': [],
        'expenses': [],
        'customCategories': [category_to_record(c) for c in DEFAULT_CATEGORIES],
        'currentMonth': current_period(today),
        'currency': config.DEFAULT_CURRENCY,
        'version': CURRENT_DATA_VERSION,
        'isOnboarded': False,
        'recurringTransactions': [],
    }


def load_store(path: Optional[Path] = None) -> Optional[Store]:
    """Read the store, or None when the file is missing or unreadable."""
    target = Path(path or config.STORE_PATH)
    if not target.exists():
        return None
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("store_load_failed", path=str(target), error=str(e))
        return None
    if not isinstance(data, dict):
        logger.warning("store_load_failed", path=str(target), error="top level is not an object")
        return None
    return data


def save_store(store: Mapping[str, Any], path: Optional[Path] = None) -> None:
    target = Path(path or config.STORE_PATH)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open('w', encoding='utf-8') as handle:
            json.dump(store, handle, indent=2, ensure_ascii=False)
    except OSError as e:
        raise OSError(f"Failed to save store to {target}: {e}") from e
    logger.info("store_saved", path=str(target), version=store.get('version'))


def load_and_migrate(path: Optional[Path] = None) -> Store:
    """Load the store and bring it up to date, saving it back if it changed.

    A missing or unreadable file yields a fresh default store, which is not
    written until the caller saves it.
    """
    target = Path(path or config.STORE_PATH)
    store = load_store(target)
    if store is None:
        logger.info("store_seeded", path=str(target))
        return default_store()

    return migrate_store(store, save=lambda migrated: save_store(migrated, target)).store


# Record conversion

def _require(record: Mapping[str, Any], key: str, kind: str) -> Any:
    value = record.get(key)
    if value is None or value == '':
        raise StoreFormatError(f"{kind} record {record.get('id', '?')!r} is missing '{key}'")
    return value


def _amount(record: Mapping[str, Any], kind: str) -> float:
    raw = _require(record, 'amount', kind)
    try:
        amount = float(raw)
    except (TypeError, ValueError) as e:
        raise StoreFormatError(f"{kind} record {record.get('id', '?')!r} has a non-numeric amount") from e
    if amount < 0:
        raise StoreFormatError(f"{kind} record {record.get('id', '?')!r} has a negative amount")
    return amount


def _date(record: Mapping[str, Any], kind: str) -> date:
    raw = _require(record, 'date', kind)
    try:
        return pd.Timestamp(raw).date()
    except (TypeError, ValueError) as e:
        raise StoreFormatError(f"{kind} record {record.get('id', '?')!r} has an invalid date {raw!r}") from e


def category_from_record(record: Mapping[str, Any]) -> Category:
    bucket = _require(record, 'type', 'Category')
    if bucket not in BUCKETS:
        raise StoreFormatError(f"Category {record.get('id')!r} has unknown type {bucket!r}")
    return Category(
        id=str(_require(record, 'id', 'Category')),
        name=str(_require(record, 'name', 'Category')),
        bucket=bucket,
        icon=record.get('icon'),
        color=record.get('color'),
        parent_id=record.get('parentId'),
    )


def income_from_record(record: Mapping[str, Any]) -> Income:
    day = _date(record, 'Income')
    return Income(
        id=str(_require(record, 'id', 'Income')),
        amount=_amount(record, 'Income'),
        date=day,
        period=record.get('month') or period_key(day),
        source=record.get('source') or '',
    )


def income_to_record(income: Income) -> Dict[str, Any]:
    return {
        'id': income.id,
        'amount': income.amount,
        'source': income.source,
        'date': income.date.isoformat(),
        'month': income.period,
    }


def expense_from_record(record: Mapping[str, Any]) -> Expense:
    day = _date(record, 'Expense')
    bucket = _require(record, 'categoryType', 'Expense')
    if bucket not in BUCKETS:
        raise StoreFormatError(f"Expense {record.get('id')!r} has unknown categoryType {bucket!r}")
    return Expense(
        id=str(_require(record, 'id', 'Expense')),
        amount=_amount(record, 'Expense'),
        date=day,
        period=record.get('month') or period_key(day),
        category_id=str(_require(record, 'categoryId', 'Expense')),
        bucket=bucket,
        description=record.get('description') or '',
        subcategory_id=record.get('subcategoryId') or None,
    )


def expense_to_record(expense: Expense) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        'id': expense.id,
        'amount': expense.amount,
        'description': expense.description,
        'categoryId': expense.category_id,
        'categoryType': expense.bucket,
        'date': expense.date.isoformat(),
        'month': expense.period,
    }
    if expense.subcategory_id:
        record['subcategoryId'] = expense.subcategory_id
    return record


def recurring_from_record(record: Mapping[str, Any]) -> RecurringTransaction:
    kind = _require(record, 'type', 'Recurring transaction')
    if kind not in ('income', 'expense'):
        raise StoreFormatError(f"Recurring transaction {record.get('id')!r} has unknown type {kind!r}")
    try:
        day_of_month = int(_require(record, 'dayOfMonth', 'Recurring transaction'))
    except (TypeError, ValueError) as e:
        raise StoreFormatError(f"Recurring transaction {record.get('id')!r} has an invalid dayOfMonth") from e
    return RecurringTransaction(
        id=str(_require(record, 'id', 'Recurring transaction')),
        kind=kind,
        amount=_amount(record, 'Recurring transaction'),
        day_of_month=day_of_month,
        frequency=record.get('frequency') or 'monthly',
        is_active=bool(record.get('isActive', True)),
        last_applied_period=record.get('lastAppliedMonth'),
        source=record.get('source'),
        description=record.get('description'),
        category_id=record.get('categoryId'),
        subcategory_id=record.get('subcategoryId'),
        created_at=record.get('createdAt'),
    )


def recurring_to_record(template: RecurringTransaction) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        'id': template.id,
        'type': template.kind,
        'amount': template.amount,
        'frequency': template.frequency,
        'dayOfMonth': template.day_of_month,
        'isActive': template.is_active,
    }
    optional = {
        'source': template.source,
        'description': template.description,
        'categoryId': template.category_id,
        'subcategoryId': template.subcategory_id,
        'lastAppliedMonth': template.last_applied_period,
        'createdAt': template.created_at,
    }
    record.update({key: value for key, value in optional.items() if value is not None})
    return record


def records_from_store(store: Mapping[str, Any]) -> Ledger:
    """Convert a (migrated) store into records.

    Raises:
        StoreFormatError: If any record is malformed
    """
    try:
        ledger = Ledger(
            categories=[category_from_record(r) for r in store.get('customCategories') or []],
            incomes=[income_from_record(r) for r in store.get('incomes') or []],
            expenses=[expense_from_record(r) for r in store.get('expenses') or []],
            recurring=[recurring_from_record(r) for r in store.get('recurringTransactions') or []],
            currency=store.get('currency') or config.DEFAULT_CURRENCY,
            current_month=store.get('currentMonth'),
            version=int(store.get('version') or 0),
            is_onboarded=bool(store.get('isOnboarded', False)),
        )
    except StoreFormatError as e:
        logger.warning("store_record_rejected", error=str(e))
        raise
    return ledger


def store_from_records(ledger: Ledger) -> Store:
    return {
        'incomes': [income_to_record(i) for i in ledger.incomes],
        'expenses': [expense_to_record(e) for e in ledger.expenses],
        'customCategories': [category_to_record(c) for c in ledger.categories],
        'currentMonth': ledger.current_month or current_period(),
        'currency': ledger.currency,
        'version': ledger.version,
        'isOnboarded': ledger.is_onboarded,
        'recurringTransactions': [recurring_to_record(t) for t in ledger.recurring],
    }
