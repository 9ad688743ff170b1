"""Category directory: shipped defaults plus pure mutation helpers.

Categories form a two-level tree. A subcategory copies its parent's
bucket when it is created and keeps it afterwards; changing a parent's
bucket later does not cascade to its children (edit them explicitly).

Every helper returns new lists and leaves its inputs untouched.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .exceptions import InvalidReferenceError
from .log import get_logger
from .models import BUCKETS, NEEDS, SAVINGS, WANTS, Category, Expense

logger = get_logger(__name__)

_NEEDS_COLOR = '#F59E0B'
_WANTS_COLOR = '#A855F7'
_SAVINGS_COLOR = '#10B981'

DEFAULT_CATEGORIES: Tuple[Category, ...] = (
    # Needs (50%)
    Category('cat-1', 'Housing', NEEDS, '🏠', _NEEDS_COLOR),
    Category('cat-2', 'Utilities', NEEDS, '💡', _NEEDS_COLOR),
    Category('cat-3', 'Groceries', NEEDS, '🛒', _NEEDS_COLOR),
    Category('cat-4', 'Transportation', NEEDS, '🚗', _NEEDS_COLOR),
    Category('cat-5', 'Insurance', NEEDS, '🛡️', _NEEDS_COLOR),
    Category('cat-6', 'Healthcare', NEEDS, '⚕️', _NEEDS_COLOR),
    Category('cat-7', 'Debt Payments', NEEDS, '💳', _NEEDS_COLOR),
    Category('cat-18', 'Pets', NEEDS, '🐾', _NEEDS_COLOR),
    # Wants (30%)
    Category('cat-8', 'Eating Out / Takeaway', WANTS, '🥡', _WANTS_COLOR),
    Category('cat-9', 'Entertainment', WANTS, '🎬', _WANTS_COLOR),
    Category('cat-10', 'Shopping', WANTS, '🛍️', _WANTS_COLOR),
    Category('cat-11', 'Subscriptions', WANTS, '📺', _WANTS_COLOR),
    Category('cat-12', 'Hobbies', WANTS, '🎨', _WANTS_COLOR),
    Category('cat-13', 'Holiday', WANTS, '✈️', _WANTS_COLOR),
    # Savings (20%)
    Category('cat-14', 'Emergency Fund', SAVINGS, '🏦', _SAVINGS_COLOR),
    Category('cat-15', 'Investments', SAVINGS, '📈', _SAVINGS_COLOR),
    Category('cat-16', 'Pension', SAVINGS, '👴', _SAVINGS_COLOR),
    Category('cat-17', 'Savings Account', SAVINGS, '💰', _SAVINGS_COLOR),
    # Subcategories
    Category('sub-house-1', 'Mortgage', NEEDS, '🏡', _NEEDS_COLOR, 'cat-1'),
    Category('sub-house-2', 'Rent', NEEDS, '🔑', _NEEDS_COLOR, 'cat-1'),
    Category('sub-house-3', 'Council Tax', NEEDS, '🏛️', _NEEDS_COLOR, 'cat-1'),
    Category('sub-util-1', 'Energy', NEEDS, '⚡', _NEEDS_COLOR, 'cat-2'),
    Category('sub-util-2', 'Water', NEEDS, '🚰', _NEEDS_COLOR, 'cat-2'),
    Category('sub-util-3', 'Broadband & Phone', NEEDS, '📶', _NEEDS_COLOR, 'cat-2'),
    Category('sub-eat-1', 'Takeaway', WANTS, '🍕', _WANTS_COLOR, 'cat-8'),
    Category('sub-eat-2', 'Restaurants', WANTS, '🍽️', _WANTS_COLOR, 'cat-8'),
    Category('sub-eat-3', 'Coffee', WANTS, '☕', _WANTS_COLOR, 'cat-8'),
    Category('sub-subs-1', 'Streaming', WANTS, '🎞️', _WANTS_COLOR, 'cat-11'),
    Category('sub-subs-2', 'Gym Membership', WANTS, '🏋️', _WANTS_COLOR, 'cat-11'),
    Category('sub-hol-1', 'Flights', WANTS, '🛫', _WANTS_COLOR, 'cat-13'),
    Category('sub-hol-2', 'Accommodation', WANTS, '🏨', _WANTS_COLOR, 'cat-13'),
)


def category_index(categories: Sequence[Category]) -> Dict[str, Category]:
    return {category.id: category for category in categories}


def find_category(categories: Sequence[Category], category_id: Optional[str]) -> Optional[Category]:
    if not category_id:
        return None
    return next((c for c in categories if c.id == category_id), None)


def get_subcategories(categories: Sequence[Category], parent_id: str) -> List[Category]:
    return [c for c in categories if c.parent_id == parent_id]


def category_hierarchy(categories: Sequence[Category]) -> List[Tuple[Category, List[Category]]]:
    """Return ``(parent, children)`` pairs for every top-level category."""
    return [
        (parent, get_subcategories(categories, parent.id))
        for parent in categories
        if not parent.is_subcategory
    ]


def _check_bucket(bucket: str) -> None:
    if bucket not in BUCKETS:
        raise ValueError(f"Unknown bucket '{bucket}' (expected one of {', '.join(BUCKETS)})")


def add_category(
    categories: Sequence[Category],
    name: str,
    bucket: str,
    *,
    icon: Optional[str] = None,
    color: Optional[str] = None,
    category_id: Optional[str] = None,
) -> Tuple[List[Category], Category]:
    """Append a new top-level category.

    Returns:
        Tuple of (updated category list, created category)

    Raises:
        ValueError: If the name is empty or the bucket is unknown
    """
    if not name or not name.strip():
        raise ValueError("Category name cannot be empty")
    _check_bucket(bucket)
    created = Category(
        id=category_id or uuid.uuid4().hex,
        name=name.strip(),
        bucket=bucket,
        icon=icon,
        color=color,
    )
    return [*categories, created], created


def add_subcategory(
    categories: Sequence[Category],
    parent_id: str,
    name: str,
    *,
    icon: Optional[str] = None,
    color: Optional[str] = None,
    category_id: Optional[str] = None,
) -> Tuple[List[Category], Category]:
    """Append a subcategory that inherits its parent's bucket.

    Raises:
        InvalidReferenceError: If the parent is missing or is itself a subcategory
    """
    parent = find_category(categories, parent_id)
    if parent is None or parent.is_subcategory:
        logger.warning("subcategory_rejected", parent_id=parent_id, name=name)
        raise InvalidReferenceError('Parent category', parent_id)
    if not name or not name.strip():
        raise ValueError("Category name cannot be empty")
    created = Category(
        id=category_id or uuid.uuid4().hex,
        name=name.strip(),
        bucket=parent.bucket,
        icon=icon,
        color=color,
        parent_id=parent.id,
    )
    return [*categories, created], created


def restamp_expenses(expenses: Sequence[Expense], category_id: str, bucket: str) -> List[Expense]:
    """Re-stamp the cached bucket on every expense that references ``category_id``."""
    return [
        replace(expense, bucket=bucket)
        if expense.category_id == category_id and expense.bucket != bucket
        else expense
        for expense in expenses
    ]


def update_category(
    categories: Sequence[Category],
    expenses: Sequence[Expense],
    category_id: str,
    **changes,
) -> Tuple[List[Category], List[Expense]]:
    """Apply ``changes`` to one category and re-stamp affected expenses.

    Expenses take their bucket from ``category_id``, so only expenses filed
    directly under the edited category are re-stamped. Subcategories keep
    the bucket they were created with.
    """
    current = find_category(categories, category_id)
    if current is None:
        raise InvalidReferenceError('Category', category_id)
    if 'id' in changes or 'parent_id' in changes:
        raise ValueError("Category id and parent cannot be changed")
    if 'bucket' in changes:
        _check_bucket(changes['bucket'])

    updated = replace(current, **changes)
    new_categories = [updated if c.id == category_id else c for c in categories]

    new_expenses = list(expenses)
    if updated.bucket != current.bucket:
        new_expenses = restamp_expenses(expenses, category_id, updated.bucket)
        logger.info(
            "category_bucket_changed",
            category_id=category_id,
            old=current.bucket,
            new=updated.bucket,
        )
    return new_categories, new_expenses


def delete_category(
    categories: Sequence[Category],
    expenses: Sequence[Expense],
    category_id: str,
) -> Tuple[List[Category], List[Expense]]:
    """Remove a category, its subcategories and every expense filed under them."""
    removed_ids = {category_id} | {c.id for c in get_subcategories(categories, category_id)}
    remaining = [c for c in categories if c.id not in removed_ids]
    kept = [
        e for e in expenses
        if e.category_id not in removed_ids and e.subcategory_id not in removed_ids
    ]
    return remaining, kept


def category_to_record(category: Category) -> Dict[str, object]:
    """Persisted JSON shape of a category (camelCase keys, bucket as ``type``)."""
    record: Dict[str, object] = {
        'id': category.id,
        'name': category.name,
        'type': category.bucket,
    }
    if category.icon is not None:
        record['icon'] = category.icon
    if category.color is not None:
        record['color'] = category.color
    if category.parent_id is not None:
        record['parentId'] = category.parent_id
        record['isSubcategory'] = True
    return record
