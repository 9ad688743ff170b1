"""Versioned upgrades for the persisted store.

Each step is a pure function over the store dict and is applied only when
the stored ``version`` is below the step's version. After the steps, any
shipped default category missing from the store is appended, so users on
the latest version still pick up new defaults.

Running the pipeline twice is a no-op the second time, and the save
callback is only invoked when something actually changed.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .categories import DEFAULT_CATEGORIES, category_to_record
from .log import get_logger
from .models import NEEDS

logger = get_logger(__name__)

Store = Dict[str, Any]

CURRENT_DATA_VERSION = 5

CATEGORY_RENAMES = {
    'cat-8': {'name': 'Eating Out / Takeaway', 'icon': '🥡'},
    'cat-13': {'name': 'Holiday', 'icon': '✈️'},
    'cat-16': {'name': 'Pension', 'icon': '👴'},
}


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    apply: Callable[[Store], Store]


@dataclass
class MigrationResult:
    store: Store
    changed: bool
    applied: List[int] = field(default_factory=list)


def _backfill_category_type(store: Store) -> Store:
    store['customCategories'] = [
        {**category, 'type': category.get('type') or NEEDS}
        for category in store.get('customCategories') or []
    ]
    return store


def _rename_categories(store: Store) -> Store:
    store['customCategories'] = [
        {**category, **CATEGORY_RENAMES.get(category.get('id'), {})}
        for category in store.get('customCategories') or []
    ]
    return store


def _bump_only(store: Store) -> Store:
    # New default categories arrive through merge_missing_defaults
    return store


def _add_recurring_transactions(store: Store) -> Store:
    if store.get('recurringTransactions') is None:
        store['recurringTransactions'] = []
    return store


MIGRATIONS: Tuple[Migration, ...] = (
    Migration(1, 'backfill missing category type', _backfill_category_type),
    Migration(2, 'rename dining out, travel and retirement categories', _rename_categories),
    Migration(3, 'add pets category', _bump_only),
    Migration(4, 'expand default categories and subcategories', _bump_only),
    Migration(5, 'add recurring transactions', _add_recurring_transactions),
)


def merge_missing_defaults(store: Store) -> Tuple[Store, int]:
    """Append every default category whose id is absent.

    Returns:
        Tuple of (store, number of categories added)
    """
    categories = store.get('customCategories') or []
    existing = {category.get('id') for category in categories}
    missing = [category_to_record(c) for c in DEFAULT_CATEGORIES if c.id not in existing]
    store['customCategories'] = [*categories, *missing]
    return store, len(missing)


def migrate_store(store: Store, save: Optional[Callable[[Store], None]] = None) -> MigrationResult:
    """Bring a loaded store up to ``CURRENT_DATA_VERSION``.

    Args:
        store: Store as loaded from disk; it is not modified
        save: Called with the migrated store when anything changed

    Returns:
        MigrationResult with the migrated copy, whether it changed and the
        versions that were applied
    """
    migrated = copy.deepcopy(store)
    version = migrated.get('version') or 0

    if version > CURRENT_DATA_VERSION:
        logger.warning(
            "store_version_newer_than_supported",
            version=version,
            supported=CURRENT_DATA_VERSION,
        )
        return MigrationResult(store=migrated, changed=False)

    applied: List[int] = []
    for migration in MIGRATIONS:
        if version < migration.version:
            logger.info("migration_applied", version=migration.version, step=migration.description)
            migrated = migration.apply(migrated)
            migrated['version'] = migration.version
            version = migration.version
            applied.append(migration.version)

    migrated, added = merge_missing_defaults(migrated)
    if added:
        logger.info("default_categories_added", count=added)

    changed = bool(applied) or added > 0
    if changed and save is not None:
        save(migrated)
    return MigrationResult(store=migrated, changed=changed, applied=applied)
