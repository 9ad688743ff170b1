import copy

from budget_insights.categories import DEFAULT_CATEGORIES
from budget_insights.migrations import CURRENT_DATA_VERSION, MIGRATIONS, merge_missing_defaults, migrate_store


def _build_legacy_store():
    return {
        'incomes': [],
        'expenses': [],
        'customCategories': [
            {'id': 'cat-8', 'name': 'Dining Out', 'icon': '🍽️'},
            {'id': 'cat-13', 'name': 'Travel', 'type': 'wants', 'icon': '🧳'},
            {'id': 'custom-1', 'name': 'Gifts', 'type': 'wants'},
        ],
        'currentMonth': '2023-01',
        'currency': 'USD',
    }


class _SaveSpy:
    def __init__(self):
        self.calls = []

    def __call__(self, store):
        self.calls.append(copy.deepcopy(store))


def _by_id(store):
    return {c['id']: c for c in store['customCategories']}


def test_steps_are_ordered_up_to_current_version():
    assert [m.version for m in MIGRATIONS] == [1, 2, 3, 4, 5]
    assert CURRENT_DATA_VERSION == 5


def test_unversioned_store_is_fully_migrated():
    save = _SaveSpy()

    result = migrate_store(_build_legacy_store(), save=save)

    store = result.store
    categories = _by_id(store)
    assert store['version'] == 5
    assert result.changed
    assert result.applied == [1, 2, 3, 4, 5]
    assert categories['cat-8']['name'] == 'Eating Out / Takeaway'
    assert categories['cat-8']['icon'] == '🥡'
    assert categories['cat-8']['type'] == 'needs'
    assert categories['cat-13']['name'] == 'Holiday'
    assert categories['custom-1'] == {'id': 'custom-1', 'name': 'Gifts', 'type': 'wants'}
    assert categories['sub-house-1']['name'] == 'Mortgage'
    assert categories['sub-house-1']['parentId'] == 'cat-1'
    assert categories['cat-18']['name'] == 'Pets'
    assert store['recurringTransactions'] == []
    assert len(save.calls) == 1
    assert save.calls[0] == store


def test_migration_is_idempotent():
    first = migrate_store(_build_legacy_store())
    save = _SaveSpy()

    second = migrate_store(first.store, save=save)

    assert not second.changed
    assert second.applied == []
    assert second.store == first.store
    assert save.calls == []


def test_input_store_is_not_mutated():
    legacy = _build_legacy_store()
    snapshot = copy.deepcopy(legacy)

    migrate_store(legacy)

    assert legacy == snapshot


def test_future_version_passes_through_untouched():
    store = {'version': 9, 'customCategories': [], 'somethingNew': True}
    save = _SaveSpy()

    result = migrate_store(store, save=save)

    assert result.store == store
    assert not result.changed
    assert save.calls == []


def test_current_version_still_receives_new_defaults():
    store = migrate_store(_build_legacy_store()).store
    store['customCategories'] = [c for c in store['customCategories'] if c['id'] != 'sub-hol-2']

    result = migrate_store(store)

    assert result.changed
    assert result.applied == []
    assert 'sub-hol-2' in _by_id(result.store)


def test_existing_recurring_transactions_are_kept():
    store = _build_legacy_store()
    store['version'] = 4
    store['recurringTransactions'] = [{'id': 'r1', 'type': 'income', 'amount': 10}]

    result = migrate_store(store)

    assert result.applied == [5]
    assert result.store['recurringTransactions'] == [{'id': 'r1', 'type': 'income', 'amount': 10}]


def test_merge_missing_defaults_counts_additions():
    store, added = merge_missing_defaults({'customCategories': []})

    assert added == len(DEFAULT_CATEGORIES)
    assert len(store['customCategories']) == len(DEFAULT_CATEGORIES)


def test_null_categories_are_treated_as_empty():
    result = migrate_store({'customCategories': None, 'incomes': [], 'expenses': []})

    assert result.applied == [1, 2, 3, 4, 5]
    assert len(result.store['customCategories']) == len(DEFAULT_CATEGORIES)
    assert result.store['recurringTransactions'] == []
