from datetime import date

import pytest

from budget_insights.models import Expense, Income
from budget_insights.summary import (
    bucket_status,
    calculate_50_30_20,
    calculate_actual_breakdown,
    calculate_budget_summary,
    calculate_savings_rate,
)
from budget_insights.transactions import create_expense, create_income
from budget_insights.categories import DEFAULT_CATEGORIES


def _build_month():
    incomes = [create_income(5000, '2024-01-01', 'Salary')]
    expenses = [
        create_expense(DEFAULT_CATEGORIES, 2000, '2024-01-03', 'cat-1', 'Rent'),
        create_expense(DEFAULT_CATEGORIES, 1000, '2024-01-10', 'cat-9', 'Cinema'),
        create_expense(DEFAULT_CATEGORIES, 500, '2024-01-28', 'cat-17', 'Transfer'),
    ]
    return incomes, expenses


def test_recommended_split_follows_50_30_20():
    assert calculate_50_30_20(5000) == {'needs': 2500.0, 'wants': 1500.0, 'savings': 1000.0}
    assert calculate_50_30_20(0) == {'needs': 0.0, 'wants': 0.0, 'savings': 0.0}


def test_budget_summary_for_a_single_month():
    incomes, expenses = _build_month()

    summary = calculate_budget_summary(incomes, expenses, '2024-01')

    assert summary.total_income == 5000
    assert summary.total_expenses == 3000
    assert summary.net_savings == 2000
    assert summary.recommended_needs == 2500
    assert summary.recommended_wants == 1500
    assert summary.recommended_savings == 1000
    assert summary.actual_savings == 500
    assert summary.unallocated_cash == 1500
    assert summary.needs_status == 'under'
    assert summary.wants_status == 'under'
    assert summary.savings_status == 'under'
    assert not summary.is_over_budget
    assert summary.needs_percentage == pytest.approx(40.0)


def test_savings_transfers_are_not_counted_as_spending():
    incomes, expenses = _build_month()

    summary = calculate_budget_summary(incomes, expenses, '2024-01')

    assert summary.total_expenses == summary.actual_needs + summary.actual_wants
    assert summary.unallocated_cash == pytest.approx(summary.net_savings - summary.actual_savings)


def test_zero_income_gives_zero_percentages_and_on_track():
    expenses = [Expense('e1', 300, date(2024, 2, 5), '2024-02', 'cat-1', 'needs')]

    summary = calculate_budget_summary([], expenses, '2024-02')

    assert summary.needs_percentage == 0
    assert summary.needs_status == 'on-track'
    assert summary.is_over_budget
    assert calculate_savings_rate(0, 300) == 0


def test_year_selector_aggregates_every_month():
    incomes = [
        Income('i1', 1000, date(2024, 1, 1), '2024-01'),
        Income('i2', 1000, date(2024, 6, 1), '2024-06'),
        Income('i3', 1000, date(2023, 12, 1), '2023-12'),
    ]

    summary = calculate_budget_summary(incomes, [], '2024-ALL')

    assert summary.total_income == 2000


def test_status_uses_five_percent_band():
    assert bucket_status(1040, 1000) == 'on-track'
    assert bucket_status(960, 1000) == 'on-track'
    assert bucket_status(1060, 1000) == 'over'
    assert bucket_status(940, 1000) == 'under'


def test_unknown_bucket_is_ignored():
    expenses = [
        Expense('e1', 100, date(2024, 1, 2), '2024-01', 'cat-1', 'needs'),
        Expense('e2', 50, date(2024, 1, 2), '2024-01', 'x', 'mystery'),
    ]

    assert calculate_actual_breakdown(expenses) == {'needs': 100, 'wants': 0.0, 'savings': 0.0}
