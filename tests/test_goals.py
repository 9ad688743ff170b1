from datetime import date

import pytest

from budget_insights.goals import (
    MSG_ALREADY_REACHED,
    MSG_NOT_BUILDING,
    calculate_average_monthly_cash_balance,
    calculate_goal_timeline,
    completed_month_count,
    is_goal_planner_unlocked,
)
from budget_insights.models import Expense, Income


def _build_history():
    incomes = [
        Income('i1', 3000, date(2024, 1, 1), '2024-01'),
        Income('i2', 3000, date(2024, 2, 1), '2024-02'),
        Income('i3', 100, date(2024, 3, 1), '2024-03'),
    ]
    expenses = [
        Expense('e1', 1000, date(2024, 1, 5), '2024-01', 'cat-1', 'needs'),
        Expense('e2', 500, date(2024, 1, 20), '2024-01', 'cat-14', 'savings'),
        Expense('e3', 1500, date(2024, 2, 9), '2024-02', 'cat-9', 'wants'),
    ]
    return incomes, expenses


@pytest.mark.parametrize(
    'goal, start, monthly, expected',
    [
        (10000, 3000, 500, 14),
        (10000, 3000, 700, 10),
        (10000, 3000, 450, 16),
        (100000, 0, 100, 1000),
    ],
)
def test_goal_timeline_rounds_months_up(goal, start, monthly, expected):
    timeline = calculate_goal_timeline(goal, start, monthly, today=date(2024, 1, 15))

    assert timeline.months == expected
    assert timeline.is_achievable
    assert timeline.message == f"At your current pace, you'll reach this goal in {expected} months."


def test_single_month_message_and_completion_date():
    timeline = calculate_goal_timeline(600, 0, 600, today=date(2024, 1, 31))

    assert timeline.months == 1
    assert timeline.message == "At your current pace, you'll reach this goal in 1 month."
    assert timeline.completion_date == date(2024, 2, 29)


def test_goal_already_reached():
    timeline = calculate_goal_timeline(5000, 5000, 0)

    assert timeline.months == 0
    assert timeline.is_achievable
    assert timeline.message == MSG_ALREADY_REACHED


@pytest.mark.parametrize('monthly', [0, -250])
def test_goal_unreachable_when_balance_is_not_growing(monthly):
    timeline = calculate_goal_timeline(5000, 1000, monthly)

    assert timeline.months == -1
    assert not timeline.is_achievable
    assert timeline.message == MSG_NOT_BUILDING
    assert timeline.completion_date is None


def test_average_cash_balance_excludes_current_month_and_savings_transfers():
    incomes, expenses = _build_history()

    average = calculate_average_monthly_cash_balance(incomes, expenses, today=date(2024, 3, 10))

    # January: 3000 - 1000 - 500, February: 3000 - 1500
    assert average == pytest.approx(1500)


def test_average_cash_balance_including_current_month():
    incomes, expenses = _build_history()

    average = calculate_average_monthly_cash_balance(
        incomes, expenses, exclude_current=False, today=date(2024, 3, 10)
    )

    assert average == pytest.approx((1500 + 1500 + 100) / 3)


def test_average_cash_balance_without_history():
    assert calculate_average_monthly_cash_balance([], []) == 0.0


def test_completed_month_count():
    incomes, expenses = _build_history()

    assert completed_month_count(incomes, expenses, today=date(2024, 3, 10)) == 2
    assert completed_month_count(incomes, expenses, today=date(2024, 4, 1)) == 3
    assert not is_goal_planner_unlocked(incomes, expenses, today=date(2024, 3, 10))
    assert is_goal_planner_unlocked(incomes, expenses, today=date(2024, 4, 1))
