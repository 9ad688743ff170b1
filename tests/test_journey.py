import pytest

from budget_insights.journey import (
    BALANCED_BUILDER,
    ESSENTIALS_FOCUSED,
    LIFE_ENJOYER,
    SUPER_SAVER,
    calculate_journey_stats,
    get_financial_persona,
)
from budget_insights.models import JourneyStats, TrendPoint


def _stats(needs, wants, savings):
    return JourneyStats(100, needs, wants, savings, needs, wants, savings)


def test_journey_stats_use_last_months_only():
    history = [
        TrendPoint('2024-01', income=9999, needs=9999, wants=0, savings=0),
        TrendPoint('2024-02', income=1000, needs=500, wants=300, savings=200),
        TrendPoint('2024-03', income=1000, needs=600, wants=200, savings=200),
    ]

    stats = calculate_journey_stats(history, months=2)

    assert stats.total_income == 2000
    assert stats.needs_percentage == pytest.approx(55)
    assert stats.wants_percentage == pytest.approx(25)
    assert stats.savings_percentage == pytest.approx(20)


def test_journey_stats_without_income():
    stats = calculate_journey_stats([TrendPoint('2024-01', needs=100)])

    assert stats.total_needs == 100
    assert stats.needs_percentage == 0


@pytest.mark.parametrize(
    'needs, wants, savings, persona',
    [
        (50, 20, 25, SUPER_SAVER),
        (65, 30, 30, SUPER_SAVER),
        (61, 20, 10, ESSENTIALS_FOCUSED),
        (40, 41, 10, LIFE_ENJOYER),
        (50, 30, 20, BALANCED_BUILDER),
    ],
)
def test_persona_rules_apply_in_order(needs, wants, savings, persona):
    assert get_financial_persona(_stats(needs, wants, savings)) == persona
