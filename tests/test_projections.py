from datetime import date

import pytest

from budget_insights.models import Category, Expense, TrendPoint
from budget_insights.projections import (
    HEADLINE_GROWS,
    HEADLINE_SHRINKS,
    HEADLINE_UNCHANGED,
    buffer_status,
    calculate_projections,
    get_analysis_months,
    render_headline,
)


def _point(period, income, expenses, savings, needs, wants):
    return TrendPoint(period, income=income, expenses=expenses, savings=savings, needs=needs, wants=wants)


def _build_history():
    return [
        _point('2023-01', 1000, 800, 200, 500, 300),
        _point('2023-02', 1000, 900, 100, 600, 300),
        _point('2023-03', 1000, 700, 300, 400, 300),
        _point('2023-04', 1000, 800, 200, 500, 300),
        _point('2023-05', 1000, 1100, -100, 800, 300),
        _point('2023-06', 1000, 900, 100, 600, 300),
        _point('2023-07', 1000, 500, 500, 200, 300),
    ]


def test_analysis_window_excludes_selected_month_and_is_capped():
    analysis = get_analysis_months(_build_history(), '2023-07')

    assert len(analysis) == 6
    assert analysis[0].period == '2023-06'
    assert analysis[-1].period == '2023-01'


def test_analysis_window_shifts_with_selected_month():
    analysis = get_analysis_months(_build_history(), '2023-04')

    assert [p.period for p in analysis] == ['2023-03', '2023-02', '2023-01']


def test_analysis_window_skips_months_without_income():
    history = _build_history() + [_point('2022-12', 0, 200, -200, 100, 100)]

    analysis = get_analysis_months(history, '2023-07')

    assert all(p.period != '2022-12' for p in analysis)


def test_year_selector_includes_the_whole_year():
    analysis = get_analysis_months(_build_history(), '2023-ALL')

    assert analysis[0].period == '2023-07'
    assert len(analysis) == 6


def test_fewer_than_three_months_gives_no_projection():
    assert calculate_projections(_build_history()[:2], [], []) is None


def test_projection_averages_and_headline():
    result = calculate_projections(_build_history()[:3], [], [])

    assert result.average_savings == pytest.approx(200)
    assert result.average_needs == pytest.approx(500)
    assert result.yearly_projection == pytest.approx(2400)
    assert result.headline == HEADLINE_GROWS
    assert result.months_analyzed == 3
    assert render_headline(result) == 'Savings grow by ~$2,400.'


def test_top_categories_and_time_metrics():
    history = [
        _point('2023-01', 4000, 3000, 1000, 2000, 1000),
        _point('2023-02', 4000, 3000, 1000, 2000, 1000),
        _point('2023-03', 4000, 3000, 1000, 2000, 1000),
    ]
    categories = [Category('c1', 'Rent', 'needs', '🏠')]
    expenses = [
        Expense('1', 500, date(2023, 1, 1), '2023-01', 'c1', 'needs', 'Rent payment'),
        Expense('2', 90, date(2023, 2, 1), '2023-02', 'gone', 'wants'),
        Expense('3', 999, date(2023, 4, 1), '2023-04', 'c1', 'needs'),
    ]

    result = calculate_projections(history, expenses, categories)

    metrics = result.time_metrics
    assert metrics.months_of_living_expenses == pytest.approx(4)
    assert metrics.emergency_buffer_status == 'Healthy'
    assert [c.name for c in metrics.top_categories_covered] == ['Rent', 'Unknown']
    assert metrics.top_categories_covered[0].icon == '🏠'
    assert metrics.top_categories_covered[0].months_covered == pytest.approx(72)
    assert metrics.top_categories_covered[1].icon == '💰'


def test_deficit_projection():
    history = [
        _point('2023-01', 1000, 1200, -200, 800, 400),
        _point('2023-02', 1000, 1100, -100, 700, 400),
        _point('2023-03', 1000, 1300, -300, 900, 400),
    ]

    result = calculate_projections(history, [], [])

    assert result.average_savings == pytest.approx(-200)
    assert result.yearly_projection == pytest.approx(-2400)
    assert result.headline == HEADLINE_SHRINKS
    assert result.time_metrics.months_of_living_expenses == 0
    assert result.time_metrics.top_categories_covered == []
    assert result.time_metrics.emergency_buffer_status == 'Basic'
    assert render_headline(result, 'GBP') == 'Spending exceeds income by ~£2,400.'


def test_flat_projection_headline():
    history = [_point(f'2023-0{m}', 1000, 1000, 0, 600, 400) for m in (1, 2, 3)]

    result = calculate_projections(history, [], [])

    assert result.headline == HEADLINE_UNCHANGED
    assert render_headline(result) == 'Savings remain unchanged.'


@pytest.mark.parametrize('months, status', [(7, 'Strong'), (6, 'Healthy'), (3, 'Healthy'), (2.9, 'Basic')])
def test_buffer_status(months, status):
    assert buffer_status(months) == status
