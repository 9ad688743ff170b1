#!/usr/bin/env python3
"""Print the budget summary, narrative and projection for one period."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_insights import config
from budget_insights.breakdown import calculate_category_breakdown, get_top_categories
from budget_insights.exceptions import BudgetInsightsError
from budget_insights.formatting import format_currency, format_period
from budget_insights.log import configure_logging
from budget_insights.narrative import generate_monthly_summary, generate_yearly_summary
from budget_insights.periods import current_period, is_year_selector, validate_selector, year_of
from budget_insights.projections import calculate_projections, get_analysis_months, render_headline
from budget_insights.storage import load_and_migrate, records_from_store
from budget_insights.summary import calculate_budget_summary
from budget_insights.trends import calculate_monthly_trends, calculate_yearly_trends


def build_report(store_path: Path, selector: Optional[str], currency: Optional[str]) -> List[str]:
    ledger = records_from_store(load_and_migrate(store_path))
    selector = validate_selector(selector or ledger.current_month or current_period())
    currency = currency or ledger.currency

    summary = calculate_budget_summary(ledger.incomes, ledger.expenses, selector)
    monthly = calculate_monthly_trends(ledger.incomes, ledger.expenses)
    if is_year_selector(selector):
        bullets = generate_yearly_summary(
            year_of(selector), summary, ledger.expenses, ledger.categories,
            calculate_yearly_trends(monthly), currency,
        )
    else:
        bullets = generate_monthly_summary(
            selector, summary, ledger.expenses, ledger.categories, monthly, currency,
        )

    lines = [format_period(selector), '']
    lines.append(f"Income:    {format_currency(summary.total_income, currency, decimals=2)}")
    lines.append(f"Spending:  {format_currency(summary.total_expenses, currency, decimals=2)}")
    lines.append(f"Net:       {format_currency(summary.net_savings, currency, decimals=2)}")
    for bucket in ('needs', 'wants', 'savings'):
        lines.append(
            f"  {bucket.title():<8} {format_currency(summary.actual(bucket), currency)}"
            f" of {format_currency(summary.recommended(bucket), currency)}"
            f" ({getattr(summary, f'{bucket}_status')})"
        )

    top = get_top_categories(calculate_category_breakdown(ledger.expenses, ledger.categories, selector))
    if top:
        lines.extend(['', 'Top categories:'])
        lines.extend(
            f"  {entry.category_icon} {entry.category_name}: "
            f"{format_currency(entry.amount, currency)} ({entry.percentage:.0f}%)"
            for entry in top
        )

    if bullets:
        lines.extend(['', 'Summary:'])
        lines.extend(f"  - {bullet}" for bullet in bullets)

    projection = calculate_projections(
        get_analysis_months(monthly, selector), ledger.expenses, ledger.categories
    )
    lines.append('')
    if projection is None:
        lines.append('Not enough history for a projection yet.')
    else:
        lines.append(f"If this continues: {render_headline(projection, currency)}")
        lines.append(f"Emergency buffer: {projection.time_metrics.emergency_buffer_status}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Print a 50/30/20 budget report for one period.')
    parser.add_argument('--store', type=Path, default=config.STORE_PATH, help='Path to the JSON store')
    parser.add_argument('--period', help='YYYY-MM or YYYY-ALL (defaults to the store\'s current month)')
    parser.add_argument('--currency', help='Currency code used for display')
    parser.add_argument('--log-level', default=config.LOG_LEVEL, help='Log level for diagnostics')
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)
    try:
        lines = build_report(args.store, args.period, args.currency)
    except (BudgetInsightsError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print('\n'.join(lines))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
