"""Short plain-language summaries of one month or one year.

Candidates are produced independently, each with a fixed priority, and
then run through ``select_candidates`` which is the only place that
decides what survives. Output is deterministic for identical input.

The reconciliation hint pairs Needs and Wants variances only; a savings
shortfall never counts as the "lower spending" side.

Example:
    >>> bullets = generate_monthly_summary('2024-01', summary, expenses, categories, history)
    >>> bullets[0]
    'Total spending was $2,000 below your income.'
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .breakdown import calculate_category_breakdown
from .config import get_rule
from .formatting import format_currency
from .models import (
    NEEDS,
    SAVINGS,
    WANTS,
    BudgetSummary,
    Category,
    Expense,
    SummaryCandidate,
    TrendPoint,
    VarianceRecord,
)
from .periods import year_selector

PRIORITY_OUTCOME = 1
PRIORITY_NEEDS = 2
PRIORITY_WANTS = 3
PRIORITY_SAVINGS = 4
PRIORITY_DRIVERS = 5
PRIORITY_SAVINGS_HEALTH = 6
PRIORITY_TREND = 7
PRIORITY_RECONCILIATION = 8

KIND_OUTCOME = 'outcome'
KIND_VARIANCE = 'variance'
KIND_DRIVERS = 'drivers'
KIND_SAVINGS_HEALTH = 'savings_health'
KIND_TREND = 'trend'
KIND_RECONCILIATION = 'reconciliation'

_VARIANCE_PRIORITY = {NEEDS: PRIORITY_NEEDS, WANTS: PRIORITY_WANTS, SAVINGS: PRIORITY_SAVINGS}
_LABELS = {NEEDS: 'Needs', WANTS: 'Wants', SAVINGS: 'Savings'}


def _money(amount: float, currency: str) -> str:
    return format_currency(amount, currency, decimals=0)


def _whole_percent(value: float) -> int:
    # Half-up, so 12.5% reads as 13%
    return int(math.floor(value + 0.5))


def _rate(savings: float, income: float) -> int:
    return _whole_percent(savings / income * 100) if income > 0 else 0


# Candidate producers

def outcome_candidate(summary: BudgetSummary, currency: str = 'USD') -> SummaryCandidate:
    difference = summary.total_expenses - summary.total_income
    side = 'above' if difference > 0 else 'below'
    return SummaryCandidate(
        priority=PRIORITY_OUTCOME,
        kind=KIND_OUTCOME,
        text=f"Total spending was {_money(abs(difference), currency)} {side} your income.",
        magnitude=abs(difference),
    )


def variance_candidates(
    summary: BudgetSummary,
    absolute_threshold: float,
    currency: str = 'USD',
) -> List[SummaryCandidate]:
    """One candidate per bucket whose variance clears the noise threshold.

    The threshold is ``max(recommended * relative, absolute_threshold)``.
    """
    relative = float(get_rule('variance', 'relative_threshold', default=0.05))
    candidates = []
    for bucket in (NEEDS, WANTS, SAVINGS):
        recommended = summary.recommended(bucket)
        diff = summary.actual(bucket) - recommended
        if abs(diff) <= max(recommended * relative, absolute_threshold):
            continue

        amount = _money(abs(diff), currency)
        if bucket == SAVINGS:
            text = (
                f"Savings exceeded plan by {amount}."
                if diff > 0
                else f"Saved {amount} less than target."
            )
        else:
            more_less = 'more' if diff > 0 else 'less'
            text = f"You spent {amount} {more_less} than planned on {_LABELS[bucket]}."

        candidates.append(SummaryCandidate(
            priority=_VARIANCE_PRIORITY[bucket],
            kind=KIND_VARIANCE,
            text=text,
            magnitude=abs(diff),
            group=bucket,
            variance=VarianceRecord(
                bucket=bucket,
                direction='over' if diff > 0 else 'under',
                amount=abs(diff),
            ),
        ))
    return candidates


def drivers_candidate(
    summary: BudgetSummary,
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    selector: str,
) -> Optional[SummaryCandidate]:
    """Name the one or two categories that dominate spending, if any do."""
    if summary.total_expenses <= 0:
        return None
    share = float(get_rule('narrative', 'driver_share', default=50))
    ranked = [
        entry for entry in calculate_category_breakdown(expenses, categories, selector)
        if entry.bucket != SAVINGS
    ]
    if not ranked:
        return None

    for count in (1, 2):
        top = ranked[:count]
        if len(top) < count:
            break
        pct = sum(entry.amount for entry in top) / summary.total_expenses * 100
        if pct >= share:
            names = ' and '.join(entry.category_name for entry in top)
            return SummaryCandidate(
                priority=PRIORITY_DRIVERS,
                kind=KIND_DRIVERS,
                text=f"{names} made up {_whole_percent(pct)}% of total spending.",
                magnitude=pct,
            )
    return None


def savings_health_candidate(
    summary: BudgetSummary,
    history: Sequence[TrendPoint],
    period: str,
) -> Optional[SummaryCandidate]:
    """Period-over-period change in savings rate, in whole percentage points.

    The current rate comes from the history point for ``period`` when there
    is one, otherwise from the summary itself.
    """
    previous = [p for p in history if p.period < period]
    if not previous:
        return None
    prior = max(previous, key=lambda p: p.period)

    current = next((p for p in history if p.period == period), None)
    if current is not None:
        current_rate = _rate(current.savings, current.income)
    else:
        current_rate = _rate(summary.net_savings, summary.total_income)
    prior_rate = _rate(prior.savings, prior.income)

    change = current_rate - prior_rate
    if abs(change) < int(get_rule('narrative', 'min_rate_change', default=1)):
        return None
    verb = 'increased' if change > 0 else 'fell'
    return SummaryCandidate(
        priority=PRIORITY_SAVINGS_HEALTH,
        kind=KIND_SAVINGS_HEALTH,
        text=f"Savings {verb} from {prior_rate}% to {current_rate}%.",
        magnitude=abs(change),
    )


def trend_candidate(
    history: Sequence[TrendPoint],
    period: str,
    unit: str = 'months',
) -> Optional[SummaryCandidate]:
    """Three-period run ending at ``period``: needs up, wants up or savings down."""
    ordered = sorted(history, key=lambda p: p.period)
    index = next((i for i, p in enumerate(ordered) if p.period == period), -1)
    if index < 2:
        return None
    oldest, middle, latest = ordered[index - 2:index + 1]

    for bucket in (NEEDS, WANTS):
        a, b, c = getattr(oldest, bucket), getattr(middle, bucket), getattr(latest, bucket)
        if c > b > a:
            return SummaryCandidate(
                priority=PRIORITY_TREND,
                kind=KIND_TREND,
                text=f"{_LABELS[bucket]} spending has increased for three consecutive {unit}.",
                group=bucket,
            )
    if latest.savings < middle.savings < oldest.savings:
        return SummaryCandidate(
            priority=PRIORITY_TREND,
            kind=KIND_TREND,
            text=f"Savings have decreased for three consecutive {unit}.",
            group=SAVINGS,
        )
    return None


def reconciliation_candidate(variances: Sequence[SummaryCandidate]) -> Optional[SummaryCandidate]:
    """Pair the largest spending overrun with the largest underspend.

    Only the spending buckets take part; a savings shortfall is not lower
    spending.
    """
    records = [
        c.variance for c in variances
        if c.variance is not None and c.variance.bucket != SAVINGS
    ]
    overs = [r for r in records if r.direction == 'over']
    unders = [r for r in records if r.direction == 'under']
    if not overs or not unders:
        return None
    over = max(overs, key=lambda r: r.amount)
    under = max(unders, key=lambda r: r.amount)
    return SummaryCandidate(
        priority=PRIORITY_RECONCILIATION,
        kind=KIND_RECONCILIATION,
        text=(
            f"Lower {_LABELS[under.bucket].lower()} spending offset some of the "
            f"{_LABELS[over.bucket].lower()} overspend."
        ),
        magnitude=min(over.amount, under.amount),
    )


# Selection

def select_candidates(
    candidates: Sequence[SummaryCandidate],
    max_variances: int = 2,
    max_bullets: int = 6,
) -> List[SummaryCandidate]:
    """Rank, cap and truncate candidates into the final bullet list.

    Steps:
        1. Keep at most ``max_variances`` variance candidates, largest
           absolute variance first, ties broken by priority.
        2. A trend candidate displaces the lowest-priority surviving
           variance.
        3. Add a reconciliation hint when an over and an under variance
           both survived.
        4. Sort by priority and keep the first ``max_bullets``.

    Short input stays short; nothing is padded.
    """
    variances = [c for c in candidates if c.kind == KIND_VARIANCE]
    others = [
        c for c in candidates
        if c.kind not in (KIND_VARIANCE, KIND_RECONCILIATION)
    ]

    variances = sorted(variances, key=lambda c: (-c.magnitude, c.priority))[:max_variances]

    if variances and any(c.kind == KIND_TREND for c in others):
        displaced = max(variances, key=lambda c: c.priority)
        variances = [c for c in variances if c is not displaced]

    survivors = others + variances
    hint = reconciliation_candidate(variances)
    if hint is not None:
        survivors.append(hint)

    survivors.sort(key=lambda c: c.priority)
    return survivors[:max_bullets]


def _summarise(
    summary: BudgetSummary,
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    history: Sequence[TrendPoint],
    selector: str,
    history_key: str,
    absolute_threshold: float,
    unit: str,
    currency: str,
) -> List[str]:
    candidates: List[SummaryCandidate] = [outcome_candidate(summary, currency)]
    candidates.extend(variance_candidates(summary, absolute_threshold, currency))
    for candidate in (
        drivers_candidate(summary, expenses, categories, selector),
        savings_health_candidate(summary, history, history_key),
        trend_candidate(history, history_key, unit),
    ):
        if candidate is not None:
            candidates.append(candidate)

    selected = select_candidates(
        candidates,
        max_variances=int(get_rule('variance', 'max_bullets', default=2)),
        max_bullets=int(get_rule('narrative', 'max_bullets', default=6)),
    )
    return [c.text for c in selected]


def generate_monthly_summary(
    selector: str,
    budget_summary: BudgetSummary,
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    monthly_history: Sequence[TrendPoint],
    currency: str = 'USD',
) -> List[str]:
    """Bullets for one ``YYYY-MM`` period against its monthly history."""
    return _summarise(
        budget_summary,
        expenses,
        categories,
        monthly_history,
        selector=selector,
        history_key=selector,
        absolute_threshold=float(get_rule('variance', 'monthly_absolute_threshold', default=100)),
        unit='months',
        currency=currency,
    )


def generate_yearly_summary(
    year: str,
    budget_summary: BudgetSummary,
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    yearly_history: Sequence[TrendPoint],
    currency: str = 'USD',
) -> List[str]:
    """Bullets for a whole year; ``yearly_history`` holds ``YYYY`` points."""
    year = str(year)[:4]
    return _summarise(
        budget_summary,
        expenses,
        categories,
        yearly_history,
        selector=year_selector(year),
        history_key=year,
        absolute_threshold=float(get_rule('variance', 'yearly_absolute_threshold', default=1200)),
        unit='years',
        currency=currency,
    )
