"""Cumulative spending mix over recent months and the matching persona."""

from __future__ import annotations

from typing import Sequence

from .config import get_rule
from .models import JourneyStats, Persona, TrendPoint
from .trends import trends_frame

SUPER_SAVER = Persona(
    title='Super Saver',
    description='You are crushing your savings goals! Your savings rate is well above the recommended 20%.',
    icon='🚀',
    color='#10B981',
    recommendation='Consider investing your surplus savings for long-term growth.',
)
ESSENTIALS_FOCUSED = Persona(
    title='Essentials Focused',
    description=(
        'A large portion of your income goes to necessities. '
        'This is common in high cost-of-living areas.'
    ),
    icon='🏠',
    color='#F59E0B',
    recommendation=(
        'Review your fixed costs. Can any bills be negotiated? '
        'Ensure you have an emergency fund.'
    ),
)
LIFE_ENJOYER = Persona(
    title='Life Enjoyer',
    description=(
        'You are spending more on lifestyle choices than recommended. '
        'While fun, it may impact future goals.'
    ),
    icon='🎉',
    color='#A855F7',
    recommendation='Try the "24-hour rule" for non-essential purchases to reduce impulse buying.',
)
BALANCED_BUILDER = Persona(
    title='Balanced Builder',
    description='You are keeping a steady balance close to the 50/30/20 rule. Great stability!',
    icon='⚖️',
    color='#3B82F6',
    recommendation='You are on a good path. Look for small optimizations to boost saving slightly.',
)


def calculate_journey_stats(history: Sequence[TrendPoint], months: int = 6) -> JourneyStats:
    """Sum the last ``months`` points and express each bucket as a share of income."""
    recent = list(history)[-months:] if months > 0 else []
    totals = trends_frame(recent)[['income', 'needs', 'wants', 'savings']].sum()
    income = float(totals['income'])

    def _pct(value: float) -> float:
        return value / income * 100 if income > 0 else 0.0

    return JourneyStats(
        total_income=income,
        total_needs=float(totals['needs']),
        total_wants=float(totals['wants']),
        total_savings=float(totals['savings']),
        needs_percentage=_pct(float(totals['needs'])),
        wants_percentage=_pct(float(totals['wants'])),
        savings_percentage=_pct(float(totals['savings'])),
    )


def get_financial_persona(stats: JourneyStats) -> Persona:
    """First matching rule wins: savings, then needs, then wants."""
    if stats.savings_percentage >= get_rule('persona', 'super_saver_savings', default=25):
        return SUPER_SAVER
    if stats.needs_percentage > get_rule('persona', 'needs_heavy', default=60):
        return ESSENTIALS_FOCUSED
    if stats.wants_percentage > get_rule('persona', 'wants_heavy', default=40):
        return LIFE_ENJOYER
    return BALANCED_BUILDER
