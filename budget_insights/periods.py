"""Period keys and the year-aggregate selector.

A period key is a zero-padded ``YYYY-MM`` string so lexical order equals
chronological order. A selector is either a period key or ``YYYY-ALL``,
meaning every period of that year.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable, List, Optional, TypeVar, Union

import pandas as pd

from .exceptions import InvalidPeriodError

YEAR_SENTINEL = 'ALL'

_PERIOD_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')
_YEAR_SELECTOR_RE = re.compile(r'^\d{4}-ALL$')

T = TypeVar('T')


def period_key(value: Union[date, datetime, str]) -> str:
    """Return the ``YYYY-MM`` key for a calendar day.

    Example:
        >>> period_key('2024-01-15')
        '2024-01'
    """
    if isinstance(value, str):
        value = pd.Timestamp(value).date()
    return f"{value.year:04d}-{value.month:02d}"


def is_year_selector(selector: str) -> bool:
    return selector.endswith(f"-{YEAR_SENTINEL}")


def year_of(selector: str) -> str:
    return selector.split('-')[0]


def year_selector(year: Union[int, str]) -> str:
    return f"{int(year):04d}-{YEAR_SENTINEL}"


def validate_selector(selector: str) -> str:
    if not isinstance(selector, str) or not (
        _PERIOD_RE.match(selector) or _YEAR_SELECTOR_RE.match(selector)
    ):
        raise InvalidPeriodError(str(selector))
    return selector


def matches_period(period: str, selector: str) -> bool:
    """True when ``period`` falls inside ``selector``."""
    if is_year_selector(selector):
        return period.startswith(year_of(selector))
    return period == selector


def filter_by_period(records: Iterable[T], selector: str) -> List[T]:
    """Keep records whose ``period`` attribute matches the selector."""
    return [record for record in records if matches_period(record.period, selector)]


def current_period(today: Optional[date] = None) -> str:
    return period_key(today or date.today())


def previous_period(period: str) -> str:
    year, month = (int(part) for part in period.split('-'))
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def days_in_period(period: str) -> int:
    return pd.Period(period, freq='M').days_in_month
