"""Formatting utilities for currency amounts and period labels."""

from __future__ import annotations

import calendar
from typing import Dict, Union

from .periods import is_year_selector, year_of

# Display labels only, amounts are never converted between currencies
CURRENCIES: Dict[str, Dict[str, str]] = {
    'USD': {'symbol': '$', 'name': 'US Dollar'},
    'EUR': {'symbol': '€', 'name': 'Euro'},
    'GBP': {'symbol': '£', 'name': 'British Pound'},
    'INR': {'symbol': '₹', 'name': 'Indian Rupee'},
    'JPY': {'symbol': '¥', 'name': 'Japanese Yen'},
    'CNY': {'symbol': '¥', 'name': 'Chinese Yuan'},
    'AUD': {'symbol': 'A$', 'name': 'Australian Dollar'},
    'CAD': {'symbol': 'C$', 'name': 'Canadian Dollar'},
    'CHF': {'symbol': 'Fr', 'name': 'Swiss Franc'},
    'SGD': {'symbol': 'S$', 'name': 'Singapore Dollar'},
}


def get_currency_symbol(code: str) -> str:
    return CURRENCIES.get(code, {}).get('symbol', '$')


def format_currency(amount: Union[float, int], currency: str = 'USD', decimals: int = 0) -> str:
    """Format an amount with the currency symbol and thousands separators.

    Args:
        amount: The amount to format
        currency: ISO code used to pick the symbol
        decimals: Number of fraction digits

    Returns:
        Formatted string, negative amounts with a leading minus

    Example:
        >>> format_currency(1234.56)
        '$1,235'
        >>> format_currency(-800, 'GBP', decimals=2)
        '-£800.00'
    """
    symbol = get_currency_symbol(currency)
    formatted = f"{abs(amount):,.{decimals}f}"
    sign = '-' if round(amount, decimals) < 0 else ''
    return f"{sign}{symbol}{formatted}"


def format_period(selector: str) -> str:
    """Human label for a period selector.

    Example:
        >>> format_period('2024-01')
        'January 2024'
        >>> format_period('2024-ALL')
        'Yearly Summary 2024'
    """
    if is_year_selector(selector):
        return f"Yearly Summary {year_of(selector)}"
    year, month = selector.split('-')
    return f"{calendar.month_name[int(month)]} {year}"
