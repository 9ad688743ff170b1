import pytest

from budget_insights.formatting import format_currency, format_period, get_currency_symbol


@pytest.mark.parametrize(
    'amount, currency, decimals, expected',
    [
        (1234.56, 'USD', 0, '$1,235'),
        (1234.56, 'EUR', 2, '€1,234.56'),
        (-800, 'GBP', 2, '-£800.00'),
        (0, 'INR', 0, '₹0'),
        (1500000, 'AUD', 0, 'A$1,500,000'),
    ],
)
def test_format_currency(amount, currency, decimals, expected):
    assert format_currency(amount, currency, decimals=decimals) == expected


def test_unknown_currency_falls_back_to_dollar():
    assert get_currency_symbol('XYZ') == '$'
    assert get_currency_symbol('CHF') == 'Fr'


def test_format_period():
    assert format_period('2024-01') == 'January 2024'
    assert format_period('2023-12') == 'December 2023'
    assert format_period('2024-ALL') == 'Yearly Summary 2024'
