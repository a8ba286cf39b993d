"""
test_formatting.py — Tests for Brazilian money and date formatting.
Run: pytest test_formatting.py -v
"""
from datetime import date
from decimal import Decimal

import pytest

from app.utils.formatting import format_brl, format_date_br, format_decimal_br, parse_iso_date


@pytest.mark.parametrize('value, expected', [
    (Decimal('0'), '0,00'),
    (Decimal('1234.5'), '1.234,50'),
    (Decimal('0.005'), '0,01'),
    ('899', '899,00'),
    (Decimal('1e27'), '1.000.000.000.000.000.000.000.000.000,00'),
])
def test_format_decimal_br(value, expected):
    assert format_decimal_br(value) == expected


def test_format_brl_negative():
    assert format_brl(Decimal('-150')) == '-R$ 150,00'


def test_format_brl_large_amount():
    assert format_brl(Decimal('123456789012345678901234567890.995')) == \
        'R$ 123.456.789.012.345.678.901.234.567.891,00'


def test_dates():
    assert format_date_br(date(2026, 3, 9)) == '09/03/2026'
    assert parse_iso_date('2026-03-09T10:00') == date(2026, 3, 9)
    assert parse_iso_date('09/03/2026') is None
    assert parse_iso_date(None) is None
