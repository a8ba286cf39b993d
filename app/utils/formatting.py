"""
app/utils/formatting.py
───────────────────────
Brazilian display formats for money and dates.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from app.pricing.models import quantize_cents


def format_decimal_br(value) -> str:
    """Decimal('1234.5') → '1.234,50'."""
    amount = quantize_cents(Decimal(str(value)))
    us = f'{amount:,.2f}'                      # 1,234.50
    return us.replace(',', '_').replace('.', ',').replace('_', '.')


def format_brl(value) -> str:
    """Decimal('1234.5') → 'R$ 1.234,50'."""
    amount = Decimal(str(value))
    if amount < 0:
        return f'-R$ {format_decimal_br(-amount)}'
    return f'R$ {format_decimal_br(amount)}'


def format_date_br(value: date) -> str:
    return value.strftime('%d/%m/%Y')


def parse_iso_date(raw: Optional[str]) -> Optional[date]:
    """'2026-03-09' → date; anything unparsable → None."""
    if not raw:
        return None
    try:
        return datetime.strptime(str(raw).strip()[:10], '%Y-%m-%d').date()
    except ValueError:
        return None
