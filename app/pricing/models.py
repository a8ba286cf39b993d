"""
app/pricing/models.py
---------------------
Plain dataclasses shared by the pricing engine and the layout engine.

Money is always Decimal, never float. Values arriving from JSON or
forms are converted with Decimal(str(value)) at the boundary.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Context, Decimal, ROUND_HALF_UP, getcontext
from typing import List, Optional


ZERO  = Decimal('0')
CENTS = Decimal('0.01')


def quantize_cents(amount: Decimal) -> Decimal:
    """Round to cents, half up. Precision grows with the amount so large values never trap."""
    digits = max(getcontext().prec, amount.adjusted() + 3)
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP, context=Context(prec=digits))


class WarrantyUnit(enum.Enum):
    """Unit of the factory warranty typed by the clerk."""
    DAYS   = 'DAYS'
    MONTHS = 'MONTHS'
    YEARS  = 'YEARS'

    @property
    def label(self) -> str:
        """Printed form used on the receipt."""
        return {'DAYS': 'DIAS', 'MONTHS': 'MESES', 'YEARS': 'ANOS'}[self.value]

    @classmethod
    def parse(cls, raw) -> 'WarrantyUnit':
        """Accept enum names as well as the printed Portuguese labels."""
        if isinstance(raw, cls):
            return raw
        text = str(raw or '').strip().upper()
        for unit in cls:
            if text in (unit.value, unit.label):
                return unit
        raise ValueError(f'Unknown warranty unit: {raw!r}')


class DiscountKind(enum.Enum):
    FIXED      = 'fixed'
    PERCENTAGE = 'percentage'


@dataclass
class LineItem:
    """One cart entry. `code` is a display identifier only, not unique."""
    code:          str
    name:          str
    unit_price:    Decimal
    quantity:      int
    warranty_time: Optional[str] = None
    warranty_unit: WarrantyUnit = WarrantyUnit.MONTHS

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def warranty_text(self) -> Optional[str]:
        """Annotation printed under the description, or None."""
        if not self.warranty_time or not str(self.warranty_time).strip():
            return None
        return (
            f'GARANTIA DE FÁBRICA: {str(self.warranty_time).strip()} '
            f'{self.warranty_unit.label} | 90 DIAS LOJA'
        )


@dataclass
class DiscountConfig:
    """Clerk-entered discount. Percentages are not range-checked."""
    kind:  DiscountKind = DiscountKind.FIXED
    value: Decimal = ZERO


@dataclass
class Receipt:
    """Everything the clerk filled in for one sale."""
    name:           Optional[str] = None
    tax_id:         Optional[str] = None
    date:           Optional[str] = None      # ISO yyyy-mm-dd, as typed
    street:         Optional[str] = None
    number:         Optional[str] = None
    complement:     Optional[str] = None
    neighborhood:   Optional[str] = None
    city:           Optional[str] = None
    email:          Optional[str] = None
    contact1:       Optional[str] = None
    contact2:       Optional[str] = None
    salesperson:    Optional[str] = None
    payment_method: Optional[str] = None
    sale_code:      Optional[str] = None
    items:          List[LineItem] = field(default_factory=list)
    discount:       DiscountConfig = field(default_factory=DiscountConfig)

    # Fields the import collaborator may overwrite, in display order.
    CLIENT_FIELDS = (
        'sale_code', 'name', 'tax_id', 'date', 'email', 'street', 'number',
        'neighborhood', 'city', 'complement', 'contact1', 'contact2',
        'payment_method',
    )

    @property
    def contacts(self) -> str:
        return ' / '.join(c for c in (self.contact1, self.contact2) if c)


@dataclass(frozen=True)
class AutomaticDiscount:
    """Store-policy discount derived from cart contents."""
    amount: Decimal
    label:  str


@dataclass(frozen=True)
class PricingResult:
    subtotal:           Decimal
    automatic_discount: AutomaticDiscount
    manual_discount:    Decimal
    total:              Decimal

    @property
    def total_discount(self) -> Decimal:
        return self.automatic_discount.amount + self.manual_discount
