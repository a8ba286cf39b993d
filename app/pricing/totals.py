"""
app/pricing/totals.py
---------------------
Combine the automatic bundle discount with the clerk's manual discount.

    subtotal = Σ unit_price × quantity
    manual   = FIXED      → value
               PERCENTAGE → subtotal × value / 100   (never the post-bundle figure)
    total    = max(0, subtotal − automatic − manual)

All arithmetic uses Decimal, no float.
"""
from decimal import Decimal
from typing import Iterable, Optional

from app.pricing.bundles import compute_automatic_discount
from app.pricing.models import (
    ZERO, AutomaticDiscount, DiscountConfig, DiscountKind, LineItem,
    PricingResult, Receipt, quantize_cents,
)


def cart_subtotal(cart: Iterable[LineItem]) -> Decimal:
    """Sum of unit price × quantity for all lines."""
    total = ZERO
    for item in cart:
        total += item.unit_price * item.quantity
    return total


def manual_discount_amount(subtotal: Decimal, config: Optional[DiscountConfig]) -> Decimal:
    if config is None:
        return ZERO
    value = Decimal(str(config.value or 0))
    if config.kind is DiscountKind.PERCENTAGE:
        # Rounded to cents here; the total below is built from this rounded amount.
        return quantize_cents(subtotal * value / Decimal('100'))
    return value


def compute_totals(cart: Iterable[LineItem],
                   config: Optional[DiscountConfig],
                   automatic: AutomaticDiscount) -> PricingResult:
    """Build the PricingResult. No side effects."""
    subtotal = cart_subtotal(cart)
    manual   = manual_discount_amount(subtotal, config)

    # Clamp so an oversized discount can never print a negative total.
    total = max(ZERO, subtotal - automatic.amount - manual)

    return PricingResult(
        subtotal=subtotal,
        automatic_discount=automatic,
        manual_discount=manual,
        total=total,
    )


def price_receipt(receipt: Receipt) -> PricingResult:
    """Bundle engine followed by the aggregator, for one receipt."""
    automatic = compute_automatic_discount(receipt.items)
    return compute_totals(receipt.items, receipt.discount, automatic)
