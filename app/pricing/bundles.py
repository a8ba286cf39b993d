"""
app/pricing/bundles.py
----------------------
Store bundle promotions, evaluated against the cart.

Two fixed store rules:

  Gift pillow  → the "FLOCOS CONFORTO" pillow is free whenever the cart
                 holds any other product.
  Combo        → a BASE bought together with a mattress of the same size
                 is repriced down to the size's combo price.

Matching is by upper-cased substring on the catalog name, so
"Base Box Casal Premium" still hits the CASAL combo.

Base items consume mattresses greedily in cart order: when two bases of
the same size compete for one mattress, the first one in the cart wins.
"""
from __future__ import annotations

import unicodedata
from decimal import Decimal
from typing import Dict, Iterable, Optional

from app.pricing.models import ZERO, AutomaticDiscount, LineItem


GIFT_PILLOW_NAME = 'TRAVESSEIRO FLOCOS CONFORTO 20CM 60X40 BRANCO'

MATTRESS_TOKENS = ('COLCHÃO', 'COLCHAO')
BASE_PREFIX     = 'BASE'

# Checked in this order; the first size token found in a name wins.
COMBO_TARGET_PRICES = (
    ('CASAL',      Decimal('250.00')),
    ('QUEEN',      Decimal('300.00')),
    ('SUPER KING', Decimal('350.00')),
)

LABEL_COMBO_AND_GIFT = 'Desconto Combo + Travesseiro Brinde'
LABEL_COMBO          = 'Desconto Combo (Base+Colchão)'
LABEL_GIFT           = 'Desconto (Travesseiro Brinde)'
LABEL_FALLBACK       = 'Desconto Promocional'


def _normalise(name: str) -> str:
    return unicodedata.normalize('NFC', name or '').upper()


def _size_class(name: str) -> Optional[str]:
    for size, _target in COMBO_TARGET_PRICES:
        if size in name:
            return size
    return None


def _is_mattress(name: str) -> bool:
    return any(token in name for token in MATTRESS_TOKENS)


# ── Individual rules ──────────────────────────────────────────────

def _mattress_pools(cart: Iterable[LineItem]) -> Dict[str, int]:
    """Total mattress quantity per size class."""
    pools = {size: 0 for size, _target in COMBO_TARGET_PRICES}
    for item in cart:
        name = _normalise(item.name)
        if not _is_mattress(name):
            continue
        size = _size_class(name)
        if size:
            pools[size] += item.quantity
    return pools


def _handle_gift_pillow(item: LineItem, has_other_product: bool) -> Optional[Decimal]:
    """Full line value when the pillow qualifies, otherwise None."""
    if _normalise(item.name) != GIFT_PILLOW_NAME or not has_other_product:
        return None
    return item.unit_price * item.quantity


def _handle_combo_base(item: LineItem, pools: Dict[str, int]) -> Optional[Decimal]:
    """
    Reprice a BASE line against the remaining mattresses of its size.
    Mutates `pools`. Returns None when no mattress was claimed; a claimed
    base priced at or under the target returns Decimal('0').
    """
    name = _normalise(item.name)
    if not name.startswith(BASE_PREFIX):
        return None

    # Falls through to the next size named in the base that still has mattresses.
    for size, target in COMBO_TARGET_PRICES:
        if size not in name or pools[size] <= 0:
            continue
        claimed = min(item.quantity, pools[size])
        if claimed <= 0:
            return None
        pools[size] -= claimed
        per_unit = max(ZERO, item.unit_price - target)
        return per_unit * claimed
    return None


def _label_for(combo_fired: bool, gift_fired: bool) -> str:
    if combo_fired and gift_fired:
        return LABEL_COMBO_AND_GIFT
    if combo_fired:
        return LABEL_COMBO
    if gift_fired:
        return LABEL_GIFT
    return LABEL_FALLBACK


# ── Main public function ──────────────────────────────────────────

def compute_automatic_discount(cart: Iterable[LineItem]) -> AutomaticDiscount:
    """
    Evaluate the bundle rules against `cart` (iterated in order).

    Pure: the cart is not modified. The label is always set; callers hide
    the discount line when the amount is zero.
    """
    items = list(cart)
    has_other_product = any(_normalise(i.name) != GIFT_PILLOW_NAME for i in items)
    pools = _mattress_pools(items)

    amount      = ZERO
    gift_fired  = False
    combo_fired = False

    for item in items:
        gift = _handle_gift_pillow(item, has_other_product)
        if gift is not None:
            amount += gift
            gift_fired = True

        combo = _handle_combo_base(item, pools)
        if combo is not None:
            amount += combo
            combo_fired = True

    return AutomaticDiscount(amount=amount, label=_label_for(combo_fired, gift_fired))
