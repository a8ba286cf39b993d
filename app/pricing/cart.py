"""
app/pricing/cart.py
-------------------
Cart operations on a Receipt's ordered item list.

Order of `receipt.items` matters: it is the row order on the printed
receipt and the tie-break order for the combo rule.

Item display codes are random 6-digit numbers, regenerated whenever an
item is added. They are not unique and carry no catalog meaning.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from app.pricing.models import LineItem, Receipt, WarrantyUnit


@dataclass
class ExtractedItem:
    name:     str
    quantity: int = 1


@dataclass
class Extraction:
    """Structured data produced by the text-import collaborator."""
    client_data: Dict[str, str] = field(default_factory=dict)
    items:       List[ExtractedItem] = field(default_factory=list)


@dataclass
class ImportOutcome:
    added:   List[str] = field(default_factory=list)
    merged:  List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)


def generate_display_code(rng: Optional[random.Random] = None) -> str:
    """Six-digit numeric display code, e.g. '482915'."""
    rng = rng or random
    return str(rng.randint(100000, 999999))


# ── Write ─────────────────────────────────────────────────────────

def add_item(cart: List[LineItem], name: str, unit_price, quantity=1,
             rng: Optional[random.Random] = None) -> LineItem:
    """Append a new line with a fresh code. Non-positive quantities become 1."""
    try:
        qty = int(quantity)
    except (TypeError, ValueError):
        qty = 1
    if qty < 1:
        qty = 1

    item = LineItem(
        code=generate_display_code(rng),
        name=name,
        unit_price=Decimal(str(unit_price)),
        quantity=qty,
    )
    cart.append(item)
    return item


def remove_item(cart: List[LineItem], index: int) -> LineItem:
    """Remove and return the line at `index` (IndexError if absent)."""
    return cart.pop(index)


def set_warranty(cart: List[LineItem], index: int, time: Optional[str] = None,
                 unit=None) -> LineItem:
    """Edit the warranty annotation. The time text is not validated."""
    item = cart[index]
    if time is not None:
        item.warranty_time = time
    if unit is not None:
        item.warranty_unit = WarrantyUnit.parse(unit)
    return item


# ── Import merge ──────────────────────────────────────────────────

def apply_import(receipt: Receipt, extraction: Extraction,
                 catalog: Mapping[str, Decimal],
                 rng: Optional[random.Random] = None) -> ImportOutcome:
    """
    Merge an extraction into `receipt` in place.

    Client fields present in the extraction overwrite the receipt's.
    Items must match a catalog name exactly; a match already in the cart
    has its quantity increased, otherwise a new line is appended at the
    catalog price. Unmatched names are dropped and reported.
    """
    outcome = ImportOutcome()

    for field_name, value in extraction.client_data.items():
        if field_name in Receipt.CLIENT_FIELDS and value is not None:
            setattr(receipt, field_name, value)

    for extracted in extraction.items:
        if extracted.name not in catalog:
            outcome.dropped.append(extracted.name)
            continue

        quantity = extracted.quantity or 1
        existing = next((i for i in receipt.items if i.name == extracted.name), None)
        if existing is not None:
            existing.quantity += quantity
            outcome.merged.append(extracted.name)
        else:
            add_item(receipt.items, extracted.name, catalog[extracted.name], quantity, rng)
            outcome.added.append(extracted.name)

    return outcome
