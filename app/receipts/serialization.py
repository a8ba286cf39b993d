"""
app/receipts/serialization.py
-----------------------------
JSON <-> Receipt conversion for the HTTP layer.

Money travels as strings ("1299.90") so JSON never turns it into float.
Incoming numbers are accepted too and converted with Decimal(str(x)).
"""
from decimal import Decimal, InvalidOperation

from app.pricing.cart import generate_display_code
from app.pricing.models import (
    DiscountConfig, DiscountKind, LineItem, PricingResult, Receipt, WarrantyUnit,
)
from app.receipts.errors import ReceiptValidationError


STRING_FIELDS = (
    'name', 'tax_id', 'date', 'street', 'number', 'complement', 'neighborhood',
    'city', 'email', 'contact1', 'contact2', 'salesperson', 'payment_method', 'sale_code',
)

# Same ceiling as the catalog price column, Numeric(10, 2).
MAX_AMOUNT   = Decimal('99999999.99')
MAX_QUANTITY = 10000


def _optional_text(value):
    if value is None:
        return None
    return str(value)


def _decimal(value, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ReceiptValidationError(f'{field} must be a number.')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ReceiptValidationError(f'{field} must be a number.')
    if not amount.is_finite():
        raise ReceiptValidationError(f'{field} must be a number.')
    if amount < 0:
        raise ReceiptValidationError(f'{field} cannot be negative.')
    if amount > MAX_AMOUNT:
        raise ReceiptValidationError(f'{field} cannot exceed {MAX_AMOUNT}.')
    return amount


def _item_from_json(raw, position: int) -> LineItem:
    if not isinstance(raw, dict):
        raise ReceiptValidationError(f'Item #{position} must be an object.')

    name = raw.get('name')
    if not isinstance(name, str) or not name.strip():
        raise ReceiptValidationError(f'Item #{position}: product name is required.')

    quantity = raw.get('quantity', 1)
    if isinstance(quantity, bool) or (isinstance(quantity, float) and not quantity.is_integer()):
        raise ReceiptValidationError(f'Item #{position}: quantity must be a whole number.')
    try:
        quantity = int(quantity)
    except (TypeError, ValueError, OverflowError):
        raise ReceiptValidationError(f'Item #{position}: quantity must be a whole number.')
    if quantity < 1:
        raise ReceiptValidationError(f'Item #{position}: quantity must be at least 1.')
    if quantity > MAX_QUANTITY:
        raise ReceiptValidationError(f'Item #{position}: quantity cannot exceed {MAX_QUANTITY}.')

    try:
        unit = WarrantyUnit.parse(raw.get('warranty_unit') or WarrantyUnit.MONTHS)
    except ValueError as e:
        raise ReceiptValidationError(f'Item #{position}: {e}')

    return LineItem(
        code=_optional_text(raw.get('code')) or generate_display_code(),
        name=name,
        unit_price=_decimal(raw.get('unit_price', 0), f'Item #{position} unit_price'),
        quantity=quantity,
        warranty_time=_optional_text(raw.get('warranty_time')),
        warranty_unit=unit,
    )


def receipt_from_json(data) -> Receipt:
    """Build a Receipt, raising ReceiptValidationError on bad input."""
    if not isinstance(data, dict):
        raise ReceiptValidationError('Receipt body must be a JSON object.')

    receipt = Receipt(**{f: _optional_text(data.get(f)) for f in STRING_FIELDS})

    items = data.get('items') or []
    if not isinstance(items, list):
        raise ReceiptValidationError('items must be a list.')
    receipt.items = [_item_from_json(raw, i) for i, raw in enumerate(items, start=1)]

    discount = data.get('discount') or {}
    if not isinstance(discount, dict):
        raise ReceiptValidationError('discount must be an object.')
    try:
        kind = DiscountKind(str(discount.get('kind') or 'fixed').lower())
    except ValueError:
        raise ReceiptValidationError("discount.kind must be 'fixed' or 'percentage'.")
    receipt.discount = DiscountConfig(kind=kind, value=_decimal(discount.get('value') or 0, 'discount.value'))

    return receipt


def receipt_to_json(receipt: Receipt) -> dict:
    data = {f: getattr(receipt, f) for f in STRING_FIELDS}
    data['items'] = [{
        'code':          item.code,
        'name':          item.name,
        'unit_price':    str(item.unit_price),
        'quantity':      item.quantity,
        'warranty_time': item.warranty_time,
        'warranty_unit': item.warranty_unit.value,
    } for item in receipt.items]
    data['discount'] = {
        'kind':  receipt.discount.kind.value,
        'value': str(receipt.discount.value),
    }
    return data


def pricing_to_json(result: PricingResult) -> dict:
    return {
        'subtotal':           str(result.subtotal),
        'automatic_discount': {
            'amount': str(result.automatic_discount.amount),
            'label':  result.automatic_discount.label,
        },
        'manual_discount':    str(result.manual_discount),
        'total_discount':     str(result.total_discount),
        'total':              str(result.total),
    }
