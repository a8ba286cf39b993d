"""
app/catalog/validators.py
-------------------------
Pure-Python validation for catalog payloads.
Returns a dict of field -> error_message.
An empty dict means all fields are valid.
"""
from decimal import Decimal, InvalidOperation


def validate_product_payload(data: dict) -> dict:
    errors = {}

    # ── name ─────────────────────────────────────────────────────
    name = str(data.get('name') or '').strip()
    if not name:
        errors['name'] = 'Product name is required.'
    elif len(name) > 200:
        errors['name'] = 'Product name must be 200 characters or fewer.'

    # ── price ─────────────────────────────────────────────────────
    price_raw = str(data.get('price') if data.get('price') is not None else '').strip()
    if not price_raw:
        errors['price'] = 'Price is required.'
    else:
        try:
            price = Decimal(price_raw.replace(',', '.'))
            if not price.is_finite():
                errors['price'] = 'Price must be a valid number.'
            elif price < 0:
                errors['price'] = 'Price cannot be negative.'
        except InvalidOperation:
            errors['price'] = 'Price must be a valid number.'

    return errors


def normalise_salesperson(name) -> str:
    """Team names are stored trimmed and upper-cased."""
    return str(name or '').strip().upper()
