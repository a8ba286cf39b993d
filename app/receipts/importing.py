"""
app/receipts/importing.py
-------------------------
Validate what the text-understanding service sends back.

Expected shape (camelCase, as the service produces it):

    {
      "clientData": {"name": "...", "cpf": "...", "saleCode": "...", ...},
      "items": [{"name": "EXACT CATALOG NAME", "quantity": 2}, "OTHER NAME"]
    }

Bare strings in "items" count as quantity 1. Anything else that does not
fit raises UpstreamError; the caller shows the message, nothing retries.
"""
import json

from app.pricing.cart import ExtractedItem, Extraction
from app.receipts.errors import UpstreamError
from app.receipts.serialization import MAX_QUANTITY


CLIENT_DATA_KEYS = {
    'saleCode':      'sale_code',
    'name':          'name',
    'cpf':           'tax_id',
    'date':          'date',
    'email':         'email',
    'street':        'street',
    'number':        'number',
    'neighborhood':  'neighborhood',
    'city':          'city',
    'complement':    'complement',
    'contact1':      'contact1',
    'contact2':      'contact2',
    'paymentMethod': 'payment_method',
}


def _parse_item(raw, position: int) -> ExtractedItem:
    if isinstance(raw, str):
        name, quantity = raw, 1
    elif isinstance(raw, dict):
        name, quantity = raw.get('name'), raw.get('quantity', 1)
    else:
        raise UpstreamError(f'Import item #{position} is neither a name nor an object.')

    if not isinstance(name, str) or not name.strip():
        raise UpstreamError(f'Import item #{position} has no product name.')

    if quantity is None:
        quantity = 1
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float, str)):
        raise UpstreamError(f'Import item #{position} has an invalid quantity.')
    if isinstance(quantity, float) and not quantity.is_integer():
        raise UpstreamError(f'Import item #{position} has an invalid quantity.')
    try:
        quantity = int(quantity)
    except (ValueError, OverflowError):
        raise UpstreamError(f'Import item #{position} has an invalid quantity.')
    if quantity < 1:
        raise UpstreamError(f'Import item #{position} must have a positive quantity.')
    if quantity > MAX_QUANTITY:
        raise UpstreamError(f'Import item #{position} quantity exceeds {MAX_QUANTITY}.')

    return ExtractedItem(name=name, quantity=quantity)


def parse_extraction(payload) -> Extraction:
    """Extraction from the service's decoded JSON payload."""
    if not isinstance(payload, dict):
        raise UpstreamError('Import service returned malformed data (expected an object).')

    client_raw = payload.get('clientData') or {}
    if not isinstance(client_raw, dict):
        raise UpstreamError('Import service returned malformed client data.')

    client_data = {}
    for key, field_name in CLIENT_DATA_KEYS.items():
        value = client_raw.get(key)
        if value is None:
            continue
        client_data[field_name] = value if isinstance(value, str) else str(value)

    items_raw = payload.get('items') or []
    if not isinstance(items_raw, list):
        raise UpstreamError('Import service returned malformed item list.')

    items = [_parse_item(raw, i) for i, raw in enumerate(items_raw, start=1)]
    return Extraction(client_data=client_data, items=items)


def parse_extraction_text(text: str) -> Extraction:
    """Same as parse_extraction, for the raw JSON text of a response."""
    if not text or not text.strip():
        raise UpstreamError('Import service returned an empty response.')
    try:
        payload = json.loads(text)
    except ValueError as e:
        raise UpstreamError(f'Import service returned invalid JSON: {e}')
    return parse_extraction(payload)
