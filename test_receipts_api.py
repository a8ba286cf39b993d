"""
test_receipts_api.py — Tests for the /receipts HTTP endpoints and /health.
Run: pytest test_receipts_api.py -v
"""
from decimal import Decimal

import pytest

from app import create_app, db
from app.catalog.models import Product
from app.pricing.bundles import GIFT_PILLOW_NAME


# ── Fixtures ──────────────────────────────────────────────────────

@pytest.fixture(scope='function')
def client():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        db.session.add_all([
            Product(name='BASE CASAL', price=Decimal('400.00')),
            Product(name='COLCHÃO CASAL D33', price=Decimal('899.00')),
            Product(name='CABECEIRA ANTIGA', price=Decimal('150.00'), is_active=False),
        ])
        db.session.commit()
        yield app.test_client()
        db.drop_all()


def receipt_body(**overrides):
    body = {
        'name': 'Ana Lima',
        'date': '2026-10-19',
        'salesperson': 'CARLOS',
        'items': [
            {'code': '482915', 'name': 'COLCHÃO CASAL D33', 'unit_price': '899.00', 'quantity': 1},
            {'code': '115230', 'name': 'BASE CASAL', 'unit_price': '400.00', 'quantity': 1},
        ],
        'discount': {'kind': 'fixed', 'value': '0'},
    }
    body.update(overrides)
    return body


# ── 1. Health ─────────────────────────────────────────────────────

def test_health(client):
    rv = client.get('/health')
    assert rv.status_code == 200
    assert rv.get_json()['status'] == 'ok'


def test_unknown_route_is_json_404(client):
    rv = client.get('/nope')
    assert rv.status_code == 404
    assert rv.get_json() == {'error': 'Not found'}


# ── 2. Totals ─────────────────────────────────────────────────────

def test_totals_with_combo(client):
    rv = client.post('/receipts/totals', json=receipt_body())
    assert rv.status_code == 200
    data = rv.get_json()
    assert Decimal(data['subtotal']) == Decimal('1299.00')
    assert Decimal(data['automatic_discount']['amount']) == Decimal('150.00')
    assert data['automatic_discount']['label'] == 'Desconto Combo (Base+Colchão)'
    assert Decimal(data['total']) == Decimal('1149.00')


def test_totals_percentage_discount(client):
    body = receipt_body(discount={'kind': 'percentage', 'value': 10})
    data = client.post('/receipts/totals', json=body).get_json()
    assert Decimal(data['manual_discount']) == Decimal('129.90')
    assert Decimal(data['total_discount']) == Decimal('279.90')
    assert Decimal(data['total']) == Decimal('1019.10')


def test_totals_never_negative(client):
    body = receipt_body(discount={'kind': 'fixed', 'value': '99999'})
    data = client.post('/receipts/totals', json=body).get_json()
    assert Decimal(data['total']) == Decimal('0')


@pytest.mark.parametrize('body', [
    None,
    {'items': 'BASE CASAL'},
    {'items': [{'name': '', 'unit_price': '1'}]},
    {'items': [{'name': 'X', 'unit_price': '-1'}]},
    {'items': [{'name': 'X', 'unit_price': 'abc'}]},
    {'items': [{'name': 'X', 'unit_price': '1', 'quantity': 0}]},
    {'items': [{'name': 'X', 'unit_price': '1', 'warranty_unit': 'WEEKS'}]},
    {'discount': {'kind': 'bogus', 'value': 1}},
    {'items': [{'name': 'X', 'unit_price': '1e27'}]},
    {'items': [{'name': 'X', 'unit_price': '1', 'quantity': 2.5}]},
    {'items': [{'name': 'X', 'unit_price': '1', 'quantity': 10001}]},
    {'discount': {'kind': 'fixed', 'value': '1e30'}},
])
def test_invalid_receipt_is_400(client, body):
    rv = client.post('/receipts/totals', json=body)
    assert rv.status_code == 400
    assert rv.get_json()['error']


def test_infinite_quantity_is_400(client):
    body = '{"items": [{"name": "CAMA", "unit_price": "1", "quantity": Infinity}]}'
    rv = client.post('/receipts/totals', data=body, content_type='application/json')
    assert rv.status_code == 400
    assert 'whole number' in rv.get_json()['error']


def test_whole_float_quantity_is_accepted(client):
    body = receipt_body(items=[{'name': 'CAMA', 'unit_price': '10', 'quantity': 3.0}])
    data = client.post('/receipts/totals', json=body).get_json()
    assert Decimal(data['subtotal']) == Decimal('30')


# ── 3. Documents ──────────────────────────────────────────────────

def test_document_download(client):
    rv = client.post('/receipts/document', json=receipt_body())
    assert rv.status_code == 200
    assert rv.mimetype == 'application/pdf'
    assert rv.data.startswith(b'%PDF')
    assert 'COMPROVANTE - ANA LIMA.pdf' in rv.headers['Content-Disposition']


def test_document_label_follows_config(client):
    client.application.config['RECEIPT_LABEL'] = 'RECIBO'
    rv = client.post('/receipts/document', json=receipt_body(name='Bia'))
    assert 'RECIBO - BIA.pdf' in rv.headers['Content-Disposition']


def test_document_for_empty_cart(client):
    rv = client.post('/receipts/document', json={})
    assert rv.status_code == 200
    assert 'COMPROVANTE - CLIENTE.pdf' in rv.headers['Content-Disposition']


def test_document_paints_with_configured_font_dir(client, tmp_path, monkeypatch):
    client.application.config['RECEIPT_FONT_DIR'] = str(tmp_path)
    seen = {}

    def fake_write_pdf(document, fp, dpi, fonts=None):
        seen['fonts'] = fonts
        fp.write(b'%PDF-1.4')

    monkeypatch.setattr('app.receipts.routes.write_pdf', fake_write_pdf)
    rv = client.post('/receipts/document', json=receipt_body())
    assert rv.status_code == 200
    assert seen['fonts'].font_dir == str(tmp_path)


def test_preview_paints_with_configured_font_dir(client, tmp_path, monkeypatch):
    client.application.config['RECEIPT_FONT_DIR'] = str(tmp_path)
    seen = {}

    def fake_write_png(document, fp, page=0, dpi=None, fonts=None):
        seen['fonts'] = fonts
        fp.write(b'\x89PNG')

    monkeypatch.setattr('app.receipts.routes.write_png', fake_write_png)
    rv = client.post('/receipts/preview', json=receipt_body())
    assert rv.status_code == 200
    assert seen['fonts'].font_dir == str(tmp_path)


def test_preview_first_page(client):
    rv = client.post('/receipts/preview', json=receipt_body())
    assert rv.status_code == 200
    assert rv.mimetype == 'image/png'
    assert rv.headers['X-Page-Count'] == '1'


def test_preview_missing_page_is_404(client):
    rv = client.post('/receipts/preview?page=9', json=receipt_body())
    assert rv.status_code == 404
    assert rv.get_json()['pages'] == 1


def test_long_cart_preview_reports_pages(client):
    items = [{'code': f'{100000 + i}', 'name': f'PRODUTO {i}', 'unit_price': '10', 'quantity': 1}
             for i in range(45)]
    rv = client.post('/receipts/preview?page=2', json=receipt_body(items=items))
    assert rv.status_code == 200
    assert int(rv.headers['X-Page-Count']) >= 2


# ── 4. Import ─────────────────────────────────────────────────────

def test_import_merges_against_catalog(client):
    body = {
        'receipt': receipt_body(items=[
            {'code': '115230', 'name': 'BASE CASAL', 'unit_price': '400.00', 'quantity': 1},
        ]),
        'extraction': {
            'clientData': {'name': 'JOÃO', 'cpf': '000.000.000-00'},
            'items': [
                {'name': 'BASE CASAL', 'quantity': 1},
                'COLCHÃO CASAL D33',
                'CABECEIRA ANTIGA',
                GIFT_PILLOW_NAME,
            ],
        },
    }
    rv = client.post('/receipts/import', json=body)
    assert rv.status_code == 200
    data = rv.get_json()

    assert data['merged'] == ['BASE CASAL']
    assert data['added'] == ['COLCHÃO CASAL D33']
    assert data['dropped'] == ['CABECEIRA ANTIGA', GIFT_PILLOW_NAME]

    receipt = data['receipt']
    assert receipt['name'] == 'JOÃO'
    assert receipt['tax_id'] == '000.000.000-00'
    assert [(i['name'], i['quantity']) for i in receipt['items']] == [
        ('BASE CASAL', 2), ('COLCHÃO CASAL D33', 1),
    ]
    assert Decimal(receipt['items'][1]['unit_price']) == Decimal('899.00')
    assert len(receipt['items'][1]['code']) == 6
    # One mattress → one of the two bases is repriced.
    assert Decimal(data['pricing']['automatic_discount']['amount']) == Decimal('150.00')


@pytest.mark.parametrize('extraction', [None, 'garbage', {'items': [{'quantity': 1}]}])
def test_malformed_extraction_is_502(client, extraction):
    rv = client.post('/receipts/import', json={'receipt': {}, 'extraction': extraction})
    assert rv.status_code == 502
    assert rv.get_json()['error']
