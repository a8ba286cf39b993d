"""
test_catalog.py — Tests for catalog products, the sales team and the CLI seeders.
Run: pytest test_catalog.py -v
"""
import json
from decimal import Decimal

import pytest

from app import create_app, db
from app.catalog.models import Product, Salesperson, catalog_lookup
from app.catalog.validators import normalise_salesperson, validate_product_payload


# ── Fixtures ──────────────────────────────────────────────────────

@pytest.fixture(scope='function')
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ── 1. Validation ─────────────────────────────────────────────────

def test_product_payload_validation():
    assert validate_product_payload({'name': 'BASE', 'price': '10,50'}) == {}
    assert 'name' in validate_product_payload({'name': ' ', 'price': '1'})
    assert validate_product_payload({'name': 'X'})['price'] == 'Price is required.'
    assert validate_product_payload({'name': 'X', 'price': 'abc'})['price'] == 'Price must be a valid number.'
    assert validate_product_payload({'name': 'X', 'price': 'NaN'})['price'] == 'Price must be a valid number.'
    assert validate_product_payload({'name': 'X', 'price': '-1'})['price'] == 'Price cannot be negative.'


def test_salesperson_names_are_normalised():
    assert normalise_salesperson('  carlos ') == 'CARLOS'
    assert normalise_salesperson(None) == ''


# ── 2. Products ───────────────────────────────────────────────────

def test_create_and_search_products(client):
    rv = client.post('/catalog/products', json={'name': 'BASE CASAL', 'price': '400,00'})
    assert rv.status_code == 201
    assert Decimal(rv.get_json()['price']) == Decimal('400')

    client.post('/catalog/products', json={'name': 'COLCHÃO CASAL D33', 'price': 899})

    names = [p['name'] for p in client.get('/catalog/products').get_json()]
    assert names == ['BASE CASAL', 'COLCHÃO CASAL D33']

    found = client.get('/catalog/products?q=base').get_json()
    assert [p['name'] for p in found] == ['BASE CASAL']


def test_duplicate_product_is_rejected(client):
    client.post('/catalog/products', json={'name': 'BASE CASAL', 'price': '400'})
    rv = client.post('/catalog/products', json={'name': 'BASE CASAL', 'price': '410'})
    assert rv.status_code == 400
    assert 'already exists' in rv.get_json()['error']


def test_invalid_product_lists_field_errors(client):
    rv = client.post('/catalog/products', json={'name': '', 'price': '-5'})
    assert rv.status_code == 400
    assert set(rv.get_json()['fields']) == {'name', 'price'}


def test_catalog_lookup_skips_inactive(app):
    db.session.add_all([
        Product(name='ATIVO', price=Decimal('10.00')),
        Product(name='INATIVO', price=Decimal('20.00'), is_active=False),
    ])
    db.session.commit()
    assert catalog_lookup() == {'ATIVO': Decimal('10.00')}


# ── 3. Sales team ─────────────────────────────────────────────────

def test_salespeople_lifecycle(client):
    assert client.get('/catalog/salespeople').get_json() == []

    rv = client.post('/catalog/salespeople', json={'name': ' carlos '})
    assert rv.status_code == 201
    assert rv.get_json() == {'name': 'CARLOS'}

    client.post('/catalog/salespeople', json={'name': 'CARLOS'})
    client.post('/catalog/salespeople', json={'name': 'ana'})
    assert client.get('/catalog/salespeople').get_json() == ['ANA', 'CARLOS']

    rv = client.delete('/catalog/salespeople/carlos')
    assert rv.get_json() == {'removed': 'CARLOS'}
    assert client.get('/catalog/salespeople').get_json() == ['ANA']

    assert client.delete('/catalog/salespeople/carlos').status_code == 404


def test_salesperson_name_required(client):
    assert client.post('/catalog/salespeople', json={'name': '  '}).status_code == 400


# ── 4. CLI ────────────────────────────────────────────────────────

def test_seed_catalog_command(app, tmp_path):
    csv_file = tmp_path / 'catalog.csv'
    csv_file.write_text(
        'name,price\nBASE CASAL,400.00\nCOLCHÃO CASAL D33,"899,00"\n,10\nSEM PRECO,\n',
        encoding='utf-8',
    )
    db.session.add(Product(name='BASE CASAL', price=Decimal('350.00'), is_active=False))
    db.session.commit()

    result = app.test_cli_runner().invoke(args=['seed-catalog', '--file', str(csv_file)])
    assert result.exit_code == 0, result.output
    assert '1 created, 1 updated, 2 skipped' in result.output

    assert catalog_lookup() == {
        'BASE CASAL': Decimal('400.00'),
        'COLCHÃO CASAL D33': Decimal('899.00'),
    }


def test_seed_team_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['seed-team', 'ana', 'Carlos', 'ANA'])
    assert result.exit_code == 0, result.output
    assert sorted(s.name for s in Salesperson.query.all()) == ['ANA', 'CARLOS']


def test_render_receipt_command(app, tmp_path):
    source = tmp_path / 'receipt.json'
    source.write_text(json.dumps({
        'name': 'Ana',
        'items': [{'code': '482915', 'name': 'BASE CASAL', 'unit_price': '400', 'quantity': 1}],
    }), encoding='utf-8')
    target = tmp_path / 'out.pdf'

    result = app.test_cli_runner().invoke(args=['render-receipt', str(source), str(target)])
    assert result.exit_code == 0, result.output
    assert target.read_bytes().startswith(b'%PDF')


def test_render_receipt_rejects_bad_file(app, tmp_path):
    source = tmp_path / 'receipt.json'
    source.write_text('{"items": [{"name": ""}]}', encoding='utf-8')

    result = app.test_cli_runner().invoke(args=['render-receipt', str(source), str(tmp_path / 'x.pdf')])
    assert result.exit_code != 0
    assert 'Invalid receipt file' in result.output


def test_render_receipt_uses_configured_font_dir(app, tmp_path, monkeypatch):
    app.config['RECEIPT_FONT_DIR'] = str(tmp_path)
    source = tmp_path / 'receipt.json'
    source.write_text(json.dumps({'name': 'Ana', 'items': []}), encoding='utf-8')
    seen = {}

    def fake_write_pdf(document, fp, dpi, fonts=None):
        seen['fonts'] = fonts
        fp.write(b'%PDF-1.4')

    monkeypatch.setattr('app.layout.export.write_pdf', fake_write_pdf)
    result = app.test_cli_runner().invoke(args=['render-receipt', str(source), str(tmp_path / 'out.pdf')])
    assert result.exit_code == 0, result.output
    assert seen['fonts'].font_dir == str(tmp_path)
