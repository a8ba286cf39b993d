from decimal import Decimal

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from app import db
from app.catalog import catalog
from app.catalog.models import Product, Salesperson
from app.catalog.validators import normalise_salesperson, validate_product_payload


# ── PRODUCTS ──────────────────────────────────────────────────────

@catalog.route('/products')
def products():
    """Active products, optionally filtered by a name substring (?q=)."""
    q = request.args.get('q', '').strip()
    query = Product.query.filter_by(is_active=True)
    if q:
        query = query.filter(Product.name.ilike(f'%{q}%'))
    return jsonify([p.to_dict() for p in query.order_by(Product.name).all()])


@catalog.route('/products', methods=['POST'])
def create_product():
    data = request.get_json(silent=True) or {}
    errors = validate_product_payload(data)
    if errors:
        return jsonify({'error': 'Invalid product', 'fields': errors}), 400

    name = data['name'].strip()
    if Product.query.filter_by(name=name).first():
        return jsonify({'error': f'Product "{name}" already exists'}), 400

    product = Product(name=name, price=Decimal(str(data['price']).strip().replace(',', '.')))
    db.session.add(product)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        current_app.logger.warning(f"Product insert rejected: {exc}")
        return jsonify({'error': f'Product "{name}" already exists'}), 400

    current_app.logger.info(f"Catalog product created: {product.name} ({product.price})")
    return jsonify(product.to_dict()), 201


# ── SALES TEAM ────────────────────────────────────────────────────

@catalog.route('/salespeople')
def salespeople():
    team = Salesperson.query.order_by(Salesperson.name).all()
    return jsonify([s.name for s in team])


@catalog.route('/salespeople', methods=['POST'])
def add_salesperson():
    data = request.get_json(silent=True) or {}
    name = normalise_salesperson(data.get('name'))
    if not name:
        return jsonify({'error': 'Name is required'}), 400

    # Adding an existing name is a no-op.
    if not Salesperson.query.filter_by(name=name).first():
        db.session.add(Salesperson(name=name))
        db.session.commit()
        current_app.logger.info(f"Salesperson added: {name}")

    return jsonify({'name': name}), 201


@catalog.route('/salespeople/<name>', methods=['DELETE'])
def remove_salesperson(name):
    person = Salesperson.query.filter_by(name=normalise_salesperson(name)).first()
    if not person:
        return jsonify({'error': 'Salesperson not found'}), 404
    db.session.delete(person)
    db.session.commit()
    current_app.logger.info(f"Salesperson removed: {person.name}")
    return jsonify({'removed': person.name})
