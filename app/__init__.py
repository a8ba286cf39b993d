import csv
import json
from decimal import Decimal, InvalidOperation

import click
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from config import config

db = SQLAlchemy()


def create_app(config_name='default'):
    """Application factory — creates and configures the Flask app."""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # ── Logging ───────────────────────────────────────────────────
    from app.utils.logging import setup_logging
    setup_logging(app)

    # ── Extensions ────────────────────────────────────────────────
    db.init_app(app)

    # ── Blueprints ────────────────────────────────────────────────
    from app.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from app.catalog import catalog as catalog_blueprint
    app.register_blueprint(catalog_blueprint, url_prefix='/catalog')

    from app.receipts import receipts as receipts_blueprint
    app.register_blueprint(receipts_blueprint, url_prefix='/receipts')

    # ── Error Handlers ────────────────────────────────────────────
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({'error': 'Bad request'}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.error(f"Unhandled server error: {e}")
        return jsonify({'error': 'Server error'}), 500

    # ── CLI Commands ──────────────────────────────────────────────
    register_commands(app)

    return app


def register_commands(app):
    """Register custom Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('✅  Database tables created.')

    @app.cli.command('seed-catalog')
    @click.option('--file', 'path', required=True, type=click.Path(exists=True, dir_okay=False),
                  help='CSV with "name,price" columns')
    def seed_catalog(path):
        """Load or update catalog products from a CSV file."""
        from app.catalog.models import Product

        db.create_all()
        created, updated, skipped = 0, 0, 0
        with open(path, newline='', encoding='utf-8') as fh:
            for row in csv.DictReader(fh):
                name = (row.get('name') or '').strip()
                try:
                    price = Decimal((row.get('price') or '').strip().replace(',', '.'))
                except InvalidOperation:
                    price = None
                if not name or price is None or price < 0:
                    skipped += 1
                    continue

                product = Product.query.filter_by(name=name).first()
                if product:
                    product.price = price
                    product.is_active = True
                    updated += 1
                else:
                    db.session.add(Product(name=name, price=price))
                    created += 1
        db.session.commit()
        click.echo(f'✅  Catalog loaded: {created} created, {updated} updated, {skipped} skipped.')

    @app.cli.command('seed-team')
    @click.argument('names', nargs=-1, required=True)
    def seed_team(names):
        """Add salespeople to the team list."""
        from app.catalog.models import Salesperson
        from app.catalog.validators import normalise_salesperson

        db.create_all()
        for raw in names:
            name = normalise_salesperson(raw)
            if not name:
                continue
            if Salesperson.query.filter_by(name=name).first():
                click.echo(f'ℹ️   {name} already on the team.')
                continue
            db.session.add(Salesperson(name=name))
            click.echo(f'✅  {name} added.')
        db.session.commit()

    @app.cli.command('render-receipt')
    @click.argument('source', type=click.File('r', encoding='utf-8'))
    @click.argument('target', type=click.Path(dir_okay=False, writable=True))
    def render_receipt(source, target):
        """Render a receipt JSON file (same body as POST /receipts/document) to PDF."""
        from app.layout.export import write_pdf
        from app.pricing.totals import price_receipt
        from app.receipts.errors import ReceiptValidationError
        from app.receipts.serialization import receipt_from_json
        from app.receipts.service import build_layout

        try:
            receipt = receipt_from_json(json.load(source))
        except (ValueError, ReceiptValidationError) as e:
            raise click.ClickException(f'Invalid receipt file: {e}')

        layout   = build_layout(app.config)
        pricing  = price_receipt(receipt)
        document = layout.render(receipt, pricing)
        with open(target, 'wb') as fh:
            write_pdf(document, fh, dpi=app.config['RECEIPT_PREVIEW_DPI'], fonts=layout.measurer)
        click.echo(f'✅  {target}: {len(document)} page(s), total {pricing.total}.')
