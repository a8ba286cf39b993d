"""
app/catalog/models.py
---------------------
Catalog products and the salesperson team.

The pricing core never queries these tables itself: routes hand it a
read-only {name: price} mapping built by catalog_lookup().
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict

from app import db


class Product(db.Model):
    """A sellable product; `name` is the exact name imports must match."""
    __tablename__ = 'products'

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(200), unique=True, nullable=False, index=True)
    price      = db.Column(db.Numeric(10, 2), nullable=False)
    is_active  = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('price >= 0', name='check_price_non_negative'),
    )

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'price': str(self.price)}

    def __repr__(self):
        return f"<Product {self.name!r} {self.price}>"


class Salesperson(db.Model):
    __tablename__ = 'salespeople'

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(100), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<Salesperson {self.name!r}>"


def catalog_lookup() -> Dict[str, Decimal]:
    """Active products as {exact name: price}."""
    rows = Product.query.filter_by(is_active=True).all()
    return {p.name: Decimal(str(p.price)) for p in rows}
