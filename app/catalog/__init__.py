"""
app/catalog/__init__.py
-----------------------
Product catalog and sales team blueprint.
URL prefix: /catalog
"""
from flask import Blueprint

catalog = Blueprint('catalog', __name__)

from app.catalog import routes  # noqa: E402, F401
from app.catalog import models  # noqa: E402, F401  (registers Product/Salesperson with SQLAlchemy)
