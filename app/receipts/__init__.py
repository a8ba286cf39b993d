"""
app/receipts/__init__.py
------------------------
Receipt blueprint: totals, document download, preview and text import.
URL prefix: /receipts
"""
from flask import Blueprint

receipts = Blueprint('receipts', __name__)

from app.receipts import routes  # noqa: E402, F401
