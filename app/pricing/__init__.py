"""
app/pricing/__init__.py
-----------------------
Cart pricing: bundle promotions, manual discounts and cart operations.
Pure Python: nothing in this package touches Flask or the database.
"""
from app.pricing.models import (  # noqa: F401
    AutomaticDiscount, DiscountConfig, DiscountKind, LineItem,
    PricingResult, Receipt, WarrantyUnit,
)
from app.pricing.bundles import compute_automatic_discount  # noqa: F401
from app.pricing.totals import compute_totals, price_receipt  # noqa: F401
