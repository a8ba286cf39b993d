"""
app/layout/__init__.py
----------------------
Receipt document layout: Receipt + pricing → pages of draw primitives.
"""
from app.layout.document import Document, Page  # noqa: F401
from app.layout.engine import ReceiptLayout, StoreProfile  # noqa: F401
from app.layout.measure import FixedWidthMeasurer, PillowTextMeasurer, TextMeasurer  # noqa: F401
from app.layout.rasters import (  # noqa: F401
    Code128Generator, QRCodeGenerator, RasterGenerationError, RasterGenerator,
)
