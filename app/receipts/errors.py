"""
app/receipts/errors.py
----------------------
Typed failures raised at the receipt service boundary.

Rendering problems never show up here: oversized text is shrunk or
truncated and missing barcode/QR images are skipped by the layout engine.
"""


class ReceiptError(Exception):
    """Base class; `message` is safe to show to the clerk."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReceiptValidationError(ReceiptError):
    """The submitted receipt or item data is not usable."""


class UpstreamError(ReceiptError):
    """A collaborator (text import, raster service) failed or sent malformed data."""
