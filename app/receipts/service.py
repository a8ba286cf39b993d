"""
app/receipts/service.py
-----------------------
Wire the pure engines to application configuration.
Used by the HTTP routes and by the `flask render-receipt` command.
"""
from dataclasses import replace

from app.layout.engine import ReceiptLayout, StoreProfile
from app.layout.measure import PillowTextMeasurer
from app.layout.rasters import Code128Generator, QRCodeGenerator


def build_layout(config) -> ReceiptLayout:
    """A ReceiptLayout with Pillow fonts and real barcode/QR generators."""
    store = StoreProfile()
    if config.get('RECEIPT_QR_PAYLOAD'):
        store = replace(store, qr_payload=config['RECEIPT_QR_PAYLOAD'])

    return ReceiptLayout(
        measurer=PillowTextMeasurer(config.get('RECEIPT_FONT_DIR')),
        qr_generator=QRCodeGenerator(),
        barcode_generator=Code128Generator(),
        store=store,
    )
