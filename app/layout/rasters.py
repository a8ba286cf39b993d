"""
app/layout/rasters.py
---------------------
Raster-generator capability: payload in, PNG bytes out.

The layout engine only ever calls `generate()` and places the bytes in a
rectangle; it never decodes them. Any failure surfaces as
RasterGenerationError (or any other exception) and is absorbed by the
engine per call.
"""
import io

import qrcode
from barcode import Code128
from barcode.writer import ImageWriter


class RasterGenerationError(Exception):
    """A barcode/QR image could not be produced."""


class RasterGenerator:
    """Interface for barcode / QR producers."""

    def generate(self, payload: str) -> bytes:
        raise NotImplementedError


class QRCodeGenerator(RasterGenerator):
    """QR code without quiet zone, light-on-dark to sit on the header band."""

    def __init__(self, dark: str = '#ffffff', light: str = '#1e40af', box_size: int = 10):
        self.dark     = dark
        self.light    = light
        self.box_size = box_size

    def generate(self, payload):
        if not payload:
            raise RasterGenerationError('QR payload is empty')
        try:
            qr = qrcode.QRCode(border=0, box_size=self.box_size)
            qr.add_data(payload)
            qr.make(fit=True)
            img = qr.make_image(fill_color=self.dark, back_color=self.light)
            buf = io.BytesIO()
            img.save(buf, format='PNG')
        except Exception as e:
            raise RasterGenerationError(f'QR generation failed: {e}') from e
        return buf.getvalue()


class Code128Generator(RasterGenerator):
    """CODE128 bars only; the human-readable code is printed separately."""

    OPTIONS = {
        'write_text':    False,
        'quiet_zone':    0,
        'module_width':  0.2,
        'module_height': 8.0,
    }

    def generate(self, payload):
        if not payload:
            raise RasterGenerationError('Barcode payload is empty')
        try:
            buf = io.BytesIO()
            Code128(str(payload), writer=ImageWriter()).write(buf, options=dict(self.OPTIONS))
        except Exception as e:
            raise RasterGenerationError(f'CODE128 generation failed: {e}') from e
        return buf.getvalue()
