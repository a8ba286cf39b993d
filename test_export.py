"""
test_export.py — Tests for file naming, rasterising and the real barcode/QR generators.
Run: pytest test_export.py -v
"""
import io
from datetime import datetime
from decimal import Decimal

import pytest
from PIL import Image as PILImage

from app.layout.document import Document, Image, Page, Rect, Text
from app.layout.engine import ReceiptLayout
from app.layout.export import export_filename, rasterize, write_pdf, write_png
from app.layout.measure import FixedWidthMeasurer, PillowTextMeasurer
from app.layout.rasters import Code128Generator, QRCodeGenerator, RasterGenerationError
from app.pricing.models import LineItem, Receipt


PNG_MAGIC = b'\x89PNG'
DPI = 30


@pytest.fixture
def document():
    receipt = Receipt(name='Ana Lima', items=[
        LineItem(code='482915', name='BASE CASAL', unit_price=Decimal('400.00'), quantity=1),
    ])
    layout = ReceiptLayout(FixedWidthMeasurer(), QRCodeGenerator(), Code128Generator())
    return layout.render(receipt, issued_at=datetime(2026, 10, 19, 9, 0))


# ── 1. Filenames ──────────────────────────────────────────────────

def test_filename_uses_upper_cased_client_name():
    assert export_filename(Receipt(name=' Ana Lima ')) == 'COMPROVANTE - ANA LIMA.pdf'


def test_filename_without_client_name():
    assert export_filename(Receipt()) == 'COMPROVANTE - CLIENTE.pdf'


def test_filename_with_custom_label_and_extension():
    assert export_filename(Receipt(name='ana'), 'RECIBO', 'png') == 'RECIBO - ANA.png'


# ── 2. Generators ─────────────────────────────────────────────────

def test_qr_generator_returns_png():
    assert QRCodeGenerator().generate('https://example.com').startswith(PNG_MAGIC)


def test_code128_generator_returns_png():
    assert Code128Generator().generate('482915').startswith(PNG_MAGIC)


@pytest.mark.parametrize('generator', [QRCodeGenerator(), Code128Generator()])
def test_empty_payload_is_rejected(generator):
    with pytest.raises(RasterGenerationError):
        generator.generate('')


# ── 3. Rasterising ────────────────────────────────────────────────

def test_rasterize_one_image_per_page(document):
    pages = rasterize(document, dpi=DPI, fonts=PillowTextMeasurer())
    assert len(pages) == len(document)
    assert pages[0].size == (round(210 * DPI / 25.4), round(297 * DPI / 25.4))


def test_write_pdf(document):
    buf = io.BytesIO()
    write_pdf(document, buf, dpi=DPI)
    assert buf.getvalue().startswith(b'%PDF')


def test_write_png_page(document):
    buf = io.BytesIO()
    write_png(document, buf, page=0, dpi=DPI)
    buf.seek(0)
    with PILImage.open(buf) as img:
        assert img.format == 'PNG'


def test_write_png_rejects_missing_page(document):
    with pytest.raises(IndexError):
        write_png(document, io.BytesIO(), page=len(document), dpi=DPI)


def test_unreadable_embedded_image_is_skipped():
    page = Page((
        Rect(10, 10, 50, 20, stroke='#000000', radius=2),
        Text(20, 20, 'OLÁ', 9, char_space=1.0),
        Image(10, 40, 20, 20, data=b'not an image'),
    ))
    pages = rasterize(Document(210, 297, (page,)), dpi=DPI)
    assert len(pages) == 1


def test_missing_font_directory_falls_back_to_default_font(tmp_path):
    fonts = PillowTextMeasurer(str(tmp_path))
    assert fonts.width('BASE CASAL', 9) > 0
