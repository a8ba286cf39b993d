"""
app/layout/export.py
--------------------
Turn a Document into files: raster pages (PNG preview) and a PDF.

The PDF is built from rasterised pages with Pillow, so what the clerk
previews and what the customer receives are pixel-identical.
"""
import io
import logging
from typing import List

from PIL import Image as PILImage
from PIL import ImageDraw

from app.layout.document import Document, Image, Line, Path, Rect, Text
from app.layout.measure import PT_TO_MM, PillowTextMeasurer
from app.pricing.models import Receipt


logger = logging.getLogger(__name__)

DEFAULT_DPI    = 150
BEZIER_STEPS   = 16
ANCHORS        = {'left': 'ls', 'center': 'ms', 'right': 'rs'}


def export_filename(receipt: Receipt, label: str = 'COMPROVANTE', ext: str = 'pdf') -> str:
    """'COMPROVANTE - MARIA SOUZA.pdf'; unnamed clients become CLIENTE."""
    name = (receipt.name or '').strip().upper() or 'CLIENTE'
    return f'{label} - {name}.{ext}'


# ── Painting ──────────────────────────────────────────────────────

class _Painter:
    def __init__(self, canvas: PILImage.Image, scale: float, fonts: PillowTextMeasurer):
        self.canvas = canvas
        self.draw   = ImageDraw.Draw(canvas)
        self.scale  = scale
        self.fonts  = fonts

    def px(self, mm: float) -> int:
        return int(round(mm * self.scale))

    def stroke(self, line_width: float) -> int:
        return max(1, self.px(line_width))

    def paint(self, prim):
        if isinstance(prim, Text):
            self._text(prim)
        elif isinstance(prim, Rect):
            self._rect(prim)
        elif isinstance(prim, Line):
            self._line(prim)
        elif isinstance(prim, Path):
            self._path(prim)
        elif isinstance(prim, Image):
            self._image(prim)

    def _text(self, t: Text):
        font = self.fonts.font(t.font, max(1, self.px(t.size * PT_TO_MM)))
        x, y = self.px(t.x), self.px(t.y)
        if not t.char_space:
            self.draw.text((x, y), t.text, fill=t.color, font=font, anchor=ANCHORS.get(t.align, 'ls'))
            return
        # Letter-spaced text is only ever left-aligned in the template.
        for ch in t.text:
            self.draw.text((x, y), ch, fill=t.color, font=font, anchor='ls')
            x += font.getlength(ch) + self.px(t.char_space)

    def _rect(self, r: Rect):
        box = [self.px(r.x), self.px(r.y), self.px(r.x + r.w), self.px(r.y + r.h)]
        self.draw.rounded_rectangle(box, radius=self.px(r.radius), fill=r.fill,
                                    outline=r.stroke, width=self.stroke(r.line_width) if r.stroke else 0)

    def _line(self, l: Line):
        width = self.stroke(l.line_width)
        if not l.dash:
            self.draw.line([self.px(l.x1), self.px(l.y1), self.px(l.x2), self.px(l.y2)],
                           fill=l.color, width=width)
            return
        # Dashed lines in the template are horizontal.
        on, off = l.dash[0], l.dash[-1]
        x, end = min(l.x1, l.x2), max(l.x1, l.x2)
        while x < end:
            seg_end = min(x + on, end)
            self.draw.line([self.px(x), self.px(l.y1), self.px(seg_end), self.px(l.y1)],
                           fill=l.color, width=width)
            x = seg_end + off

    def _path(self, p: Path):
        strokes, current = [], []
        for seg in p.segments:
            op = seg[0]
            if op == 'M':
                if len(current) > 1:
                    strokes.append(current)
                current = [(seg[1], seg[2])]
            elif op == 'L':
                current.append((seg[1], seg[2]))
            elif op == 'C' and current:
                x0, y0 = current[-1]
                x1, y1, x2, y2, x3, y3 = seg[1:]
                for i in range(1, BEZIER_STEPS + 1):
                    t = i / BEZIER_STEPS
                    u = 1 - t
                    current.append((
                        u**3 * x0 + 3 * u**2 * t * x1 + 3 * u * t**2 * x2 + t**3 * x3,
                        u**3 * y0 + 3 * u**2 * t * y1 + 3 * u * t**2 * y2 + t**3 * y3,
                    ))
        if len(current) > 1:
            strokes.append(current)

        for points in strokes:
            self.draw.line([(self.px(x), self.px(y)) for x, y in points],
                           fill=p.color, width=self.stroke(p.line_width))

    def _image(self, im: Image):
        size = (max(1, self.px(im.w)), max(1, self.px(im.h)))
        try:
            raster = PILImage.open(io.BytesIO(im.data)).convert('RGBA').resize(size)
        except Exception as e:
            logger.warning(f"Skipping unreadable embedded image at ({im.x}, {im.y}): {e}")
            return
        self.canvas.paste(raster, (self.px(im.x), self.px(im.y)), raster)


def rasterize(document: Document, dpi: int = DEFAULT_DPI,
              fonts: PillowTextMeasurer = None) -> List[PILImage.Image]:
    """One RGB Pillow image per page."""
    fonts = fonts or PillowTextMeasurer()
    scale = dpi / 25.4
    pages = []
    for page in document.pages:
        canvas = PILImage.new('RGB', (int(round(document.width * scale)),
                                      int(round(document.height * scale))), 'white')
        painter = _Painter(canvas, scale, fonts)
        for prim in page.primitives:
            painter.paint(prim)
        pages.append(canvas)
    return pages


# ── Files ─────────────────────────────────────────────────────────

def write_pdf(document: Document, fp, dpi: int = DEFAULT_DPI, fonts: PillowTextMeasurer = None) -> None:
    pages = rasterize(document, dpi, fonts)
    pages[0].save(fp, format='PDF', save_all=True, append_images=pages[1:], resolution=float(dpi))


def write_png(document: Document, fp, page: int = 0, dpi: int = DEFAULT_DPI,
              fonts: PillowTextMeasurer = None) -> None:
    """Single page preview. IndexError for a page the document does not have."""
    if not 0 <= page < len(document.pages):
        raise IndexError(f'Document has {len(document.pages)} page(s); page {page + 1} requested')
    single = Document(width=document.width, height=document.height, pages=(document.pages[page],))
    rasterize(single, dpi, fonts)[0].save(fp, format='PNG')
