"""
app/layout/engine.py
--------------------
Receipt layout engine: Receipt + PricingResult → paginated Document.

Page template (A4, millimetres, 10 mm margins):

    ┌──────────────────────────────────────────────┐
    │ header band: brand · store data · QR         │
    │ title + issue timestamp                      │
    │ client grid  (3 adaptive rows)               │
    │ item table   (may continue on next pages)    │
    │ summary: sale box │ totals                   │
    │ observation box                              │
    │ return policy box                            │
    │ signature · stamp · credit line              │
    └──────────────────────────────────────────────┘

Pagination checkpoints sit before every grid row, every table row, and
each of the summary / observation / policy / footer blocks. A block's
full height is computed first and it is moved whole to a new page when
it does not fit. Only the item table spans pages, row by row, with its
header band repeated at the top of each continuation page.

Barcode and QR images come from injected RasterGenerators. A failing
generator only loses its image; the document is still produced.

ReceiptLayout holds configuration only; all cursor state lives in a
_RenderPass created per render() call, so one layout instance can serve
concurrent requests.
"""
from __future__ import annotations

import logging
from collections import namedtuple
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from app.layout.document import Document, DocumentBuilder, Image, Line, Path, Rect, Text
from app.layout.fitting import (
    distribute_widths, fit_font_size, flatten, needed_width,
    truncate_to_width, fit_cell_text, wrap_text,
)
from app.layout.measure import PillowTextMeasurer, TextMeasurer
from app.layout.rasters import RasterGenerationError, RasterGenerator
from app.pricing.models import LineItem, PricingResult, Receipt
from app.pricing.totals import price_receipt
from app.utils.formatting import format_brl, format_date_br, format_decimal_br, parse_iso_date


logger = logging.getLogger(__name__)

# ── Page geometry (mm) ────────────────────────────────────────────
PAGE_WIDTH    = 210.0
PAGE_HEIGHT   = 297.0
MARGIN        = 10.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
CONTINUE_Y    = MARGIN + 10        # cursor after a page break
BOTTOM_LIMIT  = PAGE_HEIGHT - MARGIN

HEADER_HEIGHT = 40.0
QR_SIZE       = 25.0
GRID_ROW_H    = 10.0
CELL_PADDING  = 4.0

TABLE_HEADER_H   = 6.0
TABLE_MIN_SPACE  = 20.0
ROW_BASE_H       = 6.0
ROW_LINE_H       = 3.5
ROW_MIN_H        = 8.0
ROW_MAX_H        = BOTTOM_LIMIT - CONTINUE_Y - TABLE_HEADER_H   # tallest row a continuation page holds
DESC_FONT_SIZE   = 8.0
BARCODE_HEIGHT   = 3.5
BARCODE_MIN_W    = 8.0

SUMMARY_BOX_W   = 85.0
SUMMARY_ROW_H   = 7.0
TOTALS_WIDTH    = 90.0
TOTALS_LINE_H   = 5.0

POLICY_MIN_H    = 58.0
FOOTER_HEIGHT   = 45.0

COLORS = {
    'brand_blue':  '#1e40af',
    'text_dark':   '#1f2937',
    'text_gray':   '#6b7280',
    'border_gray': '#d1d5db',
    'bg_light':    '#f9fafb',
    'white':       '#ffffff',
    'red':         '#ef4444',
    'blue':        '#3b82f6',
    'obs_bg':      '#fefce8',
    'obs_border':  '#fef9c3',
    'obs_title':   '#a16207',
    'obs_text':    '#374151',
    'policy_bg':   '#f8fafc',
    'policy_head': '#334155',
    'policy_note': '#64748b',
    'policy_text': '#475569',
    'signature':   '#505a78',
    'stamp_blue':  '#1e3a8a',
    'credit':      '#c8c8c8',
}

# (header, width, alignment)
TABLE_COLUMNS = (
    ('CÓD',                  18.0,  'left'),
    ('DESCRIÇÃO DO PRODUTO', 100.0, 'left'),
    ('QTD',                  12.0,  'center'),
    ('UNITÁRIO',             30.0,  'right'),
    ('TOTAL',                30.0,  'right'),
)

OBSERVATION_TEXT = (
    'A garantia cobre exclusivamente o que está especificado na etiqueta '
    'e no certificado de cada produto.'
)
POLICY_WITHDRAWAL = (
    'O cliente tem o prazo de até 7 (sete) dias corridos para desistir da compra, '
    'contados a partir do recebimento do produto, desde que esteja sem uso e com lacre intacto.'
)
POLICY_IN_STORE = (
    'Compras realizadas em loja física não possuem direito de arrependimento, conforme o '
    'Código de Defesa do Consumidor, exceto em casos de defeito de fabricação.'
)
POLICY_AFTER_WARRANTY = (
    '• Após esse prazo, aplicar-se-á a garantia contratual do fabricante, '
    'quando houver, conforme certificado.'
)

GridField = namedtuple('GridField', 'label text minimum')


@dataclass(frozen=True)
class StoreProfile:
    """Fixed store identity printed in the header and the stamp."""
    brand:        str = 'BelConfort'
    tagline:      str = 'CAMAS E MÓVEIS'
    legal_name:   str = 'BELCONFORT CAMAS E MÓVEIS'
    tax_id:       str = '60.190.028/0001-60'
    address:      str = 'RUA B, 103C, CASTANHEIRA - BELEM/PA'
    street:       str = 'RUA B, 103C, CASTANHEIRA'
    city:         str = 'BELEM - PA'
    email:        str = 'belconfortcamasemoveis@gmail.com'
    phone:        str = '(91) 99381-2592'
    qr_payload:   str = 'https://www.instagram.com/belconfortcamasemoveis/'
    title:        str = 'COMPROVANTE DE COMPRA'
    credit_line:  str = 'Documento gerado pelo Ecosistema Belconfort'


@dataclass
class _TableRow:
    item:     LineItem
    lines:    List[str]
    warranty: Optional[str]
    height:   float


class ReceiptLayout:
    """
    Configured layout engine.

        layout = ReceiptLayout(measurer, qr_generator=QRCodeGenerator(),
                               barcode_generator=Code128Generator())
        document = layout.render(receipt)
    """

    def __init__(self, measurer: TextMeasurer = None,
                 qr_generator: Optional[RasterGenerator] = None,
                 barcode_generator: Optional[RasterGenerator] = None,
                 store: StoreProfile = None):
        self.measurer          = measurer or PillowTextMeasurer()
        self.qr_generator      = qr_generator
        self.barcode_generator = barcode_generator
        self.store             = store or StoreProfile()

    def render(self, receipt: Receipt, pricing: PricingResult = None,
               issued_at: datetime = None) -> Document:
        pricing   = pricing or price_receipt(receipt)
        issued_at = issued_at or datetime.now()
        return _RenderPass(self, receipt, pricing, issued_at).run()


class _RenderPass:
    """Cursor and page state for one document."""

    def __init__(self, layout: ReceiptLayout, receipt: Receipt,
                 pricing: PricingResult, issued_at: datetime):
        self.layout    = layout
        self.measure   = layout.measurer
        self.store     = layout.store
        self.receipt   = receipt
        self.pricing   = pricing
        self.issued_at = issued_at
        self.builder   = DocumentBuilder(PAGE_WIDTH, PAGE_HEIGHT)
        self.y         = MARGIN

    def run(self) -> Document:
        self._header()
        self._title()
        self._client_grid()
        self._item_table()
        self._summary()
        self._observation()
        self._return_policy()
        self._footer()
        return self.builder.build()

    # ── Primitives ────────────────────────────────────────────────

    def _text(self, x, y, text, size, color, font='helvetica', align='left', char_space=0.0):
        self.builder.draw(Text(x=x, y=y, text=text, size=size, color=color,
                               font=font, align=align, char_space=char_space))

    def _width(self, text, size, font='helvetica') -> float:
        return self.measure.width(text, size, font)

    def _ensure_space(self, height: float) -> bool:
        """Pagination checkpoint: start a new page if `height` does not fit."""
        if self.y + height > BOTTOM_LIMIT:
            self.builder.add_page()
            self.y = CONTINUE_Y
            return True
        return False

    def _embed(self, generator: Optional[RasterGenerator], payload: str,
               x: float, y: float, w: float, h: float, what: str) -> bool:
        """Place a generated raster; any failure just leaves the spot empty."""
        if generator is None:
            return False
        try:
            data = generator.generate(payload)
            if not data:
                raise RasterGenerationError('generator returned no data')
        except Exception as e:
            logger.warning(f"Skipping {what} image for {payload!r}: {e}")
            return False
        self.builder.draw(Image(x=x, y=y, w=w, h=h, data=bytes(data)))
        return True

    # ── 1. Header ─────────────────────────────────────────────────

    def _header(self):
        store = self.store
        self.builder.draw(Rect(0, 0, PAGE_WIDTH, HEADER_HEIGHT, fill=COLORS['brand_blue']))

        self._text(MARGIN, 20, store.brand, 26, COLORS['white'], 'times-bold')
        self._text(MARGIN, 26, store.tagline, 8, COLORS['white'], char_space=1.5)

        qr_x   = PAGE_WIDTH - MARGIN - QR_SIZE
        info_x = qr_x - 5
        self._text(info_x, 15, f'CNPJ {store.tax_id}', 9, COLORS['white'], 'helvetica-bold', 'right')
        self._text(info_x, 20, store.address, 9, COLORS['white'], align='right')
        self._text(info_x, 25, store.email, 9, COLORS['white'], align='right')
        self._text(info_x, 30, store.phone, 9, COLORS['white'], align='right')

        self._embed(self.layout.qr_generator, store.qr_payload, qr_x, 7, QR_SIZE, QR_SIZE, 'QR')
        self.y = 48

    # ── 2. Title ──────────────────────────────────────────────────

    def _title(self):
        center = PAGE_WIDTH / 2
        self._text(center, self.y, self.store.title, 14, COLORS['text_dark'], 'helvetica-bold', 'center')
        self.y += 5
        stamp = f"Emissão: {format_date_br(self.issued_at)} às {self.issued_at.strftime('%H:%M')}"
        self._text(center, self.y, stamp, 8, COLORS['text_gray'], align='center')
        self.y += 6

    # ── 3. Client grid ────────────────────────────────────────────

    def _order_date(self) -> str:
        parsed = parse_iso_date(self.receipt.date)
        if parsed:
            return format_date_br(parsed)
        return self.receipt.date or format_date_br(self.issued_at)

    def _client_grid(self):
        r = self.receipt
        self._grid_row([
            GridField('DATA DO PEDIDO', self._order_date(), 30),
            GridField('CLIENTE',        r.name,             60),
            GridField('CPF/CNPJ',       r.tax_id,           35),
        ])
        self._grid_row([
            GridField('RUA',         r.street,       40),
            GridField('Nº',          r.number,       12),
            GridField('COMPLEMENTO', r.complement,   10),
            GridField('BAIRRO',      r.neighborhood, 25),
            GridField('CIDADE',      r.city,         25),
        ])
        self._grid_row([
            GridField('E-MAIL',   r.email,     60),
            GridField('CONTATOS', r.contacts,  60),
        ])
        self.y += 6

    def _grid_row(self, fields: List[GridField]):
        self._ensure_space(GRID_ROW_H)

        needed = [needed_width(f.label, f.text, f.minimum, self.measure) for f in fields]
        widths = distribute_widths(needed, CONTENT_WIDTH)

        x = MARGIN
        for f, w in zip(fields, widths):
            self._grid_cell(f.label, f.text, x, w)
            x += w
        self.y += GRID_ROW_H

    def _grid_cell(self, label: str, value, x: float, w: float):
        self.builder.draw(Rect(x, self.y, w, GRID_ROW_H, stroke=COLORS['border_gray'], line_width=0.1))
        self._text(x + 2, self.y + 3.5, label.upper(), 6, COLORS['text_gray'], 'helvetica-bold')

        shown, size = fit_cell_text(flatten(value), w - CELL_PADDING, self.measure)
        self._text(x + 2, self.y + 7.5, shown, size, COLORS['text_dark'])

    # ── 4. Item table ─────────────────────────────────────────────

    def _table_rows(self) -> List[_TableRow]:
        desc_width = TABLE_COLUMNS[1][1] - 4
        rows = []
        for item in self.receipt.items:
            lines    = wrap_text(item.name, desc_width, DESC_FONT_SIZE, 'helvetica', self.measure)
            warranty = item.warranty_text
            room     = ROW_MAX_H - ROW_BASE_H - (ROW_LINE_H if warranty else 0)
            keep     = int(room // ROW_LINE_H)
            if len(lines) > keep:
                tail  = truncate_to_width(' '.join(lines[keep - 1:]), desc_width,
                                          DESC_FONT_SIZE, self.measure)
                lines = lines[:keep - 1] + [tail]
            height   = ROW_BASE_H + len(lines) * ROW_LINE_H
            if warranty:
                height += ROW_LINE_H
            rows.append(_TableRow(item, lines, warranty, max(height, ROW_MIN_H)))
        return rows

    def _table_header(self):
        y = self.y
        self.builder.draw(Rect(MARGIN, y, CONTENT_WIDTH, TABLE_HEADER_H, fill=COLORS['bg_light']))
        self.builder.draw(Line(MARGIN, y, MARGIN + CONTENT_WIDTH, y, COLORS['border_gray']))
        self.builder.draw(Line(MARGIN, y + TABLE_HEADER_H, MARGIN + CONTENT_WIDTH, y + TABLE_HEADER_H,
                               COLORS['border_gray']))

        col_x = MARGIN
        for name, width, align in TABLE_COLUMNS:
            if align == 'left':
                text_x = col_x + 2
            elif align == 'right':
                text_x = col_x + width - 2
            else:
                text_x = col_x + width / 2
            self._text(text_x, y + 4, name, 7, COLORS['brand_blue'], 'helvetica-bold', align)
            col_x += width
        self.y += TABLE_HEADER_H

    def _item_table(self):
        rows = self._table_rows()

        # Header and first row move together, so a header never ends a page.
        first = rows[0].height if rows else 0
        self._ensure_space(max(TABLE_MIN_SPACE, TABLE_HEADER_H + first))
        self._table_header()

        if not rows:
            self._text(PAGE_WIDTH / 2, self.y + 10, '- Nenhum item adicionado -', 9,
                       COLORS['text_gray'], align='center')
            self.y += 20
        for i, row in enumerate(rows):
            # The first row was checked together with the header above.
            if i and self._ensure_space(row.height):
                self._table_header()
            self._table_row(row)

        self.y += 4

    def _table_row(self, row: _TableRow):
        item, y = row.item, self.y
        dark = COLORS['text_dark']
        widths = [c[1] for c in TABLE_COLUMNS]

        self.builder.draw(Line(MARGIN, y + row.height, MARGIN + CONTENT_WIDTH, y + row.height,
                               COLORS['border_gray'], 0.1))

        x = MARGIN
        code_text = item.code or '-'
        self._text(x + 2, y + 4, code_text, DESC_FONT_SIZE, dark)
        if item.code:
            bar_w = max(self._width(code_text, DESC_FONT_SIZE), BARCODE_MIN_W)
            self._embed(self.layout.barcode_generator, item.code,
                        x + 2, y + 5, bar_w, BARCODE_HEIGHT, 'barcode')

        x += widths[0]
        for i, line in enumerate(row.lines):
            self._text(x + 2, y + 4 + i * ROW_LINE_H, line, DESC_FONT_SIZE, dark)
        if row.warranty:
            self._text(x + 2, y + 4 + len(row.lines) * ROW_LINE_H + 2, row.warranty, 6, COLORS['text_gray'])

        x += widths[1]
        self._text(x + widths[2] / 2, y + 4, str(item.quantity), DESC_FONT_SIZE, dark, align='center')

        x += widths[2]
        self._text(x + widths[3] - 2, y + 4, format_decimal_br(item.unit_price), DESC_FONT_SIZE,
                   dark, align='right')

        x += widths[3]
        self._text(x + widths[4] - 2, y + 4, format_decimal_br(item.line_total), DESC_FONT_SIZE,
                   dark, 'helvetica-bold', 'right')

        self.y += row.height

    # ── 5. Summary ────────────────────────────────────────────────

    def _total_lines(self):
        """(label, value, colour, emphasised). Zero discounts are omitted."""
        p = self.pricing
        lines = [('Subtotal:', format_brl(p.subtotal), COLORS['text_gray'], False)]
        if p.automatic_discount.amount > 0:
            lines.append((f'{p.automatic_discount.label}:',
                          f'- {format_brl(p.automatic_discount.amount)}', COLORS['blue'], False))
        if p.manual_discount > 0:
            lines.append(('Desc. Vendedor:', f'- {format_brl(p.manual_discount)}', COLORS['red'], False))
        lines.append(('TOTAL:', format_brl(p.total), COLORS['text_dark'], True))
        return lines

    def _summary(self):
        lines  = self._total_lines()
        box_h  = SUMMARY_ROW_H * 3
        # Plain lines, 1 mm gap, 1.5 mm inset for the highlighted total, then the total.
        totals_h = TOTALS_LINE_H * len(lines) + 2.5
        self._ensure_space(max(box_h, totals_h))

        start = self.y
        self._sale_box(start)

        totals_x = PAGE_WIDTH - MARGIN - TOTALS_WIDTH
        ty = start
        for line in lines[:-1]:
            ty = self._total_line(totals_x, ty, *line)
        ty += 1
        self.builder.draw(Rect(totals_x - 5, ty - 5, TOTALS_WIDTH + 5, 10,
                               fill=COLORS['bg_light'], radius=1))
        ty += 1.5
        ty = self._total_line(totals_x, ty, *lines[-1])

        self.y = max(start + box_h, ty)

    def _total_line(self, x, y, label, value, color, emphasised) -> float:
        font = 'helvetica-bold' if emphasised else 'helvetica'
        size = 10 if emphasised else 8
        self._text(x, y, label, size, color, font)
        self._text(PAGE_WIDTH - MARGIN, y, value, size, color, font, 'right')
        return y + TOTALS_LINE_H

    def _sale_box(self, start: float):
        border = COLORS['border_gray']
        right  = MARGIN + SUMMARY_BOX_W
        self.builder.draw(Rect(MARGIN, start, SUMMARY_BOX_W, SUMMARY_ROW_H * 3, stroke=border))
        self.builder.draw(Line(MARGIN, start + SUMMARY_ROW_H, right, start + SUMMARY_ROW_H, border))
        self.builder.draw(Line(MARGIN, start + 2 * SUMMARY_ROW_H, right, start + 2 * SUMMARY_ROW_H, border))

        r = self.receipt
        rows = (
            ('CÓDIGO DA VENDA',    r.sale_code,      COLORS['brand_blue'], 'helvetica-bold', 9),
            ('VENDEDOR',           r.salesperson,    COLORS['text_dark'],  'helvetica-bold', 8),
            ('FORMA DE PAGAMENTO', r.payment_method, COLORS['text_dark'],  'helvetica',      9),
        )
        for i, (label, value, color, font, size) in enumerate(rows):
            row_y = start + i * SUMMARY_ROW_H
            self._text(MARGIN + 2, row_y + 4.5, label, 7, COLORS['text_gray'], 'helvetica-bold')

            shown  = flatten(value).upper()
            usable = SUMMARY_BOX_W - 6 - self._width(label, 7, 'helvetica-bold')
            size   = fit_font_size(shown, usable, self.measure, font, default=size)
            shown  = truncate_to_width(shown, usable, size, self.measure, font)
            self._text(right - 2, row_y + 5, shown, size, color, font, 'right')

    # ── 6. Observation and policy ─────────────────────────────────

    def _observation(self):
        self.y += 4
        lines = wrap_text(OBSERVATION_TEXT, CONTENT_WIDTH - 10, 8, 'helvetica-oblique', self.measure)
        height = 10 + len(lines) * ROW_LINE_H
        self._ensure_space(height + 5)

        center = PAGE_WIDTH / 2
        self.builder.draw(Rect(MARGIN, self.y, CONTENT_WIDTH, height, stroke=COLORS['obs_border'],
                               fill=COLORS['obs_bg'], radius=2))
        self._text(center, self.y + 5, 'OBSERVAÇÃO', 7, COLORS['obs_title'], 'helvetica-bold', 'center')
        for i, line in enumerate(lines):
            self._text(center, self.y + 9 + i * ROW_LINE_H, line, 8, COLORS['obs_text'],
                       'helvetica-oblique', 'center')
        self.y += height + 4

    def _policy_content(self):
        """Lay the policy out relative to the box top; returns (primitives, height)."""
        out = []
        wrap_w = CONTENT_WIDTH - 6
        left, bullet = MARGIN + 3, MARGIN + 5
        head, note, body = COLORS['policy_head'], COLORS['policy_note'], COLORS['policy_text']

        def text(x, y, s, font='helvetica', color=body, size=7, align='left'):
            out.append(Text(x=x, y=y, text=s, size=size, color=color, font=font, align=align))

        def paragraph(x, y, s, step=3.0):
            lines = wrap_text(s, wrap_w, 7, 'helvetica', self.measure)
            for i, line in enumerate(lines):
                text(x, y + i * step, line)
            return y + len(lines) * step

        py = 5.0
        text(PAGE_WIDTH / 2, py, 'POLÍTICA DE TROCAS E DEVOLUÇÕES', 'helvetica-bold',
             COLORS['text_dark'], 8, 'center')
        out.append(Line(MARGIN + 5, py + 2, PAGE_WIDTH - MARGIN - 5, py + 2, COLORS['border_gray'], 0.1))

        py += 8
        title = 'DIREITO DE ARREPENDIMENTO'
        text(left, py, title, 'helvetica-bold', head)
        text(left + self._width(title, 7, 'helvetica-bold') + 1, py, '(Art. 49 do CDC):', color=note)

        py = paragraph(left, py + 3.5, POLICY_WITHDRAWAL)
        text(bullet, py, '• Compras online: frete de devolução por conta da empresa.')
        py += 5

        text(left, py, 'COMPRAS EM LOJA FÍSICA:', 'helvetica-bold', head)
        py = paragraph(left, py + 3.5, POLICY_IN_STORE) + 2

        text(left, py, 'DEFEITOS DE FABRICAÇÃO (Garantia Legal):', 'helvetica-bold', head)
        py += 3.5
        text(bullet, py, '• Garantia legal de 90 (noventa) dias, conforme o CDC.')
        py = paragraph(bullet, py + 3.5, POLICY_AFTER_WARRANTY, step=3.5)

        return out, max(POLICY_MIN_H, py + 4)

    def _return_policy(self):
        content, height = self._policy_content()
        self._ensure_space(height + 10)

        top = self.y
        self.builder.draw(Rect(MARGIN, top, CONTENT_WIDTH, height, stroke=COLORS['border_gray'],
                               fill=COLORS['policy_bg'], radius=2))
        for prim in content:
            if isinstance(prim, Line):
                self.builder.draw(Line(prim.x1, prim.y1 + top, prim.x2, prim.y2 + top,
                                       prim.color, prim.line_width))
            else:
                self.builder.draw(Text(x=prim.x, y=prim.y + top, text=prim.text, size=prim.size,
                                       color=prim.color, font=prim.font, align=prim.align))
        self.y += height

    # ── 7. Footer ─────────────────────────────────────────────────

    def _footer(self):
        self._ensure_space(FOOTER_HEIGHT)
        store  = self.store
        center = PAGE_WIDTH / 2

        stamp_y  = self.y + 10
        footer_y = stamp_y + 20

        self.builder.draw(Line(PAGE_WIDTH / 4, footer_y, PAGE_WIDTH / 4 * 3, footer_y,
                               COLORS['text_dark'], 0.1, dash=(1.0, 1.0)))
        self._text(center, footer_y + 5, 'Assinatura do Responsável', 8, COLORS['text_gray'], align='center')

        bottom = max(footer_y + 15, PAGE_HEIGHT - 10)
        self._text(center, bottom, store.credit_line, 7, COLORS['credit'], align='center')

        self.builder.draw(self._signature(center - 15, stamp_y + 18))
        self._stamp(stamp_y)
        self.y = bottom

    @staticmethod
    def _signature(sx: float, sy: float) -> Path:
        segments = (
            ('M', sx, sy),
            ('C', sx + 2, sy - 15, sx + 8, sy - 15, sx + 8, sy),
            ('C', sx + 8, sy - 12, sx + 14, sy - 12, sx + 14, sy),
            ('C', sx + 16, sy - 3, sx + 18, sy + 2, sx + 19, sy - 1),
            ('L', sx + 21, sy - 8),
            ('L', sx + 21, sy),
            ('C', sx + 22, sy - 10, sx + 26, sy - 10, sx + 26, sy),
            ('C', sx + 26, sy - 5, sx + 29, sy - 5, sx + 29, sy),
            ('C', sx + 32, sy - 2, sx + 35, sy + 2, sx + 38, sy - 2),
            ('M', sx - 5, sy + 5),
            ('C', sx + 10, sy + 8, sx + 30, sy + 3, sx + 45, sy + 6),
        )
        return Path(segments=segments, color=COLORS['signature'], line_width=0.08)

    def _stamp(self, stamp_y: float):
        blue = COLORS['stamp_blue']
        w, h, b = 55.0, 22.0, 3.0
        x = (PAGE_WIDTH - w) / 2

        # Bracket corners: (corner x, corner y, horizontal direction, vertical direction)
        for cx, cy, dx, dy in ((x, stamp_y, 1, 1), (x + w, stamp_y, -1, 1),
                               (x, stamp_y + h, 1, -1), (x + w, stamp_y + h, -1, -1)):
            self.builder.draw(Line(cx, cy, cx + dx * b, cy, blue, 0.5))
            self.builder.draw(Line(cx, cy, cx, cy + dy * b, blue, 0.5))

        center = PAGE_WIDTH / 2
        self._text(center, stamp_y + 6, self.store.tax_id, 10, blue, 'helvetica-bold', 'center')
        self._text(center, stamp_y + 11, self.store.legal_name, 7, blue, align='center')
        self._text(center, stamp_y + 16, self.store.street, 6, blue, 'helvetica-bold', 'center')
        self._text(center, stamp_y + 19, self.store.city, 6, blue, 'helvetica-bold', 'center')
