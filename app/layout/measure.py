"""
app/layout/measure.py
---------------------
Text-measurement capability used by the layout engine.

A measurer answers one question: how wide (in mm) is `text` set in
`font` at `size` points? Widths must scale linearly with size: the
shrink-to-fit step relies on it.

Font names used by the layout:
    helvetica, helvetica-bold, helvetica-oblique, times-bold
"""
import logging
import os

from PIL import ImageFont


logger = logging.getLogger(__name__)

PT_TO_MM = 25.4 / 72.0

DEFAULT_FONT_DIR = '/usr/share/fonts/truetype/dejavu'

FONT_FILES = {
    'helvetica':         'DejaVuSans.ttf',
    'helvetica-bold':    'DejaVuSans-Bold.ttf',
    'helvetica-oblique': 'DejaVuSans-Oblique.ttf',
    'times-bold':        'DejaVuSerif-Bold.ttf',
}


class TextMeasurer:
    """Interface: width of a string in millimetres."""

    def width(self, text: str, size: float, font: str = 'helvetica') -> float:
        raise NotImplementedError


class FixedWidthMeasurer(TextMeasurer):
    """
    Every character advances `em` × size points, whatever the font.
    Deterministic, used by tests and quick previews.
    """

    def __init__(self, em: float = 0.5):
        self.em = em

    def width(self, text, size, font='helvetica'):
        return len(text or '') * self.em * size * PT_TO_MM


class PillowTextMeasurer(TextMeasurer):
    """
    Measures with TrueType fonts through Pillow.

    Fonts are loaded once at a reference size and scaled linearly.
    Missing font files fall back to Pillow's bundled default font.
    """

    REFERENCE_SIZE = 100

    def __init__(self, font_dir: str = None):
        self.font_dir = font_dir or DEFAULT_FONT_DIR
        self._fonts = {}

    def font(self, font: str = 'helvetica', size: int = REFERENCE_SIZE):
        """Pillow font object for `font` at `size` pixels (cached)."""
        key = (font, size)
        if key not in self._fonts:
            filename = FONT_FILES.get(font, FONT_FILES['helvetica'])
            try:
                self._fonts[key] = ImageFont.truetype(os.path.join(self.font_dir, filename), size)
            except OSError as e:
                logger.warning(f"Font {filename} unavailable ({e}); using Pillow default font")
                self._fonts[key] = ImageFont.load_default(size=size)
        return self._fonts[key]

    def width(self, text, size, font='helvetica'):
        if not text:
            return 0.0
        length = self.font(font).getlength(text)
        return length / self.REFERENCE_SIZE * size * PT_TO_MM
