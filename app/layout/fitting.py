"""
app/layout/fitting.py
---------------------
Pure sizing helpers for the receipt layout.

Nothing here draws. Every function takes a TextMeasurer so the maths can
be checked with a fixed-width measurer instead of real fonts.

Cell text goes through two steps:
  1. fit_font_size     → shrink linearly from the default size, down to a floor
  2. truncate_to_width → only if the floor is still too wide, cut + '...'
"""
from typing import List, Sequence, Tuple

from app.layout.measure import TextMeasurer


ELLIPSIS        = '...'
CELL_FONT_SIZE  = 9.0
CELL_FONT_FLOOR = 5.0
LABEL_FONT_SIZE = 6.0
CELL_PADDING    = 6.0    # added to the measured content when sizing a column
SHRINK_STEP     = 0.01


def flatten(text) -> str:
    """Collapse line breaks to spaces; empty values become '-'."""
    value = str(text) if text is not None else ''
    value = value.replace('\r\n', ' ').replace('\n', ' ').replace('\r', ' ')
    return value if value.strip() else '-'


def needed_width(label: str, value, minimum: float, measurer: TextMeasurer) -> float:
    """Width a grid cell asks for: the wider of value and label, plus padding."""
    value_w = measurer.width(flatten(value), CELL_FONT_SIZE, 'helvetica')
    label_w = measurer.width(label.upper(), LABEL_FONT_SIZE, 'helvetica-bold')
    return max(max(value_w, label_w) + CELL_PADDING, minimum)


def distribute_widths(needed: Sequence[float], available: float) -> List[float]:
    """
    Share `available` between cells in proportion to what each needs.

    The last cell takes whatever is left so the row spans exactly
    `available`. If nothing needs any space, split evenly.
    """
    count = len(needed)
    if count == 0:
        return []

    total = sum(needed)
    if total <= 0:
        widths = [available / count] * count
    else:
        widths = [w / total * available for w in needed]

    widths[-1] = available - sum(widths[:-1])
    return widths


def fit_font_size(text: str, usable: float, measurer: TextMeasurer,
                  font: str = 'helvetica',
                  default: float = CELL_FONT_SIZE,
                  floor: float = CELL_FONT_FLOOR) -> float:
    """
    Largest size ≤ `default` at which `text` fits `usable`, never below
    `floor`. Callers must truncate when the floor is returned and still
    does not fit.
    """
    if usable <= 0:
        return floor

    measured = measurer.width(text, default, font)
    if measured <= usable:
        return default

    size = max(floor, usable / measured * default)
    # Float rounding can leave the scaled text a hair too wide.
    while size > floor and measurer.width(text, size, font) > usable:
        size = max(floor, size - SHRINK_STEP)
    return size


def truncate_to_width(text: str, usable: float, size: float,
                      measurer: TextMeasurer, font: str = 'helvetica') -> str:
    """Cut characters from the end until text + '...' fits (or nothing is left)."""
    if measurer.width(text, size, font) <= usable:
        return text
    while text and measurer.width(text + ELLIPSIS, size, font) > usable:
        text = text[:-1]
    return text + ELLIPSIS


def fit_cell_text(text: str, usable: float, measurer: TextMeasurer,
                  font: str = 'helvetica') -> Tuple[str, float]:
    """Shrink, then truncate. Returns (display text, font size)."""
    size = fit_font_size(text, usable, measurer, font)
    return truncate_to_width(text, usable, size, measurer, font), size


def _break_word(word: str, width: float, size: float, font: str,
                measurer: TextMeasurer) -> List[str]:
    pieces = []
    while len(word) > 1 and measurer.width(word, size, font) > width:
        cut = len(word) - 1
        while cut > 1 and measurer.width(word[:cut], size, font) > width:
            cut -= 1
        pieces.append(word[:cut])
        word = word[cut:]
    pieces.append(word)
    return pieces


def wrap_text(text: str, width: float, size: float, font: str,
              measurer: TextMeasurer) -> List[str]:
    """
    Greedy word wrap to `width` mm. Explicit newlines are kept; a single
    word wider than the line is broken by characters.
    """
    if width <= 0:
        return [text or '']

    lines: List[str] = []
    for paragraph in str(text or '').split('\n'):
        current = ''
        for word in paragraph.split():
            candidate = f'{current} {word}' if current else word
            if measurer.width(candidate, size, font) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            pieces = _break_word(word, width, size, font, measurer)
            lines.extend(pieces[:-1])
            current = pieces[-1]
        lines.append(current)
    return lines
