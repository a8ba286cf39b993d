"""
app/layout/document.py
----------------------
Output of the layout engine: pages of positioned draw primitives.

Units: positions and sizes in millimetres from the page's top-left
corner, font sizes in points. Colours are '#rrggbb' strings.

Primitives are frozen; a Page is a tuple of primitives in paint order
and cannot change once the builder has finalized it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Text:
    x:          float
    y:          float            # baseline
    text:       str
    size:       float
    color:      str = '#000000'
    font:       str = 'helvetica'
    align:      str = 'left'     # left | center | right, relative to x
    char_space: float = 0.0


@dataclass(frozen=True)
class Rect:
    x:          float
    y:          float
    w:          float
    h:          float
    stroke:     Optional[str] = None
    fill:       Optional[str] = None
    line_width: float = 0.1
    radius:     float = 0.0


@dataclass(frozen=True)
class Line:
    x1:         float
    y1:         float
    x2:         float
    y2:         float
    color:      str = '#000000'
    line_width: float = 0.1
    dash:       Tuple[float, ...] = ()


@dataclass(frozen=True)
class Path:
    """
    Free-form stroke. Segments are ('M', x, y), ('L', x, y) or
    ('C', x1, y1, x2, y2, x, y): cubic Bézier to (x, y).
    """
    segments:   Tuple[tuple, ...]
    color:      str = '#000000'
    line_width: float = 0.1


@dataclass(frozen=True)
class Image:
    """Opaque raster blob. Only the bounding box is known to the layout."""
    x:    float
    y:    float
    w:    float
    h:    float
    data: bytes = field(repr=False)


Primitive = Union[Text, Rect, Line, Path, Image]


@dataclass(frozen=True)
class Page:
    primitives: Tuple[Primitive, ...]

    def texts(self) -> List[str]:
        return [p.text for p in self.primitives if isinstance(p, Text)]

    def images(self) -> List[Image]:
        return [p for p in self.primitives if isinstance(p, Image)]


@dataclass(frozen=True)
class Document:
    width:  float
    height: float
    pages:  Tuple[Page, ...]

    def __len__(self):
        return len(self.pages)


class DocumentBuilder:
    """Accumulates primitives for the current page; one builder per render."""

    def __init__(self, width: float, height: float):
        self.width   = width
        self.height  = height
        self._pages: List[Page] = []
        self._current: List[Primitive] = []

    @property
    def page_count(self) -> int:
        return len(self._pages) + 1

    def draw(self, primitive: Primitive) -> None:
        self._current.append(primitive)

    def add_page(self) -> None:
        self._pages.append(Page(tuple(self._current)))
        self._current = []

    def build(self) -> Document:
        pages = tuple(self._pages) + (Page(tuple(self._current)),)
        return Document(width=self.width, height=self.height, pages=pages)
