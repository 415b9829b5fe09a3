"""
In-memory canvas: pages of primitive draw commands.

The layout engine only produces these values; billing.pdf.serialize replays
them onto a ReportLab canvas. Keeping the two apart lets tests assert on what
was placed where without parsing PDF content streams.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from reportlab.lib.pagesizes import A4

PAGE_WIDTH, PAGE_HEIGHT = A4

# RGB in 0..1
Color = Tuple[float, float, float]


@dataclass(frozen=True)
class TextCommand:
    x: float
    y: float
    text: str
    font: str
    size: float
    color: Color
    # left | right | centre ; x is the anchor for the chosen alignment
    align: str = "left"
    opacity: float = 1.0
    # Free-form role used by tests and debugging, never rendered
    tag: Optional[str] = None


@dataclass(frozen=True)
class RectCommand:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    line_width: float = 0.0
    opacity: float = 1.0
    tag: Optional[str] = None


@dataclass(frozen=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    line_width: float = 0.5
    tag: Optional[str] = None


@dataclass(frozen=True)
class ImageCommand:
    x: float
    y: float
    width: float
    height: float
    # Decoded image payload (reportlab ImageReader) or a file path
    image: object
    tag: Optional[str] = None


DrawCommand = Union[TextCommand, RectCommand, LineCommand, ImageCommand]


@dataclass
class Page:
    index: int
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT
    commands: Sequence[DrawCommand] = field(default_factory=list)
    sealed: bool = False

    def draw(self, commands: Iterable[DrawCommand]) -> None:
        if self.sealed:
            raise RuntimeError(f"page {self.index} is sealed")
        self.commands.extend(commands)  # type: ignore[attr-defined]

    def tagged(self, tag: str) -> List[DrawCommand]:
        return [c for c in self.commands if getattr(c, "tag", None) == tag]

    def texts(self) -> List[str]:
        return [c.text for c in self.commands if isinstance(c, TextCommand)]


@dataclass
class PageSet:
    """Ordered pages of one document."""

    pages: List[Page] = field(default_factory=list)

    def new_page(self) -> Page:
        page = Page(index=len(self.pages))
        self.pages.append(page)
        return page

    def __getitem__(self, index: int) -> Page:
        return self.pages[index]

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self):
        return iter(self.pages)

    def seal(self) -> "PageSet":
        for page in self.pages:
            page.commands = tuple(page.commands)
            page.sealed = True
        return self
