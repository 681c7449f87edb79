"""PDF rendering for farm advisory reports (ReportLab canvas).

Every drawing function takes the canvas and a Cursor and returns the
Cursor for the next block; nothing reads or mutates a hidden text
position. Page breaks happen inside `_reserve()` when a block would
cross the bottom margin.
"""

import json
import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from io import BytesIO

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas

from agriadvisor.config import settings
from agriadvisor.core.types import (
    Block,
    BulletBlock,
    HeadingBlock,
    ParagraphBlock,
    SubHeadingBlock,
    TableBlock,
)
from agriadvisor.render.layout import classify

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = LETTER
MARGIN = 72
LINE_SPACING = 1.2

TITLE_SIZE = 18
SUBHEADING_SIZE = 14
BODY_SIZE = 12

BULLET_INDENT = 20
BULLET_GAP = 10

COLUMN_WIDTHS = (150, 100, 100, 120, 120, 120)
ROW_HEIGHT = 20
CELL_PADDING = 5
HEADER_FILL = HexColor("#eeeeee")


def heading_size(level: int) -> int:
    """Level 1 is 16pt, each deeper level 2pt smaller."""
    return TITLE_SIZE - level * 2


@dataclass(frozen=True)
class Fonts:
    regular: str
    bold: str


@lru_cache(maxsize=1)
def get_fonts() -> Fonts:
    """Register configured TTF fonts once; Helvetica when none are set."""
    if not settings.pdf_font_path:
        return Fonts(regular="Helvetica", bold="Helvetica-Bold")

    pdfmetrics.registerFont(TTFont("AdvisoryRegular", settings.pdf_font_path))
    bold = "AdvisoryRegular"
    if settings.pdf_bold_font_path:
        pdfmetrics.registerFont(TTFont("AdvisoryBold", settings.pdf_bold_font_path))
        bold = "AdvisoryBold"
    logger.info("Registered PDF fonts from %s", settings.pdf_font_path)
    return Fonts(regular="AdvisoryRegular", bold=bold)


@dataclass(frozen=True)
class Cursor:
    """Top-left of the next thing to draw, in PDF points (y grows upward)."""

    x: float = MARGIN
    y: float = PAGE_HEIGHT - MARGIN

    def down(self, amount: float) -> "Cursor":
        return replace(self, y=self.y - amount)


def _reserve(canvas: Canvas, cursor: Cursor, height: float) -> Cursor:
    """Start a new page if `height` points don't fit below the cursor."""
    if cursor.y - height >= MARGIN:
        return cursor
    canvas.showPage()
    return Cursor(x=cursor.x)


def _draw_lines(
    canvas: Canvas,
    cursor: Cursor,
    lines: list[str],
    font: str,
    size: float,
    x: float | None = None,
) -> Cursor:
    leading = size * LINE_SPACING
    left = cursor.x if x is None else x
    for line in lines:
        cursor = _reserve(canvas, cursor, leading)
        canvas.setFont(font, size)
        canvas.drawString(left, cursor.y - size, line)
        cursor = cursor.down(leading)
    return cursor


def draw_wrapped(
    canvas: Canvas,
    cursor: Cursor,
    text: str,
    font: str,
    size: float,
    indent: float = 0,
) -> Cursor:
    """Draw text wrapped to the page's text width; blank text is one empty line."""
    width = PAGE_WIDTH - 2 * MARGIN - indent
    lines = simpleSplit(text, font, size, width) or [""]
    return _draw_lines(canvas, cursor, lines, font, size, x=cursor.x + indent)


# ---------------------------------------------------------------------------
# Block renderers
# ---------------------------------------------------------------------------

def draw_title(canvas: Canvas, cursor: Cursor, title: str) -> Cursor:
    fonts = get_fonts()
    canvas.setFont(fonts.regular, TITLE_SIZE)
    canvas.drawCentredString(PAGE_WIDTH / 2, cursor.y - TITLE_SIZE, title)
    return cursor.down(TITLE_SIZE * LINE_SPACING * 2)


def draw_heading(canvas: Canvas, cursor: Cursor, block: HeadingBlock) -> Cursor:
    size = heading_size(block.level)
    cursor = cursor.down(BODY_SIZE * LINE_SPACING)
    cursor = draw_wrapped(canvas, cursor, block.text, get_fonts().bold, size)
    return cursor.down(size * LINE_SPACING * 0.5)


def draw_subheading(canvas: Canvas, cursor: Cursor, block: SubHeadingBlock) -> Cursor:
    cursor = cursor.down(BODY_SIZE * LINE_SPACING)
    cursor = draw_wrapped(canvas, cursor, block.text, get_fonts().bold, SUBHEADING_SIZE)
    return cursor.down(SUBHEADING_SIZE * LINE_SPACING * 0.3)


def draw_bullet(canvas: Canvas, cursor: Cursor, block: BulletBlock) -> Cursor:
    fonts = get_fonts()
    cursor = _reserve(canvas, cursor, BODY_SIZE * LINE_SPACING)
    canvas.setFont(fonts.regular, BODY_SIZE)
    canvas.drawString(cursor.x + BULLET_INDENT, cursor.y - BODY_SIZE, "•")
    return draw_wrapped(
        canvas, cursor, block.text, fonts.regular, BODY_SIZE,
        indent=BULLET_INDENT + BULLET_GAP,
    )


def draw_paragraph(canvas: Canvas, cursor: Cursor, block: ParagraphBlock) -> Cursor:
    return draw_wrapped(canvas, cursor, block.text, get_fonts().regular, BODY_SIZE)


def _column_width(index: int) -> float:
    # Column count is not validated; cells past the sixth reuse the last width
    return COLUMN_WIDTHS[min(index, len(COLUMN_WIDTHS) - 1)]


def _draw_row(canvas: Canvas, cursor: Cursor, cells: list[str], font: str) -> None:
    leading = BODY_SIZE * LINE_SPACING
    x = cursor.x
    for i, cell in enumerate(cells):
        width = _column_width(i)
        lines = simpleSplit(cell, font, BODY_SIZE, width - 2 * CELL_PADDING)
        canvas.setFont(font, BODY_SIZE)
        for n, line in enumerate(lines):
            # Wrapped lines may overflow into the next band
            canvas.drawString(x + CELL_PADDING, cursor.y - CELL_PADDING - BODY_SIZE - n * leading, line)
        x += width


def draw_table(canvas: Canvas, cursor: Cursor, block: TableBlock) -> Cursor:
    """Header on a shaded band in bold, then one fixed-height band per row."""
    fonts = get_fonts()
    if not block.rows:
        return cursor

    cursor = _reserve(canvas, cursor, ROW_HEIGHT)
    canvas.setFillColor(HEADER_FILL)
    canvas.rect(cursor.x, cursor.y - ROW_HEIGHT, sum(COLUMN_WIDTHS), ROW_HEIGHT, stroke=0, fill=1)
    canvas.setFillColor(black)
    _draw_row(canvas, cursor, block.header, fonts.bold)
    cursor = cursor.down(ROW_HEIGHT)

    for row in block.body:
        cursor = _reserve(canvas, cursor, ROW_HEIGHT)
        _draw_row(canvas, cursor, row, fonts.regular)
        cursor = cursor.down(ROW_HEIGHT)

    return cursor.down(BODY_SIZE * LINE_SPACING)


_RENDERERS = {
    HeadingBlock: draw_heading,
    SubHeadingBlock: draw_subheading,
    BulletBlock: draw_bullet,
    TableBlock: draw_table,
    ParagraphBlock: draw_paragraph,
}


def draw_block(canvas: Canvas, cursor: Cursor, block: Block) -> Cursor:
    return _RENDERERS[type(block)](canvas, cursor, block)


def draw_json(canvas: Canvas, cursor: Cursor, data: object) -> Cursor:
    """Pretty-printed JSON dump, one source line per PDF line, indentation kept."""
    font = get_fonts().regular
    space = pdfmetrics.stringWidth(" ", font, BODY_SIZE)
    for line in json.dumps(data, indent=2, ensure_ascii=False).splitlines():
        stripped = line.lstrip(" ")
        indent = (len(line) - len(stripped)) * space
        cursor = draw_wrapped(canvas, cursor, stripped, font, BODY_SIZE, indent=indent)
    return cursor


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_report(title: str, result: str | dict) -> bytes:
    """Render an advisory to PDF bytes.

    Text is classified into blocks (see render.layout); anything else is
    dumped as JSON without classification.
    """
    buffer = BytesIO()
    canvas = Canvas(buffer, pagesize=LETTER)
    canvas.setTitle(title)

    cursor = draw_title(canvas, Cursor(), title)
    if isinstance(result, str):
        blocks = classify(result)
        for block in blocks:
            cursor = draw_block(canvas, cursor, block)
        logger.info("Rendered %d blocks", len(blocks), extra={"step": "render"})
    else:
        cursor = draw_json(canvas, cursor, result)
        logger.info("Rendered structured advisory as JSON", extra={"step": "render"})

    canvas.save()
    return buffer.getvalue()
