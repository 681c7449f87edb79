"""Line classification — markdown-ish advisory text → document blocks.

The model is asked for "line by line" output but in practice mixes ATX
headings, `Title:` lines, bullets, and pipe tables. Each trimmed line is
classified by the first matching rule:

    1. `# ..` to `###### ..`     → HeadingBlock (level = number of #)
    2. `Capitalized Words:`      → SubHeadingBlock (colon dropped)
    3. `- ..` / `* ..`           → BulletBlock
    4. `|..|`                    → table row, state → INSIDE
    5. INSIDE + blank line       → flush TableBlock, state → OUTSIDE
    6. INSIDE + any other line   → degenerate table row (stays INSIDE)
    7. otherwise                 → ParagraphBlock (blank = empty paragraph)

Headings, sub-headings and bullets are emitted without touching the
table state, so a table only ends on a blank line or at end of input.
Rule 6 keeps prose that follows a table without a blank line inside the
table as a zero- or one-cell row.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from agriadvisor.core.types import (
    Block,
    BulletBlock,
    HeadingBlock,
    ParagraphBlock,
    SubHeadingBlock,
    TableBlock,
)

HEADING_RE = re.compile(r"^(#{1,6})\s")
SUBHEADING_RE = re.compile(r"^[A-Z][A-Za-z\s]+:$")
BULLET_RE = re.compile(r"^[-*]\s")
TABLE_ROW_RE = re.compile(r"^\|.*\|$")


class TableState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


def split_row(line: str) -> list[str]:
    """Split a pipe row, dropping the fields before the first and after the last pipe."""
    return [cell.strip() for cell in line.split("|")[1:-1]]


@dataclass
class LineClassifier:
    """Single-pass classifier holding the table state and pending rows."""

    state: TableState = TableState.OUTSIDE
    rows: list[list[str]] = field(default_factory=list)

    def feed(self, raw_line: str) -> list[Block]:
        """Classify one line; returns the blocks it completes (possibly none)."""
        line = raw_line.strip()

        heading = HEADING_RE.match(line)
        if heading:
            return [HeadingBlock(text=line[heading.end():], level=len(heading.group(1)))]
        if SUBHEADING_RE.match(line):
            return [SubHeadingBlock(text=line[:-1])]
        if BULLET_RE.match(line):
            return [BulletBlock(text=line[2:])]
        if TABLE_ROW_RE.match(line):
            self.rows.append(split_row(line))
            self.state = TableState.INSIDE
            return []

        if self.state is TableState.INSIDE:
            if line == "":
                return [self._close_table()]
            self.rows.append(split_row(line))
            return []

        return [ParagraphBlock(text=line)]

    def finish(self) -> list[Block]:
        """Flush a table left open at end of input."""
        if self.state is TableState.INSIDE and self.rows:
            return [self._close_table()]
        return []

    def _close_table(self) -> TableBlock:
        table = TableBlock(rows=self.rows)
        self.rows = []
        self.state = TableState.OUTSIDE
        return table


def classify(text: str) -> list[Block]:
    """Classify every line of an advisory into document blocks."""
    classifier = LineClassifier()
    blocks: list[Block] = []
    for line in text.split("\n"):
        blocks.extend(classifier.feed(line))
    blocks.extend(classifier.finish())
    return blocks
