"""Domain types for the agri advisor service.

All shared dataclasses and type definitions live here to prevent
circular imports and establish a single source of truth for the
domain model. Every other module imports from here.
"""

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Farm profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FarmProfile:
    """One plot of land and its growing conditions, as submitted by a farmer."""

    location: str
    land_size: str
    land_type: str
    season: str
    water_facility: str
    duration: str
    land_health: str = ""
    language: str = "en"
    user_id: str = "anonymous"


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

@dataclass
class TranslationResult:
    """Outcome of one best-effort translation call.

    `translated` is False whenever the source text came back unchanged
    because translation was skipped or failed; `reason` says why.
    """

    text: str
    translated: bool
    reason: str = ""


# ---------------------------------------------------------------------------
# Document blocks
# ---------------------------------------------------------------------------

@dataclass
class HeadingBlock:
    """Markdown ATX heading (`#` through `######`)."""

    text: str
    level: int


@dataclass
class SubHeadingBlock:
    """`Capitalized Words:` line, stored without the trailing colon."""

    text: str


@dataclass
class BulletBlock:
    text: str


@dataclass
class TableBlock:
    """Pipe-delimited rows; the first row is the header."""

    rows: list[list[str]] = field(default_factory=list)

    @property
    def header(self) -> list[str]:
        return self.rows[0] if self.rows else []

    @property
    def body(self) -> list[list[str]]:
        return self.rows[1:]


@dataclass
class ParagraphBlock:
    text: str


Block = HeadingBlock | SubHeadingBlock | BulletBlock | TableBlock | ParagraphBlock


# ---------------------------------------------------------------------------
# Directory fixtures
# ---------------------------------------------------------------------------

@dataclass
class Vendor:
    name: str
    address: str
    contact: str


@dataclass
class Organization:
    name: str
    address: str
    contact: str


@dataclass
class LoanScheme:
    scheme: str
    loanAmount: str  # noqa: N815
    interestRate: str  # noqa: N815
    apply: str
