"""Core domain types shared across all agriadvisor modules."""

from agriadvisor.core.errors import (
    AdvisoryError,
    PersistenceError,
    TranslationError,
    UpstreamError,
    ValidationError,
)
from agriadvisor.core.types import (
    Block,
    BulletBlock,
    FarmProfile,
    HeadingBlock,
    LoanScheme,
    Organization,
    ParagraphBlock,
    SubHeadingBlock,
    TableBlock,
    TranslationResult,
    Vendor,
)

__all__ = [
    "AdvisoryError",
    "Block",
    "BulletBlock",
    "FarmProfile",
    "HeadingBlock",
    "LoanScheme",
    "Organization",
    "ParagraphBlock",
    "PersistenceError",
    "SubHeadingBlock",
    "TableBlock",
    "TranslationError",
    "TranslationResult",
    "UpstreamError",
    "ValidationError",
    "Vendor",
]
