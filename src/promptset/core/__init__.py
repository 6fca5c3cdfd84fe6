"""
Core promptset components.

This package provides the Unit class, the selector listing helpers and the
type definitions shared across promptset.
"""

from promptset.core.listing import (
    DEFAULT_GLYPHS,
    Glyphs,
    ListingEntry,
    UnitStatus,
    format_listing,
    unit_status,
)
from promptset.core.types import (
    INCOMPLETE,
    VALID,
    Answers,
    Filter,
    PromptEngine,
    Question,
    Validator,
)
from promptset.core.unit import Unit, UnitConfig

__all__ = [
    "Unit",
    "UnitConfig",
    "UnitStatus",
    "Glyphs",
    "DEFAULT_GLYPHS",
    "ListingEntry",
    "format_listing",
    "unit_status",
    "INCOMPLETE",
    "VALID",
    "Answers",
    "Question",
    "Filter",
    "Validator",
    "PromptEngine",
]
