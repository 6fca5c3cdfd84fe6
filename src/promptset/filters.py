"""
Built-in answer filters.

Filters take the raw answer and return the transformed answer. They are
chained on a Unit with `Unit.add_filter` and applied left to right.
"""

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def auto_trim(value: str) -> str:
    """Strip leading and trailing whitespace."""
    return value.strip()


def single_space(value: str) -> str:
    """Collapse every run of whitespace into a single space."""
    return _WHITESPACE_RUN.sub(" ", value)


def caps_lock(value: str) -> str:
    """Set all characters to uppercase."""
    return value.upper()


def lower_case(value: str) -> str:
    """Set all characters to lowercase."""
    return value.lower()


upper_case = caps_lock

__all__ = ["auto_trim", "single_space", "caps_lock", "upper_case", "lower_case"]
