"""
Built-in answer validators.

A validator returns True when the answer is acceptable and a message string
otherwise. The message is shown to the user by the prompt engine, which then
asks again; a rejection is never raised as an exception.
"""

import math

from promptset.core.types import VALID, Validator, ValidatorResult


def disable_blank(value: str) -> ValidatorResult:
    """Reject answers that are empty or whitespace only."""
    if len(str(value).strip()) == 0:
        return "Response cannot be blank"
    return VALID


def number_only(value: str) -> ValidatorResult:
    """Reject answers that do not parse as a number."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "Response is not a number"
    if math.isnan(number):
        return "Response is not a number"
    return VALID


def integer_only(value: str) -> ValidatorResult:
    """Reject answers that are not whole numbers."""
    is_number = number_only(value)
    if is_number is not VALID:
        return is_number
    number = float(value)
    if not number.is_integer():
        return "Response cannot contain decimals"
    return VALID


def contains_string(text: str, case_sensitive: bool = True) -> Validator:
    """
    Build a validator that accepts only answers containing `text`.

    Params:
        text: Substring that must appear in the answer
        case_sensitive: Whether the substring search is case-sensitive

    Returns:
        Validator function closed over the search text
    """
    needle = text if case_sensitive else text.lower()

    def validator(value: str) -> ValidatorResult:
        haystack = value if case_sensitive else value.lower()
        if needle in haystack:
            return VALID
        return f"Response must contain {text}"

    return validator


__all__ = ["disable_blank", "number_only", "integer_only", "contains_string"]
