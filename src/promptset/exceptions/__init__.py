"""
promptset exception classes.

This package provides all exception types raised by Units and Collections
for consistent error handling and reporting.
"""

from promptset.exceptions.core import (
    ConfigurationError,
    EmptyCollectionError,
    NotFoundError,
    PolicyError,
    PromptSetError,
)

__all__ = [
    "PromptSetError",
    "ConfigurationError",
    "NotFoundError",
    "EmptyCollectionError",
    "PolicyError",
]
