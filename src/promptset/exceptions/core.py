"""
Exception classes for promptset.

This module defines the error types raised by Units and Collections when they
are configured or queried incorrectly. Validation rejections shown to the user
are not errors and never surface as exceptions.
"""

from typing import Any


class PromptSetError(Exception):
    """Base exception for all promptset errors."""

    pass


class ConfigurationError(PromptSetError, TypeError):
    """Raised when a Unit, Collection or engine is configured with invalid values."""

    def __init__(self, message: str, subject: str | None = None):
        """
        Initialize the exception.

        Params:
            message: Description of what is wrong with the configuration
            subject: Optional name of the Unit or setting being configured
        """
        self.subject = subject
        if subject:
            message = f"{subject}: {message}"
        super().__init__(message)


class NotFoundError(PromptSetError, LookupError):
    """Raised when an identifier does not resolve to a Unit in the Collection."""

    def __init__(self, identifier: Any, reason: str = "No matching Unit found in set"):
        """
        Initialize the exception.

        Params:
            identifier: The name or Unit that could not be resolved
            reason: Why the lookup failed
        """
        self.identifier = identifier
        self.reason = reason
        name = getattr(identifier, "name", identifier)
        if name is None:
            super().__init__(reason)
        else:
            super().__init__(f"{reason}: '{name}'")


class EmptyCollectionError(PromptSetError, ValueError):
    """Raised when a Collection without Units is started."""

    def __init__(self, message: str = "Cannot start an empty Collection"):
        super().__init__(message)


class PolicyError(PromptSetError, ValueError):
    """Raised when a finish mode is not one of the known policies."""

    def __init__(self, mode: Any, valid_modes: list[str]):
        """
        Initialize the exception.

        Params:
            mode: The rejected finish mode value
            valid_modes: Names of the finish modes that would have been accepted
        """
        self.mode = mode
        self.valid_modes = valid_modes
        super().__init__(
            f"Finish mode {mode!r} is not valid. Select one of: {', '.join(valid_modes)}"
        )
