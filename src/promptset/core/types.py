"""
Core type definitions for promptset.

This module contains the type aliases, the prompt engine protocol and the
sentinel values shared by Units, Collections and the engine adapter.
"""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol, TypeAlias

Answers: TypeAlias = dict[str, Any]

Question: TypeAlias = dict[str, Any]

# Returns True when the candidate is acceptable, otherwise a message for the user
ValidatorResult: TypeAlias = bool | str

Validator: TypeAlias = Callable[[Any], ValidatorResult]

Filter: TypeAlias = Callable[[Any], Any]


class PromptEngine(Protocol):
    """Async callable that renders questions and resolves with answers keyed by question name."""

    def __call__(
        self, questions: Question | list[Question], answers: Answers | None = None
    ) -> Awaitable[Answers]: ...


class _Sentinel(Enum):
    """Sentinel values for answer state."""

    INCOMPLETE = "<Incomplete>"

    def __repr__(self) -> str:
        return self.value


INCOMPLETE = _Sentinel.INCOMPLETE

VALID = True
