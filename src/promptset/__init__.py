"""
promptset - orchestrate sequences of interactive command-line questions

promptset drives a selection loop over named questions (Units), enforcing the
dependencies between them and a configurable finish policy, while the actual
rendering of each question is delegated to a prompt engine (questionary by default).
"""

from importlib.metadata import version

from promptset.collection import Collection
from promptset.config import CollectionConfig, FinishMode
from promptset.core import INCOMPLETE, Unit
from promptset.engine import get_engine, questionary_engine, reset_engine, set_engine
from promptset.exceptions import (
    ConfigurationError,
    EmptyCollectionError,
    NotFoundError,
    PolicyError,
    PromptSetError,
)

__version__ = version("promptset")

__all__ = [
    "__version__",
    "Collection",
    "CollectionConfig",
    "FinishMode",
    "Unit",
    "INCOMPLETE",
    "get_engine",
    "set_engine",
    "reset_engine",
    "questionary_engine",
    "PromptSetError",
    "ConfigurationError",
    "NotFoundError",
    "EmptyCollectionError",
    "PolicyError",
]
