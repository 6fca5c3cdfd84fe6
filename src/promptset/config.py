"""
Configuration for promptset Collections.

Holds the finish policies a Collection can run under and the presentation
defaults (selector message, notices, listing glyphs) it uses while looping.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from promptset.core.listing import DEFAULT_GLYPHS, Glyphs
from promptset.exceptions import ConfigurationError, PolicyError

SELECTOR_NAME = "SELECTED_UNIT"
FINISH_NAME = "FINISH_PROMPT"


class FinishMode(str, Enum):
    """
    When and how a Collection may stop asking questions.

    AUTO: stop as soon as every required Unit is answered.
    CHOICE: once satisfied, offer a "Done?" entry in the selector and stop when it is affirmed.
    CONFIRM: once satisfied, ask for confirmation after every answer; identical to AUTO
        when every Unit is answered and nothing is editable.
    AGGRESSIVE: CHOICE and CONFIRM combined.
    """

    AUTO = "auto"
    CHOICE = "choice"
    CONFIRM = "confirm"
    AGGRESSIVE = "aggressive"

    @classmethod
    def parse(cls, mode: Any) -> "FinishMode":
        """
        Resolve a finish mode from a member, its value or its name.

        Params:
            mode: FinishMode member or string such as "auto" or "AUTO"

        Returns:
            The matching FinishMode member

        Raises:
            PolicyError: If the value names no finish mode
        """
        if isinstance(mode, cls):
            return mode
        if isinstance(mode, str):
            key = mode.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        raise PolicyError(mode, [member.value for member in cls])


class CollectionConfig(BaseModel):
    """Presentation and policy defaults for a Collection."""

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    autoclear: bool = True
    finish_mode: FinishMode = FinishMode.CHOICE
    select_message: str = "Choose a prompt to answer"
    finish_label: str = "Done?"
    finish_message: str = "Confirm that you are finished (Default: No)"
    answered_notice: str = "Prompt Already Answered. (Editing this prompt is disabled)"
    blocked_notice: str = "Prompt must be answered before this:\n{label}"
    glyphs: Glyphs = Field(default=DEFAULT_GLYPHS)

    @classmethod
    def build(cls, **values: Any) -> "CollectionConfig":
        """Validate `values` into a config, reporting failures as ConfigurationError."""
        if "finish_mode" in values:
            values["finish_mode"] = FinishMode.parse(values["finish_mode"])
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(str(e), subject="CollectionConfig") from e
