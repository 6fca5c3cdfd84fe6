"""
Listing helpers for the Unit selector.

Maps a Unit and the satisfaction state of its dependencies to the entry shown
in the Collection's selection list: the Unit's label decorated with a glyph
describing whether it can be (re)answered.
"""

from enum import Enum
from typing import TYPE_CHECKING

from attrs import frozen
from questionary import Choice

if TYPE_CHECKING:
    from promptset.core.unit import Unit


class UnitStatus(Enum):
    """Selectable state of a Unit as shown in the selector."""

    EDIT = "edit"  # answered, may be answered again
    DONE = "done"  # answered, editing disabled
    ELIGIBLE = "eligible"  # unanswered, dependencies met
    BLOCKED = "blocked"  # unanswered, waiting on a dependency


@frozen
class Glyphs:
    edit: str = "✎"
    done: str = "✔"
    eligible: str = "○"
    blocked: str = "✖"

    def for_status(self, status: UnitStatus) -> str:
        return getattr(self, status.value)


DEFAULT_GLYPHS = Glyphs()


@frozen
class ListingEntry:
    """One line of the selector: what is displayed and which Unit it selects."""

    label: str
    value: str
    status: UnitStatus
    glyph: str

    @property
    def title(self) -> str:
        return f"{self.glyph} {self.label}"

    def as_choice(self) -> Choice:
        """Render the entry as a questionary choice selecting the Unit by name."""
        return Choice(title=self.title, value=self.value)


def unit_status(satisfied: bool, editable: bool, dependencies_satisfied: bool) -> UnitStatus:
    """
    Classify a Unit for display.

    Params:
        satisfied: Whether the Unit has an accepted answer
        editable: Whether the Unit may be answered again
        dependencies_satisfied: Whether every dependency of the Unit is satisfied

    Returns:
        The status whose glyph decorates the Unit's label
    """
    if satisfied:
        return UnitStatus.EDIT if editable else UnitStatus.DONE
    if dependencies_satisfied:
        return UnitStatus.ELIGIBLE
    return UnitStatus.BLOCKED


def format_listing(
    unit: "Unit", dependencies_satisfied: bool, glyphs: Glyphs = DEFAULT_GLYPHS
) -> ListingEntry:
    """Build the selector entry for `unit`."""
    status = unit_status(unit.satisfied, unit.editable, dependencies_satisfied)
    return ListingEntry(
        label=unit.label,
        value=unit.name,
        status=status,
        glyph=glyphs.for_status(status),
    )
