"""
Collection: an ordered set of Units and the loop that asks them.

The Collection presents its Units in a selector, enforces dependencies between
them, and keeps asking until its finish policy says the user is done. The
answers of satisfied Units are returned as a name -> value mapping.

Design notes:
    - Units are stored in a single insertion-ordered mapping keyed by name; the
      list of names is derived from it on demand.
    - Dependencies are resolved by name when they are checked. Removing a Unit
      leaves other Units' references to it in place; the next check against a
      dangling name raises `NotFoundError`.
    - Mutators return the Collection so construction can be chained.
"""

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

import questionary

from promptset.config import FINISH_NAME, SELECTOR_NAME, CollectionConfig, FinishMode
from promptset.core.types import Answers, PromptEngine
from promptset.core.unit import Unit
from promptset.engine import clear_console, get_engine
from promptset.exceptions import (
    ConfigurationError,
    EmptyCollectionError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

Identifier = str | Unit


class Collection:
    """
    Ordered container of Units driven by a dependency-aware selection loop.

    Attributes:
        config: Presentation and policy defaults
        finish_mode: Policy deciding when `start` resolves
        finish_unit: Synthetic "Done?" confirmation used by the CHOICE, CONFIRM and AGGRESSIVE modes
        cursor_hint: Name (or index) of the Unit highlighted when the selector opens
        recent: Unit most recently added or targeted; default target of prerequisite edits
        engine: Prompt engine used for the selector and passed to Units when they run
        echo: Callable receiving user-facing notices
        finished: True once `start` has resolved
    """

    def __init__(
        self,
        units: Unit | Mapping[str, Any] | list | None = None,
        *,
        finish_mode: FinishMode | str | None = None,
        config: CollectionConfig | None = None,
        engine: PromptEngine | None = None,
        echo: Callable[[str], Any] | None = None,
    ):
        """
        Create a Collection.

        Params:
            units: Units or Unit configuration mappings to add, in order
            finish_mode: Finish policy; defaults to `config.finish_mode`
            config: Presentation and policy defaults
            engine: Prompt engine; the process default is used when omitted
            echo: Receives notices such as "already answered"; defaults to `questionary.print`
        """
        self.config = config or CollectionConfig()
        self.engine = engine
        self.echo = echo or questionary.print
        self.finish_unit = Unit(
            FINISH_NAME,
            {
                "label": self.config.finish_label,
                "message": self.config.finish_message,
                "kind": "confirm",
                "default": False,
                "allow_blank": True,
            },
        )
        self.reset()
        if finish_mode is not None:
            self.set_finish_mode(finish_mode)
        if units is not None:
            self.add_new(units)

    def reset(self) -> "Collection":
        """Empty the Collection and restore its defaults for reuse."""
        self._units: dict[str, Unit] = {}
        self.cursor_hint: str | int | None = 0
        self.recent: Unit | None = None
        self.finished = False
        self.finish_mode = self.config.finish_mode
        self.finish_unit.reset(False)
        return self

    @property
    def units(self) -> list[Unit]:
        return list(self._units.values())

    @property
    def names(self) -> list[str]:
        return list(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units)

    def __contains__(self, identifier: object) -> bool:
        if isinstance(identifier, Unit):
            return self._units.get(identifier.name) is identifier
        return identifier in self._units

    def search_set(self, identifier: Identifier) -> Unit:
        """
        Find a Unit stored in this Collection.

        Params:
            identifier: Unit name, or a Unit instance that must be the stored one

        Returns:
            The stored Unit

        Raises:
            ConfigurationError: If the identifier is neither a string nor a Unit
            NotFoundError: If no matching Unit is stored
        """
        if isinstance(identifier, Unit):
            if self._units.get(identifier.name) is identifier:
                return identifier
        elif isinstance(identifier, str):
            if identifier in self._units:
                return self._units[identifier]
        else:
            raise ConfigurationError(
                f"Identifier must be a 'str' or 'Unit' instance, got {identifier!r}",
                subject="Collection",
            )
        raise NotFoundError(identifier)

    def add(self, unit: Unit) -> "Collection":
        """
        Add a Unit, replacing any stored Unit with the same name in its position.

        Raises:
            ConfigurationError: If `unit` is not a Unit or uses the reserved finish name
        """
        if not isinstance(unit, Unit):
            raise ConfigurationError(
                f"Collection.add() only accepts 'Unit' instances, got {unit!r}", subject="Collection"
            )
        if unit.name == FINISH_NAME:
            raise ConfigurationError(f"'{FINISH_NAME}' is reserved", subject="Collection")
        if unit.name in self._units:
            logger.warning("Overwriting a prompt with an identical name: %r", unit.name)
            self.reset_recent(unit.name)
        self._units[unit.name] = unit
        self.recent = unit
        return self

    def add_new(self, configs: Unit | Mapping[str, Any] | list) -> "Collection":
        """
        Create Units from configuration mappings and add them.

        Params:
            configs: A mapping carrying at least `name` and `message`, a Unit, or a
                list of either (added first to last)
        """
        if isinstance(configs, list):
            for config in configs:
                self.add_new(config)
            return self
        unit = configs if isinstance(configs, Unit) else Unit.from_config(configs)
        return self.add(unit)

    def remove(self, identifier: Identifier) -> "Collection":
        """
        Remove a Unit.

        Units depending on the removed one keep the dependency and can no longer
        be checked until it is removed from them or a Unit with that name is added.
        """
        unit = self.reset_recent(identifier)
        del self._units[unit.name]
        if self.cursor_hint == unit.name:
            self.cursor_hint = None
        return self

    def refresh_recent(self, identifier: Identifier | None = None) -> Unit | None:
        """Make `identifier` the recent Unit if given; return the recent Unit."""
        if identifier is not None:
            self.recent = self.search_set(identifier)
        return self.recent

    def reset_recent(self, identifier: Identifier) -> Unit:
        """Resolve `identifier` and forget it as the recent Unit if it is."""
        unit = self.search_set(identifier)
        if self.recent is unit:
            self.recent = None
        return unit

    def _target(self, identifier: Identifier | None) -> Unit:
        target = self.refresh_recent(identifier)
        if target is None:
            raise NotFoundError(None, "No target given and no recently touched Unit")
        return target

    def add_prerequisite(
        self, prerequisite: Identifier, target: Identifier | None = None
    ) -> "Collection":
        """
        Require `prerequisite` to be answered before `target`.

        Params:
            prerequisite: Name of the Unit that must be answered first (or the Unit itself)
            target: Unit receiving the dependency; defaults to the recent Unit
        """
        self._target(target).add_dependency(_unit_name(prerequisite))
        return self

    def remove_prerequisite(
        self, prerequisite: Identifier, target: Identifier | None = None
    ) -> "Collection":
        """Undo `add_prerequisite`; target defaults to the recent Unit."""
        self._target(target).remove_dependency(_unit_name(prerequisite))
        return self

    def set_required(self, required: bool = True, target: Identifier | None = None) -> "Collection":
        self._target(target).required = bool(required)
        return self

    def set_optional(self, target: Identifier | None = None) -> "Collection":
        return self.set_required(False, target)

    def set_editable(self, editable: bool = True, target: Identifier | None = None) -> "Collection":
        self._target(target).editable = bool(editable)
        return self

    def set_finish_mode(self, mode: FinishMode | str) -> "Collection":
        """
        Choose the finish policy.

        Raises:
            PolicyError: If `mode` is not a FinishMode or the name of one
        """
        self.finish_mode = FinishMode.parse(mode)
        return self

    def _lookup_dependency(self, name: str) -> Unit:
        if name == FINISH_NAME:
            return self.finish_unit
        return self.search_set(name)

    def prerequisites_satisfied(self, unit: Unit, silent: bool = False) -> bool:
        """
        Check whether every dependency of `unit` is satisfied.

        Params:
            unit: Unit whose dependencies are checked, in stored order
            silent: When False, the first unsatisfied dependency is reported through `echo`

        Raises:
            NotFoundError: If a dependency names no Unit in this Collection
        """
        for dependency in unit.dependencies:
            prerequisite = self._lookup_dependency(dependency)
            if not prerequisite.satisfied:
                if not silent:
                    self.echo(self.config.blocked_notice.format(label=prerequisite.label))
                return False
        return True

    def is_satisfied(self) -> bool:
        """True when every required Unit has been answered."""
        return all(unit.satisfied for unit in self._units.values() if unit.required)

    def generate_list(self) -> list[questionary.Choice]:
        """Build the selector choices, adding the finish entry when the policy offers it."""
        glyphs = self.config.glyphs
        entries = [
            unit.listing_entry(self.prerequisites_satisfied(unit, silent=True), glyphs)
            for unit in self._units.values()
        ]
        if self.is_satisfied() and self.finish_mode in (FinishMode.AGGRESSIVE, FinishMode.CHOICE):
            self.finish_unit.reset(False)
            entries.append(self.finish_unit.listing_entry(True, glyphs))
        return [entry.as_choice() for entry in entries]

    def _cursor_default(self, choices: list[questionary.Choice]) -> str | None:
        hint = self.cursor_hint
        if isinstance(hint, int) and not isinstance(hint, bool):
            names = self.names
            hint = names[hint] if -len(names) <= hint < len(names) else None
        values = [choice.value for choice in choices]
        return hint if hint in values else None

    async def select_unit(self) -> Unit:
        """
        Ask the user which Unit to answer next.

        Dependencies and editability are not checked here; `start` does that.
        When the list holds a single entry it is returned without asking.
        """
        choices = self.generate_list()
        if len(choices) == 1:
            return self.search_set(choices[0].value)

        question = {
            "type": "select",
            "name": SELECTOR_NAME,
            "message": self.config.select_message,
            "choices": choices,
        }
        default = self._cursor_default(choices)
        if default is not None:
            question["default"] = default
        answers = await (self.engine or get_engine())(question, None)
        self.clear_console()

        selected = answers[SELECTOR_NAME]
        self.cursor_hint = selected
        logger.debug("Selected %r", selected)
        if selected == FINISH_NAME:
            return self.finish_unit
        return self.search_set(selected)

    def clear_console(self) -> None:
        if self.config.autoclear:
            clear_console()

    async def is_finished(self) -> bool:
        """Apply the finish policy; may ask the finish confirmation."""
        if not self.is_satisfied():
            return False

        if self.finish_mode in (FinishMode.AGGRESSIVE, FinishMode.CONFIRM):
            if all(unit.satisfied and not unit.editable for unit in self._units.values()):
                return True
            finish = await self.finish_unit.run(self.reduce(), engine=self.engine)
            self.clear_console()
            return bool(finish)
        if self.finish_mode is FinishMode.CHOICE:
            return self.finish_unit.value is True
        return True

    def start(self):
        """
        Start asking and resolve once the finish policy is met.

        Raises `EmptyCollectionError` immediately, before anything is asked, when
        the Collection holds no Units. Otherwise returns an awaitable resolving to
        `reduce()`.

        Raises:
            EmptyCollectionError: If the Collection holds no Units
        """
        if not self._units:
            raise EmptyCollectionError()
        self.finished = False
        self.finish_unit.reset(False)
        return self._loop()

    async def _loop(self) -> Answers:
        skip_check = False
        while skip_check or not await self.is_finished():
            skip_check = False
            chosen = await self.select_unit()

            if chosen.satisfied and not chosen.editable:
                self.clear_console()
                self.echo(self.config.answered_notice)
                skip_check = True
                continue

            if not self.prerequisites_satisfied(chosen):
                continue
            # the finish gate in is_finished does the asking under this policy
            if chosen is self.finish_unit and self.finish_mode is FinishMode.AGGRESSIVE:
                continue

            await chosen.run(self.reduce(), engine=self.engine)
            self.clear_console()

        self.finished = True
        logger.debug("Collection finished with %d answers", len(self.reduce()))
        return self.reduce()

    def reduce(self) -> Answers:
        """Answers of every satisfied Unit as a name -> value mapping, in Unit order."""
        return {unit.name: unit.value for unit in self._units.values() if unit.satisfied}

    def __str__(self) -> str:
        return json.dumps(self.reduce(), default=str)

    def __repr__(self) -> str:
        return f"Collection(names={self.names!r}, finish_mode={self.finish_mode.value!r})"


def _unit_name(identifier: Identifier) -> str:
    return identifier.name if isinstance(identifier, Unit) else identifier
