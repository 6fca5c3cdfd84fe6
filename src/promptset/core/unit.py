"""
Unit: a single named question and its answer state.

A Unit owns the configuration of one question, the names of the Units that
must be answered before it, and the filter and validator chains applied to the
user's input. Rendering the question is delegated to a prompt engine.
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from functools import reduce
from typing import Any

from inflection import humanize
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from promptset.core.listing import DEFAULT_GLYPHS, Glyphs, ListingEntry, format_listing
from promptset.core.types import (
    INCOMPLETE,
    VALID,
    Answers,
    Filter,
    PromptEngine,
    Question,
    Validator,
    ValidatorResult,
)
from promptset.engine import get_engine
from promptset.exceptions import ConfigurationError, NotFoundError
from promptset.filters import auto_trim
from promptset.validators import disable_blank

logger = logging.getLogger(__name__)


class UnitConfig(BaseModel):
    """
    Validated configuration of a Unit.

    Keys not declared here are passed through to the prompt engine untouched
    (e.g. `choices`, `instruction`, `qmark`).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    label: str | None = None
    message: Any = ""
    kind: str = Field(default="text", validation_alias=AliasChoices("kind", "type"))
    default: Any = None
    required: bool = False
    editable: bool = False
    dependencies: list[str] = Field(default_factory=list)
    filters: list[Callable[[Any], Any]] = Field(default_factory=list)
    validators: list[Callable[[Any], Any]] = Field(default_factory=list)
    allow_blank: bool = False
    auto_trim: bool = False


class Unit:
    """
    A single question tracked by a Collection.

    Attributes:
        label: Text shown for this Unit in the Collection's selector
        kind: Prompt type understood by the engine (text, confirm, select, ...)
        message: Question text, or a callable receiving the answers collected so far
        default: Default answer, or a callable receiving the answers collected so far
        options: Extra engine configuration passed through unchanged
        value: Accepted answer, `INCOMPLETE` until the Unit is answered
        satisfied: Whether an answer has been accepted
        editable: Whether the Unit may be answered again once satisfied
        required: Whether the Collection waits for this Unit before it may finish
        dependencies: Sorted names of Units that must be satisfied before this one runs
        filters: Filters applied in order to the accepted answer
        validators: Validators applied in order to each candidate answer
        engine: Prompt engine used by `run`; falls back to the caller's or the process default
    """

    def __init__(
        self,
        name: str,
        config: Mapping[str, Any] | None = None,
        editable: bool | None = None,
        *,
        engine: PromptEngine | None = None,
        **options: Any,
    ):
        """
        Create an unanswered Unit.

        Params:
            name: Unique name of the Unit; key of its answer in `Collection.reduce`
            config: Question configuration; see `UnitConfig` for the interpreted keys
            editable: Overrides `config["editable"]` when given
            engine: Prompt engine used by this Unit instead of the caller's
            **options: Additional configuration merged over `config`

        Raises:
            ConfigurationError: If `name` is not a non-empty string or the configuration is invalid
        """
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Name property required (type: str)", subject="Unit")
        values = {**(config or {}), **options, "name": name}
        if editable is not None:
            values["editable"] = editable
        try:
            settings = UnitConfig.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(str(e), subject=name) from e

        self._name = settings.name
        self.label = settings.label or humanize(settings.name)
        self.kind = settings.kind
        self.message = settings.message
        self.default = settings.default
        self.options: dict[str, Any] = dict(settings.model_extra or {})
        self.required = settings.required
        self.editable = settings.editable
        self.engine = engine

        self.value: Any = INCOMPLETE
        self.satisfied = False
        self.dependencies: list[str] = []
        self.filters: list[Filter] = []
        self.validators: list[Validator] = []

        self.allow_blank = settings.allow_blank
        self.auto_trim = settings.auto_trim
        for validator in settings.validators:
            self.add_validator(validator)
        for answer_filter in settings.filters:
            self.add_filter(answer_filter)
        for dependency in settings.dependencies:
            self.add_dependency(dependency)

    @classmethod
    def from_config(cls, config: Mapping[str, Any], engine: PromptEngine | None = None) -> "Unit":
        """Build a Unit from a single mapping that carries its `name`."""
        if not isinstance(config, Mapping):
            raise ConfigurationError(f"Unit configuration must be a mapping, got {config!r}", subject="Unit")
        values = dict(config)
        return cls(values.pop("name", None), values, engine=engine)

    @property
    def name(self) -> str:
        return self._name

    @property
    def allow_blank(self) -> bool:
        """Whether blank answers are accepted (the `disable_blank` validator is absent)."""
        return disable_blank not in self.validators

    @allow_blank.setter
    def allow_blank(self, allow: bool) -> None:
        if allow:
            self.remove_validator(disable_blank)
        else:
            self.add_validator(disable_blank)

    @property
    def auto_trim(self) -> bool:
        """Whether surrounding whitespace is stripped from accepted answers."""
        return auto_trim in self.filters

    @auto_trim.setter
    def auto_trim(self, trim: bool) -> None:
        if trim:
            self.add_filter(auto_trim)
        else:
            self.remove_filter(auto_trim)

    def add_dependency(self, dependency: str) -> "Unit":
        """
        Require another Unit to be satisfied before this one may run.

        The name is trimmed and kept in sorted order. Adding a name twice has no effect.

        Raises:
            ConfigurationError: If the name is not a string or names this Unit itself
        """
        dependency = self._dependency_name(dependency)
        if dependency == self.name:
            raise ConfigurationError("A Unit cannot depend on itself", subject=self.name)
        if dependency not in self.dependencies:
            self.dependencies.append(dependency)
            self.dependencies.sort()
        return self

    def remove_dependency(self, dependency: str) -> "Unit":
        """Drop a dependency; absent names are ignored."""
        dependency = self._dependency_name(dependency)
        if dependency in self.dependencies:
            self.dependencies.remove(dependency)
        return self

    def _dependency_name(self, dependency: Any) -> str:
        if not isinstance(dependency, str) or not dependency.strip():
            raise ConfigurationError(
                f"Dependency must be a non-empty Unit name, got {dependency!r}", subject=self.name
            )
        return dependency.strip()

    def add_filter(self, answer_filter: Filter) -> "Unit":
        """Append a filter to the chain. The same function is never added twice."""
        self._require_callable(answer_filter, synchronous=True)
        if answer_filter not in self.filters:
            self.filters.append(answer_filter)
        return self

    def remove_filter(self, answer_filter: Filter) -> "Unit":
        """Remove a filter (the same function object that was added)."""
        self._require_callable(answer_filter)
        if answer_filter in self.filters:
            self.filters.remove(answer_filter)
        return self

    def add_validator(self, validator: Validator) -> "Unit":
        """
        Append a validator to the chain. The same function is never added twice.

        Raises:
            ConfigurationError: If `validator` is not callable or is a coroutine function
        """
        self._require_callable(validator, synchronous=True)
        if validator not in self.validators:
            self.validators.append(validator)
        return self

    def remove_validator(self, validator: Validator) -> "Unit":
        """Remove a validator (the same function object that was added)."""
        self._require_callable(validator)
        if validator in self.validators:
            self.validators.remove(validator)
        return self

    def _require_callable(self, function: Any, synchronous: bool = False) -> None:
        if not callable(function):
            raise ConfigurationError(f"Function required, got {function!r}", subject=self.name)
        # prompts call validators and filters inline, so they cannot be awaited
        if synchronous and inspect.iscoroutinefunction(function):
            raise ConfigurationError(
                f"Coroutine functions are not supported, got {function!r}", subject=self.name
            )

    def validate(self, candidate: Any) -> ValidatorResult:
        """
        Run the validator chain against a candidate answer.

        Params:
            candidate: Raw answer typed by the user

        Returns:
            True if every validator accepts, otherwise the first rejection message
        """
        for validator in self.validators:
            verdict = validator(candidate)
            if verdict is not VALID:
                return verdict or "Invalid response"
        return VALID

    def filter(self, raw: Any) -> Any:
        """Pipe an accepted answer through the filter chain, left to right."""
        return reduce(lambda value, answer_filter: answer_filter(value), self.filters, raw)

    def build_question(self) -> Question:
        """Assemble the question mapping handed to the prompt engine."""
        question = {
            **self.options,
            "type": self.kind,
            "name": self.name,
            "message": self.message,
            "validate": self.validate,
        }
        if self.default is not None:
            question["default"] = self.default
        if self.filters:
            question["filter"] = self.filter
        return question

    async def run(
        self, context_answers: Answers | None = None, engine: PromptEngine | None = None
    ) -> Any:
        """
        Ask the question and record the answer.

        Every call asks again and re-runs the validator and filter chains. Engine
        failures propagate unchanged.

        Params:
            context_answers: Answers collected so far, for engines that interpolate them
            engine: Engine to use when this Unit was not given one

        Returns:
            The accepted (filtered) answer

        Raises:
            NotFoundError: If the engine resolves without an answer for this Unit;
                the Unit keeps its previous state
        """
        engine = self.engine or engine or get_engine()
        answers = await engine(
            self.build_question(), dict(context_answers) if context_answers is not None else None
        )
        if self.name not in answers:
            raise NotFoundError(self, "Prompt engine returned no answer for Unit")
        self.value = answers[self.name]
        self.satisfied = True
        logger.debug("Unit %r answered", self.name)
        return self.value

    def seed(self, value: Any) -> "Unit":
        """Record an answer without asking, marking the Unit satisfied."""
        self.value = value
        self.satisfied = True
        return self

    def reset(self, value: Any = INCOMPLETE) -> "Unit":
        """Forget the answer, leaving the Unit unsatisfied with `value` as placeholder."""
        self.value = value
        self.satisfied = False
        return self

    def listing_entry(
        self, dependencies_satisfied: bool, glyphs: Glyphs = DEFAULT_GLYPHS
    ) -> ListingEntry:
        """Selector entry for this Unit given whether its dependencies are met."""
        return format_listing(self, dependencies_satisfied, glyphs)

    def __repr__(self) -> str:
        return f"Unit(name={self.name!r}, satisfied={self.satisfied}, value={self.value!r})"
