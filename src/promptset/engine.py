"""
Prompt engine adapter.

Every Unit and Collection renders its questions through a prompt engine: an
async callable taking one or more question mappings (plus the answers already
collected) and resolving with the answers keyed by question name. The default
engine drives questionary, which understands the same question mappings as
inquirer.

Engines are normally injected into a Collection or Unit. The process default
returned by `get_engine` is used only when nothing was injected.
"""

import logging
from collections.abc import Iterable

from prompt_toolkit.shortcuts import clear
from questionary import Choice
from questionary.prompts import prompt_by_name

from promptset.core.types import Answers, PromptEngine, Question
from promptset.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# inquirer names for questionary prompt types
_KIND_ALIASES = {
    "input": "text",
    "list": "select",
    "rawlist": "rawselect",
}

# questionary factories that reject a `validate` argument
_UNVALIDATED_KINDS = frozenset({"confirm", "select", "rawselect", "press_any_key_to_continue"})


def translate_question(question: Question) -> Question:
    """
    Convert a question mapping into the form questionary expects.

    Params:
        question: Question mapping using either `type` or `kind` for the prompt type

    Returns:
        New mapping with the prompt type normalised, choice mappings built into
        `questionary.Choice` instances and unsupported callbacks removed
    """
    translated = dict(question)
    kind = translated.pop("kind", None)
    kind = translated.get("type", kind) or "text"
    kind = _KIND_ALIASES.get(kind, kind)
    translated["type"] = kind
    if kind in _UNVALIDATED_KINDS:
        translated.pop("validate", None)
    if "choices" in translated:
        translated["choices"] = [
            Choice.build(choice) if isinstance(choice, dict) else choice
            for choice in translated["choices"]
        ]
    return translated


async def questionary_engine(
    questions: Question | Iterable[Question], answers: Answers | None = None
) -> Answers:
    """
    Ask questions through questionary.

    Each question is built with the questionary factory named by its type and
    asked in order. `when`, `message` and `default` may be callables taking the
    answers collected so far; a question whose `when` is false is skipped and
    left out of the result. Any other key is passed to the factory unchanged.

    Cancellation (Ctrl+C) is raised as KeyboardInterrupt rather than returning
    an empty mapping.

    Params:
        questions: Single question mapping or an iterable of them, asked in order
        answers: Answers collected so far, passed to callable `when`/`message`/`default` entries

    Returns:
        Answers keyed by question name, including the `answers` passed in

    Raises:
        ConfigurationError: If a question names a prompt type questionary does not have
    """
    if isinstance(questions, dict):
        questions = [questions]
    answers = dict(answers or {})
    for question in questions:
        options = translate_question(question)
        kind = options.pop("type")
        name = options.pop("name")
        answer_filter = options.pop("filter", None)
        when = options.pop("when", None)
        if when is not None and not (when(answers) if callable(when) else when):
            logger.debug("Skipped question %r", name)
            continue
        for key in ("message", "default"):
            if callable(options.get(key)):
                options[key] = options[key](answers)

        create_question = prompt_by_name(kind)
        if create_question is None:
            raise ConfigurationError(f"Unknown prompt type {kind!r}", subject=name)
        answer = await create_question(**options).unsafe_ask_async()
        if answer_filter is not None:
            answer = answer_filter(answer)
        answers[name] = answer
    return answers


_engine: PromptEngine = questionary_engine


def get_engine() -> PromptEngine:
    """Return the process default prompt engine."""
    return _engine


def set_engine(engine: PromptEngine) -> None:
    """
    Replace the process default prompt engine.

    Swapping the engine while a Collection is running is not supported.

    Raises:
        ConfigurationError: If `engine` is not callable
    """
    global _engine
    if not callable(engine):
        raise ConfigurationError("Prompt engine must be callable", subject="engine")
    _engine = engine


def reset_engine() -> None:
    """Restore questionary as the process default prompt engine."""
    global _engine
    _engine = questionary_engine


def clear_console() -> None:
    clear()
