"""
Shared test fixtures and utilities for the promptset test suite.
"""

import pytest

from promptset.config import CollectionConfig
from promptset.engine import translate_question


class ScriptedEngine:
    """Prompt engine double that replays scripted answers keyed by question name.

    Questions go through the same translation as the questionary adapter. A
    scripted answer rejected by the question's `validate` callback is recorded
    and skipped, as if the user typed again; the accepted answer is passed
    through the question's `filter` callback.
    """

    def __init__(self, script: dict[str, list] | None = None):
        self.script = {name: list(answers) for name, answers in (script or {}).items()}
        self.questions: list[dict] = []
        self.contexts: list[dict | None] = []
        self.rejections: list[tuple[str, object, object]] = []

    async def __call__(self, questions, answers=None):
        if not isinstance(questions, dict):
            (questions,) = questions
        question = translate_question(questions)
        name = question["name"]
        self.questions.append(question)
        self.contexts.append(answers)

        pending = self.script.get(name)
        validate = question.get("validate")
        while True:
            if not pending:
                raise AssertionError(f"No scripted answer left for {name!r}")
            answer = pending.pop(0)
            verdict = validate(answer) if validate else True
            if verdict is True:
                break
            self.rejections.append((name, answer, verdict))

        if "choices" in question:
            values = [getattr(choice, "value", choice) for choice in question["choices"]]
            assert answer in values, f"{answer!r} is not one of the offered choices {values}"
        if "filter" in question:
            answer = question["filter"](answer)
        return {**(answers or {}), name: answer}

    def asked(self, name: str) -> list[dict]:
        """Questions asked so far with the given name."""
        return [question for question in self.questions if question["name"] == name]


@pytest.fixture
def scripted_engine():
    """Factory for ScriptedEngine doubles.

    Usage:
        def test_something(scripted_engine):
            engine = scripted_engine({"a": ["1"]})
    """
    return ScriptedEngine


@pytest.fixture
def notices():
    """List collecting notices echoed by a Collection."""
    return []


@pytest.fixture
def quiet_config():
    """Collection config that never clears the terminal."""
    return CollectionConfig(autoclear=False)
