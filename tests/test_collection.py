"""
Tests for Collection bookkeeping.

Focus Areas:
1. Adding, replacing, searching and removing Units
2. Prerequisite edits against the recently touched Unit
3. Aggregate satisfaction and reduced output
"""

import json
import logging

import pytest

from promptset import Collection, FinishMode, Unit
from promptset.config import FINISH_NAME
from promptset.exceptions import ConfigurationError, NotFoundError, PolicyError


@pytest.fixture
def collection(quiet_config, notices):
    return Collection(config=quiet_config, echo=notices.append)


class TestAdd:
    """Test adding Units."""

    def test_add_appends_in_order(self, collection):
        collection.add(Unit("a")).add(Unit("b"))
        assert collection.names == ["a", "b"]
        assert len(collection) == 2
        assert collection.recent.name == "b"

    def test_add_rejects_non_units(self, collection):
        """Only Unit instances are accepted."""
        with pytest.raises(ConfigurationError):
            collection.add({"name": "a", "message": "m"})

    def test_finish_name_is_reserved(self, collection):
        with pytest.raises(ConfigurationError):
            collection.add(Unit(FINISH_NAME))

    def test_duplicate_name_replaced_with_warning(self, collection, caplog):
        """A duplicate name replaces the stored Unit in place and logs a warning."""
        collection.add_new({"name": "x", "message": "first"}).add_new({"name": "y", "message": "m"})
        with caplog.at_level(logging.WARNING, logger="promptset.collection"):
            collection.add_new({"name": "x", "message": "second"})

        assert collection.names == ["x", "y"]
        assert collection.search_set("x").message == "second"
        assert "Overwriting a prompt with an identical name" in caplog.text

    def test_add_new_accepts_lists_and_units(self, collection):
        """Mappings, Units and nested lists are added first to last."""
        collection.add_new([{"name": "a", "message": "m"}, [Unit("b"), {"name": "c", "message": "m"}]])
        assert collection.names == ["a", "b", "c"]

    def test_add_new_rejects_non_mappings(self, collection):
        with pytest.raises(ConfigurationError):
            collection.add_new("a")

    def test_add_new_reads_dependencies(self, collection):
        collection.add_new({"name": "b", "message": "m", "dependencies": ["a"]})
        assert collection.search_set("b").dependencies == ["a"]

    def test_constructor_units(self, quiet_config):
        collection = Collection([{"name": "a", "message": "m"}], config=quiet_config, finish_mode="auto")
        assert collection.names == ["a"]
        assert collection.finish_mode is FinishMode.AUTO


class TestSearchAndRemove:
    """Test lookups and removal."""

    def test_search_by_name_and_instance(self, collection):
        unit = Unit("a")
        collection.add(unit)
        assert collection.search_set("a") is unit
        assert collection.search_set(unit) is unit
        assert unit in collection
        assert "a" in collection

    def test_search_rejects_foreign_instance(self, collection):
        """A Unit with a stored name but a different identity is not found."""
        collection.add(Unit("a"))
        with pytest.raises(NotFoundError):
            collection.search_set(Unit("a"))

    def test_search_missing_name(self, collection):
        with pytest.raises(NotFoundError) as exc_info:
            collection.search_set("ghost")
        assert exc_info.value.identifier == "ghost"

    def test_search_rejects_other_types(self, collection):
        with pytest.raises(ConfigurationError):
            collection.search_set(3)

    def test_remove_clears_recent_and_cursor(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.cursor_hint = "b"
        collection.remove("b")
        assert collection.names == ["a"]
        assert collection.recent is None
        assert collection.cursor_hint is None

    def test_remove_keeps_recent_when_other_unit_removed(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.remove(collection.search_set("a"))
        assert collection.recent.name == "b"

    def test_remove_missing(self, collection):
        with pytest.raises(NotFoundError):
            collection.remove("ghost")

    def test_remove_leaves_dangling_dependencies(self, collection):
        """Dependents keep the removed name and fail when it is checked."""
        collection.add_new([{"name": "a"}, {"name": "b", "dependencies": ["a"]}])
        collection.remove("a")
        dependent = collection.search_set("b")
        assert dependent.dependencies == ["a"]
        with pytest.raises(NotFoundError):
            collection.prerequisites_satisfied(dependent)

    def test_reset_empties(self, collection):
        collection.add_new({"name": "a"}).set_finish_mode("auto")
        collection.reset()
        assert len(collection) == 0
        assert collection.recent is None
        assert collection.finish_mode is FinishMode.CHOICE


class TestPrerequisiteEdits:
    """Test prerequisite and flag mutators."""

    def test_defaults_to_recent_unit(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}, {"name": "c"}])
        collection.add_prerequisite("b").add_prerequisite("a").remove_prerequisite("a")
        assert collection.search_set("c").dependencies == ["b"]

    def test_explicit_target_becomes_recent(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.add_prerequisite("b", "a")
        assert collection.search_set("a").dependencies == ["b"]
        assert collection.recent.name == "a"

    def test_unit_identifiers_are_resolved_to_names(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.add_prerequisite(collection.search_set("a"))
        assert collection.search_set("b").dependencies == ["a"]

    def test_no_target_available(self, collection):
        """Without a target and a recent Unit the edit fails."""
        with pytest.raises(NotFoundError):
            collection.add_prerequisite("a")

    def test_repeated_add_is_idempotent(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.add_prerequisite("a").add_prerequisite("a")
        assert collection.search_set("b").dependencies == ["a"]

    def test_required_optional_and_editable(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.set_required().set_editable(target="a")
        assert collection.search_set("b").required is True
        assert collection.search_set("a").editable is True
        collection.set_optional("b")
        assert collection.search_set("b").required is False

    def test_set_finish_mode(self, collection):
        assert collection.set_finish_mode("aggressive").finish_mode is FinishMode.AGGRESSIVE
        with pytest.raises(PolicyError):
            collection.set_finish_mode("later")


class TestSatisfaction:
    """Test aggregate satisfaction and dependency checks."""

    def test_only_required_units_count(self, collection):
        collection.add_new([{"name": "a", "required": True}, {"name": "b"}])
        assert collection.is_satisfied() is False
        collection.search_set("a").seed("1")
        assert collection.is_satisfied() is True

    def test_new_required_unit_flips_satisfaction(self, collection):
        collection.add_new({"name": "a", "required": True})
        collection.search_set("a").seed("1")
        assert collection.is_satisfied() is True
        collection.add_new({"name": "b", "required": True})
        assert collection.is_satisfied() is False

    def test_empty_collection_is_satisfied(self, collection):
        assert collection.is_satisfied() is True

    def test_prerequisites_report_first_blocker(self, collection, notices):
        collection.add_new(
            [{"name": "a", "label": "Alpha"}, {"name": "b", "label": "Beta"}, {"name": "c", "dependencies": ["a", "b"]}]
        )
        dependent = collection.search_set("c")
        assert collection.prerequisites_satisfied(dependent, silent=True) is False
        assert notices == []
        assert collection.prerequisites_satisfied(dependent) is False
        assert notices == ["Prompt must be answered before this:\nAlpha"]

        collection.search_set("a").seed("1")
        collection.search_set("b").seed("2")
        assert collection.prerequisites_satisfied(dependent) is True

    def test_dependency_on_finish_unit_resolves(self, collection):
        collection.add_new({"name": "a", "dependencies": [FINISH_NAME]})
        assert collection.prerequisites_satisfied(collection.search_set("a"), silent=True) is False


class TestReduce:
    """Test reduced output and serialisation."""

    def test_reduce_omits_unsatisfied(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}, {"name": "c"}])
        collection.search_set("c").seed(3)
        collection.search_set("a").seed("1")
        assert collection.reduce() == {"a": "1", "c": 3}

    def test_str_is_json(self, collection):
        collection.add_new([{"name": "a"}, {"name": "b"}])
        collection.search_set("a").seed("1")
        assert json.loads(str(collection)) == {"a": "1"}

    def test_repr(self, collection):
        collection.add_new({"name": "a"})
        assert repr(collection) == "Collection(names=['a'], finish_mode='choice')"
