"""Relationship operator tests: prevent semantic drift."""

import pytest

from rulestream.domain.catalog import RelationshipOp
from rulestream.domain.relationships import RELATIONSHIP_TESTS, evaluate_relationship

ANY = RelationshipOp.contains_any
ALL = RelationshipOp.contains_all
SOME = RelationshipOp.contains_some
NONE = RelationshipOp.contains_none


def test_every_relationship_has_a_test():
    assert set(RELATIONSHIP_TESTS) == set(RelationshipOp)


class TestEmptyProductGroup:
    """Quantifiers over an empty group."""

    @pytest.mark.parametrize("selected", [set(), {"A"}, {"A", "B"}])
    def test_empty_group(self, selected):
        assert evaluate_relationship(selected, set(), ALL) is True
        assert evaluate_relationship(selected, set(), NONE) is True
        assert evaluate_relationship(selected, set(), ANY) is False
        assert evaluate_relationship(selected, set(), SOME) is False


class TestFullyContained:
    def test_group_inside_selected(self):
        selected = {"A", "B", "C"}
        group = {"A", "B"}
        assert evaluate_relationship(selected, group, ANY) is True
        assert evaluate_relationship(selected, group, ALL) is True
        assert evaluate_relationship(selected, group, SOME) is False
        assert evaluate_relationship(selected, group, NONE) is False


class TestDisjoint:
    def test_group_disjoint_from_selected(self):
        selected = {"X"}
        group = {"A", "B"}
        assert evaluate_relationship(selected, group, ANY) is False
        assert evaluate_relationship(selected, group, ALL) is False
        assert evaluate_relationship(selected, group, SOME) is False
        assert evaluate_relationship(selected, group, NONE) is True

    def test_empty_selected(self):
        assert evaluate_relationship(set(), {"A"}, NONE) is True
        assert evaluate_relationship(set(), {"A"}, ANY) is False


class TestPartialOverlap:
    def test_some_but_not_all(self):
        selected = {"A", "X"}
        group = {"A", "B"}
        assert evaluate_relationship(selected, group, ANY) is True
        assert evaluate_relationship(selected, group, ALL) is False
        assert evaluate_relationship(selected, group, SOME) is True
        assert evaluate_relationship(selected, group, NONE) is False

    def test_match_is_case_sensitive(self):
        assert evaluate_relationship({"a"}, {"A"}, ANY) is False
