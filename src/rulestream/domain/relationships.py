"""Relationship tests between a derived code set and a product group."""

from __future__ import annotations

from typing import AbstractSet, Callable

from .catalog import RelationshipOp


def _contains_any(selected: AbstractSet[str], group_codes: AbstractSet[str]) -> bool:
    return any(code in selected for code in group_codes)


def _contains_all(selected: AbstractSet[str], group_codes: AbstractSet[str]) -> bool:
    # True for an empty group.
    return all(code in selected for code in group_codes)


def _contains_some(selected: AbstractSet[str], group_codes: AbstractSet[str]) -> bool:
    return _contains_any(selected, group_codes) and not _contains_all(selected, group_codes)


def _contains_none(selected: AbstractSet[str], group_codes: AbstractSet[str]) -> bool:
    return not _contains_any(selected, group_codes)


RELATIONSHIP_TESTS: dict[RelationshipOp, Callable[[AbstractSet[str], AbstractSet[str]], bool]] = {
    RelationshipOp.contains_any: _contains_any,
    RelationshipOp.contains_all: _contains_all,
    RelationshipOp.contains_some: _contains_some,
    RelationshipOp.contains_none: _contains_none,
}


def evaluate_relationship(
    selected: AbstractSet[str],
    group_codes: AbstractSet[str],
    relationship: RelationshipOp,
) -> bool:
    """Return whether ``selected`` stands in ``relationship`` to ``group_codes``."""
    return RELATIONSHIP_TESTS[relationship](selected, group_codes)
