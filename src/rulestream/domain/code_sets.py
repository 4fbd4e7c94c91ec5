"""Derive the four named code sets from a customer scenario."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .catalog import CodeGroupName


@dataclass(frozen=True)
class DerivedCodeSets:
    """Code sets computed once per evaluation run."""

    customer_codes: frozenset[str]
    renewal_codes: frozenset[str]
    all_customer_codes: frozenset[str]
    opportunity_codes: frozenset[str]

    def select(self, code_group: CodeGroupName) -> frozenset[str]:
        """Return the set a condition's ``code_group`` refers to."""
        return getattr(self, code_group.name)

    def as_dict(self) -> dict[str, list[str]]:
        """Sorted lists keyed by group name, for display."""
        return {group.value: sorted(self.select(group)) for group in CodeGroupName}


def derive_code_sets(
    held_codes: Iterable[str],
    renewal_codes: Iterable[str],
) -> DerivedCodeSets:
    """Build customer, renewal, all-customer and opportunity code sets.

    Opportunity codes are renewal codes the customer does not currently hold.
    """
    held = frozenset(held_codes)
    renewal = frozenset(renewal_codes)
    return DerivedCodeSets(
        customer_codes=held,
        renewal_codes=renewal,
        all_customer_codes=held | renewal,
        opportunity_codes=renewal - held,
    )
