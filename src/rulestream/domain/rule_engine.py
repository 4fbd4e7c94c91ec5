"""RuleEngine: decide which rules fire for a customer scenario."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping

from .catalog import ProductGroup, Rule
from .code_sets import DerivedCodeSets
from .relationships import evaluate_relationship
from .verdict import ConditionOutcome, fold_verdict

_LOGGER = logging.getLogger(__name__)

REASON_DISABLED = "inactive: disabled"
REASON_OUTSIDE_WINDOW = "inactive: outside_window"
REASON_FIRED = "fired"
REASON_NOT_FIRED = "not_fired"
REASON_NO_RESOLVABLE_CONDITIONS = "not_fired: no_resolvable_conditions"


@dataclass(frozen=True)
class Diagnostic:
    """A condition skipped because its product group is missing."""

    rule_id: str
    rule_name: str
    condition_index: int
    product_group_id: str
    message: str

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "condition_index": self.condition_index,
            "product_group_id": self.product_group_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class RuleDecision:
    """Audit entry for one rule in one evaluation run."""

    rule: Rule
    reason: str
    verdict: bool = False
    outcomes: tuple[ConditionOutcome, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def fired(self) -> bool:
        return self.verdict

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule.id,
            "rule_name": self.rule.name,
            "reason": self.reason,
            "verdict": self.verdict,
            "conditions": [
                {"connector": o.connector.value, "matched": o.matched, "skipped": o.skipped}
                for o in self.outcomes
            ],
            "missing_product_groups": [d.product_group_id for d in self.diagnostics],
        }


@dataclass(frozen=True)
class FiredResult:
    """A rule whose verdict was true, with its output payload reference."""

    rule: Rule
    recommendation_id: str


def index_product_groups(groups: Iterable[ProductGroup]) -> dict[str, ProductGroup]:
    """Key a product group snapshot by identifier."""
    return {group.id: group for group in groups}


class RuleEngine:
    """Evaluate rule snapshots against derived code sets."""

    def evaluate(
        self,
        rules: Iterable[Rule],
        product_groups: Mapping[str, ProductGroup],
        code_sets: DerivedCodeSets,
        today: date,
    ) -> list[FiredResult]:
        """Return fired rules in snapshot order."""
        return [
            FiredResult(rule=decision.rule, recommendation_id=decision.rule.recommendation_id)
            for decision in self.explain(rules, product_groups, code_sets, today)
            if decision.fired
        ]

    def explain(
        self,
        rules: Iterable[Rule],
        product_groups: Mapping[str, ProductGroup],
        code_sets: DerivedCodeSets,
        today: date,
    ) -> list[RuleDecision]:
        """Return one decision per rule, in snapshot order."""
        return [self.decide(rule, product_groups, code_sets, today) for rule in rules]

    def decide(
        self,
        rule: Rule,
        product_groups: Mapping[str, ProductGroup],
        code_sets: DerivedCodeSets,
        today: date,
    ) -> RuleDecision:
        if not rule.enabled:
            return RuleDecision(rule=rule, reason=REASON_DISABLED)
        if not rule.is_active(today):
            return RuleDecision(rule=rule, reason=REASON_OUTSIDE_WINDOW)

        outcomes: list[ConditionOutcome] = []
        diagnostics: list[Diagnostic] = []
        for index, condition in enumerate(rule.conditions):
            group = product_groups.get(condition.product_group_id)
            if group is None:
                diagnostic = Diagnostic(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    condition_index=index,
                    product_group_id=condition.product_group_id,
                    message=(
                        f'Rule "{rule.name}" condition skipped: '
                        f"Product Group {condition.product_group_id} not found."
                    ),
                )
                _LOGGER.warning(
                    "condition_skipped",
                    extra={
                        "rule_id": rule.id,
                        "condition_index": index,
                        "product_group_id": condition.product_group_id,
                    },
                )
                diagnostics.append(diagnostic)
                outcomes.append(ConditionOutcome.skip(condition.connector))
                continue

            matched = evaluate_relationship(
                code_sets.select(condition.code_group),
                group.code_set,
                condition.relationship,
            )
            _LOGGER.debug(
                "condition_evaluated",
                extra={
                    "rule_id": rule.id,
                    "condition_index": index,
                    "code_group": condition.code_group.value,
                    "product_group_id": group.id,
                    "relationship": condition.relationship.value,
                    "matched": matched,
                },
            )
            outcomes.append(ConditionOutcome.match(matched, condition.connector))

        verdict = fold_verdict(outcomes)
        if verdict:
            reason = REASON_FIRED
        elif all(o.skipped for o in outcomes):
            reason = REASON_NO_RESOLVABLE_CONDITIONS
        else:
            reason = REASON_NOT_FIRED
        return RuleDecision(
            rule=rule,
            reason=reason,
            verdict=verdict,
            outcomes=tuple(outcomes),
            diagnostics=tuple(diagnostics),
        )
