"""Domain layer for RuleStream."""

from .catalog import (
    CodeGroupName,
    Connector,
    ProductGroup,
    Recommendation,
    RelationshipOp,
    Rule,
    RuleCondition,
)
from .code_sets import DerivedCodeSets, derive_code_sets
from .match_semantics import (
    RULE_CONTAINS_ALL,
    RULE_CONTAINS_ANY,
    RULE_CONTAINS_NONE,
    RULE_CONTAINS_SOME,
    RULE_FIRST_CONNECTOR_IGNORED,
    RULE_FOLD_LEFT_TO_RIGHT,
    RULE_MISSING_GROUP_SKIPPED,
    RULE_NOTHING_RESOLVED_FALSE,
    RULE_WINDOW_INCLUSIVE,
)
from .relationships import evaluate_relationship
from .rule_engine import Diagnostic, FiredResult, RuleDecision, RuleEngine, index_product_groups
from .verdict import ConditionOutcome, fold_verdict

__all__ = [
    "CodeGroupName",
    "ConditionOutcome",
    "Connector",
    "DerivedCodeSets",
    "Diagnostic",
    "FiredResult",
    "ProductGroup",
    "Recommendation",
    "RelationshipOp",
    "Rule",
    "RuleCondition",
    "RuleDecision",
    "RuleEngine",
    "derive_code_sets",
    "evaluate_relationship",
    "fold_verdict",
    "index_product_groups",
    "RULE_CONTAINS_ALL",
    "RULE_CONTAINS_ANY",
    "RULE_CONTAINS_NONE",
    "RULE_CONTAINS_SOME",
    "RULE_FIRST_CONNECTOR_IGNORED",
    "RULE_FOLD_LEFT_TO_RIGHT",
    "RULE_MISSING_GROUP_SKIPPED",
    "RULE_NOTHING_RESOLVED_FALSE",
    "RULE_WINDOW_INCLUSIVE",
]
