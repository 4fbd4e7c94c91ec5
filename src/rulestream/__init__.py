"""RuleStream application package."""

from .domain import (
    CodeGroupName,
    Connector,
    DerivedCodeSets,
    FiredResult,
    ProductGroup,
    Recommendation,
    RelationshipOp,
    Rule,
    RuleCondition,
    RuleEngine,
    derive_code_sets,
)

__version__ = "0.1.0"
__all__ = [
    "CodeGroupName",
    "Connector",
    "DerivedCodeSets",
    "FiredResult",
    "ProductGroup",
    "Recommendation",
    "RelationshipOp",
    "Rule",
    "RuleCondition",
    "RuleEngine",
    "derive_code_sets",
]
