"""Domain records and tool request/response models."""

from ..domain.catalog import (
    CodeGroupName,
    Connector,
    ProductGroup,
    Recommendation,
    RelationshipOp,
    Rule,
    RuleCondition,
)
from .requests import ScenarioRequest
from .responses import DiagnosticView, EvaluationResponse, FiredRuleView

__all__ = [
    # Domain
    "CodeGroupName",
    "Connector",
    "ProductGroup",
    "Recommendation",
    "RelationshipOp",
    "Rule",
    "RuleCondition",
    # Requests
    "ScenarioRequest",
    # Responses
    "DiagnosticView",
    "EvaluationResponse",
    "FiredRuleView",
]
