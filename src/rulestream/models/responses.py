"""Response DTOs for the evaluation tools."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class FiredRuleView(BaseModel):
    """A rule that fired, with its marketing artifact."""

    rule_id: str = Field(..., description="Rule identifier")
    rule_name: str = Field(..., description="Rule name")
    recommendation_id: str = Field(..., description="Recommendation attached to the rule")
    recommendation_name: str | None = Field(default=None, description="Recommendation name, if it resolves")
    recommendation_url: str | None = Field(default=None, description="Recommendation URL, if it resolves")
    marketing_url: str = Field(..., description="Marketing link for the fired rule")


class DiagnosticView(BaseModel):
    """A condition skipped during evaluation."""

    rule_id: str
    rule_name: str
    condition_index: int
    product_group_id: str
    message: str


class EvaluationResponse(BaseModel):
    """Output DTO for rules.evaluate."""

    request_id: str = Field(..., description="Trace ID for this evaluation")
    as_of: date = Field(..., description="Date the rules were evaluated for")
    code_sets: dict[str, list[str]] = Field(
        default_factory=dict, description="Derived code groups, keyed by group name"
    )
    fired: list[FiredRuleView] = Field(default_factory=list, description="Fired rules in rule order")
    diagnostics: list[DiagnosticView] = Field(
        default_factory=list, description="Conditions skipped for missing product groups"
    )
    warnings: list[str] = Field(default_factory=list, description="Non-fatal notes about the run")
