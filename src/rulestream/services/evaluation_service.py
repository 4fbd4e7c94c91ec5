"""EvaluationService: run a customer scenario through the rule engine."""

from __future__ import annotations

import logging
from typing import Any

from ..config.runtime import get_settings
from ..domain.code_sets import derive_code_sets
from ..domain.rule_engine import RuleEngine, index_product_groups
from ..models.requests import ScenarioRequest
from ..models.responses import DiagnosticView, EvaluationResponse, FiredRuleView
from ..ports.id_gen import RequestIdProvider, UuidRequestIdProvider
from ..ports.snapshots import (
    ProductGroupSnapshotProvider,
    RecommendationProvider,
    RuleSnapshotProvider,
)


class EvaluationService:
    """Orchestrates snapshot fetch, code-set derivation and rule evaluation."""

    def __init__(
        self,
        rules: RuleSnapshotProvider,
        product_groups: ProductGroupSnapshotProvider,
        recommendations: RecommendationProvider | None = None,
        rule_engine: RuleEngine | None = None,
        request_id_provider: RequestIdProvider | None = None,
        marketing_base_url: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._rules = rules
        self._groups = product_groups
        self._recommendations = recommendations
        self._engine = rule_engine or RuleEngine()
        self._req_id = request_id_provider or UuidRequestIdProvider()
        if marketing_base_url is None:
            marketing_base_url = get_settings().marketing_base_url
        self._base_url = marketing_base_url.rstrip("/")
        self._logger = logger or logging.getLogger(__name__)

    def evaluate(self, request: ScenarioRequest) -> tuple[EvaluationResponse, dict[str, Any]]:
        """Evaluate every rule for the scenario. Returns the response and an audit trace."""
        request_id = self._req_id.new_request_id()
        today = request.effective_date()
        self._logger.info(
            "evaluate_start",
            extra={
                "trace_id": request_id,
                "as_of": today.isoformat(),
                "held_count": len(request.held_codes),
                "renewal_count": len(request.renewal_codes),
            },
        )

        rules = self._rules.list_rules()
        groups = index_product_groups(self._groups.list_product_groups())
        recommendations = (
            {r.id: r for r in self._recommendations.list_recommendations()}
            if self._recommendations is not None
            else {}
        )
        code_sets = derive_code_sets(request.held_codes, request.renewal_codes)
        decisions = self._engine.explain(rules, groups, code_sets, today)

        fired: list[FiredRuleView] = []
        diagnostics: list[DiagnosticView] = []
        warnings: list[str] = []
        for decision in decisions:
            diagnostics.extend(DiagnosticView(**d.to_dict()) for d in decision.diagnostics)
            if not decision.fired:
                continue
            rule = decision.rule
            recommendation = recommendations.get(rule.recommendation_id)
            if recommendation is None and self._recommendations is not None:
                warnings.append(
                    f"rule {rule.id!r} fired but recommendation {rule.recommendation_id!r} was not found"
                )
            fired.append(
                FiredRuleView(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    recommendation_id=rule.recommendation_id,
                    recommendation_name=recommendation.name if recommendation else None,
                    recommendation_url=recommendation.url if recommendation else None,
                    marketing_url=self.marketing_url(rule.id),
                )
            )

        if not request.held_codes and not request.renewal_codes:
            warnings.append("no held or renewal codes supplied; only contains-none/contains-all rules can fire")
        if not rules:
            warnings.append("no rules defined")

        response = EvaluationResponse(
            request_id=request_id,
            as_of=today,
            code_sets=code_sets.as_dict(),
            fired=fired,
            diagnostics=diagnostics,
            warnings=warnings,
        )
        audit_trace: dict[str, Any] = {
            "request_id": request_id,
            "as_of": today.isoformat(),
            "held_codes": list(request.held_codes),
            "renewal_codes": list(request.renewal_codes),
            "code_sets": response.code_sets,
            "decisions": [d.to_dict() for d in decisions],
        }
        self._logger.info(
            "evaluate_done",
            extra={
                "trace_id": request_id,
                "rules_count": len(rules),
                "fired_count": len(fired),
                "skipped_conditions": len(diagnostics),
            },
        )
        return response, audit_trace

    def marketing_url(self, rule_id: str) -> str:
        return f"{self._base_url}/{rule_id}"
