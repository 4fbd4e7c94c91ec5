"""Tool registry for MCP servers.

Strict JSON schemas via Pydantic; request shaping (limits);
response allowlists (field-level).
"""

from __future__ import annotations

import json
import time
from typing import Any

from pydantic import ValidationError

from .observability import log_tool_invocation, tool_call_counts

from rulestream.config.runtime import get_settings
from rulestream.domain.catalog import CodeGroupName, Connector, ProductGroup, Recommendation, RelationshipOp, Rule
from rulestream.domain.code_sets import derive_code_sets
from rulestream.domain import match_semantics
from rulestream.services.validation import validate_scenario
from rulestream.models.requests import ScenarioRequest

# ---------------------------------------------------------------------------
# Response allowlists (field-level)
# ---------------------------------------------------------------------------
ALLOWED_FIRED_RULE_KEYS = frozenset({
    "rule_id",
    "rule_name",
    "recommendation_id",
    "recommendation_name",
    "recommendation_url",
    "marketing_url",
})
ALLOWED_EVALUATION_RESPONSE_KEYS = frozenset({
    "request_id",
    "as_of",
    "code_sets",
    "fired",
    "diagnostics",
    "warnings",
})

# In-memory trace store for rules_explain (request_id -> audit_trace)
_trace_store: dict[str, dict[str, Any]] = {}
_TRACE_STORE_MAX = 1_000


def _shape_evaluation_response(response: Any) -> dict:
    """Return only allowed fields for rules_evaluate response."""
    d = response.model_dump(mode="json") if hasattr(response, "model_dump") else response
    out: dict = {k: d[k] for k in ALLOWED_EVALUATION_RESPONSE_KEYS if k in d}
    if "fired" in out:
        out["fired"] = [
            {k: f.get(k) for k in ALLOWED_FIRED_RULE_KEYS if k in f}
            for f in out["fired"]
        ]
    return out


def _store_trace_for_explain(request_id: str, audit_trace: dict[str, Any]) -> None:
    _trace_store[request_id] = audit_trace
    while len(_trace_store) > _TRACE_STORE_MAX:
        # Drop oldest
        _trace_store.pop(next(iter(_trace_store)))


def _get_evaluation_service():
    from ...wiring import build_evaluation_service
    return build_evaluation_service()


def _get_catalog_service():
    from ...wiring import build_catalog_service
    return build_catalog_service()


def _error(message: str, detail: str | None = None, **extra: Any) -> str:
    payload: dict[str, Any] = {"error": message}
    if detail is not None:
        payload["detail"] = detail
    payload.update(extra)
    return json.dumps(payload)


def _build_scenario(
    held_codes: list[str] | None,
    renewal_codes: list[str] | None,
    as_of: str | None,
) -> ScenarioRequest:
    return ScenarioRequest(
        held_codes=held_codes or [],
        renewal_codes=renewal_codes or [],
        as_of=as_of or None,
    )


# ---------------------------------------------------------------------------
# Engine tools
# ---------------------------------------------------------------------------
ENGINE_ALLOWED_TOOLS = frozenset({
    "rules_evaluate",
    "rules_explain",
    "codes_derive",
    "rules_capabilities",
    "rules_health",
})


def register_engine_tools(mcp):
    """Register Engine (read-only evaluation) tools with request shaping and response allowlist."""

    @mcp.tool()
    def rules_evaluate(
        held_codes: list[str] | None = None,
        renewal_codes: list[str] | None = None,
        as_of: str | None = None,
    ) -> str:
        """Evaluate all rules for a customer scenario (read-only). Returns fired rules with marketing URLs.

        Args:
            held_codes: Product codes the customer currently holds
            renewal_codes: Product codes up for renewal
            as_of: Evaluation date YYYY-MM-DD (default: today)

        Returns:
            JSON with request_id, as_of, code_sets, fired (rule_id, rule_name, marketing_url, ...), diagnostics, warnings
        """
        t0 = time.monotonic()
        try:
            request = _build_scenario(held_codes, renewal_codes, as_of)
        except ValidationError as e:
            log_tool_invocation("rules_evaluate", None, (time.monotonic() - t0) * 1000, error="invalid_request")
            return _error("invalid request", str(e))
        validation = validate_scenario(request, max_codes=get_settings().max_codes_per_scenario)
        if not validation.is_valid:
            log_tool_invocation("rules_evaluate", None, (time.monotonic() - t0) * 1000, error="invalid_request")
            return json.dumps({"error": "invalid request", "validation": validation.to_dict()})

        service = _get_evaluation_service()
        response, audit_trace = service.evaluate(request)
        _store_trace_for_explain(response.request_id, audit_trace)
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation("rules_evaluate", response.request_id, latency_ms, extra={"fired_count": len(response.fired)})
        return json.dumps(_shape_evaluation_response(response), indent=2)

    @mcp.tool()
    def rules_explain(request_id: str) -> str:
        """Return the per-rule audit trace for a prior rules_evaluate call.

        Args:
            request_id: ID returned by rules_evaluate

        Returns:
            JSON trace with code_sets and one decision per rule (reason, verdict, condition outcomes, missing groups)
        """
        trace = _trace_store.get(request_id)
        if trace is None:
            return _error("request_id not found", request_id=request_id)

        enhanced = dict(trace)
        reasons: dict[str, int] = {}
        for decision in trace.get("decisions", []):
            reasons[decision["reason"]] = reasons.get(decision["reason"], 0) + 1
        enhanced["analysis"] = {
            "total_rules": len(trace.get("decisions", [])),
            "by_reason": reasons,
        }
        return json.dumps(enhanced, indent=2)

    @mcp.tool()
    def codes_derive(
        held_codes: list[str] | None = None,
        renewal_codes: list[str] | None = None,
    ) -> str:
        """Show the derived code groups (customer, renewal, all-customer, opportunity) for a scenario.

        Args:
            held_codes: Product codes the customer currently holds
            renewal_codes: Product codes up for renewal

        Returns:
            JSON object keyed by code group name
        """
        t0 = time.monotonic()
        request = _build_scenario(held_codes, renewal_codes, None)
        validation = validate_scenario(request, max_codes=get_settings().max_codes_per_scenario)
        if not validation.is_valid:
            log_tool_invocation("codes_derive", None, (time.monotonic() - t0) * 1000, error="invalid_request")
            return json.dumps({"error": "invalid request", "validation": validation.to_dict()})
        code_sets = derive_code_sets(request.held_codes, request.renewal_codes)
        log_tool_invocation("codes_derive", None, (time.monotonic() - t0) * 1000)
        return json.dumps(code_sets.as_dict(), indent=2)

    @mcp.tool()
    def rules_capabilities() -> str:
        """Supported code groups, relationships, connectors and evaluation semantics."""
        return json.dumps({
            "code_groups": [g.value for g in CodeGroupName],
            "relationships": [r.value for r in RelationshipOp],
            "connectors": [c.value for c in Connector],
            "semantics": [
                match_semantics.RULE_CONTAINS_ANY,
                match_semantics.RULE_CONTAINS_ALL,
                match_semantics.RULE_CONTAINS_SOME,
                match_semantics.RULE_CONTAINS_NONE,
                match_semantics.RULE_FOLD_LEFT_TO_RIGHT,
                match_semantics.RULE_FIRST_CONNECTOR_IGNORED,
                match_semantics.RULE_MISSING_GROUP_SKIPPED,
                match_semantics.RULE_NOTHING_RESOLVED_FALSE,
                match_semantics.RULE_WINDOW_INCLUSIVE,
            ],
        })

    @mcp.tool()
    def rules_health() -> str:
        """Liveness/readiness: catalog store reachable, record counts, tool call counts."""
        try:
            service = _get_catalog_service()
            return json.dumps({
                "ok": True,
                "rules": len(service.list_rules()),
                "product_groups": len(service.list_product_groups()),
                "recommendations": len(service.list_recommendations()),
                "tool_calls": tool_call_counts(),
            })
        except Exception as e:
            return json.dumps({"ok": False, "error": str(e)})


# ---------------------------------------------------------------------------
# Studio tools
# ---------------------------------------------------------------------------
STUDIO_ALLOWED_TOOLS = frozenset({
    "rules_list",
    "rules_upsert",
    "rules_delete",
    "product_groups_list",
    "product_groups_upsert",
    "product_groups_delete",
    "recommendations_list",
    "recommendations_upsert",
    "recommendations_delete",
    "catalog_seed",
})


def _upsert(tool: str, record_json: str, model, save) -> str:
    t0 = time.monotonic()
    try:
        record = model.model_validate_json(record_json)
    except ValidationError as e:
        log_tool_invocation(tool, None, (time.monotonic() - t0) * 1000, error="invalid_record")
        return _error(f"invalid {model.__name__}", str(e))
    result = save(record)
    log_tool_invocation(tool, None, (time.monotonic() - t0) * 1000, extra={"record_id": record.id})
    return json.dumps({"id": record.id, "saved": result.is_valid, **result.to_dict()})


def register_studio_tools(mcp):
    """Register Studio (catalog admin) tools."""

    @mcp.tool()
    def rules_list() -> str:
        """List all rules in evaluation order."""
        from .auth import require_studio_scope
        require_studio_scope()
        return json.dumps([r.to_document() for r in _get_catalog_service().list_rules()])

    @mcp.tool()
    def rules_upsert(rule_json: str) -> str:
        """Create or replace a rule.

        Args:
            rule_json: JSON rule object (id, name, enabled, startDate, endDate, conditions, recommendationId)

        Returns:
            JSON with saved flag, validation errors and warnings
        """
        from .auth import require_studio_scope
        require_studio_scope()
        return _upsert("rules_upsert", rule_json, Rule, _get_catalog_service().save_rule)

    @mcp.tool()
    def rules_delete(rule_id: str) -> str:
        """Delete a rule by ID."""
        from .auth import require_studio_scope
        require_studio_scope()
        deleted = _get_catalog_service().delete_rule(rule_id)
        return json.dumps({"deleted": deleted, "id": rule_id})

    @mcp.tool()
    def product_groups_list() -> str:
        """List all product groups."""
        from .auth import require_studio_scope
        require_studio_scope()
        return json.dumps([g.to_document() for g in _get_catalog_service().list_product_groups()])

    @mcp.tool()
    def product_groups_upsert(product_group_json: str) -> str:
        """Create or replace a product group.

        Args:
            product_group_json: JSON object (id, name, productCodes)

        Returns:
            JSON with saved flag, validation errors and warnings
        """
        from .auth import require_studio_scope
        require_studio_scope()
        return _upsert(
            "product_groups_upsert", product_group_json, ProductGroup, _get_catalog_service().save_product_group
        )

    @mcp.tool()
    def product_groups_delete(product_group_id: str) -> str:
        """Delete a product group. Rules still referencing it are reported; their conditions will be skipped."""
        from .auth import require_studio_scope
        require_studio_scope()
        deleted, referencing = _get_catalog_service().delete_product_group(product_group_id)
        out: dict[str, Any] = {"deleted": deleted, "id": product_group_id}
        if deleted and referencing:
            out["warnings"] = [f"still referenced by rules: {', '.join(referencing)}"]
        return json.dumps(out)

    @mcp.tool()
    def recommendations_list() -> str:
        """List all recommendations."""
        from .auth import require_studio_scope
        require_studio_scope()
        return json.dumps([r.to_document() for r in _get_catalog_service().list_recommendations()])

    @mcp.tool()
    def recommendations_upsert(recommendation_json: str) -> str:
        """Create or replace a recommendation. Setting isDefault clears it on all others.

        Args:
            recommendation_json: JSON object (id, name, url, score, isDefault)

        Returns:
            JSON with saved flag, validation errors and warnings
        """
        from .auth import require_studio_scope
        require_studio_scope()
        return _upsert(
            "recommendations_upsert",
            recommendation_json,
            Recommendation,
            _get_catalog_service().save_recommendation,
        )

    @mcp.tool()
    def recommendations_delete(recommendation_id: str) -> str:
        """Delete a recommendation by ID."""
        from .auth import require_studio_scope
        require_studio_scope()
        deleted, referencing = _get_catalog_service().delete_recommendation(recommendation_id)
        out: dict[str, Any] = {"deleted": deleted, "id": recommendation_id}
        if deleted and referencing:
            out["warnings"] = [f"still referenced by rules: {', '.join(referencing)}"]
        return json.dumps(out)

    @mcp.tool()
    def catalog_seed(catalog_json: str) -> str:
        """Load recommendations, productGroups and rules from one JSON document.

        Args:
            catalog_json: JSON object with optional "recommendations", "productGroups" and "rules" arrays

        Returns:
            JSON with saved counts per section and per-record errors
        """
        from .auth import require_studio_scope
        require_studio_scope()
        try:
            catalog = json.loads(catalog_json)
        except json.JSONDecodeError as e:
            return _error("invalid catalog_json", str(e))
        if not isinstance(catalog, dict):
            return _error("catalog_json must be a JSON object")
        return json.dumps(_get_catalog_service().seed(catalog))
