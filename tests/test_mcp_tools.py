"""Tests that each MCP server exposes only its allowed tool set, and that
engine tools shape their responses.
"""

import json
from datetime import date

import pytest

from rulestream.domain.catalog import ProductGroup, Rule, RuleCondition
from rulestream.interface.mcp import tools
from rulestream.interface.mcp.auth import check_scope
from rulestream.interface.mcp.server import create_server
from rulestream.interface.mcp.tools import ENGINE_ALLOWED_TOOLS, STUDIO_ALLOWED_TOOLS
from rulestream.services.evaluation_service import EvaluationService


def _get_tool_names(server) -> set[str]:
    """Extract registered tool names from a FastMCP server."""
    # FastMCP stores tools in _tool_manager._tools dict
    return set(server._tool_manager._tools.keys())


def _call(server, name: str, **kwargs) -> dict:
    tool = server._tool_manager._tools[name]
    return json.loads(tool.fn(**kwargs))


def test_engine_exposes_only_allowed_tools():
    assert _get_tool_names(create_server("engine")) == ENGINE_ALLOWED_TOOLS


def test_engine_has_no_studio_tools():
    assert not _get_tool_names(create_server("engine")) & STUDIO_ALLOWED_TOOLS


def test_studio_exposes_catalog_tools():
    names = _get_tool_names(create_server("studio"))
    assert names == STUDIO_ALLOWED_TOOLS
    assert "rules_evaluate" not in names


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        create_server("admin")


class FakeCatalog:
    def list_rules(self):
        return [
            Rule(
                id="R1",
                name="Rule one",
                enabled=True,
                start_date=date(2025, 1, 1),
                end_date=date(2025, 12, 31),
                conditions=[RuleCondition(product_group_id="G1")],
                recommendation_id="rec-1",
            )
        ]

    def list_product_groups(self):
        return [ProductGroup(id="G1", name="Group", product_codes=["A"])]

    def list_recommendations(self):
        return []


@pytest.fixture
def engine(monkeypatch):
    catalog = FakeCatalog()
    monkeypatch.setattr(
        tools,
        "_get_evaluation_service",
        lambda: EvaluationService(rules=catalog, product_groups=catalog, recommendations=catalog),
    )
    return create_server("engine")


class TestEngineTools:
    def test_evaluate_and_explain(self, engine):
        out = _call(engine, "rules_evaluate", held_codes=["A"], as_of="2025-06-01")
        assert set(out) <= tools.ALLOWED_EVALUATION_RESPONSE_KEYS
        assert [f["rule_id"] for f in out["fired"]] == ["R1"]
        assert out["fired"][0]["marketing_url"].endswith("/R1")

        trace = _call(engine, "rules_explain", request_id=out["request_id"])
        assert trace["analysis"]["by_reason"] == {"fired": 1}

    def test_evaluate_rejects_bad_date(self, engine):
        out = _call(engine, "rules_evaluate", held_codes=["A"], as_of="June 1st")
        assert out["error"] == "invalid request"

    def test_explain_unknown_request(self, engine):
        assert _call(engine, "rules_explain", request_id="nope")["error"] == "request_id not found"

    def test_codes_derive(self, engine):
        out = _call(engine, "codes_derive", held_codes=["A"], renewal_codes=["A", "B"])
        assert out["opportunityCodes"] == ["B"]

    def test_codes_derive_rejects_too_many_codes(self, engine, monkeypatch):
        from rulestream.config.runtime import get_settings

        monkeypatch.setenv("MAX_CODES_PER_SCENARIO", "2")
        get_settings.cache_clear()
        try:
            out = _call(engine, "codes_derive", held_codes=["A", "B"], renewal_codes=["C"])
        finally:
            get_settings.cache_clear()
        assert out["error"] == "invalid request"
        assert out["validation"]["valid"] is False

    def test_capabilities(self, engine):
        out = _call(engine, "rules_capabilities")
        assert out["relationships"] == ["contains-any", "contains-all", "contains-some", "contains-none"]
        assert out["connectors"] == ["AND", "OR"]


class TestScope:
    @pytest.fixture(autouse=True)
    def _fresh_settings(self, monkeypatch):
        from rulestream.config.runtime import get_settings

        monkeypatch.delenv("MCP_STUDIO_KEY", raising=False)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_studio_open_by_default(self):
        check_scope("studio")

    def test_studio_key_required(self, monkeypatch):
        from rulestream.config.runtime import get_settings

        monkeypatch.setenv("REQUIRE_STUDIO_KEY", "true")
        get_settings.cache_clear()
        with pytest.raises(PermissionError):
            check_scope("studio")
        monkeypatch.setenv("MCP_STUDIO_KEY", "secret")
        check_scope("studio")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            check_scope("admin")

    def test_engine_key_required(self, monkeypatch):
        from rulestream.config.runtime import get_settings

        monkeypatch.delenv("MCP_ENGINE_KEY", raising=False)
        monkeypatch.setenv("REQUIRE_ENGINE_KEY", "true")
        get_settings.cache_clear()
        with pytest.raises(PermissionError, match="MCP_ENGINE_KEY"):
            check_scope("engine")
        check_scope("studio")


def test_tool_calls_are_counted():
    from rulestream.interface.mcp.observability import log_tool_invocation, tool_call_counts

    before = tool_call_counts()
    log_tool_invocation("rules_evaluate", "req-1", 1.5)
    log_tool_invocation("rules_evaluate", None, 0.4, error="invalid_request")
    after = tool_call_counts()
    assert after["calls"]["rules_evaluate"] - before["calls"].get("rules_evaluate", 0) == 2
    assert after["failures"]["rules_evaluate"] - before["failures"].get("rules_evaluate", 0) == 1
