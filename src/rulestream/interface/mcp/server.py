"""MCP server factory.

Creates either an Engine or Studio server depending on
the requested mode. Each surface registers only its own tool set.
"""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from ...domain.catalog import CodeGroupName, Connector, RelationshipOp
from .tools import register_engine_tools, register_studio_tools


_SERVER_NAMES = {
    "engine": "rulestream-engine",
    "studio": "rulestream-studio",
}

CONDITION_SCHEMA_URI = "rulestream://schema/conditions"


def create_server(mode: str = "engine") -> FastMCP:
    """Build and return a configured FastMCP server.

    Args:
        mode: ``"engine"`` for the Engine (read-only evaluation)
            or ``"studio"`` for the Studio (catalog administration).

    Returns:
        A FastMCP instance with the appropriate tools registered.
    """
    if mode not in _SERVER_NAMES:
        raise ValueError(f"Unknown MCP mode {mode!r}; expected 'engine' or 'studio'")

    server = FastMCP(_SERVER_NAMES[mode])

    if mode == "engine":
        register_engine_tools(server)
        _register_engine_resources(server)
    else:
        register_studio_tools(server)

    return server


def condition_schema() -> dict:
    """Valid values for each rule condition field, with an example rule."""
    return {
        "codeGroup": [g.value for g in CodeGroupName],
        "relationship": [r.value for r in RelationshipOp],
        "connector": [c.value for c in Connector],
        "example": {
            "id": "r-upsell",
            "name": "Upsell broadband",
            "enabled": True,
            "startDate": "2025-01-01",
            "endDate": "2025-12-31",
            "recommendationId": "rec-broadband",
            "conditions": [
                {"codeGroup": "customerCodes", "productGroupId": "g-mobile", "relationship": "contains-any"},
                {
                    "connector": "AND",
                    "codeGroup": "customerCodes",
                    "productGroupId": "g-broadband",
                    "relationship": "contains-none",
                },
            ],
        },
    }


def _register_engine_resources(server: FastMCP) -> None:
    """Register Engine resources (condition schema)."""

    @server.resource(CONDITION_SCHEMA_URI, mime_type="application/json")
    def get_condition_schema() -> str:
        """Valid code groups, relationships and connectors for rule conditions."""
        return json.dumps(condition_schema(), indent=2)


def main() -> None:
    """Start the surface selected by MCP_MODE."""
    from ...config.runtime import get_settings
    from .auth import check_scope
    from .observability import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)
    mode = settings.mcp_mode.value
    check_scope(mode)
    create_server(mode).run(transport="stdio")


if __name__ == "__main__":
    main()
