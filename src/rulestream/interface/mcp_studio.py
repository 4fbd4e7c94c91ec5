"""Studio entrypoint.

Starts the MCP Studio server (admin-only: rules, product groups, recommendations).

Usage:
    python -m rulestream.interface.mcp_studio
    # or:
    rulestream-studio
"""

from __future__ import annotations

from ..config.runtime import get_settings
from .mcp.auth import check_scope
from .mcp.observability import configure_logging
from .mcp.server import create_server


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    check_scope("studio")
    server = create_server(mode="studio")
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
