"""Engine entrypoint.

Starts the MCP Engine server (read-only rule evaluation).
This module avoids importing any CLI or studio modules so it can be used
as a minimal container entrypoint.

Usage:
    python -m rulestream.interface.mcp_engine
    # or via the script entrypoint:
    rulestream-engine
"""

from __future__ import annotations

from ..config.runtime import get_settings
from .mcp.observability import configure_logging
from .mcp.server import create_server


def main() -> None:
    from .mcp.auth import check_scope

    configure_logging(get_settings().log_level)
    check_scope("engine")
    server = create_server(mode="engine")
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
