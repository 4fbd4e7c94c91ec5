"""MCP server surfaces (Engine and Studio)."""
