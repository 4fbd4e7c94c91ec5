"""Operator-facing surfaces: MCP servers and CLI."""
