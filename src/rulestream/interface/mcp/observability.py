"""Tool-call logging for the MCP surfaces.

Every tool call emits one ``tool_invocation`` record and bumps a per-tool
counter; ``rules_health`` reports the counters.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

_LOGGER = logging.getLogger("rulestream.mcp")

_CALLS: Counter[str] = Counter()
_FAILURES: Counter[str] = Counter()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for an entrypoint (stderr; stdout carries the MCP stream)."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def log_tool_invocation(
    tool: str,
    trace_id: str | None,
    latency_ms: float,
    error: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    payload: dict[str, Any] = {
        "tool": tool,
        "trace_id": trace_id,
        "latency_ms": round(latency_ms, 2),
    }
    if error:
        payload["error"] = error
    if extra:
        payload.update(extra)
    _LOGGER.info("tool_invocation", extra=payload)
    _CALLS[tool] += 1
    if error:
        _FAILURES[tool] += 1


def tool_call_counts() -> dict[str, dict[str, int]]:
    """Calls and failed calls per tool since process start."""
    return {"calls": dict(_CALLS), "failures": dict(_FAILURES)}
