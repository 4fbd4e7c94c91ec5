"""Shared-key gates for the Engine and Studio surfaces.

Off by default. When ``REQUIRE_STUDIO_KEY`` / ``REQUIRE_ENGINE_KEY`` is set,
the surface refuses to serve unless its key variable is present.
"""

from __future__ import annotations

import os

# mode -> (settings flag, env var holding the key)
_GATES = {
    "studio": ("require_studio_key", "MCP_STUDIO_KEY"),
    "engine": ("require_engine_key", "MCP_ENGINE_KEY"),
}


def _require(mode: str) -> None:
    from ...config.runtime import get_settings

    flag, key_var = _GATES[mode]
    if getattr(get_settings(), flag) and not os.environ.get(key_var):
        raise PermissionError(f"{mode.capitalize()} requires {key_var} to be set")


def require_studio_scope() -> None:
    """Raise PermissionError if the Studio key gate is on and no key is set."""
    _require("studio")


def check_scope(mode: str) -> None:
    """Check the gate for a server mode at startup."""
    if mode not in _GATES:
        raise ValueError(f"Unknown mode: {mode!r}")
    _require(mode)
