"""Pydantic-based runtime settings for RuleStream surfaces.

Loads from environment variables (with optional .env file).
Invalid values fail fast on first access.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class McpMode(str, Enum):
    engine = "engine"
    studio = "studio"


class RuntimeSettings(BaseSettings):
    """All configuration for the RuleStream runtime, validated at startup."""

    model_config = {"env_prefix": "", "env_file": ".env", "env_file_encoding": "utf-8"}

    # --- Server mode ---
    mcp_mode: McpMode = Field(
        default=McpMode.engine,
        description="Which MCP surface to start: 'engine' (evaluation) or 'studio' (catalog admin)",
    )

    # --- Catalog storage ---
    catalog_db_path: str = Field(
        default="data/catalog.db",
        description="SQLite path for rules, product groups and recommendations",
    )
    seed_file_path: str = Field(
        default="data/catalog.json",
        description="JSON file loaded by the seed command",
    )

    # --- Output artifacts ---
    marketing_base_url: str = Field(
        default="https://marketing.example.com",
        description="Base URL for fired-rule marketing links (<base>/<rule id>)",
    )

    # --- Auth (optional shared-key gate) ---
    require_studio_key: bool = Field(
        default=False,
        description="If True, Studio requires MCP_STUDIO_KEY env",
    )
    require_engine_key: bool = Field(
        default=False,
        description="If True, Engine requires MCP_ENGINE_KEY env",
    )

    # --- Limits ---
    max_batch_size: int = Field(default=500, ge=1, le=10000, description="Maximum records per seed/upsert batch")
    max_codes_per_scenario: int = Field(
        default=1000, ge=1, description="Maximum held + renewal codes in one evaluation request"
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Root log level for entrypoints")

    @field_validator("marketing_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return the singleton RuntimeSettings (cached after first call)."""
    return RuntimeSettings()
