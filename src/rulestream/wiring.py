"""Composition root: the single place where wiring happens.

Call ``build_evaluation_service()`` or ``build_catalog_service()`` to get
a fully-constructed service backed by the SQLite catalog store. No ad-hoc
construction elsewhere.
"""

from __future__ import annotations

from .adapters.sqlite_catalog_store import SqliteCatalogStore
from .config.runtime import RuntimeSettings, get_settings
from .services.catalog_service import CatalogService
from .services.evaluation_service import EvaluationService


def build_catalog_store(settings: RuntimeSettings | None = None) -> SqliteCatalogStore:
    """Construct the SQLite catalog store at the configured path."""
    settings = settings or get_settings()
    return SqliteCatalogStore(settings.catalog_db_path)


def build_evaluation_service(settings: RuntimeSettings | None = None) -> EvaluationService:
    """Construct an EvaluationService reading snapshots from the catalog store."""
    settings = settings or get_settings()
    store = build_catalog_store(settings)
    return EvaluationService(
        rules=store,
        product_groups=store,
        recommendations=store,
        marketing_base_url=settings.marketing_base_url,
    )


def build_catalog_service(settings: RuntimeSettings | None = None) -> CatalogService:
    """Construct a CatalogService over the catalog store."""
    settings = settings or get_settings()
    return CatalogService(store=build_catalog_store(settings), settings=settings)
