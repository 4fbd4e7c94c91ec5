"""Concrete adapter implementations."""

from .sqlite_catalog_store import SqliteCatalogStore

__all__ = ["SqliteCatalogStore"]
