"""Application services."""

from .catalog_service import CatalogService
from .evaluation_service import EvaluationService

__all__ = ["CatalogService", "EvaluationService"]
