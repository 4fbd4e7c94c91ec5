"""Port interfaces (Protocols).

Services depend only on these, never on concrete adapters.
No sqlite or MCP imports allowed here.
"""

from .id_gen import RequestIdProvider, UuidRequestIdProvider
from .snapshots import (
    CatalogStorePort,
    ProductGroupSnapshotProvider,
    RecommendationProvider,
    RuleSnapshotProvider,
)

__all__ = [
    "CatalogStorePort",
    "ProductGroupSnapshotProvider",
    "RecommendationProvider",
    "RequestIdProvider",
    "RuleSnapshotProvider",
    "UuidRequestIdProvider",
]
