"""Port: catalog snapshots for rules, product groups and recommendations."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain.catalog import ProductGroup, Recommendation, Rule


@runtime_checkable
class RuleSnapshotProvider(Protocol):
    """Current rules, in the order they should be evaluated."""

    def list_rules(self) -> list[Rule]: ...


@runtime_checkable
class ProductGroupSnapshotProvider(Protocol):
    """Current product groups."""

    def list_product_groups(self) -> list[ProductGroup]: ...


@runtime_checkable
class RecommendationProvider(Protocol):
    """Current recommendations."""

    def list_recommendations(self) -> list[Recommendation]: ...


@runtime_checkable
class CatalogStorePort(RuleSnapshotProvider, ProductGroupSnapshotProvider, RecommendationProvider, Protocol):
    """Read/write interface for the record store."""

    # --- queries ---

    def get_rule(self, rule_id: str) -> Rule | None: ...

    def get_product_group(self, group_id: str) -> ProductGroup | None: ...

    def get_recommendation(self, recommendation_id: str) -> Recommendation | None: ...

    # --- mutations ---

    def upsert_rule(self, rule: Rule) -> None: ...

    def upsert_product_group(self, group: ProductGroup) -> None: ...

    def upsert_recommendation(self, recommendation: Recommendation) -> None: ...

    def delete_rule(self, rule_id: str) -> bool: ...

    def delete_product_group(self, group_id: str) -> bool: ...

    def delete_recommendation(self, recommendation_id: str) -> bool: ...

    def clear_default_recommendation(self, keep_id: str | None = None) -> int: ...
