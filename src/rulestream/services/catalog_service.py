"""CatalogService for rule, product group and recommendation records."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..config.runtime import RuntimeSettings
from ..domain.catalog import ProductGroup, Recommendation, Rule
from ..domain.rule_engine import index_product_groups
from ..ports.snapshots import CatalogStorePort
from .validation import (
    ValidationResult,
    validate_product_group,
    validate_recommendation,
    validate_rule,
)

_LOGGER = logging.getLogger(__name__)


class CatalogService:
    """Validated create/update/delete over the catalog store."""

    def __init__(self, store: CatalogStorePort, settings: RuntimeSettings) -> None:
        self._store = store
        self._settings = settings

    # --- reads ---

    def list_rules(self) -> list[Rule]:
        return self._store.list_rules()

    def list_product_groups(self) -> list[ProductGroup]:
        return self._store.list_product_groups()

    def list_recommendations(self) -> list[Recommendation]:
        return self._store.list_recommendations()

    # --- writes ---

    def save_rule(self, rule: Rule) -> ValidationResult:
        """Validate and store a rule. Nothing is written when validation fails."""
        result = validate_rule(
            rule,
            product_groups=index_product_groups(self._store.list_product_groups()),
            recommendations={r.id: r for r in self._store.list_recommendations()},
        )
        if result.is_valid:
            self._store.upsert_rule(rule)
            _LOGGER.info("rule_saved", extra={"rule_id": rule.id, "conditions": len(rule.conditions)})
        return result

    def save_product_group(self, group: ProductGroup) -> ValidationResult:
        result = validate_product_group(group)
        if result.is_valid:
            self._store.upsert_product_group(group)
            _LOGGER.info("product_group_saved", extra={"product_group_id": group.id})
        return result

    def save_recommendation(self, recommendation: Recommendation) -> ValidationResult:
        """Validate and store a recommendation.

        Marking a recommendation as default clears the flag on all others.
        """
        result = validate_recommendation(recommendation)
        if not result.is_valid:
            return result
        self._store.upsert_recommendation(recommendation)
        if recommendation.is_default:
            cleared = self._store.clear_default_recommendation(keep_id=recommendation.id)
            if cleared:
                result.add_warning(f"default flag moved from {cleared} other recommendation(s)")
        _LOGGER.info("recommendation_saved", extra={"recommendation_id": recommendation.id})
        return result

    def delete_rule(self, rule_id: str) -> bool:
        return self._store.delete_rule(rule_id)

    def delete_product_group(self, group_id: str) -> tuple[bool, list[str]]:
        """Delete a product group. Returns (deleted, ids of rules still referencing it)."""
        referencing = [
            rule.id
            for rule in self._store.list_rules()
            if any(c.product_group_id == group_id for c in rule.conditions)
        ]
        deleted = self._store.delete_product_group(group_id)
        if deleted and referencing:
            _LOGGER.warning(
                "product_group_deleted_while_referenced",
                extra={"product_group_id": group_id, "rule_ids": referencing},
            )
        return deleted, referencing

    def delete_recommendation(self, recommendation_id: str) -> tuple[bool, list[str]]:
        """Delete a recommendation. Returns (deleted, ids of rules still pointing at it)."""
        referencing = [r.id for r in self._store.list_rules() if r.recommendation_id == recommendation_id]
        return self._store.delete_recommendation(recommendation_id), referencing

    # --- bulk ---

    def seed(self, catalog: dict[str, Any]) -> dict[str, Any]:
        """Load a catalog document with ``recommendations``, ``productGroups`` and ``rules`` lists.

        Records are saved in dependency order so rule references resolve.
        Invalid records are reported and skipped; the rest are still saved.
        Each section is processed in chunks of ``max_batch_size``; nothing is
        truncated.
        """
        limit = self._settings.max_batch_size
        saved = {"recommendations": 0, "product_groups": 0, "rules": 0}
        errors: list[dict[str, Any]] = []

        sections = (
            ("recommendations", ("recommendations",), Recommendation, self.save_recommendation),
            ("product_groups", ("productGroups", "product_groups"), ProductGroup, self.save_product_group),
            ("rules", ("rules",), Rule, self.save_rule),
        )
        for name, keys, model, save in sections:
            raw_items = next((catalog[k] for k in keys if k in catalog), [])
            if not isinstance(raw_items, list):
                errors.append({"section": name, "error": "must be a JSON array"})
                continue
            for start in range(0, len(raw_items), limit):
                batch = raw_items[start : start + limit]
                for index, item in enumerate(batch, start=start):
                    try:
                        record = model.model_validate(item)
                    except ValidationError as e:
                        errors.append({"section": name, "index": index, "error": str(e)})
                        continue
                    result = save(record)
                    if result.is_valid:
                        saved[name] += 1
                    else:
                        errors.append({"section": name, "index": index, "error": "; ".join(result.errors)})
                _LOGGER.debug(
                    "seed_batch_done",
                    extra={"section": name, "batch_start": start, "batch_len": len(batch)},
                )

        _LOGGER.info("catalog_seeded", extra={"saved": saved, "errors": len(errors)})
        return {"saved": saved, "errors": errors}
