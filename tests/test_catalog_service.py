"""CatalogService tests against a temporary SQLite store."""

import json
from datetime import date
from pathlib import Path

import pytest

from rulestream.adapters.sqlite_catalog_store import SqliteCatalogStore
from rulestream.config.runtime import RuntimeSettings
from rulestream.domain.catalog import ProductGroup, Recommendation, Rule, RuleCondition
from rulestream.services.catalog_service import CatalogService

SAMPLE_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.json"


@pytest.fixture
def service(tmp_path):
    settings = RuntimeSettings(catalog_db_path=str(tmp_path / "catalog.db"))
    return CatalogService(store=SqliteCatalogStore(settings.catalog_db_path), settings=settings)


def _rule(group_id: str = "g1") -> Rule:
    return Rule(
        id="r1",
        name="Rule",
        enabled=True,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 2, 1),
        conditions=[RuleCondition(product_group_id=group_id)],
        recommendation_id="rec-1",
    )


class TestSave:
    def test_invalid_rule_not_stored(self, service):
        result = service.save_rule(_rule().model_copy(update={"conditions": []}))
        assert not result.is_valid
        assert service.list_rules() == []

    def test_rule_with_unknown_group_saved_with_warning(self, service):
        result = service.save_rule(_rule("missing"))
        assert result.is_valid
        assert any("missing" in w for w in result.warnings)
        assert [r.id for r in service.list_rules()] == ["r1"]

    def test_invalid_product_group_not_stored(self, service):
        assert not service.save_product_group(ProductGroup(id="g", name="x", product_codes=[])).is_valid
        assert service.list_product_groups() == []

    def test_default_recommendation_is_exclusive(self, service):
        service.save_recommendation(Recommendation(id="a", name="A", url="a.com", score=10, is_default=True))
        result = service.save_recommendation(
            Recommendation(id="b", name="B", url="b.com", score=10, is_default=True)
        )
        assert result.warnings
        assert [r.id for r in service.list_recommendations() if r.is_default] == ["b"]


class TestDelete:
    def test_delete_referenced_group_reports_rules(self, service):
        service.save_product_group(ProductGroup(id="g1", name="Group", product_codes=["A"]))
        service.save_rule(_rule("g1"))
        deleted, referencing = service.delete_product_group("g1")
        assert deleted is True
        assert referencing == ["r1"]

    def test_delete_missing_recommendation(self, service):
        deleted, referencing = service.delete_recommendation("nope")
        assert deleted is False
        assert referencing == []


class TestSeed:
    def test_seed_sample_catalog(self, service):
        catalog = json.loads(SAMPLE_CATALOG.read_text(encoding="utf-8"))
        result = service.seed(catalog)
        assert result["errors"] == []
        assert result["saved"] == {"recommendations": 2, "product_groups": 3, "rules": 2}
        assert [r.id for r in service.list_rules()] == ["r-upsell-broadband", "r-renew-tv"]

    def test_seed_reports_bad_records_and_keeps_good_ones(self, service):
        result = service.seed(
            {
                "productGroups": [
                    {"id": "g1", "name": "Good group", "productCodes": ["A"]},
                    {"id": "g2", "name": "x", "productCodes": ["A"]},
                    {"name": "no id"},
                ],
                "rules": "not a list",
            }
        )
        assert result["saved"]["product_groups"] == 1
        sections = [(e["section"], e.get("index")) for e in result["errors"]]
        assert ("product_groups", 1) in sections
        assert ("product_groups", 2) in sections
        assert ("rules", None) in sections

    def test_seed_processes_every_record_past_batch_size(self, tmp_path):
        settings = RuntimeSettings(catalog_db_path=str(tmp_path / "batched.db"), max_batch_size=2)
        batched = CatalogService(store=SqliteCatalogStore(settings.catalog_db_path), settings=settings)
        groups = [{"id": f"g{i}", "name": f"Group {i}", "productCodes": ["A"]} for i in range(5)]
        groups[3]["name"] = "x"

        result = batched.seed({"productGroups": groups})

        assert result["saved"]["product_groups"] == 4
        assert [(e["section"], e["index"]) for e in result["errors"]] == [("product_groups", 3)]
        assert [g.id for g in batched.list_product_groups()] == ["g0", "g1", "g2", "g4"]
