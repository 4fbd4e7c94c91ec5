"""Catalog record parsing: camelCase documents and defaults."""

from datetime import date

import pytest
from pydantic import ValidationError

from rulestream.domain.catalog import (
    CodeGroupName,
    Connector,
    ProductGroup,
    Recommendation,
    RelationshipOp,
    Rule,
)

CAMEL_RULE = {
    "id": "r1",
    "name": "Upsell",
    "enabled": True,
    "startDate": "2025-01-01",
    "endDate": "2025-01-31",
    "recommendationId": "rec-1",
    "conditions": [
        {"codeGroup": "customerCodes", "productGroupId": "g1", "relationship": "contains-any"},
        {"connector": "OR", "codeGroup": "opportunityCodes", "productGroupId": "g2", "relationship": "contains-none"},
    ],
}


class TestCamelCaseDocuments:
    def test_rule_from_camel_case(self):
        rule = Rule.model_validate(CAMEL_RULE)
        assert rule.start_date == date(2025, 1, 1)
        assert rule.recommendation_id == "rec-1"
        assert rule.conditions[1].connector is Connector.or_
        assert rule.conditions[1].code_group is CodeGroupName.opportunity_codes
        assert rule.conditions[1].relationship is RelationshipOp.contains_none

    def test_document_uses_camel_case(self):
        doc = Rule.model_validate(CAMEL_RULE).to_document()
        assert doc["startDate"] == "2025-01-01"
        assert doc["conditions"][0]["productGroupId"] == "g1"
        assert doc["conditions"][0]["connector"] is None

    def test_product_group_and_recommendation(self):
        group = ProductGroup.model_validate({"id": "g1", "name": "G", "productCodes": ["A", "A", "B"]})
        assert group.code_set == frozenset({"A", "B"})
        rec = Recommendation.model_validate(
            {"id": "x", "name": "X", "url": "https://x.com", "score": 5, "isDefault": True}
        )
        assert rec.is_default is True


class TestDefaultsAndRejections:
    def test_condition_defaults(self):
        rule = Rule.model_validate({**CAMEL_RULE, "conditions": [{"productGroupId": "g1"}]})
        condition = rule.conditions[0]
        assert condition.code_group is CodeGroupName.customer_codes
        assert condition.relationship is RelationshipOp.contains_any
        assert condition.effective_connector is Connector.and_

    def test_rule_disabled_by_default(self):
        doc = {k: v for k, v in CAMEL_RULE.items() if k != "enabled"}
        assert Rule.model_validate(doc).enabled is False

    def test_unknown_relationship_rejected(self):
        bad = {**CAMEL_RULE, "conditions": [{"productGroupId": "g1", "relationship": "contains-most"}]}
        with pytest.raises(ValidationError):
            Rule.model_validate(bad)

    def test_unknown_connector_rejected(self):
        bad = {**CAMEL_RULE, "conditions": [{"productGroupId": "g1", "connector": "XOR"}]}
        with pytest.raises(ValidationError):
            Rule.model_validate(bad)


class TestProductCodeNormalization:
    def test_group_codes_trimmed_like_scenario_codes(self):
        group = ProductGroup.model_validate({"id": "g1", "name": "Group", "productCodes": [" A", "B ", "", "  "]})
        assert group.product_codes == ["A", "B"]
        assert group.code_set == frozenset({"A", "B"})

    def test_trimmed_group_code_matches_scenario(self):
        from rulestream.domain.code_sets import derive_code_sets
        from rulestream.domain.relationships import evaluate_relationship

        group = ProductGroup(id="g1", name="Group", product_codes=[" A"])
        sets = derive_code_sets(["A"], [])
        assert evaluate_relationship(sets.customer_codes, group.code_set, RelationshipOp.contains_any)

    def test_codes_stay_case_sensitive(self):
        group = ProductGroup(id="g1", name="Group", product_codes=["a"])
        assert "A" not in group.code_set
