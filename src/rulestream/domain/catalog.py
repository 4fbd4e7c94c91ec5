"""Rule, product group and recommendation records."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CodeGroupName(str, Enum):
    """Derived code sets a condition can test."""

    customer_codes = "customerCodes"
    renewal_codes = "renewalCodes"
    all_customer_codes = "allCustomerCodes"
    opportunity_codes = "opportunityCodes"


class RelationshipOp(str, Enum):
    """How a code set relates to a product group."""

    contains_any = "contains-any"    # some group code is held
    contains_all = "contains-all"    # every group code is held
    contains_some = "contains-some"  # some, but not all
    contains_none = "contains-none"  # no group code is held


class Connector(str, Enum):
    """Joins a condition to the verdict accumulated before it."""

    and_ = "AND"
    or_ = "OR"


class CatalogRecord(BaseModel):
    """Base for stored records: accepts snake_case or camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize with camelCase keys, as the catalog transport expects."""
        return self.model_dump(mode="json", by_alias=True)


class ProductGroup(CatalogRecord):
    """Operator-maintained set of product codes."""

    id: str = Field(..., description="Product group identifier")
    name: str = Field(..., description="Display name")
    product_codes: list[str] = Field(default_factory=list, description="Member product codes")

    @field_validator("product_codes")
    @classmethod
    def _drop_blank(cls, value: list[str]) -> list[str]:
        return [code.strip() for code in value if code and code.strip()]

    @property
    def code_set(self) -> frozenset[str]:
        return frozenset(self.product_codes)


class Recommendation(CatalogRecord):
    """Marketing artifact a rule points at when it fires."""

    id: str = Field(..., description="Recommendation identifier")
    name: str = Field(..., description="Display name")
    url: str = Field(..., description="Landing URL")
    score: int = Field(default=0, description="Operator-assigned score (1-100)")
    is_default: bool = Field(default=False, description="Whether this is the default recommendation")


class RuleCondition(CatalogRecord):
    """One relationship test between a code group and a product group.

    ``connector`` joins this condition to the verdict of the conditions
    before it. It has no effect on the first condition that resolves.
    """

    connector: Connector | None = Field(default=None, description="AND/OR join to previous conditions")
    code_group: CodeGroupName = Field(
        default=CodeGroupName.customer_codes, description="Derived code set to test"
    )
    product_group_id: str = Field(..., description="Product group to compare against")
    relationship: RelationshipOp = Field(
        default=RelationshipOp.contains_any, description="Relationship operator"
    )

    @property
    def effective_connector(self) -> Connector:
        return self.connector or Connector.and_


class Rule(CatalogRecord):
    """Marketing rule with an active window and ordered conditions."""

    id: str = Field(..., description="Rule identifier")
    name: str = Field(..., description="Rule name")
    enabled: bool = Field(default=False, description="Whether the rule may fire")
    start_date: date = Field(..., description="First active day (inclusive)")
    end_date: date = Field(..., description="Last active day (inclusive)")
    conditions: list[RuleCondition] = Field(default_factory=list, description="Ordered conditions")
    recommendation_id: str = Field(..., description="Recommendation emitted when the rule fires")

    def is_active(self, today: date | None = None) -> bool:
        """Return True if the rule is enabled and ``today`` is inside its window."""
        today = today or date.today()
        if not self.enabled:
            return False
        return self.start_date <= today <= self.end_date
