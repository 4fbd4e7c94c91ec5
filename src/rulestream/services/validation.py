"""Record and scenario validation.

Mirrors the checks the catalog editing forms enforce before a record is
saved. The rule engine itself never re-validates; these run at the
Studio/CLI boundary.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from ..domain.catalog import ProductGroup, Recommendation, Rule
from ..models.requests import ScenarioRequest

_URL_RE = re.compile(r"^(https?://)?([\w\d-]+\.)+\w{2,}(/.+)?$")

GROUP_NAME_MIN = 2
GROUP_NAME_MAX = 50
GROUP_CODES_MIN = 1
GROUP_CODES_MAX = 100
SCORE_MIN = 1
SCORE_MAX = 100


class ValidationResult:
    """Result of record validation."""

    def __init__(self, is_valid: bool = True, errors: list[str] | None = None, warnings: list[str] | None = None):
        self.is_valid = is_valid
        self.errors = errors or []
        self.warnings = warnings or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response."""
        return {
            "valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }

    def add_error(self, error: str) -> ValidationResult:
        """Add an error and return self for chaining."""
        self.errors.append(error)
        self.is_valid = False
        return self

    def add_warning(self, warning: str) -> ValidationResult:
        """Add a warning and return self for chaining."""
        self.warnings.append(warning)
        return self


def validate_rule(
    rule: Rule,
    product_groups: Mapping[str, ProductGroup] | None = None,
    recommendations: Mapping[str, Recommendation] | None = None,
) -> ValidationResult:
    """Validate a Rule the way the rule editor does.

    When ``product_groups`` / ``recommendations`` are given, dangling
    references are reported as warnings: the engine skips such conditions
    rather than failing.
    """
    result = ValidationResult()

    if not rule.name.strip():
        result.add_error("Name is required")
    if rule.start_date > rule.end_date:
        result.add_error("End Date must be after Start Date")
    if not rule.recommendation_id:
        result.add_error("Recommendation is required")

    if not rule.conditions:
        result.add_error("At least one condition is required")
    elif any(not c.product_group_id for c in rule.conditions):
        result.add_error("All conditions must have a product group selected")

    if rule.conditions and rule.conditions[0].connector is not None:
        result.add_warning("connector on the first condition is ignored")

    if product_groups is not None:
        for index, condition in enumerate(rule.conditions):
            if condition.product_group_id and condition.product_group_id not in product_groups:
                result.add_warning(
                    f"condition {index + 1}: product group {condition.product_group_id!r} not found; "
                    "it will be skipped during evaluation"
                )
    if recommendations is not None and rule.recommendation_id:
        if rule.recommendation_id not in recommendations:
            result.add_warning(f"recommendation {rule.recommendation_id!r} not found")

    return result


def validate_product_group(group: ProductGroup) -> ValidationResult:
    """Validate a ProductGroup: name length and member count."""
    result = ValidationResult()
    name_len = len(group.name)
    if name_len < GROUP_NAME_MIN or name_len > GROUP_NAME_MAX:
        result.add_error(f"Group name must be between {GROUP_NAME_MIN} and {GROUP_NAME_MAX} characters")
    code_count = len(group.product_codes)
    if code_count < GROUP_CODES_MIN or code_count > GROUP_CODES_MAX:
        result.add_error(f"Select between {GROUP_CODES_MIN} and {GROUP_CODES_MAX} products")
    if len(set(group.product_codes)) != code_count:
        result.add_warning("duplicate product codes will be treated as one")
    return result


def validate_recommendation(recommendation: Recommendation) -> ValidationResult:
    """Validate a Recommendation: name, URL format and score range."""
    result = ValidationResult()
    if not recommendation.name:
        result.add_error("Name is required")
    if not recommendation.url:
        result.add_error("URL is required")
    elif not _URL_RE.match(recommendation.url):
        result.add_error("Enter a valid URL")
    if recommendation.score < SCORE_MIN or recommendation.score > SCORE_MAX:
        result.add_error(f"Score must be between {SCORE_MIN} and {SCORE_MAX}")
    return result


def validate_scenario(request: ScenarioRequest, max_codes: int = 1000) -> ValidationResult:
    """Validate a scenario before evaluation."""
    result = ValidationResult()
    total = len(request.held_codes) + len(request.renewal_codes)
    if total > max_codes:
        result.add_error(f"too many codes ({total}; max {max_codes})")
    if total == 0:
        result.add_warning("no held or renewal codes supplied")
    return result
