"""Rule semantics, named for audit output and capability listings."""

RULE_CONTAINS_ANY = "contains-any: at least one product group code is in the code set"
RULE_CONTAINS_ALL = "contains-all: every product group code is in the code set (empty group matches)"
RULE_CONTAINS_SOME = "contains-some: some but not all product group codes are in the code set"
RULE_CONTAINS_NONE = "contains-none: no product group code is in the code set (empty group matches)"
RULE_FOLD_LEFT_TO_RIGHT = "connectors: conditions combine left to right, no AND/OR precedence"
RULE_FIRST_CONNECTOR_IGNORED = "connectors: the first resolved condition's connector is ignored"
RULE_MISSING_GROUP_SKIPPED = "missing product group: condition skipped, rule still evaluated"
RULE_NOTHING_RESOLVED_FALSE = "no resolvable conditions: rule does not fire"
RULE_WINDOW_INCLUSIVE = "schedule: enabled and start_date <= today <= end_date"
