"""Verdict fold tests: left-to-right connectors, skips, empty input."""

from rulestream.domain.catalog import Connector
from rulestream.domain.verdict import ConditionOutcome, fold_verdict

AND = Connector.and_
OR = Connector.or_


def _m(value: bool, connector: Connector | None = None) -> ConditionOutcome:
    return ConditionOutcome.match(value, connector)


class TestFoldOrder:
    """No operator precedence: (A op B) op C."""

    def test_or_then_and_is_not_reassociated(self):
        # (true OR false) AND true
        assert fold_verdict([_m(True), _m(False, OR), _m(True, AND)]) is True

    def test_precedence_would_change_the_answer(self):
        # (true OR true) AND false == false, whereas true OR (true AND false) == true
        assert fold_verdict([_m(True), _m(True, OR), _m(False, AND)]) is False

    def test_each_outcome_uses_its_own_connector(self):
        # false OR true -> true; using the previous connector (AND) would give false
        assert fold_verdict([_m(False, AND), _m(True, OR)]) is True

    def test_missing_connector_defaults_to_and(self):
        assert fold_verdict([_m(True), _m(False)]) is False


class TestFoldSeed:
    def test_first_connector_is_ignored(self):
        assert fold_verdict([_m(True, OR)]) is True
        assert fold_verdict([_m(False, OR), _m(True, AND)]) is False

    def test_single_outcome(self):
        assert fold_verdict([_m(True)]) is True
        assert fold_verdict([_m(False)]) is False


class TestFoldSkips:
    def test_empty_is_false(self):
        assert fold_verdict([]) is False

    def test_all_skipped_is_false(self):
        assert fold_verdict([ConditionOutcome.skip(), ConditionOutcome.skip(OR)]) is False

    def test_skip_consumes_no_connector(self):
        # skipped OR between two ANDed values leaves true AND false
        outcomes = [_m(True), ConditionOutcome.skip(OR), _m(False, AND)]
        assert fold_verdict(outcomes) is False

    def test_leading_skip_moves_the_seed(self):
        # seed becomes the second outcome; its OR connector is ignored
        outcomes = [ConditionOutcome.skip(), _m(False, OR), _m(True, AND)]
        assert fold_verdict(outcomes) is False

    def test_skip_flag(self):
        assert ConditionOutcome.skip().skipped is True
        assert _m(False).skipped is False
