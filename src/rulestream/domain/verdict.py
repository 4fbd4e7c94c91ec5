"""Fold per-condition outcomes into a rule verdict."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .catalog import Connector


@dataclass(frozen=True)
class ConditionOutcome:
    """Resolution of one condition: matched True/False, or skipped.

    ``matched`` is None when the condition's product group could not be
    resolved; such outcomes take no part in the fold.
    """

    connector: Connector
    matched: bool | None

    @classmethod
    def match(cls, matched: bool, connector: Connector | None = None) -> ConditionOutcome:
        return cls(connector=connector or Connector.and_, matched=matched)

    @classmethod
    def skip(cls, connector: Connector | None = None) -> ConditionOutcome:
        return cls(connector=connector or Connector.and_, matched=None)

    @property
    def skipped(self) -> bool:
        return self.matched is None


def fold_verdict(outcomes: Iterable[ConditionOutcome]) -> bool:
    """Combine outcomes left to right, without operator precedence.

    The first resolved outcome seeds the verdict and its connector is
    ignored. Each later outcome is joined with its own connector, so
    ``A AND B OR C`` reads as ``(A AND B) OR C``. With nothing resolved the
    verdict is False.
    """
    verdict: bool | None = None
    for outcome in outcomes:
        if outcome.skipped:
            continue
        if verdict is None:
            verdict = outcome.matched
        elif outcome.connector is Connector.or_:
            verdict = verdict or outcome.matched
        else:
            verdict = verdict and outcome.matched
    return bool(verdict)
