from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .strategies import EvaluationStrategy, TwoPointDeviation, build_registry
from .verdict import Verdict

if TYPE_CHECKING:
    from ..config import TrapConfig


def should_respond(history: Sequence[bytes], threshold: int) -> Verdict:
    """Evaluate a newest-first history with the two-point threshold rule.

    Pure and deterministic: identical histories always give identical
    verdicts. A malformed snapshot raises ``SnapshotDecodeError``.
    """
    return TwoPointDeviation(threshold).evaluate(history)


class Decider:
    """Stateless wrapper binding a strategy to the ``should_respond`` call."""

    def __init__(self, strategy: EvaluationStrategy) -> None:
        self.strategy = strategy

    @classmethod
    def from_config(cls, trap: TrapConfig, strategy_key: Optional[str] = None) -> "Decider":
        registry = build_registry(trap)
        return cls(registry[strategy_key or trap.strategy].strategy)

    def should_respond(self, history: Sequence[bytes]) -> Verdict:
        return self.strategy.evaluate(history)
