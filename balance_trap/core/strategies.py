from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Protocol, Sequence, Tuple

from .snapshot import decode_snapshot
from .verdict import INSUFFICIENT_DATA, THRESHOLD_EXCEEDED, Verdict

if TYPE_CHECKING:
    from ..config import TrapConfig


logger = logging.getLogger(__name__)

History = Sequence[bytes]


class EvaluationStrategy(Protocol):
    def evaluate(self, history: History) -> Verdict:
        ...


class TwoPointDeviation:
    """Compare the two newest snapshots against a fixed threshold.

    The comparison is inclusive: a deviation equal to the threshold responds.
    Older entries in the history are ignored, so slow drift across many small
    steps never triggers.
    """

    key = "two_point"
    label = "|b[0] - b[1]| >= threshold"

    def __init__(self, threshold: int) -> None:
        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
            raise ValueError(f"threshold must be a non-negative int, got {threshold!r}")
        self.threshold = threshold

    def evaluate(self, history: History) -> Verdict:
        if len(history) < 2:
            return Verdict.skip(INSUFFICIENT_DATA)

        current = decode_snapshot(history[0])
        previous = decode_snapshot(history[1])
        # Python ints do not wrap, so this is the exact absolute difference
        deviation = abs(current - previous)
        logger.debug(
            "two-point deviation",
            extra={"current": current, "previous": previous, "deviation": deviation},
        )
        if deviation >= self.threshold:
            return Verdict.respond(THRESHOLD_EXCEEDED)
        return Verdict.skip()

    def __repr__(self) -> str:
        return f"TwoPointDeviation(threshold={self.threshold})"


StrategyFactory = Callable[["TrapConfig"], EvaluationStrategy]

_STRATEGIES: Dict[str, Tuple[str, StrategyFactory]] = {
    TwoPointDeviation.key: (TwoPointDeviation.label, lambda trap: TwoPointDeviation(trap.threshold_wei)),
}

STRATEGY_KEYS = frozenset(_STRATEGIES)


@dataclass
class StrategySpec:
    key: str
    strategy: EvaluationStrategy
    label: str


def build_registry(trap: "TrapConfig") -> Dict[str, StrategySpec]:
    return {
        key: StrategySpec(key=key, strategy=factory(trap), label=label)
        for key, (label, factory) in _STRATEGIES.items()
    }
