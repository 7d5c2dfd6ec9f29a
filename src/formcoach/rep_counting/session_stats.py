import math
from dataclasses import dataclass
from typing import List, Tuple


def _round_half_up(value: float) -> int:
    # 72.5 -> 73, where round() gives 72
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class RepData:
    """One validated repetition."""
    count: int  # Sequence number within the session, starting at 1
    duration: float  # Seconds
    quality: float
    confidence: float
    timestamp: float  # Completion time, seconds


class SessionStats:
    """Running totals over the accepted repetitions of one exercise selection."""

    def __init__(self):
        self._history: List[RepData] = []
        self.quality_sum = 0.0
        self.confidence_sum = 0.0

    def record(self, rep: RepData) -> None:
        self._history.append(rep)
        self.quality_sum += rep.quality
        self.confidence_sum += rep.confidence

    def reset(self) -> None:
        self._history = []
        self.quality_sum = 0.0
        self.confidence_sum = 0.0

    @property
    def rep_count(self) -> int:
        return len(self._history)

    @property
    def history(self) -> Tuple[RepData, ...]:
        return tuple(self._history)

    @property
    def avg_quality(self) -> int:
        """Mean quality, rounded for display."""
        if not self._history:
            return 0
        return _round_half_up(self.quality_sum / len(self._history))

    @property
    def avg_confidence(self) -> float:
        """Mean confidence, rounded to two decimals."""
        if not self._history:
            return 0.0
        return _round_half_up(self.confidence_sum / len(self._history) * 100) / 100

    @property
    def last_rep_duration(self) -> float:
        return self._history[-1].duration if self._history else 0.0
