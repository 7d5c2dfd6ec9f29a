from collections import deque
from typing import Tuple


class WeightedAngleSmoother:
    """
    Confidence- and recency-weighted average over the last few samples.

    Sample i of n gets weight confidence_i * decay ** (n - 1 - i), so the
    newest sample has recency weight 1 and older ones fade exponentially.
    """

    def __init__(self, capacity: int = 5, decay: float = 0.8):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.decay = decay
        self._values = deque(maxlen=capacity)
        self._weights = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._values)

    def push(self, value: float, confidence: float) -> float:
        """Add a sample and return the smoothed estimate."""
        self._values.append(float(value))
        self._weights.append(float(confidence))

        n = len(self._values)
        weighted_sum = 0.0
        total_weight = 0.0
        for i, (v, w) in enumerate(zip(self._values, self._weights)):
            weight = w * self.decay ** (n - 1 - i)
            weighted_sum += v * weight
            total_weight += weight
        # All-zero confidence: nothing to trust but the raw value
        if total_weight <= 0:
            return float(value)
        return weighted_sum / total_weight

    def snapshot(self) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
        return tuple(self._values), tuple(self._weights)

    def reset(self) -> None:
        self._values.clear()
        self._weights.clear()
