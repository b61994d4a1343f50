"""Fixed-capacity sliding window of recent durations."""

from collections import deque

import numpy as np


class BoundedHistory:
    """Keeps the most recent ``capacity`` samples; the oldest is evicted first.

    Example:
        >>> history = BoundedHistory(capacity=2)
        >>> for value in (10.0, 20.0, 30.0):
        ...     history.append(value)
        >>> list(history)
        [20.0, 30.0]
    """

    def __init__(self, capacity: int = 200) -> None:
        if capacity <= 0:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._samples: deque[float] = deque(maxlen=capacity)

    def append(self, value: float) -> None:
        self._samples.append(float(value))

    def mean(self, default: float) -> float:
        """Average of the retained samples, or ``default`` when empty."""
        if not self._samples:
            return default
        return float(np.mean(self._samples))

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)
