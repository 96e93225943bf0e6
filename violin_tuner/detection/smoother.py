import logging
from collections import deque
from typing import ClassVar, Deque

logger = logging.getLogger(__name__)


class SmoothingState:
    """
    Rolling history of raw frequency estimates for a stable display.

    Three or more values are reduced with a median, which rejects single
    outliers such as octave errors; one or two values are averaged. The
    owner must call clear() when the signal drops out so that a new note
    starts from an empty history.
    """

    DEFAULT_CAPACITY: ClassVar[int] = 5

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Smoothing capacity must be at least 1, got {capacity}")
        self._capacity = int(capacity)
        self._history: Deque[float] = deque(maxlen=self._capacity)

    def add(self, frequency: float) -> float:
        """Adds a new raw frequency and returns the smoothed frequency."""
        self._history.append(float(frequency))
        smoothed = self.value
        logger.debug(
            f"Smoothed {frequency:.2f}Hz -> {smoothed:.2f}Hz "
            f"({len(self._history)}/{self._capacity} samples)"
        )
        return smoothed

    @property
    def value(self) -> float:
        """The current smoothed frequency, or 0.0 if the history is empty."""
        if not self._history:
            return 0.0
        if len(self._history) >= 3:
            return sorted(self._history)[len(self._history) // 2]
        return sum(self._history) / len(self._history)

    def clear(self) -> None:
        """Forget all history."""
        if self._history:
            logger.debug(f"Clearing {len(self._history)} smoothing samples")
        self._history.clear()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def history(self) -> tuple:
        """Retained frequencies, oldest first."""
        return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)
