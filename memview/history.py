from collections import deque
from typing import Dict, List, Sequence

HISTORY_SAMPLING_RATE = 500  # Hz
HISTORY_LENGTH = 1000  # samples


class ActivityHistory:
    """Keeps the recent activation levels of every unit, for activity plots."""

    def __init__(self, sampling_rate=HISTORY_SAMPLING_RATE, length=HISTORY_LENGTH):
        self.period = 1.0 / sampling_rate
        self.length = length
        self.logs: Dict[int, deque] = {}
        self.last_sample = None

    def record(self, t: float, levels: Sequence[float]) -> bool:
        """Stores `levels` if a sampling period elapsed since the last sample.

        Returns True if a sample was stored.
        """
        if self.last_sample is not None and t - self.last_sample < self.period:
            return False

        self.last_sample = t
        for i, level in enumerate(levels):
            if i not in self.logs:
                self.logs[i] = deque(maxlen=self.length)
            self.logs[i].append(level)
        return True

    def get(self, unit: int) -> List[float]:
        return list(self.logs.get(unit, ()))
