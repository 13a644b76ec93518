import time
import logging

from .edge import pair_key

logger = logging.getLogger("memview")


class MemoryNetwork:
    """
    Minimal in-process memory network.

    It exposes what the view reads from a producer every tick: the number of
    units, their names, their activation levels and the symmetric weight
    matrix. The learning dynamics of a real network are out of its scope;
    levels and weights are set from outside.
    """

    def __init__(self, names=(), clock=time.monotonic):
        self._names = []
        self._levels = []
        self._weights = {}
        # unit index -> clock time at which its activation is released
        self._releases = {}
        self.clock = clock
        for name in names:
            self.add_unit(name)

    def size(self):
        return len(self._names)

    def units_names(self):
        return list(self._names)

    def activations(self):
        self._release_expired()
        return list(self._levels)

    def has_unit(self, name):
        return name in self._names

    def add_unit(self, name):
        """Adds a unit and returns its index. Units are never removed."""
        if name in self._names:
            return self._names.index(name)
        self._names.append(name)
        self._levels.append(0.0)
        logger.info(f"Added unit '{name}' (#{len(self._names) - 1})")
        return len(self._names) - 1

    def _index(self, unit):
        if isinstance(unit, str):
            try:
                return self._names.index(unit)
            except ValueError:
                raise KeyError(f"Unknown unit '{unit}'") from None
        if not 0 <= unit < len(self._names):
            raise KeyError(f"Unknown unit #{unit}")
        return unit

    def activate_unit(self, unit, level=1.0, duration=None):
        """
        Sets the activation level of a unit, given by name or index.

        Args:
            level (float): New activation level.
            duration (float): Seconds after which the level falls back to 0.
                None keeps the level until the next activation.
        """
        i = self._index(unit)
        self._levels[i] = level
        if duration is None:
            self._releases.pop(i, None)
        else:
            self._releases[i] = self.clock() + duration

    def _release_expired(self):
        if not self._releases:
            return
        now = self.clock()
        for i, deadline in list(self._releases.items()):
            if now >= deadline:
                self._levels[i] = 0.0
                del self._releases[i]

    def set_weight(self, i, j, weight):
        self._weights[pair_key(self._index(i), self._index(j))] = weight

    def weight(self, i, j):
        return self._weights.get(pair_key(i, j), 0.0)
