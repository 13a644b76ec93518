import math


class Vec2:
    """Small 2D vector used for positions, speeds and forces."""

    __slots__ = ("x", "y")

    def __init__(self, x=0.0, y=0.0):
        self.x = float(x)
        self.y = float(y)

    def __add__(self, other):
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, k):
        return Vec2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k):
        return Vec2(self.x / k, self.y / k)

    def __neg__(self):
        return Vec2(-self.x, -self.y)

    def __eq__(self, other):
        if not isinstance(other, Vec2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Vec2({self.x:.3f}, {self.y:.3f})"

    def copy(self):
        return Vec2(self.x, self.y)

    def length2(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self):
        """Returns the unit vector with the same direction, or a null vector."""
        l = self.length()
        if l == 0.0:
            return Vec2()
        return Vec2(self.x / l, self.y / l)

    def is_null(self) -> bool:
        return self.x == 0.0 and self.y == 0.0
