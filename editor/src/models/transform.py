"""Geometry value types shared by every coordinate space of the editor."""
import math
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Layout space (node-local, Y-up)
    - World space (camera input, Y-up)
    - Surface pixels (render surface, Y-up)
    - Workspace pixels (widget, Y-down)
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other):
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor):
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self):
        return Vec2(-self.x, -self.y)

    def length(self):
        return math.hypot(self.x, self.y)

    def copy(self):
        return Vec2(self.x, self.y)

    @classmethod
    def of(cls, value):
        """Coerce a Vec2 or an (x, y) pair into a new Vec2."""
        if isinstance(value, Vec2):
            return Vec2(float(value.x), float(value.y))
        x, y = value
        return cls(float(x), float(y))


@dataclass
class Rect:
    """Axis-aligned rectangle stored as origin + size.

    The origin is the minimum corner, whatever the Y direction of the space
    the rect lives in (top-left for workspace pixels, bottom-left for layout).
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_min_max(cls, x_min, y_min, x_max, y_max):
        return cls(x_min, y_min, x_max - x_min, y_max - y_min)

    @classmethod
    def from_points(cls, points):
        """Bounding rect of an iterable of Vec2 (None if empty)."""
        points = list(points)
        if not points:
            return None
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls.from_min_max(min(xs), min(ys), max(xs), max(ys))

    @property
    def x_min(self):
        return self.x

    @property
    def y_min(self):
        return self.y

    @property
    def x_max(self):
        return self.x + self.width

    @property
    def y_max(self):
        return self.y + self.height

    @property
    def center(self):
        return Vec2(self.x + self.width * 0.5, self.y + self.height * 0.5)

    @property
    def size(self):
        return Vec2(self.width, self.height)

    def contains(self, point):
        """Inclusive min, exclusive max - adjacent rects never share a point."""
        return (self.x <= point.x < self.x + self.width and
                self.y <= point.y < self.y + self.height)

    def is_degenerate(self, epsilon=1e-6):
        return abs(self.width) <= epsilon or abs(self.height) <= epsilon

    def translated(self, offset):
        return Rect(self.x + offset.x, self.y + offset.y, self.width, self.height)

    def corners(self):
        """Corners in bottom-left, top-left, top-right, bottom-right order (Y-up)."""
        return [
            Vec2(self.x_min, self.y_min),
            Vec2(self.x_min, self.y_max),
            Vec2(self.x_max, self.y_max),
            Vec2(self.x_max, self.y_min),
        ]
