"""
Geometry Module
Screen-space point type used for node positions, cursor positions and socket centres
"""

import math
import numbers
from typing import Any, NamedTuple

from .errors import InvalidPosition


def _is_coordinate(value: Any) -> bool:
    # bool is a Real subclass but never a coordinate
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and math.isfinite(value))


class Point(NamedTuple):
    """An (x, y) pixel coordinate."""
    x: float
    y: float

    @staticmethod
    def parse(value: Any) -> 'Point':
        """
        Build a Point from a Point, an (x, y) pair or an {'x': .., 'y': ..} mapping.

        Raises:
            InvalidPosition: if the value is missing, malformed or has a non-finite coordinate
        """
        if isinstance(value, (str, bytes, bytearray)):
            raise InvalidPosition(value)
        try:
            if isinstance(value, dict):
                x, y = value['x'], value['y']
            else:
                x, y = value
        except (KeyError, TypeError, ValueError):
            raise InvalidPosition(value) from None
        if not (_is_coordinate(x) and _is_coordinate(y)):
            raise InvalidPosition(value)
        return Point(float(x), float(y))

    def plus(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def minus(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


ZERO = Point(0.0, 0.0)


class Rect(NamedTuple):
    """Axis-aligned bounding box."""
    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, point: Point) -> bool:
        return (self.x <= point.x <= self.x + self.width and
                self.y <= point.y <= self.y + self.height)
