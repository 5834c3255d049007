"""
Rectangle helpers for page fitting.

All rectangles are axis-aligned and use half-open containment,
so a point lying on a shared edge belongs to exactly one of two
adjacent rectangles.
"""

from typing import Iterable, Sequence

from .errors import ErrorKind, PageFitError
from .types import Coordinate, Rect


def bounds(points: Sequence[Coordinate]) -> Rect:
    """
    Compute the bounding box of a set of points.

    Collinear or coincident points give a zero width and/or height.

    Args:
        points: Points to bound

    Returns:
        Rect spanning (min_x, min_y) to (max_x, max_y)

    Raises:
        PageFitError: If points is empty
    """
    if not points:
        raise PageFitError(ErrorKind.INVALID_INPUT, "cannot bound an empty point set", "points")

    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)

    return Rect(min_x, min_y, max_x - min_x, max_y - min_y)


def rect_centre(rect: Rect) -> Coordinate:
    """Centre point of a rectangle."""
    return rect.centre()


def rect_from_centre(centre: Coordinate, width: float, height: float) -> Rect:
    """
    Create a rectangle of the given size centred on a point.

    Args:
        centre: Centre of the rectangle
        width: Horizontal extent
        height: Vertical extent

    Returns:
        Rect whose lower-left corner is (centre.x - width/2, centre.y - height/2)
    """
    return Rect(centre.x - width / 2.0, centre.y - height / 2.0, width, height)


def contains(rect: Rect, point: Coordinate) -> bool:
    """Check whether point lies in rect, [x, x+w) by [y, y+h)."""
    return rect.contains(point)


def count_contained(rect: Rect, points: Iterable[Coordinate]) -> int:
    """Number of points lying in rect."""
    return sum(1 for p in points if rect.contains(p))
