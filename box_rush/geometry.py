"""
Geometry Utilities
===================
Box overlap, distances and boundary checks in canvas pixel space.

Boxes are anchored at their top-left corner and all share the same
side length, so overlap only needs the two corner positions.
"""

from typing import Tuple
import math

from .components import Position
from .errors import DegenerateVectorError


def overlaps(a: Position, b: Position, box_size: float) -> bool:
    """Check whether two equal-sized boxes overlap."""
    return abs(a.x - b.x) < box_size and abs(a.y - b.y) < box_size


def distance(a: Position, b: Position) -> float:
    """Euclidean distance between two positions."""
    return math.hypot(b.x - a.x, b.y - a.y)


def unit_vector(src: Position, dst: Position) -> Tuple[float, float]:
    """
    Normalized direction from src to dst.

    Raises DegenerateVectorError when both points coincide.
    """
    dx = dst.x - src.x
    dy = dst.y - src.y
    dist = math.hypot(dx, dy)
    if dist == 0:
        raise DegenerateVectorError(f'zero-length direction at ({src.x}, {src.y})')
    return dx / dist, dy / dist


def out_of_bounds(x: float, y: float, width: float, height: float,
                  box_size: float) -> bool:
    """True if a box at (x, y) would stick out of the canvas."""
    return x < 0 or x + box_size > width or y < 0 or y + box_size > height


def clamp_inside(x: float, y: float, width: float, height: float,
                 box_size: float, current: Position) -> Tuple[float, float]:
    """
    Resolve a wall hit for the target point (x, y).

    Axes that would leave the canvas are pinned one pixel inside the
    wall; axes that stay inside keep the entity's current coordinate.
    """
    new_x, new_y = current.x, current.y
    if x < 0:
        new_x = 1.0
    elif x + box_size > width:
        new_x = width - box_size - 1
    if y < 0:
        new_y = 1.0
    elif y + box_size > height:
        new_y = height - box_size - 1
    return new_x, new_y
