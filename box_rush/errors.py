"""
Error Types
============
Exceptions raised by the simulation core.
"""


class BoxRushError(Exception):
    """Base class for all game errors."""


class PlacementError(BoxRushError):
    """No spawn point far enough from the excluded point was found."""

    def __init__(self, width: float, height: float, exclude_x: float,
                 exclude_y: float, attempts: int):
        self.width = width
        self.height = height
        self.exclude_x = exclude_x
        self.exclude_y = exclude_y
        self.attempts = attempts
        super().__init__(
            f'no spawn position in {width}x{height} at least '
            f'{min(width, height) / 2:.1f}px from ({exclude_x:.1f}, {exclude_y:.1f}) '
            f'after {attempts} attempts'
        )


class DegenerateVectorError(BoxRushError, ValueError):
    """Direction requested between two identical points."""
