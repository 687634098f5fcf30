"""
Termination conditions for heightmap searches.
"""

from typing import Callable
from summit.services.surface import LOWEST_ELEVATION, Position, Surface

GoalPredicate = Callable[[Position, Surface], bool]


def reached_best_signal(position: Position, surface: Surface) -> bool:
    """True on the cell marked 'E'"""
    return position == surface.best_signal


def reached_lowest_elevation(position: Position, surface: Surface) -> bool:
    """True on any cell at elevation 'a' (including the start marker)"""
    return surface.elevation_at(position) == LOWEST_ELEVATION
