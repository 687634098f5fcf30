"""
Move legality for climbing the heightmap.

Ascending, a step may climb at most `max_climb` levels and drop any amount.
Descending mirrors that relation so a search can run backwards from the
best signal.
"""

from enum import Enum
from typing import List, Tuple
from summit.services.surface import Position, Surface

DEFAULT_MAX_CLIMB = 1


class TraversalMode(str, Enum):
    ASCEND = "ascend"
    DESCEND = "descend"


class Move(Enum):
    """Single grid step as (dx, dy)"""
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


def is_legal_move(current_elevation: int, neighbor_elevation: int,
                  mode: TraversalMode, max_climb: int = DEFAULT_MAX_CLIMB) -> bool:
    """Check whether stepping from current to neighbor is allowed in `mode`"""
    if mode == TraversalMode.ASCEND:
        return neighbor_elevation <= current_elevation + max_climb
    if mode == TraversalMode.DESCEND:
        return neighbor_elevation >= current_elevation - max_climb
    raise ValueError(f"Unknown traversal mode: {mode}")


def legal_moves(surface: Surface, position: Position, mode: TraversalMode,
                max_climb: int = DEFAULT_MAX_CLIMB) -> List[Tuple[Position, int]]:
    """
    Neighbors of `position` reachable in one step, paired with their elevation.

    Ordered highest elevation first; ties keep LEFT, RIGHT, UP, DOWN order.
    """
    current_elevation = surface.elevation_at(position)
    moves = []
    for move in Move:
        neighbor = position.offset(move.dx, move.dy)
        if not surface.contains(neighbor):
            continue
        neighbor_elevation = surface.elevation_at(neighbor)
        if is_legal_move(current_elevation, neighbor_elevation, mode, max_climb):
            moves.append((neighbor, neighbor_elevation))

    moves.sort(key=lambda move: move[1], reverse=True)
    return moves
