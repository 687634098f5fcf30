"""
Shortest-path search over a heightmap surface.

Two engines share the same contract (fewest steps from a start cell to any
cell satisfying a goal predicate):

1. breadth_first_search - queue-based BFS with a per-cell distance map
2. branch_and_bound_search - depth-first exploration, tallest neighbor
   first, pruned by the distance map and the best length found so far

Both report UNREACHABLE when no cell satisfies the goal.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple
import numpy as np

from summit.services.goals import GoalPredicate, reached_best_signal, reached_lowest_elevation
from summit.services.move_rules import TraversalMode, legal_moves
from summit.services.search_config import BRANCH_AND_BOUND, BREADTH_FIRST, SearchConfig
from summit.services.surface import Position, Surface, parse_heightmap

logger = logging.getLogger(__name__)

UNREACHABLE = int(np.iinfo(np.int64).max)


class SearchLimitExceeded(RuntimeError):
    """Raised when a search expands more cells than its configuration allows"""


@dataclass
class SearchResult:
    steps: int
    path: List[Position] = field(default_factory=list)
    nodes_explored: int = 0
    explored: List[Position] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def reachable(self) -> bool:
        return self.steps != UNREACHABLE


@dataclass(frozen=True, eq=False)
class SearchState:
    """
    One branch of the depth-first search: where we are and how we got here.

    The history is a parent chain, so siblings share their common prefix
    and a step costs O(1) instead of copying the path.
    """
    position: Position
    length: int = 0
    parent: Optional['SearchState'] = None

    def step(self, neighbor: Position) -> 'SearchState':
        return SearchState(position=neighbor, length=self.length + 1, parent=self)

    def _ancestors(self) -> Iterator[Position]:
        node = self.parent
        while node is not None:
            yield node.position
            node = node.parent

    @property
    def visited(self) -> FrozenSet[Position]:
        return frozenset(self._ancestors())

    @property
    def path(self) -> Tuple[Position, ...]:
        return tuple(reversed(list(self._ancestors())))

    def trail(self) -> List[Position]:
        """Every position from the start to this one, inclusive"""
        return list(self.path) + [self.position]


def new_distance_map(surface: Surface) -> np.ndarray:
    """Per-cell best known path length, starting at UNREACHABLE everywhere"""
    return np.full(surface.shape, UNREACHABLE, dtype=np.int64)


def reconstruct_path(came_from: Dict[Position, Position], current: Position) -> List[Position]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def _check_limit(nodes_explored: int, config: SearchConfig):
    if nodes_explored > config.max_iterations:
        raise SearchLimitExceeded(
            f"Search expanded more than {config.max_iterations} cells"
        )


def breadth_first_search(surface: Surface, start: Position, mode: TraversalMode,
                         goal: GoalPredicate, config: Optional[SearchConfig] = None) -> SearchResult:
    """
    Breadth-first search from `start` until `goal` holds.

    Cells leave the queue in order of distance, so the first one satisfying
    the goal is a nearest one.
    """
    if config is None:
        config = SearchConfig()

    start_time = time.time()
    distances = new_distance_map(surface)
    distances[start.index] = 0
    came_from = {}
    queue = deque([start])

    nodes_explored = 0
    explored = []

    while queue:
        current = queue.popleft()
        nodes_explored += 1
        _check_limit(nodes_explored, config)

        if config.record_explored:
            explored.append(current)

        if goal(current, surface):
            steps = int(distances[current.index])
            logger.debug(f"BFS reached goal {current} in {steps} steps, {nodes_explored} cells expanded")
            return SearchResult(
                steps=steps,
                path=reconstruct_path(came_from, current),
                nodes_explored=nodes_explored,
                explored=explored,
                elapsed=time.time() - start_time,
            )

        next_distance = distances[current.index] + 1
        for neighbor, _ in legal_moves(surface, current, mode, config.max_climb):
            if next_distance < distances[neighbor.index]:
                distances[neighbor.index] = next_distance
                came_from[neighbor] = current
                queue.append(neighbor)

    logger.debug(f"BFS found no goal from {start} after {nodes_explored} cells")
    return SearchResult(
        steps=UNREACHABLE,
        nodes_explored=nodes_explored,
        explored=explored,
        elapsed=time.time() - start_time,
    )


def branch_and_bound_search(surface: Surface, start: Position, mode: TraversalMode,
                            goal: GoalPredicate, config: Optional[SearchConfig] = None) -> SearchResult:
    """
    Depth-first search with branch-and-bound pruning.

    The distance map is updated when a neighbor is pushed, and a neighbor is
    only pushed when it improves on the recorded length. That keeps dominated
    branches off the stack and also keeps a branch from stepping back onto
    its own path, since every cell on it is recorded at a shorter length.

    A branch is abandoned when it:
    - was superseded by a shorter route pushed after it
    - cannot beat the best complete path found so far

    Uses an explicit stack, so the grid size is not limited by recursion depth.
    """
    if config is None:
        config = SearchConfig()

    start_time = time.time()
    distances = new_distance_map(surface)
    distances[start.index] = 0
    best = UNREACHABLE
    best_state = None
    stack = [SearchState(start)]

    nodes_explored = 0
    explored = []

    if goal(start, surface):
        best = 0
        best_state = stack.pop()

    while stack:
        state = stack.pop()
        position = state.position
        length = state.length

        if distances[position.index] < length:
            continue

        # A goal beyond this cell would be at least length + 1 steps away
        if length >= best - 1:
            continue

        nodes_explored += 1
        _check_limit(nodes_explored, config)

        if config.record_explored:
            explored.append(position)

        next_length = length + 1
        # Reversed so the tallest neighbor is popped first
        for neighbor, _ in reversed(legal_moves(surface, position, mode, config.max_climb)):
            if distances[neighbor.index] <= next_length:
                continue
            distances[neighbor.index] = next_length

            if goal(neighbor, surface):
                if next_length < best:
                    best = next_length
                    best_state = state.step(neighbor)
                    logger.debug(f"Branch and bound tightened best to {best}")
                continue

            stack.append(state.step(neighbor))

    logger.debug(f"Branch and bound finished with best={best}, {nodes_explored} cells expanded")
    return SearchResult(
        steps=best,
        path=best_state.trail() if best_state is not None else [],
        nodes_explored=nodes_explored,
        explored=explored,
        elapsed=time.time() - start_time,
    )


SEARCH_ENGINES = {
    BREADTH_FIRST: breadth_first_search,
    BRANCH_AND_BOUND: branch_and_bound_search,
}


def run_search(surface: Surface, start: Position, mode: TraversalMode,
               goal: GoalPredicate, config: Optional[SearchConfig] = None) -> SearchResult:
    """Run the engine selected by `config.strategy`"""
    if config is None:
        config = SearchConfig()
    if not surface.contains(start):
        raise ValueError(f"Start {start} is outside the surface")
    engine = SEARCH_ENGINES[config.strategy]
    return engine(surface, start, mode, goal, config)


def find_shortest_path_up(surface: Surface, start: Position,
                          config: Optional[SearchConfig] = None) -> SearchResult:
    """Fewest steps climbing from `start` to the best signal"""
    return run_search(surface, start, TraversalMode.ASCEND, reached_best_signal, config)


def find_shortest_path_down(surface: Surface, config: Optional[SearchConfig] = None) -> SearchResult:
    """Fewest steps between the best signal and any cell at the lowest elevation

    Runs backwards from the best signal, so the returned path starts at 'E'.
    """
    return run_search(surface, surface.best_signal, TraversalMode.DESCEND,
                      reached_lowest_elevation, config)


def shortest_path_up(height_str: str, config: Optional[SearchConfig] = None) -> int:
    """Finds the shortest path to the top and returns its length"""
    surface, start = parse_heightmap(height_str)
    return find_shortest_path_up(surface, start, config).steps


def shortest_path_down(height_str: str, config: Optional[SearchConfig] = None) -> int:
    """Finds the shortest path from any lowest cell to the top and returns its length"""
    surface, _ = parse_heightmap(height_str)
    return find_shortest_path_down(surface, config).steps
