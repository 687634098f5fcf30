import dataclasses
import logging
from typing import List, Tuple
from summit.services.hill_climber import (
    SearchResult, find_shortest_path_down, find_shortest_path_up
)
from summit.services.move_rules import TraversalMode
from summit.services.search_config import SearchConfig
from summit.services.surface import HeightmapFormatError, Position, Surface, parse_heightmap

logger = logging.getLogger(__name__)


class HillClimbService:
    """Service for finding the fewest steps across a heightmap"""

    def __init__(self, search_config: SearchConfig = None, debug_mode: bool = False):
        self.debug_mode = debug_mode
        self.search_config = search_config or SearchConfig()

        # Debug runs keep the expansion order so it can be returned to the caller
        if debug_mode and not self.search_config.record_explored:
            self.search_config = dataclasses.replace(self.search_config, record_explored=True)
        logger.info(
            f"HillClimbService initialized with strategy={self.search_config.strategy}, "
            f"debug_mode={debug_mode}"
        )

    def validate_heightmap(self, height_str: str) -> bool:
        """Validate that the heightmap parses into a surface"""
        try:
            Surface(height_str)
        except HeightmapFormatError as e:
            logger.info(f"Rejected heightmap: {e}")
            return False
        return True

    def _search(self, surface: Surface, start: Position, direction: TraversalMode) -> SearchResult:
        if direction == TraversalMode.ASCEND:
            return find_shortest_path_up(surface, start, self.search_config)
        return find_shortest_path_down(surface, self.search_config)

    async def find_route(self, height_str: str,
                         direction: TraversalMode = TraversalMode.ASCEND) -> Tuple[List[Position], dict]:
        """
        Find the fewest-steps route across the heightmap
        Returns: (path_positions, statistics)
        """
        try:
            surface, start = parse_heightmap(height_str)
        except HeightmapFormatError as e:
            logger.error(f"Error finding route: {str(e)}")
            return [], {"error": str(e)}
        return await self.find_route_on(surface, start, direction)

    async def find_route_on(self, surface: Surface, start: Position,
                            direction: TraversalMode = TraversalMode.ASCEND) -> Tuple[List[Position], dict]:
        """Same as find_route, for a heightmap that is already parsed"""
        try:
            result = self._search(surface, start, direction)

            if not result.reachable:
                logger.error(f"No {direction.value} route found")
                error_stats = {"error": "No route found"}
                if self.debug_mode:
                    error_stats["debug_data"] = self._debug_data(result)
                return [], error_stats

            # Elevation totals along the path
            elevation_gain = 0
            elevation_loss = 0
            for previous, current in zip(result.path, result.path[1:]):
                change = surface.elevation_at(current) - surface.elevation_at(previous)
                if change > 0:
                    elevation_gain += change
                else:
                    elevation_loss -= change

            stats = {
                "steps": result.steps,
                "waypoints": len(result.path),
                "elevation_gain": elevation_gain,
                "elevation_loss": elevation_loss,
                "nodes_explored": result.nodes_explored,
                "grid_size": [surface.height, surface.width],
                "strategy": self.search_config.strategy,
                "difficulty": self.describe_steps(result.steps),
            }

            if self.debug_mode:
                stats["debug_data"] = self._debug_data(result)
                logger.info(f"Debug data added to stats: {len(result.explored)} explored nodes")

            return result.path, stats

        except Exception as e:
            logger.error(f"Error finding route: {str(e)}")
            return [], {"error": str(e)}

    def _debug_data(self, result: SearchResult) -> dict:
        return {
            "explored_nodes": [[p.x, p.y] for p in result.explored],
            "nodes_explored": result.nodes_explored,
            "elapsed_seconds": round(result.elapsed, 6),
        }

    def describe_steps(self, steps: int) -> str:
        """Estimate difficulty based on the number of steps"""
        if steps < 50:
            return "easy"
        elif steps < 300:
            return "moderate"
        else:
            return "hard"
