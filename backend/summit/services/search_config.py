"""
Search configuration for the hill climber.
Selects the search strategy and the limits it runs under.
"""

from dataclasses import dataclass
from summit.services.move_rules import DEFAULT_MAX_CLIMB

BREADTH_FIRST = "breadth_first"
BRANCH_AND_BOUND = "branch_and_bound"

STRATEGIES = (BREADTH_FIRST, BRANCH_AND_BOUND)


@dataclass
class SearchConfig:
    """Configuration for a single heightmap search"""

    # Which engine to run: breadth_first or branch_and_bound
    strategy: str = BREADTH_FIRST

    # Highest climb allowed in one step (descent is unlimited)
    max_climb: int = DEFAULT_MAX_CLIMB

    # Cap on expanded cells before the search gives up
    max_iterations: int = 10000000

    # Keep the order cells were expanded in, for debugging
    record_explored: bool = False

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown search strategy {self.strategy!r}, expected one of {', '.join(STRATEGIES)}"
            )
        if self.max_climb < 0:
            raise ValueError("max_climb must be non-negative")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")


class SearchPresets:
    """Preset search configurations"""

    @staticmethod
    def default() -> SearchConfig:
        """Breadth-first search, the fastest option for puzzle-sized maps"""
        return SearchConfig()

    @staticmethod
    def exhaustive() -> SearchConfig:
        """Depth-first branch and bound, exploring tall neighbors first"""
        return SearchConfig(strategy=BRANCH_AND_BOUND)

    @staticmethod
    def debug() -> SearchConfig:
        return SearchConfig(record_explored=True)
