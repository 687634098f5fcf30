#!/usr/bin/env python3
"""
Command-line tool for finding the fewest steps across a heightmap.

Usage:
    # Using local libraries (default):
    python climb_cli.py input.txt

    # Both directions, showing the path:
    python climb_cli.py --direction both --show-path input.txt

    # Using API service:
    python climb_cli.py --api --api-url http://localhost:9001 input.txt
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import time
import argparse
import requests

from summit.services.hill_climber import (
    UNREACHABLE, SearchLimitExceeded, find_shortest_path_down, find_shortest_path_up
)
from summit.services.search_config import BREADTH_FIRST, STRATEGIES, SearchConfig
from summit.services.surface import HeightmapFormatError, parse_heightmap

DIRECTIONS = {
    "up": "ascend",
    "down": "descend",
}

MESSAGES = {
    "up": "The shortest path is {steps} steps long",
    "down": "The shortest hike from the lowest ground is {steps} steps long",
}


class TimedStep:
    """Context manager for timing individual steps"""
    def __init__(self, description, quiet=False):
        self.description = description
        self.quiet = quiet
        self.start_time = None

    def __enter__(self):
        if not self.quiet:
            print(f"\n📍 {self.description}...")
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if self.quiet:
            return
        if exc_type is None:
            print(f"   ✓ Completed in {format_time(duration)}")
        else:
            print(f"   ✗ Failed after {format_time(duration)}")


def format_time(seconds):
    """Format time in human-readable way"""
    if seconds < 1:
        return f"{seconds*1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds / 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def format_result(direction, steps):
    """Human-readable answer for one direction"""
    if steps is None or steps == UNREACHABLE:
        return f"No {direction} path exists on this heightmap"
    return MESSAGES[direction].format(steps=steps)


def read_heightmap(file_path):
    with open(file_path, 'r') as f:
        return f.read()


def climb_locally(height_str, direction, strategy=BREADTH_FIRST, max_iterations=None):
    """Run the search in-process. Returns (steps, path)"""
    config = SearchConfig(strategy=strategy)
    if max_iterations is not None:
        config = SearchConfig(strategy=strategy, max_iterations=max_iterations)
    surface, start = parse_heightmap(height_str)
    if direction == "up":
        result = find_shortest_path_up(surface, start, config)
    else:
        result = find_shortest_path_down(surface, config)
    return result.steps, [(p.x, p.y) for p in result.path]


def climb_via_api(height_str, direction, strategy=None, api_url="http://localhost:9001"):
    """Run the search through the API service. Returns (steps, path) or None"""
    payload = {
        "heightmap": height_str,
        "direction": DIRECTIONS[direction],
    }
    if strategy is not None:
        payload["strategy"] = strategy

    try:
        response = requests.post(
            f"{api_url}/api/climbs/calculate",
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=30
        )
    except requests.exceptions.ConnectionError:
        print(f"   ✗ Cannot connect to API at {api_url}")
        return None
    except requests.exceptions.Timeout:
        print(f"   ✗ API request timed out - server may not be running at {api_url}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"   ✗ API request failed: {e}")
        return None

    if response.status_code == 422:
        raise HeightmapFormatError(response.json().get("detail", "Invalid heightmap"))
    try:
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        print(f"   ✗ API request failed: {e}")
        return None

    result = response.json()
    if result["status"] != "completed":
        return UNREACHABLE, []
    return result["steps"], [(p["x"], p["y"]) for p in result["path"]]


def main(argv=None):
    """Main CLI function"""

    parser = argparse.ArgumentParser(
        description='Find the fewest steps across a heightmap using local libraries or API service',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python climb_cli.py input.txt
  python climb_cli.py --direction both input.txt
  python climb_cli.py --api --api-url http://myserver:9001 input.txt
        '''
    )

    parser.add_argument('map_file', help='Heightmap text file')
    parser.add_argument('--direction', choices=['up', 'down', 'both'], default='up',
                        help='up: S to E, down: E to the nearest a (default: up)')
    parser.add_argument('--strategy', choices=STRATEGIES, default=None,
                        help=f'Search strategy (default: {BREADTH_FIRST})')
    parser.add_argument('--max-iterations', type=int, default=None,
                        help='Give up after expanding this many cells')
    parser.add_argument('--show-path', action='store_true', help='Print every cell on the path')
    parser.add_argument('--verbose', action='store_true', help='Print timing for each step')
    parser.add_argument('--api', action='store_true', help='Use API service instead of local libraries')
    parser.add_argument('--api-url', default='http://localhost:9001', help='API service URL (default: http://localhost:9001)')

    args = parser.parse_args(argv)
    if args.max_iterations is not None and args.max_iterations <= 0:
        parser.error("--max-iterations must be positive")
    quiet = not args.verbose

    with TimedStep("Reading heightmap", quiet=quiet):
        try:
            height_str = read_heightmap(args.map_file)
        except OSError as e:
            print(f"❌ Should have been able to read {args.map_file}: {e}")
            return 1

    directions = ['up', 'down'] if args.direction == 'both' else [args.direction]

    for direction in directions:
        with TimedStep(f"Searching {direction}", quiet=quiet):
            try:
                if args.api:
                    outcome = climb_via_api(height_str, direction, args.strategy, args.api_url)
                    if outcome is None:
                        return 1
                else:
                    outcome = climb_locally(height_str, direction, args.strategy or BREADTH_FIRST,
                                            args.max_iterations)
            except HeightmapFormatError as e:
                print(f"❌ Invalid heightmap: {e}")
                return 1
            except SearchLimitExceeded as e:
                print(f"❌ Search gave up: {e}")
                return 1

        steps, path = outcome
        print(format_result(direction, steps))
        if args.show_path and path:
            print("   " + " -> ".join(f"({x},{y})" for x, y in path))

    return 0


if __name__ == "__main__":
    sys.exit(main())
