"""
Pytest configuration and shared fixtures
"""

import pytest
import sys
import os

# Add backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Import all fixtures from heightmap_fixtures
from tests.fixtures.heightmap_fixtures import (
    canonical_heightmap,
    canonical_surface,
    unreachable_heightmap,
    heightmap_file
)

# Re-export all fixtures
__all__ = [
    'canonical_heightmap',
    'canonical_surface',
    'unreachable_heightmap',
    'heightmap_file'
]
