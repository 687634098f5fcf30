"""
Heightmap surface model.

Parses the puzzle heightmap text into an elevation grid and locates the
start ('S') and best signal ('E') markers.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple
import numpy as np


START_MARKER = 'S'
TARGET_MARKER = 'E'

LOWEST_LETTER = 'a'
HIGHEST_LETTER = 'z'

# Elevations are stored as ranks: 'a' -> 0 ... 'z' -> 25
LOWEST_ELEVATION = 0
HIGHEST_ELEVATION = ord(HIGHEST_LETTER) - ord(LOWEST_LETTER)


class HeightmapFormatError(ValueError):
    """Raised when heightmap text cannot be turned into a surface"""


@dataclass(frozen=True)
class Position:
    """Grid cell addressed by column (x) and row (y), both 0-indexed"""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> 'Position':
        return Position(self.x + dx, self.y + dy)

    @property
    def index(self):
        """numpy (row, col) index for this position"""
        return self.y, self.x


def elevation_of(character: str) -> int:
    """Convert a heightmap character to its elevation rank"""
    if character == START_MARKER:
        character = LOWEST_LETTER
    elif character == TARGET_MARKER:
        character = HIGHEST_LETTER
    elif not (LOWEST_LETTER <= character <= HIGHEST_LETTER):
        raise HeightmapFormatError(f"Invalid character {character!r}")
    return ord(character) - ord(LOWEST_LETTER)


def _split_rows(height_str: str) -> List[str]:
    """Split heightmap text into rows and check that the grid is rectangular"""
    # Only "\n" separates rows; other Unicode line breaks are invalid characters
    rows = [row[:-1] if row.endswith("\r") else row for row in height_str.split("\n")]
    # Trailing blank lines are tolerated, anything else blank is a ragged row
    while rows and not rows[-1]:
        rows.pop()

    if not rows:
        raise HeightmapFormatError("Heightmap is empty")

    width = len(rows[0])
    for row_number, row in enumerate(rows):
        if len(row) != width:
            raise HeightmapFormatError(
                f"Row {row_number} has length {len(row)}, expected {width}"
            )
    return rows


def _find_marker(rows: List[str], marker: str) -> Position:
    """Locate the single cell holding `marker`"""
    found = [
        Position(x, y)
        for y, row in enumerate(rows)
        for x, character in enumerate(row)
        if character == marker
    ]
    if not found:
        raise HeightmapFormatError(f"No {marker!r} marker in heightmap")
    if len(found) > 1:
        raise HeightmapFormatError(
            f"Expected exactly one {marker!r} marker, found {len(found)}"
        )
    return found[0]


def _parse_heights(rows: List[str]) -> np.ndarray:
    heights = np.zeros((len(rows), len(rows[0])), dtype=np.uint8)
    for y, row in enumerate(rows):
        for x, character in enumerate(row):
            try:
                heights[y, x] = elevation_of(character)
            except HeightmapFormatError:
                raise HeightmapFormatError(
                    f"Invalid character {character!r} at row {y}, column {x}"
                ) from None
    return heights


class Surface:
    """Rectangular elevation grid with the position of the best signal"""

    def __init__(self, height_str: str):
        """
        Creates a surface with the heights and highest point in the passed string.

        Raises HeightmapFormatError for unknown characters, ragged rows, or a
        missing/duplicated start or target marker.
        """
        self._load(_split_rows(height_str))

    @classmethod
    def from_rows(cls, rows: List[str]) -> 'Surface':
        """Build a surface from rows already checked by _split_rows"""
        surface = cls.__new__(cls)
        surface._load(rows)
        return surface

    def _load(self, rows: List[str]):
        heights = _parse_heights(rows)
        # The start marker is not stored, but a surface without one is malformed
        _find_marker(rows, START_MARKER)

        self.best_signal = _find_marker(rows, TARGET_MARKER)
        heights.setflags(write=False)
        self.heights = heights

    @property
    def width(self) -> int:
        return self.heights.shape[1]

    @property
    def height(self) -> int:
        return self.heights.shape[0]

    @property
    def shape(self):
        return self.heights.shape

    def contains(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def elevation_at(self, position: Position) -> int:
        if not self.contains(position):
            raise IndexError(f"{position} is outside the {self.width}x{self.height} surface")
        return int(self.heights[position.y, position.x])

    def letter_at(self, position: Position) -> str:
        return chr(ord(LOWEST_LETTER) + self.elevation_at(position))

    def positions(self) -> Iterator[Position]:
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    def lowest_cells(self) -> List[Position]:
        rows, cols = np.nonzero(self.heights == LOWEST_ELEVATION)
        return [Position(int(x), int(y)) for y, x in zip(rows, cols)]

    def __eq__(self, other):
        if isinstance(other, Surface):
            return (
                self.best_signal == other.best_signal and
                np.array_equal(self.heights, other.heights)
            )
        return False

    def __hash__(self):
        return hash((self.best_signal, self.heights.tobytes(), self.heights.shape))

    def __repr__(self):
        return f"Surface(width={self.width}, height={self.height}, best_signal={self.best_signal})"


def start_position(height_str: str) -> Position:
    """Position of the start marker; the text must describe a valid surface"""
    rows = _split_rows(height_str)
    _parse_heights(rows)
    _find_marker(rows, TARGET_MARKER)
    return _find_marker(rows, START_MARKER)


def parse_heightmap(height_str: str) -> Tuple[Surface, Position]:
    """Parse the text once, returning the surface and the start position"""
    rows = _split_rows(height_str)
    surface = Surface.from_rows(rows)
    return surface, _find_marker(rows, START_MARKER)
