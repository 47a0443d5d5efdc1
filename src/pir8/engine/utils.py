"""
Grid utility functions for the PIR8 engine.
"""

import math
import re
from typing import List, Union

from ..constants import ADJACENCY_DISTANCE
from .errors import InvalidCoordinateError
from .types import Coordinate

# Canonical "x,y": ASCII digits, no sign, padding or leading zeros
COORDINATE_PATTERN = re.compile(r"(0|[1-9][0-9]*),(0|[1-9][0-9]*)")


def coordinate_to_string(coordinate: Coordinate) -> str:
    """
    Convert a coordinate to its canonical "x,y" string.

    Args:
        coordinate: Grid coordinate

    Returns:
        String such as "3,7"
    """
    return f"{coordinate.x},{coordinate.y}"


def string_to_coordinate(value: str) -> Coordinate:
    """
    Parse an "x,y" string into a coordinate.

    Args:
        value: String in "x,y" form

    Returns:
        Parsed coordinate

    Raises:
        InvalidCoordinateError: If the string is not two comma-separated integers
    """
    match = COORDINATE_PATTERN.fullmatch(str(value))
    if match is None:
        raise InvalidCoordinateError(f'Invalid coordinate format. Expected format: "x,y", got {value!r}')
    return Coordinate(int(match.group(1)), int(match.group(2)))


def as_coordinate(value: Union[Coordinate, str]) -> Coordinate:
    """Accept either a coordinate or its string form."""
    if isinstance(value, Coordinate):
        return value
    return string_to_coordinate(value)


def calculate_distance(a: Coordinate, b: Coordinate) -> float:
    """Euclidean distance between two coordinates."""
    return math.hypot(a.x - b.x, a.y - b.y)


def are_adjacent(a: Coordinate, b: Coordinate) -> bool:
    """True for the 8-neighbourhood (diagonals included)."""
    return calculate_distance(a, b) <= ADJACENCY_DISTANCE


def is_in_bounds(coordinate: Coordinate, size: int) -> bool:
    return 0 <= coordinate.x < size and 0 <= coordinate.y < size


def neighbours(coordinate: Coordinate, size: int) -> List[Coordinate]:
    """In-bounds 8-neighbourhood of a coordinate, in row-major order."""
    result = []
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            candidate = Coordinate(coordinate.x + dx, coordinate.y + dy)
            if is_in_bounds(candidate, size):
                result.append(candidate)
    return result


def grid_index_to_coordinate(index: int, size: int) -> Coordinate:
    """Convert a flat row-major grid index to a coordinate."""
    return Coordinate(index // size, index % size)


def coordinate_to_grid_index(coordinate: Coordinate, size: int) -> int:
    return coordinate.x * size + coordinate.y
