"""
Map Generator

Builds the NxN board. Cell types follow a banded distribution over the
normalized distance from the board center: treasure and ports cluster in
the middle, islands in the mid ring, hazards toward the rim.
"""

import math

from ..constants import MAP_BANDS, TERRITORY_GENERATION
from .rng import MAP_STREAM, make_rng
from .types import Coordinate, GameMap, TerritoryCell, TerritoryType


def normalized_distance(x: int, y: int, size: int) -> float:
    """Distance from the board center divided by the center-to-corner distance."""
    center = size // 2
    max_distance = math.hypot(center, center)
    if max_distance == 0:
        return 0.0
    return math.hypot(x - center, y - center) / max_distance


def pick_territory_type(distance: float, roll: float) -> TerritoryType:
    """
    Select a cell type from the band containing a normalized distance.

    Args:
        distance: Normalized distance from center
        roll: Uniform sample in [0, 1)

    Returns:
        Territory type chosen by cumulative weight
    """
    for upper, table in MAP_BANDS:
        if distance < upper:
            cumulative = 0.0
            for territory_type, weight in table:
                cumulative += weight
                if roll < cumulative:
                    return TerritoryType(territory_type)
            return TerritoryType(table[-1][0])
    return TerritoryType.WATER


def create_game_map(size: int, seed: int) -> GameMap:
    """
    Generate a board.

    Args:
        size: Board edge length (at least 1)
        seed: Game seed; the same (size, seed) always yields the same map

    Returns:
        GameMap with every cell unowned and uncontested
    """
    if size < 1:
        raise ValueError(f"Map size must be at least 1, got {size}")

    rng = make_rng(seed, MAP_STREAM)
    rolls = rng.random((size, size))

    cells = []
    for x in range(size):
        column = []
        for y in range(size):
            territory_type = pick_territory_type(normalized_distance(x, y, size), float(rolls[x, y]))
            column.append(TerritoryCell(
                coordinate=Coordinate(x, y),
                type=territory_type,
                resources=dict(TERRITORY_GENERATION[territory_type.value]),
            ))
        cells.append(tuple(column))

    return GameMap(size=size, cells=tuple(cells))


def count_territory_types(game_map: GameMap) -> dict:
    """Count cells per territory type."""
    counts = {territory_type.value: 0 for territory_type in TerritoryType}
    for cell in game_map.iter_cells():
        counts[cell.type.value] += 1
    return counts
