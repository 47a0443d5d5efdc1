"""
Movement Resolver

Validates a ship's displacement against its speed and the board, and
applies hazard damage on arrival.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

from ..constants import HAZARD_DAMAGE
from .types import Coordinate, GameMap, Ship
from .utils import calculate_distance


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    reason: str
    updated_ship: Optional[Ship] = None
    damage: int = 0


def resolve_move(ship: Ship, target: Coordinate, game_map: GameMap) -> MoveResult:
    """
    Resolve a move request.

    Args:
        ship: Ship being moved
        target: Destination coordinate
        game_map: Current board

    Returns:
        MoveResult; on acceptance updated_ship is the ship at its new
        position with any hazard damage applied
    """
    if not ship.is_alive:
        return MoveResult(False, "Ship destroyed")
    if target == ship.position:
        return MoveResult(False, "Ship is already at destination")

    distance = calculate_distance(ship.position, target)
    if distance > ship.speed:
        return MoveResult(
            False,
            f"Exceeds speed: ship can only move {ship.speed} cells per turn. Distance: {math.ceil(distance)}",
        )

    cell = game_map.cell_at(target)
    if cell is None:
        return MoveResult(False, "Invalid destination")

    damage = HAZARD_DAMAGE.get(cell.type.value, 0)
    moved = replace(ship, position=target, health=max(0, ship.health - damage))
    if damage:
        return MoveResult(True, f"Ship moved but took {damage} damage from {cell.type.value}!", moved, damage)
    return MoveResult(True, "Ship moved successfully", moved)
