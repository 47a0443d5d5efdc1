"""
Ship Factory

Creates ships from the static stat templates and seeds starting fleets.
"""

from typing import Dict, List, Sequence, Tuple, Union

from ..constants import MAX_PLAYERS, SHIP_STATS, STARTING_CORNERS
from .types import Coordinate, Ship, ShipType


def create_ship(
    ship_type: Union[ShipType, str],
    owner_id: str,
    position: Coordinate,
    token: int = 1,
) -> Ship:
    """
    Create a full-health ship.

    Args:
        ship_type: Ship class
        owner_id: Owning player's key
        position: Starting coordinate
        token: Per-owner counter that keeps ids unique

    Returns:
        Ship with id "{owner}_{type}_{token}"
    """
    ship_type = ShipType(ship_type)
    stats = SHIP_STATS[ship_type.value]
    return Ship(
        id=f"{owner_id}_{ship_type.value}_{token}",
        type=ship_type,
        owner=owner_id,
        health=stats["health"],
        max_health=stats["health"],
        attack=stats["attack"],
        defense=stats["defense"],
        speed=stats["speed"],
        position=position,
    )


def create_starting_fleet(owner_id: str, positions: Sequence[Coordinate]) -> List[Ship]:
    """
    Seed a sloop at positions[0] and a frigate at positions[1].

    Fewer than two positions yields an empty fleet.
    """
    if len(positions) < 2:
        return []
    return [
        create_ship(ShipType.SLOOP, owner_id, positions[0], token=1),
        create_ship(ShipType.FRIGATE, owner_id, positions[1], token=2),
    ]


def generate_starting_positions(player_count: int, size: int) -> List[Tuple[Coordinate, Coordinate]]:
    """
    Corner deployment positions, one pair per player.

    Args:
        player_count: Number of players (at most four)
        size: Board edge length

    Returns:
        List of (first ship, second ship) coordinates
    """
    if player_count > MAX_PLAYERS:
        raise ValueError(f"At most {MAX_PLAYERS} players have starting corners")

    def resolve(offset: int) -> int:
        value = offset if offset >= 0 else size + offset
        return min(max(value, 0), size - 1)

    positions = []
    for first, second in STARTING_CORNERS[:player_count]:
        positions.append((
            Coordinate(resolve(first[0]), resolve(first[1])),
            Coordinate(resolve(second[0]), resolve(second[1])),
        ))
    return positions


def fleet_summary(ships: Sequence[Ship]) -> Dict[str, int]:
    """Living/destroyed counts and health totals for display."""
    living = [ship for ship in ships if ship.is_alive]
    return {
        "total": len(ships),
        "living": len(living),
        "destroyed": len(ships) - len(living),
        "health": sum(ship.health for ship in living),
        "max_health": sum(ship.max_health for ship in living),
    }
