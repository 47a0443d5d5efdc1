"""
Territory Controller

Claims cells for players. The controller only touches the map; keeping
player territory indexes in step is the action layer's job.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Union

from .errors import InvalidCoordinateError, InvariantViolationError
from .types import Coordinate, GameMap, GameState, TerritoryType
from .utils import as_coordinate, coordinate_to_string


@dataclass(frozen=True)
class ClaimResult:
    accepted: bool
    reason: str
    updated_map: Optional[GameMap] = None
    previous_owner: Optional[str] = None


def claim_territory(
    player_id: str,
    coordinate: Union[Coordinate, str],
    game_map: GameMap,
) -> ClaimResult:
    """
    Claim a cell for a player.

    Claiming a cell owned by someone else overwrites the owner; the cell is
    then marked contested and the previous owner is reported. The contested
    mark is permanent: it records that the cell has changed hands, and a
    later reclaim by the original owner keeps it.

    Args:
        player_id: Claiming player's key
        coordinate: Target cell
        game_map: Current board

    Returns:
        ClaimResult with the new map on acceptance
    """
    try:
        coordinate = as_coordinate(coordinate)
    except InvalidCoordinateError:
        return ClaimResult(False, "Invalid coordinate")

    cell = game_map.cell_at(coordinate)
    if cell is None:
        return ClaimResult(False, "Invalid coordinate")
    if cell.type == TerritoryType.WATER:
        return ClaimResult(False, "Cannot claim water territories")
    if cell.owner == player_id:
        return ClaimResult(False, "You already control this territory")

    previous_owner = cell.owner
    claimed = replace(cell, owner=player_id, is_contested=cell.is_contested or previous_owner is not None)
    return ClaimResult(
        True,
        f"Territory claimed: {cell.type.value}",
        game_map.with_cell(claimed),
        previous_owner,
    )


def owned_cells(player_id: str, game_map: GameMap):
    """Cells currently owned by a player."""
    return [cell for cell in game_map.iter_cells() if cell.owner == player_id]


def count_owned_types(player_id: str, controlled: Iterable[str], game_map: GameMap) -> Dict[str, int]:
    """
    Count territory types over a player's index, skipping cells it no longer owns.
    """
    counts: Dict[str, int] = {}
    for key in controlled:
        cell = game_map.cell_at(as_coordinate(key))
        if cell is None or cell.owner != player_id:
            continue
        counts[cell.type.value] = counts.get(cell.type.value, 0) + 1
    return counts


def check_invariants(state: GameState) -> None:
    """
    Verify every player's territory index matches the cell owners.

    Raises:
        InvariantViolationError: On the first mismatch found
    """
    for player in state.players:
        owned = {coordinate_to_string(cell.coordinate) for cell in owned_cells(player.public_key, state.game_map)}
        if owned != set(player.controlled_territories):
            missing = sorted(owned - set(player.controlled_territories))
            stale = sorted(set(player.controlled_territories) - owned)
            raise InvariantViolationError(
                f"Territory index of {player.public_key} out of sync: "
                f"unindexed={missing} stale={stale}"
            )
