"""
Victory Evaluator

Terminal detection, winner selection and the composite score used for
tie-break ranking.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..config import Config
from ..constants import (
    DEFAULT_TERRITORY_SCORE,
    ECONOMIC_VALUE_WEIGHTS,
    SCORE_WEIGHTS,
    SHIP_ATTACK_SCORE_WEIGHT,
    TERRITORY_SCORE,
    VALUABLE_TERRITORY_TYPES,
)
from .types import GameMap, Player
from .utils import as_coordinate

# Victory reasons
FLEET_DESTROYED = "fleet_destroyed"
TERRITORY_MAJORITY = "territory_majority"
ECONOMIC_DOMINANCE = "economic_dominance"
TURN_LIMIT = "turn_limit"


@dataclass(frozen=True)
class VictoryResult:
    is_over: bool
    winner: Optional[str] = None
    reason: Optional[str] = None


def territory_score(player: Player, game_map: GameMap) -> int:
    """Points for indexed cells the player still owns."""
    score = 0
    for key in player.controlled_territories:
        cell = game_map.cell_at(as_coordinate(key))
        if cell is None or cell.owner != player.public_key:
            continue
        score += TERRITORY_SCORE.get(cell.type.value, DEFAULT_TERRITORY_SCORE)
    return score


def calculate_player_score(player: Player, game_map: GameMap) -> int:
    """
    Composite score: weighted resources, living fleet strength and territory.
    """
    resources = player.resources
    resource_score = sum(getattr(resources, name) * weight for name, weight in SCORE_WEIGHTS.items())
    fleet_score = sum(
        ship.max_health + ship.attack * SHIP_ATTACK_SCORE_WEIGHT for ship in player.living_ships
    )
    return resource_score + fleet_score + territory_score(player, game_map)


def economic_value(player: Player) -> int:
    resources = player.resources
    return sum(getattr(resources, name) * weight for name, weight in ECONOMIC_VALUE_WEIGHTS.items())


def rank_players(players: Sequence[Player], game_map: GameMap) -> List[Player]:
    """Players by composite score, highest first; ties keep input order."""
    return sorted(players, key=lambda player: -calculate_player_score(player, game_map))


def _valuable_cell_count(game_map: GameMap) -> int:
    return sum(1 for cell in game_map.iter_cells() if cell.type.value in VALUABLE_TERRITORY_TYPES)


def territory_majority_holder(players: Sequence[Player], game_map: GameMap) -> Optional[str]:
    """
    The player owning a strict majority of treasure and port cells, if any.

    With n valuable cells the holder needs n // 2 + 1 of them.
    """
    total = _valuable_cell_count(game_map)
    if total == 0:
        return None
    needed = total // 2 + 1
    counts: Dict[str, int] = {}
    for cell in game_map.iter_cells():
        if cell.owner is not None and cell.type.value in VALUABLE_TERRITORY_TYPES:
            counts[cell.owner] = counts.get(cell.owner, 0) + 1
    for player in players:
        if counts.get(player.public_key, 0) >= needed:
            return player.public_key
    return None


def _survivors(players: Sequence[Player]) -> List[Player]:
    return [player for player in players if player.is_active and player.has_living_ship]


def _score_leader(players: Sequence[Player], game_map: GameMap) -> Optional[str]:
    if not players:
        return None
    return rank_players(players, game_map)[0].public_key


def evaluate_victory(
    players: Sequence[Player],
    game_map: GameMap,
    config: Optional[Config] = None,
    turn_number: int = 0,
) -> VictoryResult:
    """
    Check every terminal condition in order and pick the winner.

    Args:
        players: All players, in turn order
        game_map: Current board
        config: Thresholds (economic victory, turn limit)
        turn_number: Current turn, for the turn limit

    Returns:
        VictoryResult; winner is None for a game with no survivors
    """
    config = config or Config()
    survivors = _survivors(players)

    with_ships = [player for player in players if player.has_living_ship]
    if len(with_ships) <= 1 or len(survivors) <= 1:
        winner = survivors[0].public_key if len(survivors) == 1 else None
        return VictoryResult(True, winner, FLEET_DESTROYED)

    holder = territory_majority_holder(players, game_map)
    if holder is not None:
        return VictoryResult(True, holder, TERRITORY_MAJORITY)

    for player in survivors:
        if economic_value(player) >= config.economic_victory_threshold:
            return VictoryResult(True, player.public_key, ECONOMIC_DOMINANCE)

    if turn_number >= config.max_turns:
        return VictoryResult(True, _score_leader(survivors, game_map), TURN_LIMIT)

    return VictoryResult(False)


def is_game_over(
    players: Sequence[Player],
    game_map: GameMap,
    config: Optional[Config] = None,
    turn_number: int = 0,
) -> bool:
    return evaluate_victory(players, game_map, config, turn_number).is_over


def determine_winner(
    players: Sequence[Player],
    game_map: GameMap,
    config: Optional[Config] = None,
    turn_number: int = 0,
) -> Optional[str]:
    """
    Winner of the game as it stands.

    The sole survivor wins outright; with no survivors there is no winner.
    Otherwise the holder of a fired victory condition wins, falling back to
    the highest composite score.
    """
    survivors = _survivors(players)
    if not survivors:
        return None
    if len(survivors) == 1:
        return survivors[0].public_key

    result = evaluate_victory(players, game_map, config, turn_number)
    if result.is_over and result.winner is not None:
        return result.winner
    return _score_leader(survivors, game_map)
