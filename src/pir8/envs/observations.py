"""
Observation System

Encodes a GameState from one player's perspective as a normalized feature
vector.

Layout:
- Cell features: map_size * map_size * 11 (type one-hot 7, mine, enemy's,
  my ship, enemy ship)
- Player features: 9 (six resources, living ships, turn progress, my turn)

Total observation size: map_size**2 * 11 + 9
"""

from typing import Dict

import numpy as np
from gymnasium import spaces

from ..config import Config
from ..engine.types import GameState, TerritoryType

TERRITORY_ORDER = list(TerritoryType)
CELL_FEATURES = len(TERRITORY_ORDER) + 4
PLAYER_FEATURES = 9

# Soft caps used for normalization
RESOURCE_SCALE: Dict[str, float] = {
    "gold": 20000.0,
    "crew": 1000.0,
    "cannons": 500.0,
    "supplies": 2000.0,
    "wood": 1000.0,
    "rum": 500.0,
}


def observation_size(config: Config) -> int:
    return config.map_size * config.map_size * CELL_FEATURES + PLAYER_FEATURES


def build_observation_space(config: Config) -> spaces.Box:
    """
    Build the observation space.

    Returns:
        Box space with normalized values in [0, 1]
    """
    size = observation_size(config)
    low = np.zeros((size,), dtype=np.float32)
    high = np.ones((size,), dtype=np.float32)
    return spaces.Box(low=low, high=high, dtype=np.float32)


def compute_observation(state: GameState, player_id: str, config: Config) -> np.ndarray:
    """
    Compute the observation for one player.

    Args:
        state: Current game state
        player_id: Player whose perspective is encoded
        config: Environment configuration

    Returns:
        float32 vector with values in [0, 1]
    """
    size = state.game_map.size
    cells = np.zeros((size, size, CELL_FEATURES), dtype=np.float32)

    for cell in state.game_map.iter_cells():
        x, y = cell.coordinate.x, cell.coordinate.y
        cells[x, y, TERRITORY_ORDER.index(cell.type)] = 1.0
        if cell.owner == player_id:
            cells[x, y, len(TERRITORY_ORDER)] = 1.0
        elif cell.owner is not None:
            cells[x, y, len(TERRITORY_ORDER) + 1] = 1.0

    for player in state.players:
        feature = len(TERRITORY_ORDER) + (2 if player.public_key == player_id else 3)
        for ship in player.living_ships:
            cells[ship.position.x, ship.position.y, feature] = 1.0

    player = state.get_player(player_id)
    player_features = np.zeros((PLAYER_FEATURES,), dtype=np.float32)
    if player is not None:
        for index, (name, scale) in enumerate(RESOURCE_SCALE.items()):
            player_features[index] = getattr(player.resources, name) / scale
        player_features[6] = len(player.living_ships) / config.max_ships_per_player
    player_features[7] = state.turn_number / config.max_turns
    current = state.current_player
    player_features[8] = float(current is not None and current.public_key == player_id)

    observation = np.concatenate([cells.reshape(-1), player_features])
    return np.clip(observation, 0.0, 1.0).astype(np.float32)
