"""
Action System

Translates the flat gymnasium action dictionaries produced by agents into
engine action descriptors.

Action types supported:
- 0 End turn (no-op)
- 1 Move: ship_index sails to target_cell
- 2 Attack: ship_index fires on target_ship
- 3 Claim: claim the cell ship_index sits on
- 4 Collect: bank territory income
- 5 Build: commission ship_type at target_cell
"""

from typing import Dict, List, Optional

from gymnasium import spaces

from ..config import Config
from ..engine import actions as engine_actions
from ..engine.types import Action, GameState, Ship, ShipType
from ..engine.utils import coordinate_to_grid_index, grid_index_to_coordinate

END_TURN, MOVE, ATTACK, CLAIM, COLLECT, BUILD = range(6)
NUM_ACTION_TYPES = 6

ACTION_TYPE_KINDS = {
    END_TURN: engine_actions.END_TURN,
    MOVE: engine_actions.MOVE,
    ATTACK: engine_actions.ATTACK,
    CLAIM: engine_actions.CLAIM,
    COLLECT: engine_actions.COLLECT,
    BUILD: engine_actions.BUILD,
}

SHIP_TYPE_ORDER = [ShipType.SLOOP, ShipType.FRIGATE, ShipType.GALLEON, ShipType.FLAGSHIP]


def build_action_space(config: Config) -> spaces.Dict:
    """Action space shared by every player."""
    return spaces.Dict({
        "action_type": spaces.Discrete(NUM_ACTION_TYPES),
        "ship_index": spaces.Discrete(config.max_ships_per_player),
        "target_cell": spaces.Discrete(config.map_size * config.map_size),
        "target_ship": spaces.Discrete(config.max_players * config.max_ships_per_player),
        "ship_type": spaces.Discrete(len(SHIP_TYPE_ORDER)),
    })


def noop_action() -> Dict[str, int]:
    return {"action_type": END_TURN, "ship_index": 0, "target_cell": 0, "target_ship": 0, "ship_type": 0}


def own_ships(state: GameState, player_id: str) -> List[Ship]:
    """Living ships of a player, indexed the way ship_index addresses them."""
    player = state.get_player(player_id)
    return list(player.living_ships) if player is not None else []


def enemy_ships(state: GameState, player_id: str) -> List[Ship]:
    """Living enemy ships in player order, indexed the way target_ship addresses them."""
    return [
        ship
        for player in state.players if player.public_key != player_id
        for ship in player.living_ships
    ]


def decode_action(action: Dict, state: GameState, player_id: str, config: Config) -> Optional[Action]:
    """
    Convert an action dictionary into an engine action.

    Args:
        action: Dictionary sampled from the action space
        state: Current game state
        player_id: Acting player
        config: Environment configuration

    Returns:
        Engine Action, or None when the indexes do not resolve
    """
    action_type = int(action["action_type"])
    kind = ACTION_TYPE_KINDS.get(action_type)
    if kind is None:
        return None

    if action_type in (END_TURN, COLLECT):
        return Action(kind=kind, player=player_id)

    if action_type == BUILD:
        return Action(
            kind=kind,
            player=player_id,
            target=grid_index_to_coordinate(int(action["target_cell"]) % (config.map_size ** 2), config.map_size),
            ship_type=SHIP_TYPE_ORDER[int(action["ship_type"]) % len(SHIP_TYPE_ORDER)],
        )

    ships = own_ships(state, player_id)
    ship_index = int(action["ship_index"])
    if ship_index >= len(ships):
        return None
    ship = ships[ship_index]

    if action_type == MOVE:
        target = grid_index_to_coordinate(int(action["target_cell"]) % (config.map_size ** 2), config.map_size)
        return Action(kind=kind, player=player_id, ship_id=ship.id, target=target)
    elif action_type == ATTACK:
        targets = enemy_ships(state, player_id)
        target_index = int(action["target_ship"])
        if target_index >= len(targets):
            return None
        return Action(kind=kind, player=player_id, ship_id=ship.id, target_ship_id=targets[target_index].id)
    else:  # Claim
        return Action(kind=kind, player=player_id, ship_id=ship.id, target=ship.position)


def encode_action(action: Action, state: GameState, config: Config) -> Dict[str, int]:
    """
    Convert an engine action back to an action dictionary.

    Used by scripted agents that reason in engine terms.
    """
    encoded = noop_action()
    kinds = {kind: action_type for action_type, kind in ACTION_TYPE_KINDS.items()}
    encoded["action_type"] = kinds.get(action.kind, END_TURN)

    if action.ship_id is not None:
        ids = [ship.id for ship in own_ships(state, action.player)]
        if action.ship_id in ids:
            encoded["ship_index"] = ids.index(action.ship_id)
    if action.target is not None:
        encoded["target_cell"] = coordinate_to_grid_index(action.target, config.map_size)
    if action.target_ship_id is not None:
        ids = [ship.id for ship in enemy_ships(state, action.player)]
        if action.target_ship_id in ids:
            encoded["target_ship"] = ids.index(action.target_ship_id)
    if action.ship_type is not None:
        encoded["ship_type"] = SHIP_TYPE_ORDER.index(ShipType(action.ship_type))
    return encoded


def valid_action_types(state: GameState, player_id: str, config: Config) -> List[int]:
    """
    Action types that have at least one accepted instantiation right now.

    End turn is always listed while it is the player's turn.
    """
    current = state.current_player
    if current is None or current.public_key != player_id:
        return []

    valid = [END_TURN]
    player = state.get_player(player_id)
    ships = list(player.living_ships)

    if ships:
        valid.append(MOVE)
    if any(
        engine_actions.is_valid_action(state, Action(engine_actions.ATTACK, player_id, ship.id,
                                                     target_ship_id=enemy.id), config)
        for ship in ships for enemy in enemy_ships(state, player_id)
    ):
        valid.append(ATTACK)
    if any(
        engine_actions.is_valid_action(state, Action(engine_actions.CLAIM, player_id, ship.id,
                                                     target=ship.position), config)
        for ship in ships
    ):
        valid.append(CLAIM)
    if engine_actions.is_valid_action(state, Action(engine_actions.COLLECT, player_id), config):
        valid.append(COLLECT)
    if any(
        engine_actions.is_valid_action(state, Action(engine_actions.BUILD, player_id, target=cell.coordinate,
                                                     ship_type=ShipType.SLOOP), config)
        for cell in state.game_map.iter_cells() if cell.owner == player_id
    ):
        valid.append(BUILD)
    return valid
