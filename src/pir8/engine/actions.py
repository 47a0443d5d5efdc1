"""
Action Layer

Validates player action descriptors against a full GameState and applies
them. Rejections return the input state unchanged with a reason.

Action kinds:
- move: Sail a ship to a cell within its speed
- attack: Fire on an enemy ship in range
- claim: Claim the cell a ship sits on
- collect: Bank this turn's territory income
- build: Commission a ship at an owned port
- end_turn: Pass
- resign: Leave the game (allowed off-turn)
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Optional, Tuple

from ..config import Config
from .combat import is_in_attack_range, resolve_combat
from .economy import (
    bonus_income,
    calculate_active_bonuses,
    can_afford,
    has_extra_action,
    ship_cost,
)
from .errors import InvalidCoordinateError
from .movement import resolve_move
from .rng import derive_seed
from .ships import create_ship
from .territory import check_invariants, claim_territory
from .turns import EXTRA_ACTION, advance_turn, check_completion, record_event, resign
from .types import (
    Action,
    ActionResult,
    Coordinate,
    GamePhase,
    GameState,
    GameStatus,
    Player,
    ShipType,
    TerritoryType,
)
from .utils import as_coordinate, coordinate_to_string

logger = logging.getLogger(__name__)

MOVE = "move"
ATTACK = "attack"
CLAIM = "claim"
COLLECT = "collect"
BUILD = "build"
END_TURN = "end_turn"
RESIGN = "resign"

ACTION_KINDS = (END_TURN, MOVE, ATTACK, CLAIM, COLLECT, BUILD, RESIGN)

# Phase each action naturally belongs to; phases are informational only
ACTION_PHASES = {
    MOVE: GamePhase.MOVEMENT,
    ATTACK: GamePhase.COMBAT,
    CLAIM: GamePhase.RESOURCE_COLLECTION,
    COLLECT: GamePhase.RESOURCE_COLLECTION,
    BUILD: GamePhase.DEPLOYMENT,
}

# (accepted, reason, new state, event data)
_Outcome = Tuple[bool, str, GameState, Dict]


def _reject(state: GameState, reason: str) -> _Outcome:
    return False, reason, state, {}


def _own_living_ship(player: Player, ship_id: Optional[str]):
    ship = player.get_ship(ship_id) if ship_id is not None else None
    if ship is None:
        return None, "Ship not found"
    if not ship.is_alive:
        return None, "Ship destroyed"
    return ship, ""


def _target(action: Action) -> Coordinate:
    if action.target is None:
        raise InvalidCoordinateError("Action has no target coordinate")
    return as_coordinate(action.target)


def _move(state: GameState, player: Player, action: Action, config: Config) -> _Outcome:
    ship, reason = _own_living_ship(player, action.ship_id)
    if ship is None:
        return _reject(state, reason)

    target = _target(action)
    occupant = state.ship_at(target)
    if occupant is not None and occupant.id != ship.id:
        return _reject(state, "Position occupied by another ship")

    result = resolve_move(ship, target, state.game_map)
    if not result.accepted:
        return _reject(state, result.reason)

    state = state.with_player(player.with_ship(result.updated_ship))
    return True, result.reason, state, {"ship_id": ship.id, "to": str(target), "damage": result.damage}


def _attack(state: GameState, player: Player, action: Action, config: Config) -> _Outcome:
    ship, reason = _own_living_ship(player, action.ship_id)
    if ship is None:
        return _reject(state, reason)

    target = state.find_ship(action.target_ship_id) if action.target_ship_id else None
    if target is None:
        return _reject(state, "Target ship not found")
    if target.owner == player.public_key:
        return _reject(state, "Cannot attack your own ship")
    if not target.is_alive:
        return _reject(state, "Target ship already destroyed")
    if not is_in_attack_range(ship, target):
        return _reject(state, "Target out of range")

    seed = derive_seed(state.seed, state.action_count)
    result = resolve_combat(ship, target, seed, config)

    defender = state.get_player(target.owner)
    state = state.with_player(defender.with_ship(result.defender_ship))
    return True, result.message, state, {
        "ship_id": ship.id,
        "target_ship_id": target.id,
        "damage": result.damage,
        "destroyed": result.destroyed,
    }


def _claim(state: GameState, player: Player, action: Action, config: Config) -> _Outcome:
    target = _target(action)
    if not any(ship.position == target for ship in player.living_ships):
        return _reject(state, "Ship must be at territory to claim it")

    result = claim_territory(player.public_key, target, state.game_map)
    if not result.accepted:
        return _reject(state, result.reason)

    key = coordinate_to_string(target)
    state = replace(state, game_map=result.updated_map)
    if result.previous_owner is not None:
        loser = state.get_player(result.previous_owner)
        if loser is not None:
            state = state.with_player(replace(
                loser, controlled_territories=loser.controlled_territories - {key}
            ))
    claimant = state.get_player(player.public_key)
    state = state.with_player(replace(
        claimant, controlled_territories=claimant.controlled_territories | {key}
    ))
    return True, result.reason, state, {"coordinate": key, "previous_owner": result.previous_owner}


def _collect(state: GameState, player: Player, action: Action, config: Config) -> _Outcome:
    income = bonus_income(player, state)
    if not any(income.to_dict().values()):
        return _reject(state, "This territory produces no resources")
    state = state.with_player(replace(player, resources=player.resources.add(income)))
    return True, f"Collected {income.to_dict()}", state, {"income": income.to_dict()}


def _build(state: GameState, player: Player, action: Action, config: Config) -> _Outcome:
    if action.ship_type is None:
        return _reject(state, "Ship type required")
    ship_type = ShipType(action.ship_type)
    target = _target(action)

    if len(player.living_ships) >= config.max_ships_per_player:
        return _reject(state, f"Fleet size limit reached ({config.max_ships_per_player} ships)")

    cell = state.game_map.cell_at(target)
    if cell is None:
        return _reject(state, "Invalid coordinate")
    if cell.type != TerritoryType.PORT or cell.owner != player.public_key:
        return _reject(state, "Ships can only be built at a port you control")
    if state.ship_at(target) is not None:
        return _reject(state, "Position occupied by another ship")

    cost = ship_cost(ship_type, calculate_active_bonuses(player, state))
    if not can_afford(player.resources, cost):
        return _reject(state, f"Insufficient resources. Need: {cost.to_dict()}")

    ship = create_ship(ship_type, player.public_key, target, token=len(player.ships) + 1)
    state = state.with_player(replace(
        player,
        ships=player.ships + (ship,),
        resources=player.resources.subtract(cost),
    ))
    return True, f"Built {ship_type.value} {ship.id}", state, {"ship_id": ship.id, "cost": cost.to_dict()}


def _end_turn(state: GameState, player: Player, action: Action, config: Config) -> _Outcome:
    return True, "Turn ended", state, {}


_HANDLERS: Dict[str, Callable[[GameState, Player, Action, Config], _Outcome]] = {
    MOVE: _move,
    ATTACK: _attack,
    CLAIM: _claim,
    COLLECT: _collect,
    BUILD: _build,
    END_TURN: _end_turn,
}


def _precheck(state: GameState, action: Action) -> Optional[str]:
    if state.game_status != GameStatus.ACTIVE:
        return "Game is not active"
    if action.kind not in ACTION_KINDS:
        return "Unknown action type"
    player = state.get_player(action.player)
    if player is None:
        return "Player not found"
    if not player.is_active:
        return "Player has resigned"
    if action.kind != RESIGN and state.current_player.public_key != action.player:
        return "Not your turn"
    return None


def is_valid_action(state: GameState, action: Action, config: Optional[Config] = None) -> bool:
    """Check an action without keeping its result."""
    return apply_action(state, action, config).accepted


def apply_action(state: GameState, action: Action, config: Optional[Config] = None) -> ActionResult:
    """
    Validate and apply an action.

    Args:
        state: Current game state
        action: Action descriptor
        config: Engine configuration

    Returns:
        ActionResult; on rejection state is the input state unchanged
    """
    config = config or Config()

    reason = _precheck(state, action)
    if reason is not None:
        logger.debug("Rejected %s by %s: %s", action.kind, action.player, reason)
        return ActionResult(False, reason, state)

    if action.kind == RESIGN:
        new_state = resign(state, action.player, config)
        new_state = replace(new_state, action_count=state.action_count + 1)
        return ActionResult(True, f"{action.player} resigned", new_state)

    player = state.get_player(action.player)
    try:
        accepted, reason, new_state, data = _HANDLERS[action.kind](state, player, action, config)
    except ValueError as exc:
        accepted, reason, new_state, data = False, f"Invalid action: {exc}", state, {}

    if not accepted:
        logger.debug("Rejected %s by %s: %s", action.kind, action.player, reason)
        return ActionResult(False, reason, state)

    new_state = record_event(new_state, action.kind, action.player, reason, data, config=config)
    new_state = replace(
        new_state,
        action_count=state.action_count + 1,
        current_phase=ACTION_PHASES.get(action.kind, new_state.current_phase),
    )

    if config.debug:
        check_invariants(new_state)

    new_state = check_completion(new_state, config)
    if new_state.game_status == GameStatus.ACTIVE:
        new_state = _finish_action(new_state, action, config)

    return ActionResult(True, reason, new_state)


def _finish_action(state: GameState, action: Action, config: Config) -> GameState:
    """Advance the turn unless the player earned an extra action."""
    if action.kind != END_TURN and state.pending_action_type is None:
        player = state.get_player(action.player)
        if player.has_living_ship and has_extra_action(calculate_active_bonuses(player, state)):
            return replace(state, pending_action_type=EXTRA_ACTION)
    state = advance_turn(state)
    # The turn limit is checked once the new turn has begun
    return check_completion(state, config)
