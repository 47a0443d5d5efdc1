"""
Turn/Phase State Machine

Game lifecycle (waiting -> active -> completed), round-robin turn order,
advisory phase cycling and completion.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from ..config import Config
from .economy import starting_resources
from .errors import GameStateError
from .map_generator import create_game_map
from .ships import create_starting_fleet, generate_starting_positions
from .types import GameEvent, GamePhase, GameState, GameStatus, Player
from .victory import evaluate_victory

logger = logging.getLogger(__name__)

EXTRA_ACTION = "extra_action"

# Phase cycle; deployment only opens the game
PHASE_CYCLE = {
    GamePhase.DEPLOYMENT: GamePhase.MOVEMENT,
    GamePhase.MOVEMENT: GamePhase.COMBAT,
    GamePhase.COMBAT: GamePhase.RESOURCE_COLLECTION,
    GamePhase.RESOURCE_COLLECTION: GamePhase.MOVEMENT,
}


def create_game(game_id: str, seed: int, config: Optional[Config] = None) -> GameState:
    """
    Create a game waiting for players.

    Args:
        game_id: Identifier of the game
        seed: Game seed supplied by the authoritative layer
        config: Map size and limits

    Returns:
        GameState in the waiting status with a generated map
    """
    config = config or Config()
    game_map = create_game_map(config.map_size, seed)
    logger.info("Created game %s (size=%d, seed=%d)", game_id, config.map_size, seed)
    return GameState(game_id=game_id, game_map=game_map, seed=seed)


def join_game(state: GameState, public_key: str, config: Optional[Config] = None) -> GameState:
    """
    Add a player with starting resources and a corner fleet.

    Raises:
        GameStateError: If the game has started, is full, or the player already joined
    """
    config = config or Config()
    if state.game_status != GameStatus.WAITING:
        raise GameStateError(f"Cannot join game {state.game_id}: status is {state.game_status.value}")
    if len(state.players) >= config.max_players:
        raise GameStateError(f"Game {state.game_id} is full ({config.max_players} players)")
    if state.get_player(public_key) is not None:
        raise GameStateError(f"Player {public_key} already joined game {state.game_id}")

    corners = generate_starting_positions(len(state.players) + 1, state.game_map.size)
    fleet = create_starting_fleet(public_key, corners[-1])
    player = Player(public_key=public_key, ships=tuple(fleet), resources=starting_resources())

    state = replace(state, players=state.players + (player,))
    return record_event(state, "player_joined", public_key, f"{public_key} joined the game", config=config)


def start_game(state: GameState, config: Optional[Config] = None) -> GameState:
    """
    Activate a waiting game. The first player is seed % player_count.

    Raises:
        GameStateError: If the game is not waiting or has too few players
    """
    config = config or Config()
    if state.game_status != GameStatus.WAITING:
        raise GameStateError(f"Cannot start game {state.game_id}: status is {state.game_status.value}")
    if len(state.players) < config.min_players:
        raise GameStateError(
            f"Game {state.game_id} needs at least {config.min_players} players, has {len(state.players)}"
        )

    first = state.seed % len(state.players)
    state = replace(
        state,
        game_status=GameStatus.ACTIVE,
        current_player_index=first,
        current_phase=GamePhase.DEPLOYMENT,
        turn_number=1,
    )
    logger.info("Started game %s with %d players", state.game_id, len(state.players))
    return record_event(state, "game_started", state.players[first].public_key, "The game has begun", config=config)


def record_event(
    state: GameState,
    kind: str,
    player: Optional[str],
    description: str,
    data: Optional[Dict[str, Any]] = None,
    config: Optional[Config] = None,
) -> GameState:
    """Append an event, keeping only the most recent entries."""
    config = config or Config()
    event = GameEvent(kind=kind, player=player, turn_number=state.turn_number,
                      description=description, data=data or {})
    log = (state.event_log + (event,))[-config.event_log_limit:]
    return replace(state, event_log=log)


def advance_phase(state: GameState) -> GameState:
    return replace(state, current_phase=PHASE_CYCLE[state.current_phase])


def _can_take_turn(player: Player) -> bool:
    return player.is_active and player.has_living_ship


def advance_turn(state: GameState) -> GameState:
    """
    Pass the turn to the next player able to act.

    Players who resigned or have no living ship are skipped. The turn number
    increments every time the order wraps past the last player.
    """
    count = len(state.players)
    if count == 0:
        return state

    index = state.current_player_index
    turn_number = state.turn_number
    for _ in range(count):
        index = (index + 1) % count
        if index == 0:
            turn_number += 1
        if _can_take_turn(state.players[index]):
            break

    return replace(state, current_player_index=index, turn_number=turn_number, pending_action_type=None)


def complete_game(
    state: GameState,
    winner: Optional[str],
    reason: str,
    config: Optional[Config] = None,
) -> GameState:
    """Mark a game completed and set its winner. Completed games never change again."""
    if state.game_status == GameStatus.COMPLETED:
        return state
    state = replace(state, game_status=GameStatus.COMPLETED, winner=winner)
    logger.info("Game %s completed: winner=%s reason=%s", state.game_id, winner, reason)
    return record_event(
        state, "game_completed", winner,
        f"Game over ({reason}): {winner if winner is not None else 'no winner'}",
        {"reason": reason}, config=config,
    )


def check_completion(state: GameState, config: Optional[Config] = None) -> GameState:
    """Complete the game when any victory condition has fired."""
    if state.game_status != GameStatus.ACTIVE:
        return state
    result = evaluate_victory(state.players, state.game_map, config, state.turn_number)
    if not result.is_over:
        return state
    return complete_game(state, result.winner, result.reason, config)


def resign(state: GameState, public_key: str, config: Optional[Config] = None) -> GameState:
    """
    Withdraw a player from an active game.

    Raises:
        GameStateError: If the game is not active or the player is unknown
    """
    if state.game_status != GameStatus.ACTIVE:
        raise GameStateError(f"Cannot resign from game {state.game_id}: status is {state.game_status.value}")
    player = state.get_player(public_key)
    if player is None:
        raise GameStateError(f"Player {public_key} is not in game {state.game_id}")

    was_current = state.current_player is not None and state.current_player.public_key == public_key
    state = state.with_player(replace(player, is_active=False))
    state = record_event(state, "player_resigned", public_key, f"{public_key} resigned", config=config)
    state = check_completion(state, config)
    if was_current and state.game_status == GameStatus.ACTIVE:
        state = advance_turn(state)
    return state
