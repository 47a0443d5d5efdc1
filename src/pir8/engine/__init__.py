"""
PIR8 Engine

Pure, deterministic game rules. Every function takes immutable records and
returns new ones.
"""

from .actions import apply_action, is_valid_action
from .combat import CombatResult, combat_preview, is_in_attack_range, resolve_combat
from .economy import (
    BONUS_CATALOG,
    TerritoryBonus,
    apply_bonuses,
    bonus_income,
    calculate_active_bonuses,
    has_extra_action,
    next_bonus,
    ship_cost,
    total_ship_cost_reduction,
    turn_income,
)
from .errors import GameStateError, InvalidCoordinateError, InvariantViolationError, PIR8Error
from .map_generator import create_game_map
from .movement import MoveResult, resolve_move
from .ships import create_ship, create_starting_fleet, fleet_summary, generate_starting_positions
from .territory import ClaimResult, check_invariants, claim_territory
from .turns import advance_phase, advance_turn, check_completion, create_game, join_game, resign, start_game
from .types import (
    Action,
    ActionResult,
    Coordinate,
    GameEvent,
    GameMap,
    GamePhase,
    GameState,
    GameStatus,
    Player,
    Resources,
    Ship,
    ShipType,
    TerritoryCell,
    TerritoryType,
)
from .utils import are_adjacent, calculate_distance, coordinate_to_string, string_to_coordinate
from .victory import (
    VictoryResult,
    calculate_player_score,
    determine_winner,
    evaluate_victory,
    is_game_over,
    rank_players,
)
