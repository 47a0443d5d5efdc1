"""
Game Metrics

Per-player counters the environment reports in infos: territories held,
ships lost, damage dealt and resources banked.
"""

from typing import Any, Dict

from ..engine.economy import calculate_active_bonuses
from ..engine.types import GameState
from ..engine.victory import calculate_player_score


def reset_game_metrics(env) -> None:
    """Clear accumulated counters at the start of an episode."""
    env.damage_dealt_by_player = {agent: 0 for agent in env.possible_agents}
    env.ships_destroyed_by_player = {agent: 0 for agent in env.possible_agents}
    env.rejected_actions_by_player = {agent: 0 for agent in env.possible_agents}


def update_from_event(env, agent: str, event_data: Dict[str, Any]) -> None:
    """Fold one accepted action's event data into the counters."""
    env.damage_dealt_by_player[agent] += int(event_data.get("damage", 0) if "target_ship_id" in event_data else 0)
    if event_data.get("destroyed"):
        env.ships_destroyed_by_player[agent] += 1


def snapshot_player(state: GameState, player_id: str) -> Dict[str, Any]:
    """Current standing of a player."""
    player = state.get_player(player_id)
    if player is None:
        return {}
    return {
        "score": calculate_player_score(player, state.game_map),
        "territories": len(player.controlled_territories),
        "living_ships": len(player.living_ships),
        "ships_lost": len(player.ships) - len(player.living_ships),
        "resources": player.resources.to_dict(),
        "active_bonuses": [bonus.id for bonus in calculate_active_bonuses(player, state)],
        "is_active": player.is_active,
    }
