"""
PIR8 Configuration

User-configurable settings for the engine and the practice environment.
These can be changed without affecting the static rule tables.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import *


@dataclass
class Config:
    """User-configurable settings for a PIR8 game"""

    # Board and lobby
    map_size: int = DEFAULT_MAP_SIZE
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS

    # Combat tuning
    minimum_damage: int = MINIMUM_DAMAGE
    combat_variance: float = COMBAT_VARIANCE  # Damage factor drawn from [1 - v, 1 + v]

    # Fleet and victory
    max_ships_per_player: int = MAX_SHIPS_PER_PLAYER
    max_turns: int = MAX_TURNS
    economic_victory_threshold: int = ECONOMIC_VICTORY_THRESHOLD

    # Bookkeeping
    event_log_limit: int = EVENT_LOG_LIMIT

    # Runtime settings
    debug: bool = False  # Run the ownership invariant check after every action
    seed: Optional[int] = None  # Overridden during adjudication

    # Practice environment
    num_players: int = 2
    win_reward: float = 100.0
    loss_reward: float = -100.0

    @property
    def max_episode_steps(self) -> int:
        """Upper bound on env steps: every player acts once per turn, plus extra actions"""
        return self.max_turns * self.num_players * 2
