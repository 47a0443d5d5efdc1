"""
Public API for competition agents.

Users inherit from CompetitionAgent to build their AI for practice games.
This class provides a minimal interface over the environment's game state.
"""

from typing import List, Optional

from ..engine.rng import AGENT_STREAM, derive_seed, string_key
from ..engine.types import GameState, Player, Ship


class CompetitionAgent:
    """
    Base class for competition agents.

    Users inherit this class and override methods to implement their strategy.

    Basic Usage Example:
        ```python
        from pir8 import Config
        from pir8.agents import CompetitionAgent, PirateBot
        from pir8.envs import PirateMultiAgentEnv

        config = Config()
        env = PirateMultiAgentEnv(config=config)
        agent = CompetitionAgent("player_0", config)
        opponent = PirateBot("player_1", config, difficulty="captain")
        env.set_agents(agent, opponent)

        obs, info = env.reset(seed=7)
        for step in range(1000):
            actions = {
                "player_0": agent.select_action(obs["player_0"]),
                "player_1": opponent.select_action(obs["player_1"]),
            }
            obs, rewards, terminated, truncated, info = env.step(actions)
            if terminated["player_0"] or truncated["player_0"]:
                obs, info = env.reset()
        ```
    """

    def __init__(self, player_id: str, config):
        """
        Initialize agent for the given seat.

        Args:
            player_id: Seat name, e.g. "player_0"
            config: Environment configuration (read-only)
        """
        self._player_id = player_id
        self._config = config
        self._env = None

    @property
    def player_id(self) -> str:
        """The player this agent controls (read-only)."""
        return self._player_id

    @property
    def config(self):
        """Environment configuration (read-only)."""
        return self._config

    @property
    def action_space(self):
        """Action space for this agent (read-only)."""
        if self._env is None:
            raise RuntimeError("Agent not registered with environment. Call env.set_agents() first.")
        return self._env.action_spaces[self.player_id]

    @property
    def observation_space(self):
        """Observation space for this agent (read-only)."""
        if self._env is None:
            raise RuntimeError("Agent not registered with environment. Call env.set_agents() first.")
        return self._env.observation_spaces[self.player_id]

    # === Methods users can override ===

    def get_observation(self):
        """
        Get the current observation for this agent.

        Returns:
            Observation (numpy array with shape from observation_space)
        """
        if self._env is None:
            raise RuntimeError("Agent not registered with environment. Call env.set_agents() first.")

        from ..envs import observations
        return observations.compute_observation(self._env.game_state, self.player_id, self.config)

    def select_action(self, observation):
        """
        Select an action based on observation.

        Default implementation samples the action space. Invalid samples
        forfeit the turn, so this plays a weak but legal game.

        Args:
            observation: Current observation (from get_observation)

        Returns:
            Action dict
        """
        return self.action_space.sample()

    def calculate_reward(self, env) -> float:
        """
        Per-step reward shaping. Terminal win/loss rewards are added by the env.

        Args:
            env: The environment after the step

        Returns:
            Reward for this step
        """
        return 0.0

    def on_reset(self, seed: int) -> None:
        """
        Called by the environment at the start of every game.

        The default seeds the action space so random play is reproducible.
        """
        self.action_space.seed(derive_seed(seed, AGENT_STREAM, string_key(self.player_id)))

    # === Read-only helpers ===

    def get_state(self) -> Optional[GameState]:
        if self._env is None:
            return None
        return self._env.game_state

    def get_player(self) -> Optional[Player]:
        state = self.get_state()
        return state.get_player(self.player_id) if state is not None else None

    def get_my_ships(self) -> List[Ship]:
        """Living ships this agent commands."""
        player = self.get_player()
        return list(player.living_ships) if player is not None else []

    def get_enemy_ships(self) -> List[Ship]:
        """Living ships of every other player."""
        state = self.get_state()
        if state is None:
            return []
        return [
            ship
            for player in state.players if player.public_key != self.player_id
            for ship in player.living_ships
        ]

    def is_my_turn(self) -> bool:
        state = self.get_state()
        return state is not None and state.current_player is not None \
            and state.current_player.public_key == self.player_id

    def _set_env(self, env):
        """Internal: link agent to environment (called by env.set_agents)."""
        self._env = env
