"""
PIR8 Multi-Agent Environment

PettingZoo Parallel environment for practice games against the engine.
Each agent controls one player. Every step all agents submit an action, but
only the player whose turn it is has theirs applied; the rest are ignored.
A rejected action forfeits the turn so games always progress.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from gymnasium import spaces
from pettingzoo import ParallelEnv

from ..config import Config
from ..engine import actions as engine_actions
from ..engine.turns import create_game, join_game, start_game
from ..engine.types import Action, GameState, GameStatus
from ..engine.victory import evaluate_victory
from ..replay import ReplayRecorder
from . import actions as actions_module
from . import game_metrics
from . import observations

logger = logging.getLogger(__name__)


class PirateMultiAgentEnv(ParallelEnv):
    """
    PettingZoo Parallel environment over the PIR8 engine.

    PettingZoo Parallel API:
        - All agents submit actions each step; only the current player acts
        - Returns dicts keyed by agent name: {"player_0": ..., "player_1": ...}
        - Agent names double as engine player keys
    """

    metadata = {
        "render_modes": ["ansi"],
        "name": "pir8_v0",
    }

    def __init__(
        self,
        config: Optional[Config] = None,
        render_mode: Optional[str] = None,
        enable_replay: bool = False,
        replay_dir: str = "./replays",
    ):
        """
        Initialize the environment.

        Args:
            config: Game and environment configuration
            render_mode: "ansi" for a text board, or None
            enable_replay: Whether to record each episode for replay
            replay_dir: Directory replays are written to
        """
        super().__init__()

        self.config = config or Config()
        self.render_mode = render_mode
        self.enable_replay = enable_replay

        if not self.config.min_players <= self.config.num_players <= self.config.max_players:
            raise ValueError(
                f"num_players must be between {self.config.min_players} and {self.config.max_players}"
            )

        self.possible_agents = [f"player_{i}" for i in range(self.config.num_players)]
        self.agents = self.possible_agents[:]

        self.game_state: Optional[GameState] = None
        self.current_step = 0
        self.episode_seed: Optional[int] = None
        self.last_result: Optional[Dict[str, Any]] = None

        # Competition agents (set via set_agents())
        self.competition_agents: Dict[str, Any] = {}

        self._observation_spaces = None
        self._action_spaces = None

        self.replay_recorder = ReplayRecorder(replay_dir) if enable_replay else None

        game_metrics.reset_game_metrics(self)

    def set_agent_classes(self, *agent_factories):
        """Register factories that build fresh agents on every reset."""
        self.agent_factories = agent_factories

    def set_agents(self, *agents):
        """
        Register one competition agent per player, in seat order.

        Args:
            *agents: CompetitionAgent instances whose player_id matches a seat
        """
        if len(agents) != len(self.possible_agents):
            raise ValueError(f"Expected {len(self.possible_agents)} agents, got {len(agents)}")

        self.competition_agents = {}
        for agent in agents:
            if agent.player_id not in self.possible_agents:
                raise ValueError(f"Unknown player id {agent.player_id}")
            self.competition_agents[agent.player_id] = agent
            agent._set_env(self)

        self._observation_spaces = {
            name: observations.build_observation_space(self.config) for name in self.possible_agents
        }
        self._action_spaces = {
            name: actions_module.build_action_space(self.config) for name in self.possible_agents
        }

    @property
    def observation_spaces(self) -> Dict[str, spaces.Space]:
        """PettingZoo required: observation spaces for each agent."""
        if self._observation_spaces is None:
            raise RuntimeError("Agents must be set via set_agents() before accessing spaces")
        return self._observation_spaces

    @property
    def action_spaces(self) -> Dict[str, spaces.Space]:
        """PettingZoo required: action spaces for each agent."""
        if self._action_spaces is None:
            raise RuntimeError("Agents must be set via set_agents() before accessing spaces")
        return self._action_spaces

    def observation_space(self, agent: str) -> spaces.Space:
        return self.observation_spaces[agent]

    def action_space(self, agent: str) -> spaces.Space:
        return self.action_spaces[agent]

    @property
    def current_agent(self) -> Optional[str]:
        if self.game_state is None or self.game_state.current_player is None:
            return None
        return self.game_state.current_player.public_key

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Dict]]:
        """
        Start a new game.

        Args:
            seed: Game seed; falls back to config.seed, then fresh entropy
            options: Supported options:
                - game_id: Identifier stored on the game state

        Returns:
            Tuple of (observations, infos) keyed by agent name
        """
        if getattr(self, "agent_factories", None):
            self.set_agents(*(factory() for factory in self.agent_factories))

        if not self.competition_agents:
            raise RuntimeError("Agents must be set via set_agents() before reset()")

        if seed is None:
            seed = self.config.seed
        if seed is None:
            seed = int(np.random.SeedSequence().entropy) & ((1 << 64) - 1)
        self.episode_seed = int(seed)

        game_id = (options or {}).get("game_id", f"practice_{self.episode_seed}")
        state = create_game(game_id, self.episode_seed, self.config)
        for name in self.possible_agents:
            state = join_game(state, name, self.config)
        self.game_state = start_game(state, self.config)

        self.current_step = 0
        self.agents = self.possible_agents[:]
        self.last_result = None
        game_metrics.reset_game_metrics(self)

        for agent in self.competition_agents.values():
            agent.on_reset(self.episode_seed)

        if self.replay_recorder is not None:
            self.replay_recorder.start_recording(self.episode_seed, self.config, game_id)

        observations_ = {name: self._observe(name) for name in self.possible_agents}
        infos = {name: self._build_info_for_agent(name) for name in self.possible_agents}
        for info in infos.values():
            info["termination_cause"] = None

        logger.info("Reset %s (seed=%d, first=%s)", game_id, self.episode_seed, self.current_agent)
        return observations_, infos

    def step(
        self,
        actions: Dict[str, Dict]
    ) -> Tuple[
        Dict[str, np.ndarray],  # observations
        Dict[str, float],  # rewards
        Dict[str, bool],  # terminations
        Dict[str, bool],  # truncations
        Dict[str, Dict]  # infos
    ]:
        """
        Apply the current player's action.

        Args:
            actions: Action dicts keyed by agent name

        Returns:
            observations, rewards, terminations, truncations, infos
        """
        if self.game_state is None:
            raise RuntimeError("Call reset() before step()")
        if self.game_state.game_status == GameStatus.COMPLETED:
            raise RuntimeError("Game is over; call reset() to start a new one")

        self.current_step += 1
        acting = self.current_agent
        raw_action = actions.get(acting, actions_module.noop_action())

        action = actions_module.decode_action(raw_action, self.game_state, acting, self.config)
        result = engine_actions.apply_action(self.game_state, action, self.config) if action is not None else None

        if result is None or not result.accepted:
            reason = result.reason if result is not None else "Action does not resolve"
            self.rejected_actions_by_player[acting] += 1
            logger.debug("Step %d: %s forfeits turn (%s)", self.current_step, acting, reason)
            action = Action(kind=engine_actions.END_TURN, player=acting)
            forfeit = engine_actions.apply_action(self.game_state, action, self.config)
            self.game_state = forfeit.state
            self.last_result = {"agent": acting, "accepted": False, "reason": reason}
        else:
            self.game_state = result.state
            for event in reversed(self.game_state.event_log):
                if event.kind == action.kind and event.player == acting:
                    game_metrics.update_from_event(self, acting, event.data)
                    break
            self.last_result = {"agent": acting, "accepted": True, "reason": result.reason}

        if self.replay_recorder is not None:
            self.replay_recorder.record_step(action, self.last_result["accepted"], self.game_state)

        terminated = self.game_state.game_status == GameStatus.COMPLETED
        truncated = not terminated and self.current_step >= self.config.max_episode_steps

        rewards = {
            name: float(self.competition_agents[name].calculate_reward(self)) for name in self.possible_agents
        }
        if terminated:
            winner = self.game_state.winner
            for name in self.possible_agents:
                if winner is None:
                    continue
                rewards[name] += self.config.win_reward if name == winner else self.config.loss_reward

        if terminated:
            termination_cause = self._termination_cause()
        elif truncated:
            termination_cause = "step_limit"
        else:
            termination_cause = None

        if (terminated or truncated) and self.replay_recorder is not None:
            self.replay_recorder.save_replay(self.game_state)

        observations_ = {name: self._observe(name) for name in self.possible_agents}
        terminations = {name: terminated for name in self.possible_agents}
        truncations = {name: truncated for name in self.possible_agents}
        infos = {name: self._build_info_for_agent(name) for name in self.possible_agents}
        for info in infos.values():
            info["termination_cause"] = termination_cause

        if terminated or truncated:
            self.agents = []

        return observations_, rewards, terminations, truncations, infos

    def _observe(self, agent: str) -> np.ndarray:
        return observations.compute_observation(self.game_state, agent, self.config)

    def _termination_cause(self) -> str:
        """Reason recorded on the game_completed event."""
        for event in reversed(self.game_state.event_log):
            if event.kind == "game_completed":
                return event.data.get("reason", "completed")
        return evaluate_victory(self.game_state.players, self.game_state.game_map, self.config,
                                self.game_state.turn_number).reason or "completed"

    def _build_info_for_agent(self, agent: str) -> Dict:
        """
        Build info dict for a specific agent.

        Args:
            agent: Agent name

        Returns:
            Info dict with agent-specific and shared information
        """
        return {
            "step": self.current_step,
            "turn_number": self.game_state.turn_number,
            "phase": self.game_state.current_phase.value,
            "current_player": self.current_agent,
            "is_my_turn": self.current_agent == agent,
            "pending_action_type": self.game_state.pending_action_type,
            "winner": self.game_state.winner,
            "valid_action_types": actions_module.valid_action_types(self.game_state, agent, self.config),
            "last_result": self.last_result,
            "player": game_metrics.snapshot_player(self.game_state, agent),
            "damage_dealt": self.damage_dealt_by_player[agent],
            "ships_destroyed": self.ships_destroyed_by_player[agent],
            "rejected_actions": self.rejected_actions_by_player[agent],
        }

    def render(self) -> Optional[str]:
        """Text board: cell type initials, owner seat in brackets, ships as digits."""
        if self.render_mode != "ansi" or self.game_state is None:
            return None
        seats = {name: str(index) for index, name in enumerate(self.possible_agents)}
        rows: List[str] = []
        size = self.game_state.game_map.size
        for y in range(size):
            row = []
            for x in range(size):
                cell = self.game_state.game_map.cells[x][y]
                ship = self.game_state.ship_at(cell.coordinate)
                mark = seats.get(ship.owner, "?") if ship is not None else cell.type.value[0]
                owner = f"[{seats.get(cell.owner, '?')}]" if cell.owner is not None else "   "
                row.append(f"{mark}{owner}")
            rows.append(" ".join(row))
        return "\n".join(rows)

    def close(self):
        """Release the game state."""
        self.game_state = None
