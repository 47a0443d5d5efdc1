"""
PIR8 Replay System

The engine is deterministic, so a game is fully described by its seed, its
configuration, its seats and the ordered list of applied actions. Replays
store exactly that plus per-step summaries for plotting.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import Config
from .engine.actions import apply_action
from .engine.turns import create_game, join_game, start_game
from .engine.types import Action, GameState, ShipType
from .engine.utils import string_to_coordinate

logger = logging.getLogger(__name__)


@dataclass
class PIR8Replay:
    """Everything needed to reproduce a game"""

    seed: int
    game_id: str
    players: List[str]
    actions: List[Dict[str, Any]]

    # Per-step summaries (for analysis and plots)
    timeline: List[Dict[str, Any]]

    # Metadata
    winner: Optional[str]
    timestamp: str
    config: Dict[str, Any]


def _summarize(state: GameState) -> Dict[str, Any]:
    return {
        "turn_number": state.turn_number,
        "territories": {p.public_key: len(p.controlled_territories) for p in state.players},
        "living_ships": {p.public_key: len(p.living_ships) for p in state.players},
        "gold": {p.public_key: p.resources.gold for p in state.players},
    }


def action_from_dict(data: Dict[str, Any]) -> Action:
    return Action(
        kind=data["kind"],
        player=data["player"],
        ship_id=data.get("ship_id"),
        target=string_to_coordinate(data["target"]) if data.get("target") else None,
        target_ship_id=data.get("target_ship_id"),
        ship_type=ShipType(data["ship_type"]) if data.get("ship_type") else None,
    )


def config_from_dict(data: Dict[str, Any]) -> Config:
    known = {f.name for f in fields(Config)}
    return Config(**{key: value for key, value in data.items() if key in known})


class ReplayRecorder:
    """Records the applied actions of one game at a time"""

    def __init__(self, save_dir: str = "./replays"):
        self.save_dir = Path(save_dir)

        self.seed = None
        self.game_id = None
        self.players: List[str] = []
        self.actions: List[Dict[str, Any]] = []
        self.timeline: List[Dict[str, Any]] = []
        self.config: Optional[Config] = None
        self.recording = False
        self.last_path: Optional[Path] = None

    def start_recording(self, seed: int, config: Config, game_id: str, players: Optional[List[str]] = None):
        """Start recording a game"""
        self.seed = seed
        self.game_id = game_id
        self.config = config
        self.players = list(players) if players is not None else [f"player_{i}" for i in range(config.num_players)]
        self.actions = []
        self.timeline = []
        self.recording = True

    def record_step(self, action: Action, accepted: bool, state: GameState):
        """Record an action the engine applied"""
        if self.recording:
            entry = action.to_dict()
            entry["accepted"] = accepted
            self.actions.append(entry)
            self.timeline.append(_summarize(state))

    def build_replay(self, final_state: Optional[GameState] = None) -> PIR8Replay:
        return PIR8Replay(
            seed=self.seed,
            game_id=self.game_id,
            players=self.players,
            actions=self.actions,
            timeline=self.timeline,
            winner=final_state.winner if final_state is not None else None,
            timestamp=datetime.now().isoformat(),
            config=asdict(self.config),
        )

    def save_replay(self, final_state: Optional[GameState] = None, filename: Optional[str] = None) -> Path:
        """Write the recorded game as JSON and stop recording"""
        if not self.recording:
            raise RuntimeError("No active recording to save")

        self.save_dir.mkdir(parents=True, exist_ok=True)
        if filename is None:
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{self.game_id}_{stamp}.json"

        path = self.save_dir / filename
        with open(path, "w") as f:
            json.dump(asdict(self.build_replay(final_state)), f, indent=2)

        self.recording = False
        self.last_path = path
        logger.info("Saved replay to %s", path)
        return path


def load_replay(path) -> PIR8Replay:
    with open(path) as f:
        return PIR8Replay(**json.load(f))


def replay_game(replay: PIR8Replay) -> GameState:
    """
    Re-simulate a recorded game.

    Returns:
        Final state; equals the original final state for an untampered replay

    Raises:
        ValueError: If a recorded action is rejected on re-simulation
    """
    config = config_from_dict(replay.config)
    state = create_game(replay.game_id, replay.seed, config)
    for player in replay.players:
        state = join_game(state, player, config)
    state = start_game(state, config)

    for index, entry in enumerate(replay.actions):
        result = apply_action(state, action_from_dict(entry), config)
        if not result.accepted:
            raise ValueError(f"Replay diverged at action {index}: {result.reason}")
        state = result.state
    return state


def visualize_replay(replay: PIR8Replay, output_path: Optional[str] = None):
    """
    Plot territories and living ships per player over the game.

    Args:
        replay: Replay to plot
        output_path: Where to save the figure; not saved when None

    Returns:
        The matplotlib Figure
    """
    import matplotlib.pyplot as plt

    fig, (ax_territory, ax_ships) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    steps = list(range(1, len(replay.timeline) + 1))

    for player in replay.players:
        ax_territory.plot(steps, [entry["territories"].get(player, 0) for entry in replay.timeline], label=player)
        ax_ships.plot(steps, [entry["living_ships"].get(player, 0) for entry in replay.timeline], label=player)

    ax_territory.set_ylabel("Territories")
    ax_ships.set_ylabel("Living ships")
    ax_ships.set_xlabel("Action")
    ax_territory.set_title(f"{replay.game_id} (winner: {replay.winner})")
    ax_territory.legend(loc="upper left")
    fig.tight_layout()

    if output_path is not None:
        fig.savefig(output_path)
    return fig
