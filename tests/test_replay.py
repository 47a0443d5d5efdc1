"""
Tests for replay recording and deterministic re-simulation.
"""

import json
from dataclasses import replace

import pytest

from pir8.agents import PirateBot
from pir8.config import Config
from pir8.envs import PirateMultiAgentEnv
from pir8.replay import load_replay, replay_game, visualize_replay


def recorded_game(tmp_path, seed=13):
    config = Config(map_size=8, max_turns=12)
    env = PirateMultiAgentEnv(config=config, enable_replay=True, replay_dir=str(tmp_path))
    env.set_agents(PirateBot("player_0", config, "admiral"), PirateBot("player_1", config, "novice"))
    obs, infos = env.reset(seed=seed)
    for _ in range(config.max_episode_steps):
        actions = {name: env.competition_agents[name].select_action(obs[name]) for name in env.possible_agents}
        obs, rewards, terms, truncs, infos = env.step(actions)
        if terms["player_0"] or truncs["player_0"]:
            break
    return env


class TestReplay:

    def test_replay_file_written(self, tmp_path):
        env = recorded_game(tmp_path)
        path = env.replay_recorder.last_path
        assert path is not None and path.exists()
        with open(path) as f:
            data = json.load(f)
        assert data["seed"] == 13
        assert len(data["actions"]) == env.current_step
        assert data["players"] == ["player_0", "player_1"]
        env.close()

    def test_replay_reproduces_final_state(self, tmp_path):
        env = recorded_game(tmp_path)
        replay = load_replay(env.replay_recorder.last_path)
        final = replay_game(replay)
        assert final == env.game_state
        assert final.winner == replay.winner
        env.close()

    def test_tampered_replay_diverges(self, tmp_path):
        env = recorded_game(tmp_path)
        replay = load_replay(env.replay_recorder.last_path)
        tampered = replace(replay, actions=[dict(replay.actions[0], player="nobody")] + replay.actions[1:])
        with pytest.raises(ValueError):
            replay_game(tampered)
        env.close()

    def test_save_without_recording(self, tmp_path):
        env = recorded_game(tmp_path)
        with pytest.raises(RuntimeError):
            env.replay_recorder.save_replay()
        env.close()

    def test_visualize(self, tmp_path):
        env = recorded_game(tmp_path)
        replay = load_replay(env.replay_recorder.last_path)
        out = tmp_path / "summary.png"
        fig = visualize_replay(replay, str(out))
        assert out.exists()
        assert len(fig.axes) == 2
        env.close()
