"""
Space Tests

Tests for action decoding, encoding and observation layout.
"""

import numpy as np
from gymnasium import spaces

from pir8.config import Config
from pir8.engine import actions as engine_actions
from pir8.engine.types import Action, Coordinate, ShipType
from pir8.envs import actions as env_actions
from pir8.envs.observations import (
    CELL_FEATURES,
    PLAYER_FEATURES,
    build_observation_space,
    compute_observation,
    observation_size,
)

CONFIG = Config(map_size=5)


def raw(**fields):
    action = env_actions.noop_action()
    action.update(fields)
    return action


class TestActionSpace:

    def test_layout(self):
        space = env_actions.build_action_space(CONFIG)
        assert isinstance(space, spaces.Dict)
        assert space["action_type"].n == 6
        assert space["target_cell"].n == 25
        assert space["ship_index"].n == CONFIG.max_ships_per_player

    def test_noop_is_in_space(self):
        assert env_actions.build_action_space(CONFIG).contains(env_actions.noop_action())


class TestDecode:

    def test_end_turn(self, two_player_state):
        action = env_actions.decode_action(raw(), two_player_state, "alice", CONFIG)
        assert action.kind == engine_actions.END_TURN
        assert action.player == "alice"

    def test_move_target_is_grid_index(self, two_player_state):
        # index 7 on a 5x5 board is x=1, y=2
        action = env_actions.decode_action(
            raw(action_type=env_actions.MOVE, target_cell=7), two_player_state, "alice", CONFIG
        )
        assert action.kind == engine_actions.MOVE
        assert action.ship_id == "alice_sloop_1"
        assert action.target == Coordinate(1, 2)

    def test_claim_uses_ship_position(self, two_player_state):
        action = env_actions.decode_action(
            raw(action_type=env_actions.CLAIM), two_player_state, "alice", CONFIG
        )
        assert action.target == Coordinate(1, 1)

    def test_attack_resolves_enemy_index(self, two_player_state):
        action = env_actions.decode_action(
            raw(action_type=env_actions.ATTACK), two_player_state, "alice", CONFIG
        )
        assert action.target_ship_id == "bob_frigate_1"

    def test_build(self, two_player_state):
        action = env_actions.decode_action(
            raw(action_type=env_actions.BUILD, target_cell=12, ship_type=1), two_player_state, "alice", CONFIG
        )
        assert action.target == Coordinate(2, 2)
        assert action.ship_type == ShipType.FRIGATE

    def test_unresolved_indexes(self, two_player_state):
        assert env_actions.decode_action(
            raw(action_type=env_actions.MOVE, ship_index=3), two_player_state, "alice", CONFIG
        ) is None
        assert env_actions.decode_action(
            raw(action_type=env_actions.ATTACK, target_ship=4), two_player_state, "alice", CONFIG
        ) is None
        assert env_actions.decode_action(raw(action_type=9), two_player_state, "alice", CONFIG) is None

    def test_encode_inverts_decode(self, two_player_state):
        action = Action(engine_actions.MOVE, "alice", "alice_sloop_1", target=Coordinate(1, 2))
        encoded = env_actions.encode_action(action, two_player_state, CONFIG)
        assert encoded["action_type"] == env_actions.MOVE
        assert encoded["target_cell"] == 7
        assert env_actions.decode_action(encoded, two_player_state, "alice", CONFIG) == action


class TestValidActionTypes:

    def test_opening_options(self, two_player_state):
        assert env_actions.valid_action_types(two_player_state, "alice", CONFIG) == [
            env_actions.END_TURN, env_actions.MOVE,
        ]

    def test_empty_off_turn(self, two_player_state):
        assert env_actions.valid_action_types(two_player_state, "bob", CONFIG) == []


class TestObservation:

    def test_size_and_bounds(self, two_player_state):
        space = build_observation_space(CONFIG)
        observation = compute_observation(two_player_state, "alice", CONFIG)
        assert observation.shape == (25 * CELL_FEATURES + PLAYER_FEATURES,)
        assert observation.shape == (observation_size(CONFIG),)
        assert observation.dtype == np.float32
        assert space.contains(observation)

    def test_ships_from_own_perspective(self, two_player_state):
        alice_view = compute_observation(two_player_state, "alice", CONFIG)
        bob_view = compute_observation(two_player_state, "bob", CONFIG)
        cells = alice_view[:-PLAYER_FEATURES].reshape(5, 5, CELL_FEATURES)
        assert cells[1, 1, CELL_FEATURES - 2] == 1.0
        assert cells[3, 3, CELL_FEATURES - 1] == 1.0
        assert alice_view[-1] == 1.0
        assert bob_view[-1] == 0.0
