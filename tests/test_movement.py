"""
Tests for the movement resolver.
"""

from dataclasses import replace

from pir8.engine.movement import resolve_move
from pir8.engine.ships import create_ship
from pir8.engine.types import Coordinate

from conftest import make_map


class TestMovementBounds:
    """Speed and board limits"""

    def test_sloop_diagonal_within_speed(self):
        """Sloop (speed 3) at (0,0) reaches (2,2): distance 2.83."""
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        result = resolve_move(sloop, Coordinate(2, 2), make_map(10))
        assert result.accepted
        assert result.updated_ship.position == Coordinate(2, 2)
        assert result.updated_ship.health == 100

    def test_sloop_cannot_exceed_speed(self):
        """Sloop at (0,0) cannot reach (4,0)."""
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        result = resolve_move(sloop, Coordinate(4, 0), make_map(10))
        assert not result.accepted
        assert "speed" in result.reason.lower()
        assert result.updated_ship is None

    def test_galleon_moves_one(self):
        galleon = create_ship("galleon", "alice", Coordinate(3, 3))
        assert resolve_move(galleon, Coordinate(4, 3), make_map(10)).accepted
        assert not resolve_move(galleon, Coordinate(4, 4), make_map(10)).accepted

    def test_off_board(self):
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        result = resolve_move(sloop, Coordinate(-1, 0), make_map(5))
        assert not result.accepted
        assert result.reason == "Invalid destination"

    def test_speed_checked_before_bounds(self):
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        result = resolve_move(sloop, Coordinate(-5, 0), make_map(5))
        assert "speed" in result.reason.lower()

    def test_destroyed_ship_cannot_move(self):
        sloop = replace(create_ship("sloop", "alice", Coordinate(0, 0)), health=0)
        assert not resolve_move(sloop, Coordinate(1, 0), make_map(5)).accepted


class TestHazards:
    """Arrival damage"""

    def test_reef_damage(self):
        game_map = make_map(5, cells={(1, 0): "reef"})
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        result = resolve_move(sloop, Coordinate(1, 0), game_map)
        assert result.accepted
        assert result.damage == 25
        assert result.updated_ship.health == 75
        assert "reef" in result.reason

    def test_whirlpool_damage(self):
        game_map = make_map(5, cells={(1, 0): "whirlpool"})
        frigate = create_ship("frigate", "alice", Coordinate(0, 0))
        result = resolve_move(frigate, Coordinate(1, 0), game_map)
        assert result.updated_ship.health == 150

    def test_hazard_health_clamps_at_zero(self):
        """Health never goes negative; the ship arrives destroyed."""
        game_map = make_map(5, cells={(1, 0): "whirlpool"})
        sloop = replace(create_ship("sloop", "alice", Coordinate(0, 0)), health=30)
        result = resolve_move(sloop, Coordinate(1, 0), game_map)
        assert result.accepted
        assert result.updated_ship.health == 0
        assert not result.updated_ship.is_alive

    def test_storm_is_harmless(self):
        game_map = make_map(5, cells={(1, 0): "storm"})
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        result = resolve_move(sloop, Coordinate(1, 0), game_map)
        assert result.updated_ship.health == 100
        assert result.reason == "Ship moved successfully"

    def test_input_ship_unchanged(self):
        game_map = make_map(5, cells={(1, 0): "reef"})
        sloop = create_ship("sloop", "alice", Coordinate(0, 0))
        resolve_move(sloop, Coordinate(1, 0), game_map)
        assert sloop.health == 100
        assert sloop.position == Coordinate(0, 0)

    def test_staying_put_is_not_a_move(self):
        """A ship parked on a whirlpool takes no damage from a zero-distance move."""
        game_map = make_map(5, cells={(1, 0): "whirlpool"})
        sloop = create_ship("sloop", "alice", Coordinate(1, 0))
        result = resolve_move(sloop, Coordinate(1, 0), game_map)
        assert not result.accepted
        assert result.reason == "Ship is already at destination"
        assert result.updated_ship is None
