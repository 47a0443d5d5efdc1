"""
Tests for the ship factory.
"""

import pytest

from pir8.constants import SHIP_STATS
from pir8.engine.ships import (
    create_ship,
    create_starting_fleet,
    fleet_summary,
    generate_starting_positions,
)
from pir8.engine.types import Coordinate, ShipType


class TestCreateShip:

    @pytest.mark.parametrize("ship_type", list(ShipType))
    def test_stats_match_template(self, ship_type):
        """Every ship starts at full health with template stats."""
        ship = create_ship(ship_type, "alice", Coordinate(0, 0))
        stats = SHIP_STATS[ship_type.value]
        assert ship.health == ship.max_health == stats["health"]
        assert ship.attack == stats["attack"]
        assert ship.defense == stats["defense"]
        assert ship.speed == stats["speed"]

    def test_id_format(self):
        ship = create_ship("galleon", "alice", Coordinate(2, 3), token=4)
        assert ship.id == "alice_galleon_4"
        assert ship.owner == "alice"
        assert ship.type == ShipType.GALLEON

    def test_ids_unique_per_token(self):
        ids = {create_ship("sloop", "bob", Coordinate(0, 0), token=i).id for i in range(5)}
        assert len(ids) == 5


class TestStartingFleet:

    def test_sloop_and_frigate(self):
        fleet = create_starting_fleet("alice", [Coordinate(1, 1), Coordinate(2, 1)])
        assert [ship.type for ship in fleet] == [ShipType.SLOOP, ShipType.FRIGATE]
        assert fleet[0].position == Coordinate(1, 1)
        assert fleet[1].position == Coordinate(2, 1)
        assert fleet[0].id != fleet[1].id

    def test_too_few_positions_yield_empty_fleet(self):
        """One position is a documented edge case, not an error."""
        assert create_starting_fleet("alice", [Coordinate(1, 1)]) == []
        assert create_starting_fleet("alice", []) == []


class TestStartingPositions:

    def test_corners_on_ten_board(self):
        positions = generate_starting_positions(4, 10)
        assert positions[0] == (Coordinate(1, 1), Coordinate(2, 1))
        assert positions[1] == (Coordinate(8, 1), Coordinate(9, 1))
        assert positions[2] == (Coordinate(1, 8), Coordinate(1, 9))
        assert positions[3] == (Coordinate(8, 9), Coordinate(9, 8))

    def test_positions_distinct(self):
        flat = [c for pair in generate_starting_positions(4, 10) for c in pair]
        assert len(set(flat)) == 8

    def test_too_many_players(self):
        with pytest.raises(ValueError):
            generate_starting_positions(5, 10)


def test_fleet_summary():
    fleet = create_starting_fleet("alice", [Coordinate(1, 1), Coordinate(2, 1)])
    summary = fleet_summary(fleet)
    assert summary["living"] == 2
    assert summary["destroyed"] == 0
    assert summary["health"] == 300
