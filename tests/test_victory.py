"""
Tests for terminal detection, winner selection and scoring.
"""

from dataclasses import replace

from pir8.config import Config
from pir8.engine.types import Resources
from pir8.engine.victory import (
    ECONOMIC_DOMINANCE,
    FLEET_DESTROYED,
    TERRITORY_MAJORITY,
    TURN_LIMIT,
    calculate_player_score,
    determine_winner,
    evaluate_victory,
    is_game_over,
    rank_players,
)

from conftest import make_map, make_player, with_health

# Ten valuable cells in column 0 and 1
VALUABLE = [(0, y) for y in range(5)] + [(1, y) for y in range(5)]


def valuable_map(alice_count):
    cells = {c: ("port" if i % 2 else "treasure") for i, c in enumerate(VALUABLE)}
    owners = {c: "alice" for c in VALUABLE[:alice_count]}
    return make_map(5, cells=cells, owners=owners)


def fleets():
    alice = make_player("alice", ships=[("sloop", (3, 3))])
    bob = make_player("bob", ships=[("sloop", (4, 4))])
    return alice, bob


class TestTerritoryMajority:

    def test_six_of_ten_ends_game(self):
        alice, bob = fleets()
        alice = replace(alice, controlled_territories=frozenset(f"{x},{y}" for x, y in VALUABLE[:6]))
        assert is_game_over([alice, bob], valuable_map(6))
        result = evaluate_victory([alice, bob], valuable_map(6))
        assert result.winner == "alice"
        assert result.reason == TERRITORY_MAJORITY

    def test_five_of_ten_does_not(self):
        alice, bob = fleets()
        assert not is_game_over([alice, bob], valuable_map(5))

    def test_no_valuable_cells(self):
        alice, bob = fleets()
        assert not is_game_over([alice, bob], make_map(5))


class TestFleetDestroyed:

    def test_fleet_wipe_scenario(self):
        """A's only ship at 0 health, B's at 50: game over and B wins."""
        alice, bob = fleets()
        alice = with_health(alice, 0, 0)
        bob = with_health(bob, 0, 50)
        assert is_game_over([alice, bob], make_map(5))
        assert determine_winner([alice, bob], make_map(5)) == "bob"
        assert evaluate_victory([alice, bob], make_map(5)).reason == FLEET_DESTROYED

    def test_everyone_destroyed(self):
        alice, bob = fleets()
        alice = with_health(alice, 0, 0)
        bob = with_health(bob, 0, 0)
        assert is_game_over([alice, bob], make_map(5))
        assert determine_winner([alice, bob], make_map(5)) is None

    def test_both_alive(self):
        alice, bob = fleets()
        assert not is_game_over([alice, bob], make_map(5))

    def test_resigned_player_loses(self):
        alice, bob = fleets()
        alice = replace(alice, is_active=False)
        assert is_game_over([alice, bob], make_map(5))
        assert determine_winner([alice, bob], make_map(5)) == "bob"


class TestOtherConditions:

    def test_economic_dominance(self):
        alice, bob = fleets()
        alice = replace(alice, resources=Resources(gold=15000))
        result = evaluate_victory([alice, bob], make_map(5))
        assert result.reason == ECONOMIC_DOMINANCE
        assert result.winner == "alice"

    def test_turn_limit_falls_back_to_score(self):
        alice, bob = fleets()
        bob = replace(bob, resources=Resources(gold=5000))
        result = evaluate_victory([alice, bob], make_map(5), Config(max_turns=10), turn_number=10)
        assert result.is_over
        assert result.reason == TURN_LIMIT
        assert result.winner == "bob"

    def test_before_turn_limit(self):
        alice, bob = fleets()
        assert not is_game_over([alice, bob], make_map(5), Config(max_turns=10), turn_number=9)


class TestScore:

    def test_composite_score(self):
        game_map = make_map(5, cells={(0, 0): "treasure", (0, 1): "island"},
                            owners={(0, 0): "alice", (0, 1): "alice"})
        alice = make_player("alice", ships=[("sloop", (3, 3))], owned=[(0, 0), (0, 1)],
                            resources=Resources(gold=100, crew=10, cannons=2, supplies=5))
        # resources 100 + 20 + 10 + 5; sloop 100 + 125; territory 100 + 25
        assert calculate_player_score(alice, game_map) == 135 + 225 + 125

    def test_destroyed_ships_do_not_score(self):
        alice = make_player("alice", ships=[("sloop", (3, 3))], resources=Resources())
        assert calculate_player_score(with_health(alice, 0, 0), make_map(5)) == 0

    def test_lost_cells_do_not_score(self):
        game_map = make_map(5, cells={(0, 0): "treasure"}, owners={(0, 0): "bob"})
        alice = make_player("alice", owned=[(0, 0)], resources=Resources())
        assert calculate_player_score(alice, game_map) == 0

    def test_ties_keep_first_player(self):
        alice, bob = fleets()
        assert [p.public_key for p in rank_players([alice, bob], make_map(5))] == ["alice", "bob"]
        assert [p.public_key for p in rank_players([bob, alice], make_map(5))] == ["bob", "alice"]
        assert determine_winner([alice, bob], make_map(5)) == "alice"


def test_default_turn_limit_is_fifty():
    alice, bob = fleets()
    assert Config().max_turns == 50
    assert not is_game_over([alice, bob], make_map(5), Config(), turn_number=49)
    assert evaluate_victory([alice, bob], make_map(5), Config(), turn_number=50).reason == TURN_LIMIT
