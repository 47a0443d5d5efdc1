"""Shared builders for hand-made boards and players."""

from dataclasses import replace

import pytest

from pir8.constants import TERRITORY_GENERATION
from pir8.engine.economy import starting_resources
from pir8.engine.ships import create_ship
from pir8.engine.types import (
    Coordinate,
    GameMap,
    GameState,
    GameStatus,
    Player,
    TerritoryCell,
    TerritoryType,
)


def make_map(size=5, cells=None, owners=None):
    """
    Build an all-water board with selected cells overridden.

    Args:
        cells: {(x, y): "port", ...}
        owners: {(x, y): "alice", ...}
    """
    cells = cells or {}
    owners = owners or {}
    columns = []
    for x in range(size):
        column = []
        for y in range(size):
            territory_type = TerritoryType(cells.get((x, y), "water"))
            column.append(TerritoryCell(
                coordinate=Coordinate(x, y),
                type=territory_type,
                owner=owners.get((x, y)),
                resources=dict(TERRITORY_GENERATION[territory_type.value]),
            ))
        columns.append(tuple(column))
    return GameMap(size=size, cells=tuple(columns))


def make_player(key, ships=(), owned=(), resources=None):
    """Player owning the given (x, y) cells, with ships given as (type, (x, y)) pairs."""
    built = tuple(
        create_ship(ship_type, key, Coordinate(*position), token=index + 1)
        for index, (ship_type, position) in enumerate(ships)
    )
    return Player(
        public_key=key,
        ships=built,
        controlled_territories=frozenset(f"{x},{y}" for x, y in owned),
        resources=resources or starting_resources(),
    )


def make_state(game_map, players, seed=1, current=0):
    return GameState(
        game_id="test",
        game_map=game_map,
        players=tuple(players),
        current_player_index=current,
        game_status=GameStatus.ACTIVE,
        seed=seed,
    )


def with_health(player, ship_index, health):
    ship = replace(player.ships[ship_index], health=health)
    return player.with_ship(ship)


@pytest.fixture
def two_player_state():
    """5x5 board: alice's sloop at (1,1) next to an island, bob's frigate at (3,3)."""
    game_map = make_map(5, cells={(1, 2): "island", (2, 2): "port", (0, 0): "reef"})
    alice = make_player("alice", ships=[("sloop", (1, 1))])
    bob = make_player("bob", ships=[("frigate", (3, 3))])
    return make_state(game_map, [alice, bob])
