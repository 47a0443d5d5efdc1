"""
PIR8 Engine Types

Immutable records describing a game. Engine functions never mutate these;
they build new records with dataclasses.replace and return them.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from ..constants import SHIP_STATS


class TerritoryType(str, Enum):
    WATER = "water"
    ISLAND = "island"
    PORT = "port"
    TREASURE = "treasure"
    STORM = "storm"
    REEF = "reef"
    WHIRLPOOL = "whirlpool"


class ShipType(str, Enum):
    SLOOP = "sloop"
    FRIGATE = "frigate"
    GALLEON = "galleon"
    FLAGSHIP = "flagship"


class GameStatus(str, Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"


class GamePhase(str, Enum):
    DEPLOYMENT = "deployment"
    MOVEMENT = "movement"
    COMBAT = "combat"
    RESOURCE_COLLECTION = "resource_collection"


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.x},{self.y}"


@dataclass(frozen=True)
class TerritoryCell:
    coordinate: Coordinate
    type: TerritoryType
    owner: Optional[str] = None
    resources: Dict[str, int] = field(default_factory=dict, compare=False)
    # Set once the cell has been taken from another player; never cleared
    is_contested: bool = False


@dataclass(frozen=True)
class GameMap:
    """Square grid of cells indexed as cells[x][y]"""
    size: int
    cells: Tuple[Tuple[TerritoryCell, ...], ...]

    def in_bounds(self, coordinate: Coordinate) -> bool:
        return 0 <= coordinate.x < self.size and 0 <= coordinate.y < self.size

    def cell_at(self, coordinate: Coordinate) -> Optional[TerritoryCell]:
        """Return the cell at a coordinate, or None when it is off the board."""
        if not self.in_bounds(coordinate):
            return None
        return self.cells[coordinate.x][coordinate.y]

    def iter_cells(self):
        for column in self.cells:
            yield from column

    def with_cell(self, cell: TerritoryCell) -> "GameMap":
        """Return a copy of the map with one cell replaced."""
        x, y = cell.coordinate.x, cell.coordinate.y
        column = self.cells[x][:y] + (cell,) + self.cells[x][y + 1:]
        return replace(self, cells=self.cells[:x] + (column,) + self.cells[x + 1:])


@dataclass(frozen=True)
class Ship:
    id: str
    type: ShipType
    owner: str
    health: int
    max_health: int
    attack: int
    defense: int
    speed: int
    position: Coordinate

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def attack_range(self) -> int:
        return SHIP_STATS[self.type.value]["attack_range"]


RESOURCE_FIELDS = ("gold", "crew", "cannons", "supplies", "wood", "rum")


@dataclass(frozen=True)
class Resources:
    """Resource counters. Arithmetic clamps every counter at zero."""
    gold: int = 0
    crew: int = 0
    cannons: int = 0
    supplies: int = 0
    wood: int = 0
    rum: int = 0

    @classmethod
    def from_dict(cls, values: Dict[str, int]) -> "Resources":
        return cls(**{name: max(0, int(values.get(name, 0))) for name in RESOURCE_FIELDS})

    def to_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in RESOURCE_FIELDS}

    def add(self, other: "Resources") -> "Resources":
        return Resources(**{
            name: max(0, getattr(self, name) + getattr(other, name)) for name in RESOURCE_FIELDS
        })

    def subtract(self, other: "Resources") -> "Resources":
        return Resources(**{
            name: max(0, getattr(self, name) - getattr(other, name)) for name in RESOURCE_FIELDS
        })

    def covers(self, other: "Resources") -> bool:
        """True when every counter is at least the other's."""
        return all(getattr(self, name) >= getattr(other, name) for name in RESOURCE_FIELDS)


@dataclass(frozen=True)
class Player:
    public_key: str
    ships: Tuple[Ship, ...] = ()
    controlled_territories: FrozenSet[str] = frozenset()
    resources: Resources = Resources()
    total_score: int = 0
    is_active: bool = True

    @property
    def living_ships(self) -> Tuple[Ship, ...]:
        return tuple(ship for ship in self.ships if ship.is_alive)

    @property
    def has_living_ship(self) -> bool:
        return any(ship.is_alive for ship in self.ships)

    def get_ship(self, ship_id: str) -> Optional[Ship]:
        for ship in self.ships:
            if ship.id == ship_id:
                return ship
        return None

    def with_ship(self, ship: Ship) -> "Player":
        """Return a copy with the ship of the same id replaced."""
        return replace(self, ships=tuple(ship if s.id == ship.id else s for s in self.ships))


@dataclass(frozen=True)
class GameEvent:
    kind: str
    player: Optional[str]
    turn_number: int
    description: str
    data: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class GameState:
    game_id: str
    game_map: GameMap
    players: Tuple[Player, ...] = ()
    current_player_index: int = 0
    game_status: GameStatus = GameStatus.WAITING
    current_phase: GamePhase = GamePhase.DEPLOYMENT
    turn_number: int = 1
    event_log: Tuple[GameEvent, ...] = ()
    winner: Optional[str] = None
    seed: int = 0
    action_count: int = 0
    pending_action_type: Optional[str] = None

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def get_player(self, public_key: str) -> Optional[Player]:
        for player in self.players:
            if player.public_key == public_key:
                return player
        return None

    def player_index(self, public_key: str) -> Optional[int]:
        for index, player in enumerate(self.players):
            if player.public_key == public_key:
                return index
        return None

    def with_player(self, player: Player) -> "GameState":
        """Return a copy with the player of the same key replaced."""
        return replace(self, players=tuple(
            player if p.public_key == player.public_key else p for p in self.players
        ))

    def find_ship(self, ship_id: str) -> Optional[Ship]:
        for player in self.players:
            ship = player.get_ship(ship_id)
            if ship is not None:
                return ship
        return None

    def ship_at(self, coordinate: Coordinate) -> Optional[Ship]:
        """Return the living ship occupying a coordinate, if any."""
        for player in self.players:
            for ship in player.ships:
                if ship.is_alive and ship.position == coordinate:
                    return ship
        return None


@dataclass(frozen=True)
class Action:
    """Action descriptor submitted by a player."""
    kind: str
    player: str
    ship_id: Optional[str] = None
    target: Optional[Coordinate] = None
    target_ship_id: Optional[str] = None
    ship_type: Optional[ShipType] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "player": self.player,
            "ship_id": self.ship_id,
            "target": str(self.target) if self.target is not None else None,
            "target_ship_id": self.target_ship_id,
            "ship_type": self.ship_type.value if self.ship_type is not None else None,
        }


@dataclass(frozen=True)
class ActionResult:
    accepted: bool
    reason: str
    state: GameState
