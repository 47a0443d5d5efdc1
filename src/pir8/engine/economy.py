"""
Resource Economy

Per-turn income from controlled cells, the territory combination bonus
catalog, and ship costs.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from ..constants import (
    BONUS_TIER_ORDER,
    MAX_SHIP_COST_REDUCTION,
    SHIP_COSTS,
    STARTING_RESOURCES,
)
from .territory import count_owned_types
from .types import GameMap, GameState, Player, Resources, ShipType
from .utils import as_coordinate


@dataclass(frozen=True)
class TerritoryBonus:
    """A reward for holding a combination of territory types."""
    id: str
    name: str
    description: str
    requirements: Dict[str, int]
    tier: str
    multipliers: Dict[str, float] = field(default_factory=dict)
    resource_generation: int = 0
    ship_cost_reduction: float = 0.0
    extra_action: bool = False


BONUS_CATALOG: List[TerritoryBonus] = [
    TerritoryBonus(
        "port_starter", "Harbor Master", "Control 2 ports",
        {"port": 2}, "bronze", {"gold": 1.25, "crew": 1.25},
    ),
    TerritoryBonus(
        "island_starter", "Island Chain", "Control 2 islands",
        {"island": 2}, "bronze", {"supplies": 1.3},
    ),
    TerritoryBonus(
        "trade_network", "Trade Network", "Control 3 ports",
        {"port": 3}, "silver", {"gold": 1.5, "crew": 1.5},
        ship_cost_reduction=0.15,
    ),
    TerritoryBonus(
        "supply_chain", "Supply Chain", "Control 3 islands",
        {"island": 3}, "silver", {"supplies": 1.5},
        resource_generation=5,
    ),
    TerritoryBonus(
        "treasure_hunter", "Treasure Hunter", "Control 2 treasure sites",
        {"treasure": 2}, "silver", {"gold": 2.0},
        extra_action=True,
    ),
    TerritoryBonus(
        "naval_supremacy", "Naval Supremacy", "Control 4 ports",
        {"port": 4}, "gold", {"gold": 2.0, "crew": 2.0},
        ship_cost_reduction=0.30,
    ),
    TerritoryBonus(
        "resource_empire", "Resource Empire", "Control 5 islands",
        {"island": 5}, "gold", {"supplies": 2.0},
        resource_generation=10, ship_cost_reduction=0.20,
    ),
    TerritoryBonus(
        "balanced_fleet", "Balanced Fleet", "Control 1 port and 2 islands",
        {"port": 1, "island": 2}, "gold", {"gold": 1.3, "supplies": 1.3},
        ship_cost_reduction=0.20,
    ),
    TerritoryBonus(
        "pirate_king", "Pirate King", "Control 3 treasure sites",
        {"treasure": 3}, "legendary", {"gold": 3.0},
        resource_generation=20, ship_cost_reduction=0.40, extra_action=True,
    ),
    TerritoryBonus(
        "master_strategist", "Master Strategist", "Control 2 ports, 3 islands and 1 treasure site",
        {"port": 2, "island": 3, "treasure": 1}, "legendary",
        {"gold": 2.5, "supplies": 2.5, "crew": 2.0},
        ship_cost_reduction=0.35, extra_action=True,
    ),
]

_CATALOG_ORDER = {bonus.id: index for index, bonus in enumerate(BONUS_CATALOG)}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def starting_resources() -> Resources:
    return Resources.from_dict(STARTING_RESOURCES)


def turn_income(player: Player, game_map: GameMap) -> Resources:
    """
    Sum the generation tables of every indexed cell the player still owns.

    Args:
        player: Player whose territory index is summed
        game_map: Current board

    Returns:
        Raw income before bonuses
    """
    totals: Dict[str, int] = {}
    for key in sorted(player.controlled_territories):
        cell = game_map.cell_at(as_coordinate(key))
        if cell is None or cell.owner != player.public_key:
            continue
        for name, amount in cell.resources.items():
            totals[name] = totals.get(name, 0) + amount
    return Resources.from_dict(totals)


def _territory_counts(player: Player, game_map: GameMap) -> Dict[str, int]:
    return count_owned_types(player.public_key, player.controlled_territories, game_map)


def calculate_active_bonuses(player: Player, game_state: GameState) -> List[TerritoryBonus]:
    """
    Bonuses whose requirements the player meets, sorted by tier for display.

    Ties within a tier keep catalog order.
    """
    counts = _territory_counts(player, game_state.game_map)
    active = [
        bonus for bonus in BONUS_CATALOG
        if all(counts.get(kind, 0) >= needed for kind, needed in bonus.requirements.items())
    ]
    return sorted(active, key=lambda bonus: BONUS_TIER_ORDER[bonus.tier])


def apply_bonuses(income: Resources, bonuses: Sequence[TerritoryBonus]) -> Resources:
    """
    Apply bonuses to raw income.

    All multipliers are applied first in catalog order, then every flat
    resource_generation bump is added to gold and supplies. Results are
    rounded half-up.
    """
    ordered = sorted(bonuses, key=lambda bonus: _CATALOG_ORDER.get(bonus.id, len(_CATALOG_ORDER)))
    values = {name: float(amount) for name, amount in income.to_dict().items()}

    for bonus in ordered:
        for name, multiplier in bonus.multipliers.items():
            values[name] = values.get(name, 0.0) * multiplier

    for bonus in ordered:
        if bonus.resource_generation:
            values["gold"] += bonus.resource_generation
            values["supplies"] += bonus.resource_generation

    return Resources.from_dict({name: round_half_up(value) for name, value in values.items()})


def bonus_income(player: Player, game_state: GameState) -> Resources:
    """Turn income with the player's active bonuses applied."""
    income = turn_income(player, game_state.game_map)
    return apply_bonuses(income, calculate_active_bonuses(player, game_state))


def total_ship_cost_reduction(bonuses: Sequence[TerritoryBonus]) -> float:
    """Summed cost reduction, capped, rounded to whole percent."""
    total = min(MAX_SHIP_COST_REDUCTION, sum(bonus.ship_cost_reduction for bonus in bonuses))
    return round(total, 2)


def has_extra_action(bonuses: Sequence[TerritoryBonus]) -> bool:
    return any(bonus.extra_action for bonus in bonuses)


def ship_cost(ship_type: Union[ShipType, str], bonuses: Sequence[TerritoryBonus] = ()) -> Resources:
    """Build cost of a ship type after cost reduction bonuses (amounts floored)."""
    percent_paid = 100 - int(round(total_ship_cost_reduction(bonuses) * 100))
    base = SHIP_COSTS[ShipType(ship_type).value]
    return Resources.from_dict({
        name: amount * percent_paid // 100 for name, amount in base.items()
    })


def can_afford(resources: Resources, cost: Resources) -> bool:
    return resources.covers(cost)


def next_bonus(player: Player, game_state: GameState) -> Optional[Dict]:
    """
    The closest bonus not yet earned.

    Returns:
        {"bonus", "progress", "missing"} for the first partially met bonus
        in catalog order, or None when nothing is in progress
    """
    counts = _territory_counts(player, game_state.game_map)
    active_ids = {bonus.id for bonus in calculate_active_bonuses(player, game_state)}

    for bonus in BONUS_CATALOG:
        if bonus.id in active_ids:
            continue
        required = sum(bonus.requirements.values())
        have = sum(min(counts.get(kind, 0), needed) for kind, needed in bonus.requirements.items())
        progress = have / required
        if 0 < progress < 1:
            missing = {
                kind: needed - counts.get(kind, 0)
                for kind, needed in bonus.requirements.items()
                if counts.get(kind, 0) < needed
            }
            return {"bonus": bonus, "progress": progress, "missing": missing}
    return None
