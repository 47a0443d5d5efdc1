"""
Combat Resolver

Asymmetric attacker-to-defender damage with defense mitigation, a damage
floor and bounded seeded variance. The attacker takes no damage here;
counter-fire is a second call with the roles swapped.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..config import Config
from ..constants import ATTACK_RANGE_SCALE
from .rng import COMBAT_STREAM, make_rng
from .types import Ship
from .utils import calculate_distance


@dataclass(frozen=True)
class CombatResult:
    defender_ship: Ship
    damage: int
    destroyed: bool
    message: str
    attacker_damage_taken: int = 0


def base_damage(attacker: Ship, defender: Ship, minimum_damage: int) -> int:
    return max(minimum_damage, attacker.attack - defender.defense)


def combat_preview(attacker: Ship, defender: Ship, config: Optional[Config] = None) -> Tuple[int, int]:
    """Lowest and highest damage an attack can deal, without drawing randomness."""
    config = config or Config()
    base = base_damage(attacker, defender, config.minimum_damage)
    low = max(config.minimum_damage, math.floor(base * (1 - config.combat_variance)))
    high = max(config.minimum_damage, math.floor(base * (1 + config.combat_variance)))
    return low, high


def resolve_combat(
    attacker: Ship,
    defender: Ship,
    seed: int,
    config: Optional[Config] = None,
) -> CombatResult:
    """
    Resolve one attack.

    Args:
        attacker: Attacking ship
        defender: Defending ship
        seed: Seed for the variance draw; same inputs give the same result
        config: Combat tuning (minimum damage, variance)

    Returns:
        CombatResult with the damaged defender
    """
    config = config or Config()
    rng = make_rng(seed, COMBAT_STREAM)
    factor = rng.uniform(1 - config.combat_variance, 1 + config.combat_variance)

    base = base_damage(attacker, defender, config.minimum_damage)
    damage = max(config.minimum_damage, math.floor(base * factor))

    health = max(0, defender.health - damage)
    damaged = replace(defender, health=health)
    destroyed = health <= 0

    if destroyed:
        message = f"{attacker.id} destroyed {defender.id}!"
    else:
        message = f"{attacker.id} dealt {damage} damage to {defender.id} ({health} HP remaining)"

    return CombatResult(defender_ship=damaged, damage=damage, destroyed=destroyed, message=message)


def is_in_attack_range(attacker: Ship, defender: Ship) -> bool:
    return calculate_distance(attacker.position, defender.position) <= attacker.attack_range * ATTACK_RANGE_SCALE
