"""
Tests for the combat resolver.
"""

from dataclasses import replace

from pir8.config import Config
from pir8.engine.combat import combat_preview, is_in_attack_range, resolve_combat
from pir8.engine.ships import create_ship
from pir8.engine.types import Coordinate


def sloop_at(x, y, owner="alice"):
    return create_ship("sloop", owner, Coordinate(x, y))


class TestDamage:
    """Damage formula and bounds"""

    def test_damage_floor(self):
        """attack <= defense still deals at least the minimum damage."""
        attacker = sloop_at(0, 0)  # attack 25
        defender = create_ship("flagship", "bob", Coordinate(1, 0))  # defense 60
        for seed in range(50):
            result = resolve_combat(attacker, defender, seed)
            assert result.damage >= 10
            assert result.defender_ship.health == 500 - result.damage

    def test_variance_bounds(self):
        """Damage stays within +-15% of base damage."""
        attacker = create_ship("flagship", "alice", Coordinate(0, 0))  # attack 80
        defender = sloop_at(1, 0, "bob")  # defense 10 -> base 70
        low, high = combat_preview(attacker, defender)
        assert (low, high) == (59, 80)
        damages = {resolve_combat(attacker, defender, seed).damage for seed in range(200)}
        assert min(damages) >= low
        assert max(damages) <= high
        assert len(damages) > 1, "Variance should spread damage"

    def test_deterministic_per_seed(self):
        attacker = create_ship("galleon", "alice", Coordinate(0, 0))
        defender = create_ship("frigate", "bob", Coordinate(1, 0))
        assert resolve_combat(attacker, defender, 99) == resolve_combat(attacker, defender, 99)

    def test_health_clamps_and_destroys(self):
        attacker = create_ship("flagship", "alice", Coordinate(0, 0))
        defender = replace(sloop_at(1, 0, "bob"), health=5)
        result = resolve_combat(attacker, defender, 1)
        assert result.defender_ship.health == 0
        assert result.destroyed
        assert "destroyed" in result.message

    def test_attacker_takes_no_damage(self):
        result = resolve_combat(sloop_at(0, 0), sloop_at(1, 0, "bob"), 3)
        assert result.attacker_damage_taken == 0

    def test_damage_message(self):
        result = resolve_combat(sloop_at(0, 0), create_ship("flagship", "bob", Coordinate(1, 0)), 3)
        assert not result.destroyed
        assert f"dealt {result.damage} damage" in result.message

    def test_configured_minimum(self):
        config = Config(minimum_damage=20, combat_variance=0.0)
        result = resolve_combat(sloop_at(0, 0), create_ship("flagship", "bob", Coordinate(1, 0)), 3, config)
        assert result.damage == 20


class TestRange:

    def test_adjacent_in_range(self):
        assert is_in_attack_range(sloop_at(0, 0), sloop_at(1, 1, "bob"))

    def test_sloop_out_of_range(self):
        assert not is_in_attack_range(sloop_at(0, 0), sloop_at(2, 0, "bob"))

    def test_galleon_reaches_further(self):
        galleon = create_ship("galleon", "alice", Coordinate(0, 0))
        assert is_in_attack_range(galleon, sloop_at(3, 0, "bob"))
        assert not is_in_attack_range(galleon, sloop_at(4, 0, "bob"))
