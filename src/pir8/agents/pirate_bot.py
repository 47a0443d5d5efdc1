"""
Heuristic practice opponent.

Scores every claim, attack, move, build and collect option available this
turn, then walks the options from best to worst, taking each with a
difficulty-dependent chance.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..constants import HAZARD_DAMAGE
from ..engine import actions as engine_actions
from ..engine.combat import is_in_attack_range
from ..engine.economy import bonus_income, calculate_active_bonuses, can_afford, ship_cost
from ..engine.rng import AGENT_STREAM, make_rng, string_key
from ..engine.types import Action, Coordinate, ShipType, TerritoryType
from ..engine.utils import calculate_distance
from ..envs import actions as env_actions
from .competition_agent import CompetitionAgent


@dataclass(frozen=True)
class Difficulty:
    name: str
    claim_chance: float
    attack_chance: float
    move_chance: float
    build_chance: float
    collect_chance: float


DIFFICULTIES: Dict[str, Difficulty] = {
    "novice": Difficulty("Novice", 1.0, 0.4, 1.0, 0.3, 0.8),
    "pirate": Difficulty("Pirate", 1.0, 0.7, 1.0, 0.5, 0.9),
    "captain": Difficulty("Captain", 1.0, 0.85, 1.0, 0.7, 1.0),
    "admiral": Difficulty("Admiral", 0.95, 0.9, 0.95, 0.8, 1.0),
}

CLAIM_SCORES = {"treasure": 100, "port": 90, "island": 75}
MOVE_SCORES = {"treasure": 100, "port": 70, "island": 40, "water": 15}
ATTACK_TYPE_BONUS = {"flagship": 50, "galleon": 30, "frigate": 20}
BUILD_SCORES = {"flagship": 90, "galleon": 80, "frigate": 70, "sloop": 60}


@dataclass(frozen=True)
class Option:
    kind: str
    score: float
    action: Action
    reason: str


class PirateBot(CompetitionAgent):
    """Scripted opponent with novice/pirate/captain/admiral difficulty."""

    def __init__(self, player_id: str, config, difficulty: str = "pirate"):
        super().__init__(player_id, config)
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty {difficulty!r}; choose from {sorted(DIFFICULTIES)}")
        self.difficulty = DIFFICULTIES[difficulty]
        self._rng = make_rng(0, AGENT_STREAM, string_key(player_id))
        self.last_decision: Optional[Option] = None

    def on_reset(self, seed: int) -> None:
        super().on_reset(seed)
        self._rng = make_rng(seed, AGENT_STREAM, string_key(self.player_id))

    def select_action(self, observation):
        state = self.get_state()
        if state is None or not self.is_my_turn():
            return env_actions.noop_action()

        action = self.choose_action()
        return env_actions.encode_action(action, state, self.config)

    def choose_action(self) -> Action:
        """Pick this turn's engine action."""
        options = sorted(self.collect_options(), key=lambda option: -option.score)
        if not options:
            self.last_decision = None
            return Action(kind=engine_actions.END_TURN, player=self.player_id)

        analysis = self.analyze()
        chosen = options[0]
        for option in options:
            if self._rng.random() < self._selection_chance(option.kind, analysis):
                chosen = option
                break
        self.last_decision = chosen
        return chosen.action

    def _selection_chance(self, kind: str, analysis: Dict[str, bool]) -> float:
        difficulty = self.difficulty
        if kind == engine_actions.CLAIM:
            return difficulty.claim_chance
        elif kind == engine_actions.ATTACK:
            return difficulty.attack_chance * 1.2 if analysis["is_losing"] else difficulty.attack_chance
        elif kind == engine_actions.MOVE:
            return difficulty.move_chance
        elif kind == engine_actions.BUILD:
            return difficulty.build_chance * 0.8 if analysis["is_winning"] else difficulty.build_chance
        return difficulty.collect_chance

    def analyze(self) -> Dict[str, bool]:
        """Compare territory and fleet size with the opponents' average."""
        state = self.get_state()
        me = self.get_player()
        others = [p for p in state.players if p.public_key != self.player_id and p.is_active]
        if not others:
            return {"is_winning": True, "is_losing": False}

        avg_territories = sum(len(p.controlled_territories) for p in others) / len(others)
        avg_ships = sum(len(p.living_ships) for p in others) / len(others)
        territories = len(me.controlled_territories)
        ships = len(me.living_ships)
        return {
            "is_winning": territories > avg_territories * 1.3 and ships >= avg_ships,
            "is_losing": territories < avg_territories * 0.7 or ships < avg_ships * 0.7,
        }

    def collect_options(self) -> List[Option]:
        return (
            self._claim_options()
            + self._attack_options()
            + self._move_options()
            + self._build_options()
            + self._collect_options()
        )

    def _claim_options(self) -> List[Option]:
        state = self.get_state()
        options = []
        for ship in self.get_my_ships():
            cell = state.game_map.cell_at(ship.position)
            if cell is None or cell.type == TerritoryType.WATER or cell.owner == self.player_id:
                continue
            action = Action(engine_actions.CLAIM, self.player_id, ship.id, target=ship.position)
            options.append(Option(engine_actions.CLAIM, CLAIM_SCORES.get(cell.type.value, 70), action,
                                  f"claim {cell.type.value} at {ship.position}"))
        return options

    def _attack_options(self) -> List[Option]:
        state = self.get_state()
        is_losing = self.analyze()["is_losing"]
        late_game = state.turn_number > self.config.max_turns * 2 // 3
        options = []
        for ship in self.get_my_ships():
            for enemy in self.get_enemy_ships():
                if not is_in_attack_range(ship, enemy):
                    continue
                score = 100 + (100 - round(100 * enemy.health / enemy.max_health))
                score += ATTACK_TYPE_BONUS.get(enemy.type.value, 0)
                if is_losing:
                    score += 25
                if late_game:
                    score *= 1.5
                action = Action(engine_actions.ATTACK, self.player_id, ship.id, target_ship_id=enemy.id)
                options.append(Option(engine_actions.ATTACK, score, action, f"attack {enemy.id}"))
        return options

    def _move_options(self) -> List[Option]:
        state = self.get_state()
        size = state.game_map.size
        options = []
        for ship in self.get_my_ships():
            best: Optional[Option] = None
            for x in range(max(0, ship.position.x - ship.speed), min(size, ship.position.x + ship.speed + 1)):
                for y in range(max(0, ship.position.y - ship.speed), min(size, ship.position.y + ship.speed + 1)):
                    target = Coordinate(x, y)
                    distance = calculate_distance(ship.position, target)
                    if target == ship.position or distance > ship.speed or state.ship_at(target) is not None:
                        continue
                    cell = state.game_map.cell_at(target)
                    if cell.type.value in HAZARD_DAMAGE or cell.type == TerritoryType.STORM:
                        score = -50
                    else:
                        score = MOVE_SCORES.get(cell.type.value, 15)
                    if cell.owner is None and cell.type != TerritoryType.WATER:
                        score += 30
                    elif cell.owner == self.player_id:
                        score -= 20
                    score -= 3 * distance
                    if best is None or score > best.score:
                        action = Action(engine_actions.MOVE, self.player_id, ship.id, target=target)
                        best = Option(engine_actions.MOVE, score, action, f"move {ship.id} to {target}")
            if best is not None:
                options.append(best)
        return options

    def _build_options(self) -> List[Option]:
        state = self.get_state()
        player = self.get_player()
        if len(player.living_ships) >= self.config.max_ships_per_player:
            return []
        bonuses = calculate_active_bonuses(player, state)
        ports = [
            cell.coordinate for cell in state.game_map.iter_cells()
            if cell.owner == self.player_id and cell.type == TerritoryType.PORT
            and state.ship_at(cell.coordinate) is None
        ]
        if not ports:
            return []
        for ship_type in (ShipType.FLAGSHIP, ShipType.GALLEON, ShipType.FRIGATE, ShipType.SLOOP):
            if can_afford(player.resources, ship_cost(ship_type, bonuses)):
                action = Action(engine_actions.BUILD, self.player_id, target=ports[0], ship_type=ship_type)
                return [Option(engine_actions.BUILD, BUILD_SCORES[ship_type.value], action,
                               f"build {ship_type.value} at {ports[0]}")]
        return []

    def _collect_options(self) -> List[Option]:
        income = bonus_income(self.get_player(), self.get_state())
        total = sum(income.to_dict().values())
        if total == 0:
            return []
        action = Action(engine_actions.COLLECT, self.player_id)
        return [Option(engine_actions.COLLECT, 50 + min(50, total), action, f"collect {income.to_dict()}")]
