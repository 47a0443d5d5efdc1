"""
PIR8 Constants

Static rule tables for the game engine. These define the game itself;
user-tunable settings live in config.py.
"""

# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Board
DEFAULT_MAP_SIZE = 10

# Fleet
MAX_SHIPS_PER_PLAYER = 6

# Turn limit before falling back to score ranking
MAX_TURNS = 50

# Combat
MINIMUM_DAMAGE = 10
COMBAT_VARIANCE = 0.15
ATTACK_RANGE_SCALE = 1.5

# Two cells are adjacent when their Euclidean distance is within this bound
ADJACENCY_DISTANCE = 1.5

# Ship stat templates: health, attack, defense, speed, attack range (cells)
SHIP_STATS = {
    "sloop": {"health": 100, "attack": 25, "defense": 10, "speed": 3, "attack_range": 1},
    "frigate": {"health": 200, "attack": 40, "defense": 25, "speed": 2, "attack_range": 1},
    "galleon": {"health": 350, "attack": 60, "defense": 40, "speed": 1, "attack_range": 2},
    "flagship": {"health": 500, "attack": 80, "defense": 60, "speed": 1, "attack_range": 2},
}

# Build costs
SHIP_COSTS = {
    "sloop": {"gold": 500, "crew": 10, "cannons": 5, "supplies": 20},
    "frigate": {"gold": 1200, "crew": 25, "cannons": 15, "supplies": 40},
    "galleon": {"gold": 2500, "crew": 50, "cannons": 30, "supplies": 80},
    "flagship": {"gold": 5000, "crew": 100, "cannons": 60, "supplies": 150},
}

STARTING_RESOURCES = {
    "gold": 1000,
    "crew": 50,
    "cannons": 10,
    "supplies": 100,
    "wood": 0,
    "rum": 0,
}

# Per-turn yield of a controlled cell, by territory type
TERRITORY_GENERATION = {
    "water": {},
    "island": {"supplies": 3},
    "port": {"gold": 5, "crew": 2},
    "treasure": {"gold": 10},
    "storm": {},
    "reef": {},
    "whirlpool": {},
}

# Damage taken on arrival
HAZARD_DAMAGE = {
    "reef": 25,
    "whirlpool": 50,
}

# Map generation bands: (upper bound on normalized distance, [(type, weight), ...]).
# Weights inside a band are cumulative-drawn against one uniform sample per cell.
MAP_BANDS = [
    (0.2, [("treasure", 0.7), ("port", 0.3)]),
    (0.5, [("island", 0.4), ("port", 0.2), ("water", 0.4)]),
    (0.8, [("storm", 0.1), ("reef", 0.05), ("water", 0.85)]),
    (float("inf"), [("whirlpool", 0.2), ("storm", 0.1), ("water", 0.7)]),
]

# Territory points in the composite score
TERRITORY_SCORE = {
    "treasure": 100,
    "port": 50,
    "island": 25,
}
DEFAULT_TERRITORY_SCORE = 10

# Composite score weights
SCORE_WEIGHTS = {
    "gold": 1,
    "crew": 2,
    "cannons": 5,
    "supplies": 1,
}
SHIP_ATTACK_SCORE_WEIGHT = 5

# Economic value weights used for the dominance victory
ECONOMIC_VALUE_WEIGHTS = {
    "gold": 1,
    "crew": 5,
    "cannons": 10,
    "supplies": 2,
    "wood": 2,
    "rum": 10,
}
ECONOMIC_VICTORY_THRESHOLD = 15000

# Cells whose control decides the territory majority victory
VALUABLE_TERRITORY_TYPES = ("treasure", "port")

MAX_SHIP_COST_REDUCTION = 0.5

BONUS_TIER_ORDER = {"legendary": 0, "gold": 1, "silver": 2, "bronze": 3}

# Event log retention
EVENT_LOG_LIMIT = 50

# Starting corners as (first ship, second ship) offsets; resolved against map size
STARTING_CORNERS = [
    ((1, 1), (2, 1)),
    ((-2, 1), (-1, 1)),
    ((1, -2), (1, -1)),
    ((-2, -1), (-1, -2)),
]
