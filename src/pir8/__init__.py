"""
PIR8 - deterministic naval conquest engine with a multi-agent practice environment
"""

__version__ = "0.1.0"

from .config import Config
from .engine import apply_action, create_game, join_game, start_game
from .envs import PirateMultiAgentEnv

__all__ = [
    "Config",
    "PirateMultiAgentEnv",
    "apply_action",
    "create_game",
    "join_game",
    "start_game",
]
