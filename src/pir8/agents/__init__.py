from .competition_agent import CompetitionAgent
from .pirate_bot import DIFFICULTIES, PirateBot

__all__ = ["CompetitionAgent", "PirateBot", "DIFFICULTIES"]
