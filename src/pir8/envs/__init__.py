from .pirate_multiagent_env import PirateMultiAgentEnv

__all__ = ["PirateMultiAgentEnv"]
