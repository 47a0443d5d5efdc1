import logging

from pir8 import Config
from pir8.agents import CompetitionAgent, PirateBot
from pir8.envs import PirateMultiAgentEnv
from pir8.training import evaluate, print_evaluation_results

logging.basicConfig(level=logging.INFO)

# Create environment
config = Config()
env = PirateMultiAgentEnv(config=config, render_mode="ansi")

# Register agent classes (random agent vs. heuristic bot)
env.set_agent_classes(
    lambda: CompetitionAgent("player_0", config),
    lambda: PirateBot("player_1", config, difficulty="captain")
)

# Play one game with a fixed seed
observations, infos = env.reset(seed=8)
print(env.render())

for step in range(config.max_episode_steps):
    actions = {
        name: env.competition_agents[name].select_action(observations[name])
        for name in env.possible_agents
    }

    observations, rewards, terminations, truncations, infos = env.step(actions)

    if terminations["player_0"] or truncations["player_0"]:
        print(f"Game ended at step {step}: {infos['player_0']['termination_cause']}, winner={env.game_state.winner}")
        break

print(env.render())

# Short evaluation run
results = evaluate(env, episodes=5, seeds=range(5))
print_evaluation_results(results)

env.close()
print("Test completed!")
