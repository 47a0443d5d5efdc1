"""
Evaluation Module

Runs repeated practice games between CompetitionAgents and summarizes the
outcomes.
"""

import numpy as np
from typing import Any, Dict, Optional, Sequence


def evaluate(
    env,
    episodes: int = 10,
    seeds: Optional[Sequence[int]] = None,
    verbose: bool = False
) -> Dict[str, Any]:
    """
    Evaluate the agents registered on a PirateMultiAgentEnv.

    Args:
        env: PirateMultiAgentEnv with agents set
        episodes: Number of games to play
        seeds: Optional per-game seeds; game i uses seeds[i]
        verbose: If True, print game results

    Returns:
        dict with statistics per agent plus shared totals:
        {
            "player_0": {"mean_reward": ..., "std_reward": ..., "wins": ..., ...},
            ...,
            "draws": ...,
            "mean_steps": ...,
            "victory_reasons": {...},
            "episodes": ...
        }
    """
    names = list(env.possible_agents)
    rewards_by_agent = {name: [] for name in names}
    wins = {name: 0 for name in names}
    victory_reasons: Dict[str, int] = {}
    draws = 0
    total_steps = []

    for episode in range(episodes):
        seed = seeds[episode] if seeds is not None else None
        obs, info = env.reset(seed=seed)

        episode_rewards = {name: 0.0 for name in names}
        episode_steps = 0
        done = False

        while not done:
            actions = {
                name: env.competition_agents[name].select_action(obs[name]) for name in names
            }
            obs, rewards, terminations, truncations, infos = env.step(actions)

            for name in names:
                episode_rewards[name] += rewards[name]
            episode_steps += 1

            done = terminations[names[0]] or truncations[names[0]]

        for name in names:
            rewards_by_agent[name].append(episode_rewards[name])
        total_steps.append(episode_steps)

        cause = infos[names[0]].get("termination_cause")
        victory_reasons[cause] = victory_reasons.get(cause, 0) + 1

        winner = env.game_state.winner
        if winner in wins:
            wins[winner] += 1
        else:
            draws += 1

        if verbose:
            summary = ", ".join(f"{name}={episode_rewards[name]:.2f}" for name in names)
            print(f"Episode {episode + 1}/{episodes}: Winner={winner or 'Draw'} ({cause}), "
                  f"{summary}, Steps={episode_steps}")

    results: Dict[str, Any] = {}
    for name in names:
        results[name] = {
            "mean_reward": float(np.mean(rewards_by_agent[name])),
            "std_reward": float(np.std(rewards_by_agent[name])),
            "total_reward": float(np.sum(rewards_by_agent[name])),
            "wins": wins[name],
            "win_rate": wins[name] / episodes,
        }
    results.update({
        "draws": draws,
        "mean_steps": float(np.mean(total_steps)),
        "std_steps": float(np.std(total_steps)),
        "victory_reasons": victory_reasons,
        "episodes": episodes,
    })
    return results


def print_evaluation_results(results: Dict[str, Any]):
    """
    Pretty print evaluation results from evaluate.

    Args:
        results: Results dict from evaluate
    """
    players = [key for key, value in results.items() if isinstance(value, dict) and "win_rate" in value]

    print("\n" + "="*60)
    print("EVALUATION RESULTS")
    print("="*60)
    print(f"Episodes: {results['episodes']}")
    print(f"Mean Steps: {results['mean_steps']:.1f} ± {results['std_steps']:.1f}")
    print()

    for name in players:
        stats = results[name]
        print(f"{name.upper()}:")
        print(f"  Mean Reward: {stats['mean_reward']:.2f} ± {stats['std_reward']:.2f}")
        print(f"  Total Reward: {stats['total_reward']:.2f}")
        print(f"  Wins: {stats['wins']} ({stats['win_rate']*100:.1f}%)")
        print()

    print(f"DRAWS: {results['draws']}")
    print("VICTORY REASONS: " + ", ".join(f"{k}={v}" for k, v in results["victory_reasons"].items()))
    print("="*60)
