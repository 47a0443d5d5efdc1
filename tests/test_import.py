"""Smoke test for package imports."""


def test_imports():
    import pir8
    from pir8 import Config, PirateMultiAgentEnv
    from pir8.agents import CompetitionAgent, PirateBot
    from pir8.engine import apply_action, create_game_map, resolve_combat
    from pir8.training import evaluate, print_evaluation_results

    assert pir8.__version__ == "0.1.0"
    assert Config().map_size == 10


def test_evaluate_runs():
    from pir8 import Config, PirateMultiAgentEnv
    from pir8.agents import PirateBot
    from pir8.training import evaluate, print_evaluation_results

    config = Config(map_size=8, max_turns=10)
    env = PirateMultiAgentEnv(config=config)
    env.set_agents(PirateBot("player_0", config), PirateBot("player_1", config))
    results = evaluate(env, episodes=2, seeds=[1, 2])
    assert results["episodes"] == 2
    assert results["player_0"]["wins"] + results["player_1"]["wins"] + results["draws"] == 2
    print_evaluation_results(results)
    env.close()
