import logging
from argparse import ArgumentParser
from importlib import import_module
from pathlib import Path

from pir8 import Config
from pir8.envs import PirateMultiAgentEnv

SEATS = ("player_0", "player_1")


def try_adjudicate(adjudication_config):
    missing = [seat for seat, agent_class in zip(SEATS, adjudication_config.agent_classes) if agent_class is None]

    if len(missing) == len(SEATS):
        output_outcome(adjudication_config, None)
        return
    elif len(missing) == 1:
        present = [seat for seat in SEATS if seat not in missing]
        output_outcome(adjudication_config, present[0])
        return

    adjudicate(adjudication_config)


def adjudicate(adjudication_config):
    config = Config()
    if adjudication_config.random_seed is not None:
        config.seed = adjudication_config.random_seed

    replay_path = Path(adjudication_config.replay_path)
    env = PirateMultiAgentEnv(config=config, enable_replay=True, replay_dir=str(replay_path.parent))

    env.set_agent_classes(*(
        (lambda seat=seat, agent_class=agent_class: agent_class(seat, config))
        for seat, agent_class in zip(SEATS, adjudication_config.agent_classes)
    ))

    observations, infos = env.reset()

    for step in range(config.max_episode_steps):
        actions = {
            seat: env.competition_agents[seat].select_action(observations[seat]) for seat in SEATS
        }

        observations, rewards, terminations, truncations, infos = env.step(actions)

        if terminations[SEATS[0]] or truncations[SEATS[0]]:
            print(f"Game ended at step {step}: {infos[SEATS[0]]['termination_cause']}")
            break

    if env.replay_recorder.last_path is not None:
        env.replay_recorder.last_path.replace(replay_path)

    output_outcome(adjudication_config, env.game_state.winner)

    env.close()


def output_outcome(adjudication_config, winner):
    print(f"Match was won by {winner}")

    with open(adjudication_config.outcome_path, 'w') as f:
        f.write(winner or "draw")


class AdjudicationConfig:
    def __init__(self):
        self.random_seed = None
        self.agent_classes = [None, None]

        self.replay_path = None
        self.outcome_path = None


def import_agent_class(package_name, module_name, class_name):
    try:
        module = import_module(module_name, package=package_name)
    except ImportError as exc:
        print(f"Error trying to import module {module_name} from package {package_name}: {exc}")
        return None

    agent_class = getattr(module, class_name)

    assert agent_class

    return agent_class


def create_config(args):
    adjudication_config = AdjudicationConfig()
    adjudication_config.random_seed = args.random_seed
    adjudication_config.agent_classes = [
        import_agent_class(args.player_0_agent_package, args.player_0_agent_module, args.player_0_agent_class),
        import_agent_class(args.player_1_agent_package, args.player_1_agent_module, args.player_1_agent_class),
    ]
    adjudication_config.replay_path = args.replay_path
    adjudication_config.outcome_path = args.outcome_path

    return adjudication_config


if __name__ == "__main__":
    parser = ArgumentParser()
    parser.add_argument("--player_0_agent_package", type=str, default=None)
    parser.add_argument("--player_0_agent_module", type=str, required=True)
    parser.add_argument("--player_0_agent_class", type=str, required=True)
    parser.add_argument("--player_1_agent_package", type=str, default=None)
    parser.add_argument("--player_1_agent_module", type=str, required=True)
    parser.add_argument("--player_1_agent_class", type=str, required=True)
    parser.add_argument("--replay_path", type=str, required=True)
    parser.add_argument("--outcome_path", type=str, required=True)
    parser.add_argument("--random_seed", type=int)
    parser.add_argument("--log_level", type=str, default="WARNING")

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    adjudication_config = create_config(args)

    try_adjudicate(adjudication_config)
