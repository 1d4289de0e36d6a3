# main.py
import argparse

import numpy as np

import config
from blueprints import load_blueprints
from predsim.logging_config import setup_logging
from predsim.simulation import Simulation


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Run the predator evolution simulation headless.")
    ap.add_argument("--ticks", type=int, default=config.DEFAULT_TICKS)
    ap.add_argument("--dt", type=float, default=config.TICK_DT, help="simulated seconds per tick")
    ap.add_argument("--seed", type=int, default=config.SEED)
    ap.add_argument("--population", type=int, default=None, help="override the initial count of every species")
    ap.add_argument("--blueprints", default=None, help="YAML file with blueprint overrides")
    ap.add_argument("--log-level", default=config.LOG_LEVEL)
    ap.add_argument("--log-file", default=config.LOG_FILE)
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = setup_logging(args.log_level, args.log_file)

    blueprints = load_blueprints(args.blueprints)
    if args.population is not None:
        for blueprint in blueprints.values():
            blueprint["count"] = args.population

    sim = Simulation(config.WORLD_WIDTH, config.WORLD_HEIGHT,
                     blueprints=blueprints, rng=np.random.default_rng(args.seed))
    sim.populate()
    stats = sim.run(args.ticks, dt=args.dt)

    logger.info(
        f"Finished {stats['tick']} ticks ({stats['time']:.1f}s simulated): "
        f"{stats['alive']} alive, {stats['births']} births, {stats['deaths']} deaths, "
        f"max generation {stats['max_generation']}"
    )
    return stats


if __name__ == '__main__':
    main()
