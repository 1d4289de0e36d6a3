# predsim/simulation.py
import math

import numpy as np

import config
from blueprints import SPECIES_BLUEPRINTS
from predsim.creatures.agent import Agent
from predsim.interfaces import Actuator, Spawner
from predsim.logging_config import get_logger, log_birth, log_death
from predsim.movement import KinematicActuator
from predsim.prey import Prey
from predsim.reproduction import ReproductionEngine, can_mate
from predsim.world import World

logger = get_logger(__name__)


class Simulation:
    """
    Tick scheduler. Every live agent computes its tick against the same world
    state; only afterwards are commands applied and cross-agent effects
    (eating, mating, births, deaths) resolved, in that order.
    """

    def __init__(self, width=config.WORLD_WIDTH, height=config.WORLD_HEIGHT,
                 blueprints=None, rng=None, world=None, actuator=None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng(config.SEED)
        self.world = world if world is not None else World(width, height, cell_size=config.WORLD_GRID_CELL_SIZE)
        self.actuator: Actuator = actuator if actuator is not None else KinematicActuator(
            speed=config.MOVE_SPEED, rotate_speed=config.ROTATE_SPEED, min_forward=config.MIN_FORWARD)
        self.blueprints = blueprints if blueprints is not None else SPECIES_BLUEPRINTS
        # keyed by the species_name agents carry
        self.species = {
            blueprint.get("species_name", key): blueprint
            for key, blueprint in self.blueprints.items()
        }
        self.engines = {
            name: ReproductionEngine.from_blueprint(blueprint, rng=self.rng)
            for name, blueprint in self.species.items()
        }

        self.time = 0.0
        self.tick_counter = 0
        self.births = 0
        self.deaths = 0
        self.population_data = []
        self._corpses = {}  # agent id -> time at which it leaves the registry
        self._prey_timer = 0.0

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------
    def _random_position(self):
        return (self.rng.uniform(0, self.width), self.rng.uniform(0, self.height))

    def spawn_agent(self, blueprint, position=None, network=None, generation=0):
        position = position if position is not None else self._random_position()
        agent = Agent.spawn(self.world.next_id(), blueprint, position,
                            rng=self.rng, network=network, generation=generation)
        self.world.handle_boundaries(agent)
        self.world.add_agent(agent)
        return agent.id

    def spawn(self, network, position_hint, generation=0, species_name=None, **inheritance):
        """Spawner used for offspring: places the child near the hint."""
        offset = self.rng.integers(-3, 4, size=2)
        position = (position_hint[0] + float(offset[0]), position_hint[1] + float(offset[1]))
        blueprint = self.species[species_name] if species_name is not None else next(iter(self.species.values()))
        return self.spawn_agent(blueprint, position, network=network, generation=generation)

    def populate(self):
        for blueprint in self.blueprints.values():
            for _ in range(blueprint.get("count", 0)):
                self.spawn_agent(blueprint)
        self.spawn_prey(amount=config.INITIAL_PREY_COUNT)
        logger.info(f"Populated world with {len(self.world.agents)} agents and {len(self.world.prey)} prey")

    def spawn_prey(self, amount=1):
        for _ in range(amount):
            x, y = self._random_position()
            self.world.add_prey(Prey(self.world.next_id(), x, y,
                                     hunger_value=config.PREY_HUNGER_VALUE, radius=config.PREY_RADIUS))

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def update(self, dt):
        self.time += dt
        self.world.update_grid()

        agents = self.world.live_agents()
        results = [agent.tick(self.world, dt, self.rng) for agent in agents]

        for agent, result in zip(agents, results):
            self.actuator.apply(agent, result.command, dt)
            self.world.handle_boundaries(agent)

        self._resolve_eating()
        self._resolve_mating(results)
        self._register_deaths()
        self._remove_corpses()
        self._maintain_population(dt)

        self.tick_counter += 1
        if self.tick_counter % config.STATS_LOG_INTERVAL == 0:
            self.log_population_data()
        return results

    def run(self, ticks, dt=config.TICK_DT):
        for _ in range(ticks):
            self.update(dt)
        return self.population_stats()

    def _resolve_eating(self):
        eaten = set()
        for agent in self.world.live_agents():
            for prey in list(self.world.prey.values()):
                if prey.id in eaten:
                    continue
                if math.hypot(agent.x - prey.x, agent.y - prey.y) < agent.radius + prey.radius:
                    agent.eat(prey)
                    eaten.add(prey.id)
                    break
        for prey_id in eaten:
            self.world.remove_prey(prey_id)

    def _resolve_mating(self, results):
        offspring = []
        for result in results:
            if result.mated_with is None:
                continue
            parent_a = self.world.agents.get(result.agent_id)
            parent_b = self.world.agents.get(result.mated_with)
            if parent_a is None or parent_b is None or not can_mate(parent_a, parent_b):
                continue
            engine = self.engines[parent_a.species_name]
            offspring.append((parent_a.species_name, engine.reproduce(parent_a, parent_b)))
            parent_a.controller.rest()
            parent_b.controller.rest()

        spawner: Spawner = self
        for species_name, child in offspring:
            child_id = spawner.spawn(child.network, child.position_hint,
                                  generation=child.generation, species_name=species_name)
            self.births += 1
            log_birth(self.tick_counter, child_id, child.parent_ids, child.generation)

    def _register_deaths(self):
        for agent in self.world.agents.values():
            if agent.is_alive or agent.death_time is not None:
                continue
            agent.death_time = self.time
            self._corpses[agent.id] = self.time + config.CORPSE_REMOVAL_DELAY
            self.deaths += 1
            log_death(self.tick_counter, agent.id, agent.generation, agent.lifespan)

    def _remove_corpses(self):
        for agent_id, remove_at in list(self._corpses.items()):
            if self.time >= remove_at:
                self.world.remove_agent(agent_id)
                del self._corpses[agent_id]

    def _maintain_population(self, dt):
        self._prey_timer += dt
        if self._prey_timer >= config.PREY_SPAWN_INTERVAL:
            self._prey_timer = 0.0
            if len(self.world.prey) < config.MAX_PREY:
                self.spawn_prey()

        if config.RESPAWN_WHEN_EXTINCT and not self.world.live_agents():
            logger.info("Population extinct, spawning a fresh agent")
            self.spawn_agent(next(iter(self.blueprints.values())))

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------
    def population_stats(self):
        alive = self.world.live_agents()
        return {
            "tick": self.tick_counter,
            "time": round(self.time, 3),
            "alive": len(alive),
            "prey": len(self.world.prey),
            "births": self.births,
            "deaths": self.deaths,
            "mean_hunger": float(np.mean([a.metabolism.hunger for a in alive])) if alive else 0.0,
            "max_generation": max((a.generation for a in alive), default=0),
        }

    def log_population_data(self):
        stats = self.population_stats()
        self.population_data.append(stats)
        if len(self.population_data) > config.STATS_MAX_POINTS:
            self.population_data.pop(0)
        logger.info(
            f"t={stats['tick']} alive={stats['alive']} prey={stats['prey']} "
            f"births={stats['births']} deaths={stats['deaths']} "
            f"mean_hunger={stats['mean_hunger']:.1f} max_gen={stats['max_generation']}"
        )
