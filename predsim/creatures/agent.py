# predsim/creatures/agent.py
from dataclasses import dataclass
from typing import Optional

import numpy as np

from predsim.behavior import BehaviorController, BehaviorSettings, BehaviorState
from predsim.errors import AgentConstructionError, ConfigError
from predsim.interfaces import STOP, EntityKind, MovementCommand, WorldQuery
from predsim.logging_config import get_logger
from predsim.metabolism import Metabolism
from predsim.nn import NeuralNetwork
from predsim.sensors import EXTRA_INPUTS, SensorEncoder, fit_to_width

logger = get_logger(__name__)

REQUIRED_KEYS = (
    "species_name", "nn_layer_sizes", "num_sensors", "view_radius",
    "max_hunger", "initial_hunger_fraction", "hunger_decrease_rate",
    "max_love", "initial_love_max_fraction", "love_increase_rate",
    "reproduction_hunger_gained",
    "hunt_threshold", "hunt_exit_threshold", "emergency_threshold",
    "rest_duration", "prey_memory_duration", "mating_duration",
    "mating_radius", "standard_speed",
    "mutation_chance", "mutation_amount",
)


def check_blueprint(blueprint):
    missing = [key for key in REQUIRED_KEYS if key not in blueprint]
    if missing:
        raise ConfigError(f"blueprint {blueprint.get('species_name', '?')!r} is missing {missing}")

    if blueprint["num_sensors"] < 1:
        raise ConfigError(f"num_sensors must be at least 1, got {blueprint['num_sensors']}")
    if blueprint["view_radius"] <= 0:
        raise ConfigError(f"view_radius must be positive, got {blueprint['view_radius']}")

    sizes = list(blueprint["nn_layer_sizes"])
    expected_inputs = blueprint["num_sensors"] + EXTRA_INPUTS
    if len(sizes) < 2 or sizes[0] != expected_inputs:
        raise ConfigError(
            f"nn_layer_sizes {sizes} must start with {expected_inputs} inputs "
            f"({blueprint['num_sensors']} sensors + {EXTRA_INPUTS})"
        )
    if sizes[-1] != 2:
        raise ConfigError(f"nn_layer_sizes {sizes} must end with 2 outputs (forward, turn)")

    hunt, exit_, emergency = (blueprint["hunt_threshold"], blueprint["hunt_exit_threshold"],
                              blueprint["emergency_threshold"])
    if not 0.0 <= emergency <= hunt <= exit_ <= 1.0:
        raise ConfigError(
            "thresholds must satisfy 0 <= emergency <= hunt <= hunt_exit <= 1, "
            f"got {emergency}, {hunt}, {exit_}"
        )


@dataclass
class TickResult:
    agent_id: int
    command: MovementCommand
    state: BehaviorState
    died: bool = False
    mated_with: Optional[int] = None


class Agent:
    """
    One predator. Owns its brain, metabolism and state machine; other agents
    are only ever referred to by id.
    """
    kind = EntityKind.AGENT

    def __init__(self, agent_id, network, metabolism, controller, encoder,
                 position=(0.0, 0.0), heading=0.0, generation=0, species_name="wolf",
                 radius=0.5):
        parts = {"network": network, "metabolism": metabolism,
                 "controller": controller, "encoder": encoder}
        missing = [name for name, part in parts.items() if part is None]
        if missing:
            raise AgentConstructionError(f"agent {agent_id} cannot be built without {missing}")
        if network.input_width != encoder.width:
            raise AgentConstructionError(
                f"agent {agent_id}: network takes {network.input_width} inputs "
                f"but the encoder produces {encoder.width}"
            )

        self.id = agent_id
        self.network = network
        self.metabolism = metabolism
        self.controller = controller
        self.encoder = encoder
        self.x, self.y = float(position[0]), float(position[1])
        self.heading = float(heading)
        self.generation = generation
        self.species_name = species_name
        self.radius = radius
        self.lifespan = 0.0
        self.death_time = None
        self.sensor_inputs = encoder.default_vector(metabolism.hunger_fraction)
        self.nn_outputs = np.zeros(network.shape[-1], dtype=np.float32)
        self.last_command = STOP

    @classmethod
    def spawn(cls, agent_id, blueprint, position, heading=None, rng=None, network=None, generation=0):
        """Builds an agent from a species blueprint; a fresh random brain unless one is given."""
        check_blueprint(blueprint)
        rng = rng if rng is not None else np.random.default_rng()
        if network is None:
            network = NeuralNetwork(blueprint["nn_layer_sizes"], rng=rng)

        max_hunger = blueprint["max_hunger"]
        max_love = blueprint["max_love"]
        metabolism = Metabolism(
            max_hunger=max_hunger,
            hunger=max_hunger * blueprint["initial_hunger_fraction"],
            hunger_decrease_rate=blueprint["hunger_decrease_rate"],
            max_love=max_love,
            love=rng.uniform(0.0, max_love * blueprint["initial_love_max_fraction"]),
            love_increase_rate=blueprint["love_increase_rate"],
            reproduction_hunger_gained=blueprint["reproduction_hunger_gained"],
        )
        controller = BehaviorController(settings=BehaviorSettings.from_blueprint(blueprint))
        encoder = SensorEncoder(blueprint["num_sensors"], blueprint["view_radius"])
        if heading is None:
            heading = rng.uniform(0.0, 360.0)

        return cls(agent_id, network, metabolism, controller, encoder,
                   position=position, heading=heading, generation=generation,
                   species_name=blueprint["species_name"],
                   radius=blueprint.get("body_radius", 0.5))

    # ------------------------------------------------------------------
    @property
    def position(self):
        return (self.x, self.y)

    @property
    def is_alive(self):
        return self.metabolism.is_alive

    @property
    def state(self):
        return self.controller.state

    def sense(self, world: WorldQuery):
        """One neighbourhood snapshot, shared by targeting and encoding for the whole tick."""
        return world.entities_within(self.position, self.controller.settings.sense_radius)

    def think(self, inputs):
        inputs = fit_to_width(inputs, self.network.input_width)
        self.nn_outputs = self.network.evaluate(inputs)
        return MovementCommand(float(self.nn_outputs[0]), float(self.nn_outputs[1]))

    def tick(self, world: WorldQuery, dt: float, rng) -> TickResult:
        """sense -> think -> transition -> metabolise. Returns the command for the actuator."""
        if not self.is_alive:
            logger.debug(f"Agent {self.id} is dead, skipping its tick")
            self.last_command = STOP
            return TickResult(self.id, STOP, self.state)

        metabolism = self.metabolism
        snapshot = self.sense(world)
        self.controller.update_targets(world, self.id, self.position, snapshot,
                                       metabolism.love_is_full, dt)
        self.sensor_inputs = self.encoder.encode(
            self.position, self.heading, snapshot, metabolism.hunger_fraction,
            self_id=self.id, prey_id=self.controller.target_prey,
        )
        proposal = self.think(self.sensor_inputs)
        decision = self.controller.decide(
            proposal, world, self.position, self.heading,
            metabolism.hunger_fraction, metabolism.love_is_full, dt, rng,
        )

        died = metabolism.tick(dt)
        self.lifespan += dt
        command = STOP if died else decision.command
        self.last_command = command
        return TickResult(self.id, command, decision.state, died=died, mated_with=decision.mated_with)

    def eat(self, prey):
        self.metabolism.feed(prey.hunger_value)
        if self.controller.target_prey == prey.id:
            self.controller.clear_prey()

    def __repr__(self):
        return (f"Agent(id={self.id}, gen={self.generation}, state={self.state.name}, "
                f"hunger={self.metabolism.hunger:.1f}, love={self.metabolism.love:.1f}, "
                f"alive={self.is_alive})")
