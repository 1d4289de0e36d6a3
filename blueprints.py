# blueprints.py
# Species parameters. Every agent is built from one of these at spawn time.

import copy
import os

import yaml

from predsim.errors import ConfigError
from predsim.logging_config import get_logger

logger = get_logger("blueprints")

SPECIES_BLUEPRINTS = {
    "wolf": {
        "species_name": "wolf",
        "count": 5,
        "body_radius": 0.5,
        # 6 sensors + hunger + prey direction + prey proximity
        "num_sensors": 6,
        "nn_layer_sizes": [9, 32, 2],
        "view_radius": 20.0,
        # Metabolism
        "max_hunger": 100.0,
        "initial_hunger_fraction": 0.7,  # Start at 70% full
        "hunger_decrease_rate": 5.0,     # Per second
        "max_love": 100.0,
        "initial_love_max_fraction": 0.5,  # Love starts uniformly in [0, 50%]
        "love_increase_rate": 0.2,         # Per second
        "reproduction_hunger_gained": 5.0,
        # Behavior (thresholds are fractions of max_hunger)
        "hunt_threshold": 0.5,
        "hunt_exit_threshold": 0.6,  # Hunting ends once 60% full
        "emergency_threshold": 0.3,
        "rest_duration": 3.0,
        "prey_memory_duration": 3.0,  # How long a wolf remembers prey after losing sight
        "mating_radius": 3.0,
        "mating_duration": 5.0,
        "standard_speed": 0.5,
        "wander_override_chance": 0.3,
        "wander_turn_chance": 0.15,
        # Reproduction
        "mutation_chance": 0.8,
        "mutation_amount": 0.2,
        "reproduction_cost": 0.0,
    }
}


def load_blueprints(path=None):
    """
    Returns a copy of SPECIES_BLUEPRINTS with overrides from a YAML file laid
    on top. The file maps species names to partial blueprints; unknown species
    and keys are ignored with a warning; a malformed file raises ConfigError.
    """
    blueprints = copy.deepcopy(SPECIES_BLUEPRINTS)
    if path is None or not os.path.exists(path):
        if path is not None:
            logger.warning(f"Blueprint file {path} not found, using defaults")
        return blueprints

    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must map species names to blueprint overrides")

    for species, overrides in raw.items():
        if species not in blueprints:
            logger.warning(f"Ignoring unknown species {species!r} in {path}")
            continue
        overrides = overrides or {}
        if not isinstance(overrides, dict):
            raise ConfigError(f"overrides for {species!r} in {path} must be a mapping")
        if overrides.get("species_name", species) != species:
            raise ConfigError(
                f"{path}: species_name {overrides['species_name']!r} does not match its entry {species!r}"
            )
        valid = set(blueprints[species])
        for key, value in overrides.items():
            if key not in valid:
                logger.warning(f"Ignoring unknown key {species}.{key} in {path}")
                continue
            blueprints[species][key] = value
    return blueprints
