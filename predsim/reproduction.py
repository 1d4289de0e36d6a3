# predsim/reproduction.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from predsim.logging_config import get_logger
from predsim.nn import NeuralNetwork

logger = get_logger(__name__)

Vec = Tuple[float, float]


@dataclass
class Offspring:
    """Everything the spawner needs to put a child into the world."""
    network: NeuralNetwork
    parent_ids: Tuple[int, int]
    generation: int
    # for each layer, the id of the parent it was copied from
    inherited_from: Tuple[int, ...]
    position_hint: Vec


def can_mate(parent_a, parent_b):
    """The readiness gate: both parents alive and both with full love."""
    if parent_a is parent_b:
        return False
    return all(
        p.is_alive and p.metabolism.love_is_full
        for p in (parent_a, parent_b)
    )


class ReproductionEngine:
    def __init__(self, mutation_chance=0.8, mutation_amount=0.2, reproduction_cost=0.0, rng=None):
        self.mutation_chance = mutation_chance
        self.mutation_amount = mutation_amount
        self.reproduction_cost = reproduction_cost
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_blueprint(cls, blueprint, rng=None):
        return cls(
            mutation_chance=blueprint["mutation_chance"],
            mutation_amount=blueprint["mutation_amount"],
            reproduction_cost=blueprint.get("reproduction_cost", 0.0),
            rng=rng,
        )

    def crossover(self, network_a, network_b):
        """
        Builds a child whose layer i is a copy of either parent's layer i,
        picked with a fair coin per layer. Returns (child, picks) where picks[i]
        is 0 for network_a and 1 for network_b.
        """
        if network_a.shape != network_b.shape:
            raise ValueError(f"cannot cross {list(network_a.shape)} with {list(network_b.shape)}")

        child = network_a.copy()
        picks = []
        for i in range(len(child.layers)):
            pick = 0 if self.rng.random() < 0.5 else 1
            source = network_a if pick == 0 else network_b
            child.set_layer(i, source.layers[i])
            picks.append(pick)
        return child, tuple(picks)

    def reproduce(self, parent_a, parent_b):
        """
        Produces a mutated child network from two parents and charges both
        parents for it. Callers check `can_mate` first.
        """
        child, picks = self.crossover(parent_a.network, parent_b.network)
        child.mutate(self.mutation_chance, self.mutation_amount, self.rng)

        for parent in (parent_a, parent_b):
            parent.metabolism.reset_love()
            if self.reproduction_cost > 0:
                parent.metabolism.spend(self.reproduction_cost)

        ids = (parent_a.id, parent_b.id)
        midpoint = (
            (parent_a.position[0] + parent_b.position[0]) / 2.0,
            (parent_a.position[1] + parent_b.position[1]) / 2.0,
        )
        offspring = Offspring(
            network=child,
            parent_ids=ids,
            generation=max(parent_a.generation, parent_b.generation) + 1,
            inherited_from=tuple(ids[pick] for pick in picks),
            position_hint=midpoint,
        )
        logger.debug(f"Parents {ids} produced a gen {offspring.generation} child, layers from {offspring.inherited_from}")
        return offspring
