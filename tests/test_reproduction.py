from types import SimpleNamespace

import numpy as np
import pytest

from predsim.metabolism import Metabolism
from predsim.nn import NeuralNetwork
from predsim.reproduction import ReproductionEngine, can_mate


def make_parent(parent_id, network, generation=0, love=100.0, position=(0.0, 0.0), hunger=100.0):
    metabolism = Metabolism(hunger=hunger, love=love)
    return SimpleNamespace(
        id=parent_id, network=network, metabolism=metabolism, generation=generation,
        position=position, is_alive=metabolism.is_alive,
    )


def constant_network(shape, value):
    net = NeuralNetwork(shape, rng=np.random.default_rng(0))
    net.set_genome(np.full(net.calculate_genome_length(), value))
    return net


def test_identical_parents_give_identical_child_before_mutation():
    a = NeuralNetwork([3, 2], rng=np.random.default_rng(11))
    b = a.copy()
    engine = ReproductionEngine(mutation_chance=0.0, rng=np.random.default_rng(0))

    offspring = engine.reproduce(make_parent(1, a), make_parent(2, b))

    assert np.array_equal(offspring.network.get_genome(), a.get_genome())
    assert offspring.network.shape == (3, 2)


def test_reproduce_resets_both_parents_love():
    a = make_parent(1, NeuralNetwork([9, 32, 2], rng=np.random.default_rng(1)))
    b = make_parent(2, NeuralNetwork([9, 32, 2], rng=np.random.default_rng(2)))

    ReproductionEngine(rng=np.random.default_rng(0)).reproduce(a, b)

    assert a.metabolism.love == 0.0
    assert b.metabolism.love == 0.0
    assert not can_mate(a, b)


def test_crossover_copies_whole_layers():
    shape = [2, 3, 3, 2]
    ones = constant_network(shape, 1.0)
    twos = constant_network(shape, 2.0)
    engine = ReproductionEngine(rng=np.random.default_rng(5))

    seen = set()
    for _ in range(20):
        child, picks = engine.crossover(ones, twos)
        assert len(picks) == 3
        for layer, pick in zip(child.layers, picks):
            values = np.concatenate([
                layer.weight.detach().cpu().numpy().ravel(),
                layer.bias.detach().cpu().numpy().ravel(),
            ])
            assert np.all(values == (1.0 if pick == 0 else 2.0))
            seen.add(pick)

    assert seen == {0, 1}


def test_child_does_not_share_weights_with_parents():
    a = NeuralNetwork([4, 5, 2], rng=np.random.default_rng(1))
    b = NeuralNetwork([4, 5, 2], rng=np.random.default_rng(2))
    genome_a, genome_b = a.get_genome(), b.get_genome()
    engine = ReproductionEngine(mutation_chance=1.0, mutation_amount=0.5, rng=np.random.default_rng(3))

    offspring = engine.reproduce(make_parent(1, a), make_parent(2, b))
    offspring.network.mutate(1.0, 1.0, np.random.default_rng(4))

    assert np.array_equal(a.get_genome(), genome_a)
    assert np.array_equal(b.get_genome(), genome_b)


def test_offspring_records_lineage_and_midpoint():
    shape = [2, 3, 2]
    a = make_parent(4, constant_network(shape, 1.0), generation=2, position=(0.0, 0.0))
    b = make_parent(7, constant_network(shape, 2.0), generation=5, position=(4.0, 2.0))
    engine = ReproductionEngine(mutation_chance=0.0, rng=np.random.default_rng(8))

    offspring = engine.reproduce(a, b)

    assert offspring.parent_ids == (4, 7)
    assert offspring.generation == 6
    assert offspring.position_hint == (2.0, 1.0)
    assert len(offspring.inherited_from) == 2
    assert set(offspring.inherited_from) <= {4, 7}
    first_weight = float(offspring.network.layers[0].weight.detach().cpu().numpy().ravel()[0])
    assert first_weight == (1.0 if offspring.inherited_from[0] == 4 else 2.0)


def test_reproduction_cost_is_charged_to_both_parents():
    a = make_parent(1, NeuralNetwork([3, 2], rng=np.random.default_rng(1)), hunger=80.0)
    b = make_parent(2, NeuralNetwork([3, 2], rng=np.random.default_rng(2)), hunger=60.0)

    ReproductionEngine(reproduction_cost=10.0, rng=np.random.default_rng(0)).reproduce(a, b)

    assert a.metabolism.hunger == 70.0
    assert b.metabolism.hunger == 50.0


def test_crossover_rejects_different_shapes():
    engine = ReproductionEngine(rng=np.random.default_rng(0))
    with pytest.raises(ValueError):
        engine.crossover(NeuralNetwork([9, 32, 2]), NeuralNetwork([9, 16, 2]))


def test_from_blueprint_reads_mutation_settings(blueprint):
    engine = ReproductionEngine.from_blueprint(blueprint)
    assert engine.mutation_chance == blueprint["mutation_chance"]
    assert engine.mutation_amount == blueprint["mutation_amount"]
    assert engine.reproduction_cost == 0.0


@pytest.mark.parametrize("love_a, love_b, expected", [
    (100.0, 100.0, True),
    (100.0, 99.0, False),
    (50.0, 100.0, False),
])
def test_can_mate_needs_full_love_on_both_sides(love_a, love_b, expected):
    net = NeuralNetwork([3, 2], rng=np.random.default_rng(0))
    assert can_mate(make_parent(1, net, love=love_a), make_parent(2, net, love=love_b)) is expected


def test_can_mate_rejects_dead_or_self():
    net = NeuralNetwork([3, 2], rng=np.random.default_rng(0))
    alive = make_parent(1, net)
    dead = make_parent(2, net, hunger=0.0)
    assert not can_mate(alive, dead)
    assert not can_mate(alive, alive)
