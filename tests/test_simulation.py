import numpy as np
import pytest

import config
from main import main
from predsim.behavior import BehaviorState
from predsim.prey import Prey
from predsim.simulation import Simulation


@pytest.fixture
def empty_sim(blueprint):
    return Simulation(100.0, 100.0, blueprints={"wolf": blueprint}, rng=np.random.default_rng(3))


def test_seeded_runs_are_reproducible():
    def run():
        sim = Simulation(100.0, 100.0, rng=np.random.default_rng(7))
        sim.populate()
        return sim.run(30, dt=0.1)

    first, second = run(), run()

    assert first == second
    assert first["tick"] == 30
    assert first["time"] == pytest.approx(3.0)


def test_only_one_agent_eats_a_shared_prey(empty_sim, blueprint):
    sim = empty_sim
    ids = [sim.spawn_agent(blueprint, position=(50.0, 50.0)) for _ in range(2)]
    for agent_id in ids:
        sim.world.agents[agent_id].metabolism.hunger = 50.0
    sim.world.add_prey(Prey(sim.world.next_id(), 50.0, 50.0, hunger_value=25.0))

    # short tick so neither agent can step off the prey
    sim.update(0.05)

    hungers = sorted(sim.world.agents[agent_id].metabolism.hunger for agent_id in ids)
    assert hungers == pytest.approx([49.75, 74.75])
    assert len(sim.world.prey) == 0


def test_completed_mating_produces_one_child(blueprint):
    blueprint["mating_duration"] = 1.0
    sim = Simulation(100.0, 100.0, blueprints={"wolf": blueprint}, rng=np.random.default_rng(3))
    a = sim.world.agents[sim.spawn_agent(blueprint, position=(50.0, 50.0))]
    b = sim.world.agents[sim.spawn_agent(blueprint, position=(52.0, 50.0))]
    for parent in (a, b):
        parent.metabolism.love = 100.0

    sim.update(0.5)
    assert a.state is BehaviorState.MATING
    assert b.state is BehaviorState.MATING
    assert a.position == (50.0, 50.0)
    assert sim.births == 0

    sim.update(0.5)

    assert sim.births == 1
    assert len(sim.world.agents) == 3
    for parent in (a, b):
        assert parent.state is BehaviorState.RESTING
        assert parent.metabolism.love == 0.0
        assert parent.controller.target_mate is None

    child = next(agent for agent in sim.world.agents.values() if agent not in (a, b))
    assert child.generation == 1
    assert abs(child.x - 51.0) <= 3.0
    assert abs(child.y - 50.0) <= 3.0


def test_corpses_stay_until_the_removal_delay(empty_sim, blueprint, monkeypatch):
    monkeypatch.setattr(config, "RESPAWN_WHEN_EXTINCT", False)
    sim = empty_sim
    agent_id = sim.spawn_agent(blueprint, position=(50.0, 50.0))
    agent = sim.world.agents[agent_id]
    agent.metabolism.hunger = 2.5

    sim.update(0.5)
    assert not agent.is_alive
    assert agent.death_time == pytest.approx(0.5)
    assert sim.deaths == 1

    for _ in range(2):
        sim.update(0.5)
        assert agent_id in sim.world.agents
        assert sim.world.live_agents() == []

    sim.update(0.5)
    assert agent_id not in sim.world.agents
    assert sim.deaths == 1


def test_extinct_population_is_respawned(empty_sim):
    empty_sim.update(0.1)
    assert len(empty_sim.world.live_agents()) == 1


def test_prey_is_topped_up_on_its_interval(empty_sim, monkeypatch):
    monkeypatch.setattr(config, "PREY_SPAWN_INTERVAL", 0.5)
    monkeypatch.setattr(config, "RESPAWN_WHEN_EXTINCT", False)

    empty_sim.update(0.25)
    assert len(empty_sim.world.prey) == 0
    empty_sim.update(0.25)
    assert len(empty_sim.world.prey) == 1


def test_population_data_is_bounded(empty_sim, monkeypatch):
    monkeypatch.setattr(config, "STATS_LOG_INTERVAL", 1)
    monkeypatch.setattr(config, "STATS_MAX_POINTS", 3)

    empty_sim.run(5, dt=0.1)

    assert len(empty_sim.population_data) == 3
    assert empty_sim.population_data[-1]["tick"] == 5


def test_main_runs_headless():
    stats = main(["--ticks", "5", "--seed", "1", "--log-level", "WARNING"])
    assert stats["tick"] == 5
    assert stats["alive"] + stats["deaths"] >= 5


def test_species_lookups_follow_species_name_not_the_dict_key(blueprint):
    blueprint["mating_duration"] = 1.0
    sim = Simulation(100.0, 100.0, blueprints={"predator": blueprint}, rng=np.random.default_rng(3))
    a = sim.world.agents[sim.spawn_agent(blueprint, position=(50.0, 50.0))]
    b = sim.world.agents[sim.spawn_agent(blueprint, position=(52.0, 50.0))]
    for parent in (a, b):
        parent.metabolism.love = 100.0

    sim.update(0.5)
    sim.update(0.5)

    assert sim.births == 1
    child = next(agent for agent in sim.world.agents.values() if agent not in (a, b))
    assert child.species_name == "wolf"
