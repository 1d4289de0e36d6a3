from types import SimpleNamespace

import pytest

from predsim.interfaces import STOP, MovementCommand
from predsim.movement import KinematicActuator


def body(heading=0.0, alive=True):
    return SimpleNamespace(x=10.0, y=10.0, heading=heading, is_alive=alive)


@pytest.fixture
def actuator():
    return KinematicActuator(speed=10.0, rotate_speed=180.0, min_forward=0.3)


def test_moves_along_heading(actuator):
    agent = body(heading=90.0)
    actuator.apply(agent, MovementCommand(1.0, 0.0), 0.5)
    assert agent.x == pytest.approx(10.0)
    assert agent.y == pytest.approx(15.0)


def test_forward_is_clamped_to_the_minimum(actuator):
    agent = body()
    actuator.apply(agent, MovementCommand(-2.0, 0.0), 1.0)
    assert agent.x == pytest.approx(13.0)


def test_turn_is_clamped_and_scaled(actuator):
    agent = body(heading=350.0)
    actuator.apply(agent, MovementCommand(0.5, 5.0), 0.1)
    assert agent.heading == pytest.approx(8.0)


def test_hold_only_turns(actuator):
    agent = body()
    actuator.apply(agent, MovementCommand(0.0, -0.5, hold=True), 1.0)
    assert (agent.x, agent.y) == (10.0, 10.0)
    assert agent.heading == pytest.approx(270.0)


def test_dead_agents_stay_put(actuator):
    agent = body(alive=False)
    actuator.apply(agent, MovementCommand(1.0, 1.0), 1.0)
    assert (agent.x, agent.y, agent.heading) == (10.0, 10.0, 0.0)


def test_stop_leaves_agent_untouched(actuator):
    agent = body(heading=45.0)
    actuator.apply(agent, STOP, 1.0)
    assert (agent.x, agent.y, agent.heading) == (10.0, 10.0, 45.0)
