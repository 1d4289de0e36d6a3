# predsim/movement.py
import math

from predsim.sensors import clamp


class KinematicActuator:
    """
    Turns (forward, turn) commands into position and heading changes.

    Turn is clamped to [-1, 1] and forward to [min_forward, 1] so agents never
    stand still or walk backwards, unless the command asks to hold position.
    """

    def __init__(self, speed=10.0, rotate_speed=180.0, min_forward=0.3):
        self.speed = speed                # world units per second at forward = 1
        self.rotate_speed = rotate_speed  # degrees per second at turn = 1
        self.min_forward = min_forward

    def apply(self, agent, command, dt):
        if not agent.is_alive:
            return

        turn = clamp(command.turn, -1.0, 1.0)
        agent.heading = (agent.heading + turn * self.rotate_speed * dt) % 360.0
        if command.hold:
            return

        forward = clamp(command.forward, self.min_forward, 1.0)
        radians = math.radians(agent.heading)
        step = self.speed * forward * dt
        agent.x += math.cos(radians) * step
        agent.y += math.sin(radians) * step
