# predsim/prey.py
from predsim.interfaces import EntityKind


class Prey:
    kind = EntityKind.PREY
    is_alive = True

    def __init__(self, prey_id, x, y, hunger_value=25.0, radius=0.5):
        self.id = prey_id
        self.x = x
        self.y = y
        self.hunger_value = hunger_value  # how much hunger this prey restores when eaten
        self.radius = radius

    @property
    def position(self):
        return (self.x, self.y)

    def __repr__(self):
        return f"Prey(id={self.id}, pos=({self.x:.1f}, {self.y:.1f}))"


class Obstacle:
    kind = EntityKind.OBSTACLE
    is_alive = True

    def __init__(self, obstacle_id, x, y, radius=1.0):
        self.id = obstacle_id
        self.x = x
        self.y = y
        self.radius = radius

    @property
    def position(self):
        return (self.x, self.y)
