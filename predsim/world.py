# predsim/world.py
import math
from collections import defaultdict

from predsim.errors import InvalidTarget
from predsim.interfaces import Entity, EntityKind, RaycastHit


class World:
    """
    Reference WorldQuery: a wrap-around rectangle with a uniform-grid spatial
    index. Also the population registry; the scheduler is the only caller of
    the add/remove methods and only between ticks.
    """

    def __init__(self, width, height, cell_size=20.0):
        self.width = width
        self.height = height
        self.agents = {}
        self.prey = {}
        self.obstacles = {}
        self._next_id = 0

        # --- Spatial Partitioning Grid ---
        self.cell_size = cell_size
        self.grid = defaultdict(list)

    def next_id(self):
        self._next_id += 1
        return self._next_id

    def add_agent(self, agent):
        self.agents[agent.id] = agent

    def remove_agent(self, agent_id):
        self.agents.pop(agent_id, None)

    def add_prey(self, prey):
        self.prey[prey.id] = prey

    def remove_prey(self, prey_id):
        self.prey.pop(prey_id, None)

    def add_obstacle(self, obstacle):
        self.obstacles[obstacle.id] = obstacle

    def live_agents(self):
        return [agent for agent in self.agents.values() if agent.is_alive]

    def _get_cell_coords(self, x, y):
        """Converts world coordinates to grid cell coordinates."""
        return int(x // self.cell_size), int(y // self.cell_size)

    def update_grid(self):
        """Clears and rebuilds the grid with current object positions. Call once per tick."""
        self.grid.clear()
        for group in (self.live_agents(), self.prey.values(), self.obstacles.values()):
            for obj in group:
                self.grid[self._get_cell_coords(obj.x, obj.y)].append(obj)

    def _candidates(self, origin, radius):
        center_cell = self._get_cell_coords(origin[0], origin[1])
        search_radius_in_cells = int(radius // self.cell_size) + 1
        for dx in range(-search_radius_in_cells, search_radius_in_cells + 1):
            for dy in range(-search_radius_in_cells, search_radius_in_cells + 1):
                cell = self.grid.get((center_cell[0] + dx, center_cell[1] + dy))
                if cell:
                    yield from cell

    def entities_within(self, origin, radius):
        """Live entities whose centre lies within `radius` of `origin`."""
        found = []
        for obj in self._candidates(origin, radius):
            if not obj.is_alive:
                continue
            if math.hypot(obj.x - origin[0], obj.y - origin[1]) <= radius:
                found.append(Entity(obj.id, obj.kind, (obj.x, obj.y)))
        return found

    def raycast_visible(self, origin, direction, max_distance):
        """
        First entity body hit by a ray from `origin` along the unit vector
        `direction`. Bodies that contain the origin (the caster's own) are skipped.
        """
        best, best_t = None, max_distance
        for obj in self._candidates(origin, max_distance):
            if not obj.is_alive:
                continue
            fx, fy = obj.x - origin[0], obj.y - origin[1]
            centre_distance_sq = fx * fx + fy * fy
            radius_sq = obj.radius * obj.radius
            if centre_distance_sq <= radius_sq:
                continue
            t_closest = fx * direction[0] + fy * direction[1]
            miss_sq = centre_distance_sq - t_closest * t_closest
            if t_closest < 0 or miss_sq > radius_sq:
                continue
            t_hit = t_closest - math.sqrt(radius_sq - miss_sq)
            if 0 <= t_hit <= best_t:
                best, best_t = obj, t_hit
        if best is None:
            return None
        return RaycastHit(best.id, best.kind, best_t)

    def resolve(self, entity_id):
        for registry in (self.agents, self.prey, self.obstacles):
            obj = registry.get(entity_id)
            if obj is not None:
                if not obj.is_alive:
                    break
                return obj
        raise InvalidTarget(entity_id)

    def handle_boundaries(self, obj):
        obj.x = obj.x % self.width
        obj.y = obj.y % self.height

    def count(self, kind):
        if kind is EntityKind.AGENT:
            return len(self.live_agents())
        if kind is EntityKind.PREY:
            return len(self.prey)
        return len(self.obstacles)
