# predsim/metabolism.py
from dataclasses import dataclass


@dataclass
class Metabolism:
    """
    Hunger and love accumulators.

    Hunger is a fullness level: it drains over time, eating refills it, and the
    agent dies the moment it reaches zero. Love builds up over time and gates
    mating once it is full; mating sets it back to zero.
    `reproduction_hunger` is tracked but never gates anything.
    """
    max_hunger: float = 100.0
    hunger: float = 100.0
    hunger_decrease_rate: float = 5.0
    max_love: float = 100.0
    love: float = 0.0
    love_increase_rate: float = 0.2
    reproduction_hunger: float = 0.0
    reproduction_hunger_gained: float = 5.0
    is_alive: bool = True

    def __post_init__(self):
        if self.max_hunger <= 0 or self.max_love <= 0:
            raise ValueError("max_hunger and max_love must be positive")
        self.hunger = min(max(self.hunger, 0.0), self.max_hunger)
        self.love = min(max(self.love, 0.0), self.max_love)
        if self.hunger <= 0.0:
            self.is_alive = False

    @property
    def hunger_fraction(self):
        return self.hunger / self.max_hunger

    @property
    def love_is_full(self):
        return self.love >= self.max_love

    def tick(self, dt):
        """Advances the accumulators by dt seconds. Returns True if the agent died during this tick."""
        if not self.is_alive:
            return False

        self.hunger = min(max(self.hunger - self.hunger_decrease_rate * dt, 0.0), self.max_hunger)
        self.love = min(max(self.love + self.love_increase_rate * dt, 0.0), self.max_love)
        self.reproduction_hunger = min(
            max(self.reproduction_hunger + self.reproduction_hunger_gained * dt, 0.0),
            self.max_hunger,
        )

        if self.hunger <= 0.0:
            self.is_alive = False
            return True
        return False

    def feed(self, amount):
        if not self.is_alive:
            return
        self.hunger = min(max(self.hunger + amount, 0.0), self.max_hunger)
        self.reproduction_hunger = max(self.reproduction_hunger - self.reproduction_hunger_gained, 0.0)

    def spend(self, amount):
        """Takes `amount` of hunger away, e.g. the cost of reproducing. Can kill."""
        if not self.is_alive or amount <= 0:
            return False
        self.hunger = max(self.hunger - amount, 0.0)
        if self.hunger <= 0.0:
            self.is_alive = False
            return True
        return False

    def reset_love(self):
        self.love = 0.0
        self.reproduction_hunger = 0.0
