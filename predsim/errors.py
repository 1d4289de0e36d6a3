# predsim/errors.py
"""Exceptions raised by the simulation core.

None of these are fatal to a running simulation: the encoder recovers from
size mismatches, the controller recovers from stale targets, and a broken
blueprint is reported before any agent exists.
"""


class SimulationError(Exception):
    """Base class for every error raised by predsim."""


class InputSizeMismatch(SimulationError, ValueError):
    def __init__(self, expected, received):
        super().__init__(f"network expects {expected} inputs, received {received}")
        self.expected = expected
        self.received = received


class InvalidTarget(SimulationError, LookupError):
    def __init__(self, entity_id):
        super().__init__(f"entity {entity_id} no longer exists")
        self.entity_id = entity_id


class ConfigError(SimulationError, ValueError):
    pass


class AgentConstructionError(SimulationError):
    pass
