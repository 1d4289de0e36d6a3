# predsim/sensors.py
"""
Turns a neighbourhood snapshot into the fixed-length vector the brain reads.

Layout (width = num_sensors + 3):
  [bucket_0 .. bucket_{n-1}, hunger, prey_direction, prey_proximity]

  bucket_i        nearest entity in angular bucket i, distance / view radius
                  (1.0 = nothing there)
  hunger          1 - hunger / max_hunger (1.0 = starving)
  prey_direction  clamp(bearing / 90, -1, 1), 0.0 when no prey
  prey_proximity  1 - clamp01(distance / view radius), 1.0 when no prey

Angles are in degrees. Headings run counter-clockwise from +x and bearings
are signed in [-180, 180), positive meaning the target is to the left.
Bucket 0 starts straight ahead and buckets advance counter-clockwise.
"""

import math

import numpy as np

from predsim.interfaces import EntityKind

NO_DETECTION = 1.0
EXTRA_INPUTS = 3  # hunger, prey direction, prey proximity


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def normalize_angle(angle):
    return (angle + 180.0) % 360.0 - 180.0


def bearing_to(origin, heading, target):
    """Signed angle in degrees from the facing direction to `target`."""
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    if dx == 0 and dy == 0:
        return 0.0
    return normalize_angle(math.degrees(math.atan2(dy, dx)) - heading)


def distance_between(a, b):
    return math.hypot(b[0] - a[0], b[1] - a[1])


def fit_to_width(vector, width):
    """Pads with the no-detection sentinel or truncates so the brain always gets `width` values."""
    vector = np.asarray(vector, dtype=np.float32)
    if vector.shape[0] >= width:
        return vector[:width].copy()
    padded = np.full(width, NO_DETECTION, dtype=np.float32)
    padded[:vector.shape[0]] = vector
    return padded


class SensorEncoder:
    def __init__(self, num_sensors=6, view_radius=20.0):
        if num_sensors < 1:
            raise ValueError("num_sensors must be at least 1")
        if view_radius <= 0:
            raise ValueError("view_radius must be positive")
        self.num_sensors = int(num_sensors)
        self.view_radius = float(view_radius)
        self.bucket_span = 360.0 / self.num_sensors

    @property
    def width(self):
        return self.num_sensors + EXTRA_INPUTS

    def bucket_index(self, bearing):
        angle = bearing + 360.0 if bearing < 0 else bearing
        index = math.floor(angle / self.bucket_span)
        return int(clamp(index, 0, self.num_sensors - 1))

    def default_vector(self, hunger_fraction):
        vector = np.full(self.width, NO_DETECTION, dtype=np.float32)
        vector[self.num_sensors] = 1.0 - hunger_fraction
        vector[self.num_sensors + 1] = 0.0
        vector[self.num_sensors + 2] = 1.0
        return vector

    def encode(self, origin, heading, entities, hunger_fraction, self_id=None, prey_id=None):
        """
        Args:
            origin: (x, y) of the sensing agent
            heading: facing direction in degrees
            entities: Entity snapshot from WorldQuery.entities_within
            hunger_fraction: hunger / max_hunger in [0, 1]
            self_id: the sensing agent's own id, skipped
            prey_id: currently tracked prey; describes the prey slots when present

        Returns:
            float32 array of length `width`
        """
        vector = self.default_vector(clamp(hunger_fraction, 0.0, 1.0))

        nearest_prey = None
        nearest_prey_distance = math.inf
        tracked_prey = None

        for entity in entities:
            if entity.id == self_id:
                continue
            distance = distance_between(origin, entity.position)
            if distance > self.view_radius:
                continue
            bearing = bearing_to(origin, heading, entity.position)

            index = self.bucket_index(bearing)
            reading = clamp(distance / self.view_radius, 0.0, 1.0)
            if reading < vector[index]:
                vector[index] = reading

            if entity.kind is EntityKind.PREY:
                if entity.id == prey_id:
                    tracked_prey = (bearing, distance)
                if distance < nearest_prey_distance:
                    nearest_prey_distance = distance
                    nearest_prey = (bearing, distance)

        prey = tracked_prey if tracked_prey is not None else nearest_prey
        if prey is not None:
            bearing, distance = prey
            vector[self.num_sensors + 1] = clamp(bearing / 90.0, -1.0, 1.0)
            vector[self.num_sensors + 2] = 1.0 - clamp(distance / self.view_radius, 0.0, 1.0)

        return vector
