# predsim/behavior.py
"""
Behavioral state machine for predators.

The brain always proposes a command. The state machine decides whether that
proposal survives: Hunting and Mating steer toward their target, Wandering
sometimes swaps the proposal for a wander move, Resting holds still.

Hunting starts below `hunt_threshold` and only ends at `hunt_exit_threshold`
or above; in between, an agent keeps whatever state it is in.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from predsim.errors import InvalidTarget
from predsim.interfaces import EntityKind, MovementCommand
from predsim.logging_config import get_logger
from predsim.sensors import bearing_to, clamp, distance_between

logger = get_logger(__name__)


class BehaviorState(Enum):
    WANDERING = auto()
    HUNTING = auto()
    MATING = auto()
    RESTING = auto()


@dataclass(frozen=True)
class BehaviorSettings:
    # hunger thresholds, as fractions of max hunger
    hunt_threshold: float = 0.5
    hunt_exit_threshold: float = 0.6
    emergency_threshold: float = 0.3
    # timers (seconds)
    rest_duration: float = 3.0
    prey_memory_duration: float = 3.0
    mating_duration: float = 5.0
    # distances
    view_radius: float = 20.0
    mating_radius: float = 3.0
    # steering
    standard_speed: float = 0.5
    hunt_turn_angle: float = 45.0
    mate_turn_angle: float = 60.0
    wander_override_chance: float = 0.3
    wander_turn_chance: float = 0.15

    @classmethod
    def from_blueprint(cls, blueprint):
        return cls(
            hunt_threshold=blueprint["hunt_threshold"],
            hunt_exit_threshold=blueprint["hunt_exit_threshold"],
            emergency_threshold=blueprint["emergency_threshold"],
            rest_duration=blueprint["rest_duration"],
            prey_memory_duration=blueprint["prey_memory_duration"],
            mating_duration=blueprint["mating_duration"],
            view_radius=blueprint["view_radius"],
            mating_radius=blueprint["mating_radius"],
            standard_speed=blueprint["standard_speed"],
            hunt_turn_angle=blueprint.get("hunt_turn_angle", 45.0),
            mate_turn_angle=blueprint.get("mate_turn_angle", 60.0),
            wander_override_chance=blueprint.get("wander_override_chance", 0.3),
            wander_turn_chance=blueprint.get("wander_turn_chance", 0.15),
        )

    @property
    def sense_radius(self):
        """Largest radius any part of the controller looks at in one snapshot."""
        return self.view_radius * 1.2


@dataclass
class Decision:
    command: MovementCommand
    state: BehaviorState
    state_changed: bool = False
    mated_with: Optional[int] = None


def is_mate_candidate(other):
    return other is not None and other.is_alive and other.metabolism.love_is_full


@dataclass
class BehaviorController:
    settings: BehaviorSettings = field(default_factory=BehaviorSettings)
    state: BehaviorState = BehaviorState.WANDERING
    state_timer: float = 0.0
    target_prey: Optional[int] = None
    prey_memory_timer: float = 0.0
    target_mate: Optional[int] = None
    mating_timer: float = 0.0

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------
    def clear_prey(self):
        self.target_prey = None
        self.prey_memory_timer = 0.0

    def clear_mate(self):
        self.target_mate = None
        self.mating_timer = 0.0

    def _resolve(self, world, entity_id):
        try:
            return world.resolve(entity_id)
        except InvalidTarget:
            logger.debug(f"Target {entity_id} vanished, dropping it")
            return None

    def _in_sight(self, world, origin, entity, max_distance):
        dx = entity.position[0] - origin[0]
        dy = entity.position[1] - origin[1]
        length = math.hypot(dx, dy)
        if length == 0:
            return True
        hit = world.raycast_visible(origin, (dx / length, dy / length), max_distance)
        return hit is not None and hit.id == entity.id

    def track_prey(self, world, origin, snapshot, dt):
        settings = self.settings
        if self.target_prey is not None:
            self.prey_memory_timer -= dt
            if self.prey_memory_timer <= 0.0 or self._resolve(world, self.target_prey) is None:
                self.clear_prey()

        closest, closest_distance = None, math.inf
        for entity in snapshot:
            if entity.kind is not EntityKind.PREY:
                continue
            distance = distance_between(origin, entity.position)
            if distance > settings.view_radius or distance >= closest_distance:
                continue
            if self._in_sight(world, origin, entity, settings.view_radius):
                closest, closest_distance = entity, distance

        if closest is not None:
            self.target_prey = closest.id
            self.prey_memory_timer = settings.prey_memory_duration

    def track_mate(self, world, self_id, origin, snapshot, love_full):
        settings = self.settings
        view = settings.view_radius

        if self.target_mate is None:
            search_radius = view * (1.2 if love_full else 0.6)
            closest, closest_distance = None, math.inf
            for entity in snapshot:
                if entity.kind is not EntityKind.AGENT or entity.id == self_id:
                    continue
                distance = distance_between(origin, entity.position)
                if distance > search_radius or distance >= closest_distance:
                    continue
                if not is_mate_candidate(self._resolve(world, entity.id)):
                    continue
                if self._in_sight(world, origin, entity, search_radius):
                    closest, closest_distance = entity, distance

            select_radius = view if love_full else view * 0.6
            if closest is not None and closest_distance < select_radius:
                self.target_mate = closest.id
                self.mating_timer = 0.0

        # Once chosen, a mate is kept while it stays valid and within follow range.
        if self.target_mate is not None:
            mate = self._resolve(world, self.target_mate)
            follow_radius = view * (1.5 if love_full else 0.8)
            if not is_mate_candidate(mate) or distance_between(origin, mate.position) > follow_radius:
                self.clear_mate()

    def update_targets(self, world, self_id, origin, snapshot, love_full, dt):
        self.track_prey(world, origin, snapshot, dt)
        self.track_mate(world, self_id, origin, snapshot, love_full)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _enter(self, state):
        logger.debug(f"{self.state.name} -> {state.name}")
        self.state = state
        self.state_timer = 0.0

    def next_state(self, hunger_fraction, love_full):
        settings = self.settings
        has_prey = self.target_prey is not None
        has_mate = self.target_mate is not None
        hungry = hunger_fraction < settings.hunt_threshold
        fed = hunger_fraction >= settings.hunt_threshold
        wants_mate = love_full and has_mate and fed

        state = self.state
        if state is BehaviorState.WANDERING:
            if hungry and has_prey:
                state = BehaviorState.HUNTING
            elif wants_mate:
                state = BehaviorState.MATING
        elif state is BehaviorState.HUNTING:
            if not has_prey or hunger_fraction >= settings.hunt_exit_threshold:
                state = BehaviorState.WANDERING
            elif wants_mate:
                state = BehaviorState.MATING
        elif state is BehaviorState.MATING:
            if not has_mate:
                state = BehaviorState.WANDERING
            elif hungry and has_prey:
                state = BehaviorState.HUNTING
        elif state is BehaviorState.RESTING:
            if self.state_timer >= settings.rest_duration:
                state = BehaviorState.WANDERING

        if hunger_fraction < settings.emergency_threshold and has_prey:
            state = BehaviorState.HUNTING
        return state

    def transition(self, hunger_fraction, love_full):
        """Applies the transition rules once. Returns True if the state changed."""
        state = self.next_state(hunger_fraction, love_full)
        if state is self.state:
            return False
        self._enter(state)
        if state is not BehaviorState.MATING:
            self.mating_timer = 0.0
        return True

    def rest(self):
        """Called on both parents once a mating produced offspring."""
        self.clear_mate()
        self._enter(BehaviorState.RESTING)

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------
    def _wander(self, command, love_full, rng):
        settings = self.settings
        if love_full:
            # sweep a widening search circle while looking for a mate
            phase = self.state_timer % 10.0
            return MovementCommand(settings.standard_speed, math.sin(phase * 0.5 * math.pi) * 0.6)
        if rng.random() < settings.wander_override_chance:
            turn = command.turn
            if rng.random() < settings.wander_turn_chance:
                turn = -1.0 if rng.random() < 0.5 else 1.0
            return MovementCommand(settings.standard_speed, turn)
        return command

    def _hunt(self, command, world, origin, heading):
        prey = self._resolve(world, self.target_prey) if self.target_prey is not None else None
        if prey is None:
            return command
        bearing = bearing_to(origin, heading, prey.position)
        return MovementCommand(
            self.settings.standard_speed,
            clamp(bearing / self.settings.hunt_turn_angle, -1.0, 1.0),
        )

    def _mate(self, command, world, origin, heading, dt):
        settings = self.settings
        mate = self._resolve(world, self.target_mate) if self.target_mate is not None else None
        if mate is None:
            return command, None
        bearing = bearing_to(origin, heading, mate.position)
        turn = clamp(bearing / settings.mate_turn_angle, -1.0, 1.0)
        if distance_between(origin, mate.position) > settings.mating_radius:
            return MovementCommand(settings.standard_speed, turn), None

        self.mating_timer += dt
        mated_with = None
        if self.mating_timer >= settings.mating_duration:
            mated_with = self.target_mate
            self.clear_mate()
        return MovementCommand(0.0, turn, hold=True), mated_with

    def decide(self, proposal, world, origin, heading, hunger_fraction, love_full, dt, rng):
        """
        Runs one tick of the state machine on top of the brain's proposal.

        Targets must already be updated for this tick's snapshot.
        """
        self.state_timer += dt
        changed = self.transition(hunger_fraction, love_full)

        command = proposal
        if changed:
            command = MovementCommand(self.settings.standard_speed, proposal.turn)

        mated_with = None
        if self.state is BehaviorState.WANDERING:
            command = self._wander(command, love_full, rng)
        elif self.state is BehaviorState.HUNTING:
            command = self._hunt(command, world, origin, heading)
        elif self.state is BehaviorState.MATING:
            command, mated_with = self._mate(command, world, origin, heading, dt)
        elif self.state is BehaviorState.RESTING:
            command = MovementCommand(0.0, 0.0, hold=True)

        return Decision(command=command, state=self.state, state_changed=changed, mated_with=mated_with)
