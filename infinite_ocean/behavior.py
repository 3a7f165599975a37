"""
Behavior engine for the shark, fish and seaweed.

- Shark: steers the world offset toward the pointer target, with a dead
  zone around the shark to avoid jitter at rest.
- Normal fish: continuous flee/wander physics with drag and speed clamps.
  Fleeing fish may go up to 0.8x nominal speed, wandering fish 0.3x.
- Ambush fish: hiding -> emerging -> returning -> hiding state machine
  around a fixed home point.
- Seaweed: cosmetic sway phase advance.

Every fish ends its update with the same reflective Y clamp into the
open-water band.
"""

import math
import numpy as np
from typing import List

from .entity import Fish, NormalFishState, AmbushFishState, AmbushMode, SeaweedStalk
from .rng import uniform, symmetric, random_horizontal_heading
from .spatial import normalize, clamp_speed, speed_of, steer_towards, distance_2d, reflect_into_band, vec2
from .state import SimulationState
from .world import WorldState
from .constants import (
    FLEE_MIN_STRENGTH,
    FLEE_ACCEL_FACTOR,
    FLEE_DRAG,
    FLEE_JITTER_CUTOFF,
    FLEE_MAX_SPEED_FACTOR,
    WANDER_BASE_SPEED,
    WANDER_HORIZONTAL_BIAS,
    WANDER_VERTICAL_SUBTLETY,
    WANDER_THRUST,
    WANDER_DRAG,
    WANDER_MAX_SPEED_FACTOR,
    WANDER_MIN_SPEED,
    WANDER_PUSH_X,
    WANDER_PUSH_Y,
    DEPTH_OSCILLATION_STEP,
    DEPTH_OSCILLATION_AMPLITUDE,
    DIRECTION_CHANGE_BASE_TICKS,
    DIRECTION_CHANGE_SPREAD_TICKS,
    DIRECTION_NUDGE,
    HEADING_SPREAD,
    REVERSAL_PROBABILITY,
    FISH_BOUNDS_MARGIN,
    HEADING_SMOOTHING,
    HEADING_MIN_SPEED,
    AMBUSH_TRIGGER_DISTANCE,
    AMBUSH_LEASH_DISTANCE,
    AMBUSH_ARRIVAL_DISTANCE,
    AMBUSH_EMERGE_SPEED_FACTOR,
    AMBUSH_RETURN_SPEED_FACTOR,
)

TWO_PI = 2.0 * math.pi


def fish_band(world: WorldState) -> tuple:
    """Open-water Y band every fish is clamped into"""
    return world.surface_y + FISH_BOUNDS_MARGIN, world.bottom_y - FISH_BOUNDS_MARGIN


# ============================================================================
# Shark / world coupling
# ============================================================================

def update_shark(state: SimulationState) -> bool:
    """
    Move the world opposite to the shark's desired travel.

    The shark stays at the viewport center; the world offset moves by
    `speed` along the unit vector toward the pointer target. Targets inside
    the dead zone, or an inactive pointer, produce no movement.

    Returns:
        True if the world moved this tick
    """
    if not state.pointer.is_active:
        return False

    shark = state.shark
    delta = shark.target - shark.position
    direction, distance = normalize(delta)

    if distance <= state.config.shark.dead_zone_radius:
        return False

    move = direction * shark.speed
    state.world.move(move[0], move[1])
    shark.direction_deg = math.degrees(math.atan2(delta[1], delta[0]))

    # No horizontal limits, vertical clamp keeps the shark in the water
    state.world.clamp_vertical(shark.position[1])
    return True


# ============================================================================
# Normal fish
# ============================================================================

def _flee(fish: Fish, away: np.ndarray, distance: float):
    strength = max(FLEE_MIN_STRENGTH, (fish.flee_distance - distance) / fish.flee_distance)
    fish.velocity += away * (fish.speed * strength * FLEE_ACCEL_FACTOR)


def _wander(fish: Fish, wander: NormalFishState, rng: np.random.Generator):
    wander.direction_change_timer += 1

    fish.velocity[0] += math.cos(wander.swim_direction) * wander.base_speed * WANDER_HORIZONTAL_BIAS * WANDER_THRUST
    fish.velocity[1] += math.sin(wander.swim_direction) * wander.base_speed * WANDER_VERTICAL_SUBTLETY * WANDER_THRUST

    wander.depth_oscillation += DEPTH_OSCILLATION_STEP
    fish.velocity[1] += math.sin(wander.depth_oscillation) * DEPTH_OSCILLATION_AMPLITUDE

    threshold = DIRECTION_CHANGE_BASE_TICKS + float(rng.random()) * DIRECTION_CHANGE_SPREAD_TICKS
    if wander.direction_change_timer > threshold:
        wander.swim_direction += symmetric(rng, DIRECTION_NUDGE)

        # Re-roll headings that point mostly up or down
        heading = wander.swim_direction % TWO_PI
        if 0.17 * math.pi < heading < 0.83 * math.pi or 1.17 * math.pi < heading < 1.83 * math.pi:
            wander.swim_direction = random_horizontal_heading(rng, HEADING_SPREAD)

        wander.direction_change_timer = 0

    if rng.random() < REVERSAL_PROBABILITY:
        wander.swim_direction += math.pi
        wander.base_speed = uniform(rng, WANDER_BASE_SPEED)


def update_normal_fish(fish: Fish, shark_world: np.ndarray, world: WorldState,
                       rng: np.random.Generator):
    """
    Advance one free-swimming fish by one tick.

    Args:
        fish: Fish with NormalFishState (mutated)
        shark_world: Shark position in world space
        world: World bounds
        rng: Behavior RNG stream
    """
    wander: NormalFishState = fish.state
    away = fish.position - shark_world
    distance = speed_of(away)

    fish.is_fleeing = 0.0 < distance < fish.flee_distance
    if fish.is_fleeing:
        _flee(fish, away / distance, distance)
        fish.velocity *= FLEE_DRAG

        # Drop tiny components so fleeing fish don't shiver
        fish.velocity[np.abs(fish.velocity) < FLEE_JITTER_CUTOFF] = 0.0
        max_speed = fish.speed * FLEE_MAX_SPEED_FACTOR
    else:
        _wander(fish, wander, rng)
        fish.velocity *= WANDER_DRAG

        if speed_of(fish.velocity) < WANDER_MIN_SPEED:
            fish.velocity[0] += math.cos(wander.swim_direction) * WANDER_MIN_SPEED * WANDER_PUSH_X
            fish.velocity[1] += math.sin(wander.swim_direction) * WANDER_MIN_SPEED * WANDER_PUSH_Y
        max_speed = fish.speed * WANDER_MAX_SPEED_FACTOR

    fish.velocity = clamp_speed(fish.velocity, max_speed)
    fish.position += fish.velocity

    min_y, max_y = fish_band(world)
    reflect_into_band(fish.position, fish.velocity, min_y, max_y)


# ============================================================================
# Ambush fish
# ============================================================================

def update_ambush_fish(fish: Fish, shark_world: np.ndarray, world: WorldState):
    """
    Advance one ambush fish through its state machine.

    hiding: pinned to home until the shark comes within trigger distance.
    emerging: chases the shark; returns once it strays past the leash.
    returning: swims home and hides on arrival, unless the shark comes
    close again first.
    """
    lurker: AmbushFishState = fish.state
    shark_distance = distance_2d(fish.position, shark_world)

    if lurker.mode == AmbushMode.HIDING:
        fish.velocity = vec2(0.0, 0.0)
        if shark_distance < AMBUSH_TRIGGER_DISTANCE:
            lurker.mode = AmbushMode.EMERGING
            lurker.state_timer = 0
        # Snap every tick so nothing drifts while hidden
        fish.position = lurker.home.copy()

    elif lurker.mode == AmbushMode.EMERGING:
        fish.velocity, _ = steer_towards(fish.position, shark_world,
                                         fish.speed * AMBUSH_EMERGE_SPEED_FACTOR,
                                         AMBUSH_ARRIVAL_DISTANCE)
        lurker.state_timer += 1
        if distance_2d(fish.position, lurker.home) > AMBUSH_LEASH_DISTANCE:
            lurker.mode = AmbushMode.RETURNING

    elif lurker.mode == AmbushMode.RETURNING:
        fish.velocity, home_distance = steer_towards(fish.position, lurker.home,
                                                     fish.speed * AMBUSH_RETURN_SPEED_FACTOR,
                                                     AMBUSH_ARRIVAL_DISTANCE)
        if home_distance <= AMBUSH_ARRIVAL_DISTANCE:
            fish.position = lurker.home.copy()
            lurker.mode = AmbushMode.HIDING
        if shark_distance < AMBUSH_TRIGGER_DISTANCE:
            lurker.mode = AmbushMode.EMERGING
            lurker.state_timer = 0

    fish.is_fleeing = False
    fish.position += fish.velocity

    min_y, max_y = fish_band(world)
    reflect_into_band(fish.position, fish.velocity, min_y, max_y)


# ============================================================================
# Tick entry points
# ============================================================================

def _smooth_heading(fish: Fish):
    if speed_of(fish.velocity) > HEADING_MIN_SPEED:
        target = math.atan2(fish.velocity[1], fish.velocity[0])
        fish.heading = fish.heading * HEADING_SMOOTHING + target * (1.0 - HEADING_SMOOTHING)


def update_fish(state: SimulationState):
    """Advance every active fish, dispatching on its behavior state"""
    shark_world = state.shark_world_position()

    for fish in state.fish:
        if isinstance(fish.state, AmbushFishState):
            update_ambush_fish(fish, shark_world, state.world)
        elif isinstance(fish.state, NormalFishState):
            update_normal_fish(fish, shark_world, state.world, state.behavior_rng)
        _smooth_heading(fish)


def update_seaweed(stalks: List[SeaweedStalk]):
    """Advance sway phase; purely cosmetic"""
    for stalk in stalks:
        stalk.sway_phase += stalk.sway_speed
