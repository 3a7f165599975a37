"""
Eating resolution: mouth point, proximity test, consumption and growth.

The mouth point and eat radius are computed once from the shark's state at
the start of the scan, then every fish closer than the radius is eaten in
the same tick.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import List

from .entity import Fish, Shark
from .particles import spawn_blood_burst
from .spatial_queries import FishIndexAdapter
from .state import SimulationState
from .constants import (
    MOUTH_DISTANCE_FACTOR,
    SLOW_FISH_GROWTH_BASE,
    SLOW_FISH_GROWTH_DIVISOR,
    FAST_FISH_GROWTH_BASE,
    FAST_FISH_GROWTH_DIVISOR,
)


@dataclass
class EatingEvent:
    """One fish consumed this tick"""
    fish: Fish
    growth: float
    slow: bool


def is_facing_left(direction_deg: float) -> bool:
    """Sprite is mirrored when the facing angle points left of vertical"""
    return abs(direction_deg) > 90.0


def mouth_point(center: np.ndarray, shark: Shark) -> np.ndarray:
    """
    World position of the shark's mouth.

    Mirrors the facing exactly the way the sprite is mirrored: when facing
    left the drawn angle is (pi - angle) under a horizontal flip, so the X
    offset is negated.

    Args:
        center: Shark visual center in world space
        shark: Shark (direction and width are read)
    """
    angle = math.radians(shark.direction_deg)
    reach = shark.width * MOUTH_DISTANCE_FACTOR

    if is_facing_left(shark.direction_deg):
        mirrored = math.pi - angle
        return np.array([center[0] - math.cos(mirrored) * reach,
                         center[1] + math.sin(mirrored) * reach], dtype=np.float64)

    return np.array([center[0] + math.cos(angle) * reach,
                     center[1] + math.sin(angle) * reach], dtype=np.float64)


def eat_radius(state: SimulationState) -> float:
    return state.config.shark.base_eat_radius * state.shark.growth_factor


def growth_for(fish: Fish, slow_color: str) -> float:
    """Growth granted by eating fish; gold fish are worth more"""
    if fish.color == slow_color:
        return SLOW_FISH_GROWTH_BASE + fish.size / SLOW_FISH_GROWTH_DIVISOR
    return FAST_FISH_GROWTH_BASE + fish.size / FAST_FISH_GROWTH_DIVISOR


def consume_fish(state: SimulationState, fish: Fish) -> EatingEvent:
    """
    Apply the effects of eating one fish.

    Spawns a blood burst, updates counters and grows the shark. Does not
    remove the fish from state.fish; resolve_eating does that in bulk.
    """
    spawn_blood_burst(state.particles, fish.position, fish.size,
                      state.particle_rng, state.config.particles)

    slow = fish.color == state.config.fish.slow.color
    growth = growth_for(fish, state.config.fish.slow.color)

    state.stats.fish_eaten += 1
    if slow:
        state.stats.slow_fish_eaten += 1
    else:
        state.stats.fast_fish_eaten += 1

    state.shark.apply_growth(growth)

    kind = "slow" if slow else "fast"
    print(f"[EAT] {kind} fish {fish.instance_id} | growth={state.shark.growth_factor:.3f} "
          f"size={state.shark.width:.1f}x{state.shark.height:.1f} | total={state.stats.fish_eaten}")

    return EatingEvent(fish=fish, growth=growth, slow=slow)


def resolve_eating(state: SimulationState, index: FishIndexAdapter) -> List[EatingEvent]:
    """
    Eat every fish within range of the mouth this tick.

    Args:
        state: Simulation state (fish, stats, shark and particles mutated)
        index: Fish index, rebuilt here from the current fish set

    Returns:
        Eating events in scan order
    """
    if not state.fish:
        return []

    mouth = mouth_point(state.shark_visual_center(), state.shark)
    radius = eat_radius(state)

    index.build(state.fish)
    eaten = index.within(mouth, radius)
    if not eaten:
        return []

    events = [consume_fish(state, fish) for fish in eaten]

    eaten_ids = {id(fish) for fish in eaten}
    state.fish = [fish for fish in state.fish if id(fish) not in eaten_ids]
    return events
