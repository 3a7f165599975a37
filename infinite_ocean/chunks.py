"""
Chunk streaming: procedural generation and culling around the viewport.

World space is cut into square chunks. Every tick the chunks in a small
rectangle around the viewport center are generated (once per key, per
registry) and entities drifting too far from the center are evicted,
releasing their chunk key so the area is repopulated with fresh content
when the player returns.

Two registries run independently:
- seaweed registry: seaweed stalks plus the ambush fish hiding in them
- fish registry: free-swimming normal fish
"""

import math
import numpy as np
from typing import Dict, List, Tuple

from .behavior import fish_band
from .data_types import OceanConfig, FishClassConfig
from .entity import Fish, FishClass, SeaweedStalk, NormalFishState, AmbushFishState
from .rng import make_rng, uniform, symmetric, random_horizontal_heading
from .spatial import ChunkKey, chunk_coords_of, chebyshev_exceeds, vec2
from .state import SimulationState
from .constants import (
    AMBUSH_HOME_DROP,
    INITIAL_VELOCITY_SPREAD,
    WANDER_BASE_SPEED,
    HEADING_SPREAD,
    DIRECTION_CHANGE_INITIAL_TICKS,
    SEAWEED_HEIGHT_RANGE,
    SEAWEED_SWAY_SPEED_RANGE,
)


def chunk_entity_count(chunk_size: float, density: float) -> int:
    """
    Placements attempted per chunk.

    Density is expressed per 100x100 block scaled by 100, so an 800 chunk
    gets 16 seaweed attempts at 0.0025 and 3 fish attempts at 0.0005.
    """
    blocks = (chunk_size * chunk_size) / 10000.0
    return int(math.floor(blocks * density * 100.0))


def _chunk_origin(key: ChunkKey, chunk_size: float) -> Tuple[float, float]:
    return key[0] * chunk_size, key[1] * chunk_size


# ============================================================================
# Seaweed + ambush fish
# ============================================================================

def generate_seaweed_chunk(state: SimulationState, cx: int, cy: int) -> int:
    """
    Populate one chunk with seaweed and the occasional ambush fish.

    No-op if the chunk is already marked in the seaweed registry.

    Args:
        state: Simulation state (mutated)
        cx: Chunk x coordinate
        cy: Chunk y coordinate

    Returns:
        Number of seaweed stalks placed
    """
    key = (cx, cy)
    epoch = state.seaweed_chunks.mark(key)
    if epoch is None:
        return 0

    chunks = state.config.chunks
    rng = make_rng(state.world_seed, "seaweed-chunk", cx, cy, epoch)
    origin_x, origin_y = _chunk_origin(key, chunks.chunk_size)

    min_y = state.world.surface_y + chunks.seaweed_surface_margin
    max_y = state.world.bottom_y - chunks.seaweed_floor_margin
    band_min, band_max = fish_band(state.world)

    placed = 0
    for i in range(chunk_entity_count(chunks.chunk_size, chunks.seaweed_density)):
        x = origin_x + float(rng.random()) * chunks.chunk_size
        y = origin_y + float(rng.random()) * chunks.chunk_size

        # Only in open water, clear of surface and floor
        if not (min_y <= y <= max_y):
            continue

        state.seaweed.append(SeaweedStalk(
            position=vec2(x, y),
            height=uniform(rng, SEAWEED_HEIGHT_RANGE),
            sway_phase=float(rng.uniform(0.0, 2.0 * math.pi)),
            sway_speed=uniform(rng, SEAWEED_SWAY_SPEED_RANGE),
            chunk_key=key
        ))
        placed += 1

        if rng.random() < chunks.ambush_spawn_chance:
            # Home must sit inside the fish band or the lurker can never arrive
            home_y = min(max(y + AMBUSH_HOME_DROP, band_min), band_max)
            instance_id = f"ambush-{cx}_{cy}-{epoch}-{i:03d}"
            state.fish.append(_spawn_ambush_fish(rng, x, home_y, key, state.config, instance_id))

    return placed


def _spawn_ambush_fish(rng: np.random.Generator, home_x: float, home_y: float,
                       key: ChunkKey, config: OceanConfig, instance_id: str) -> Fish:
    ambush = config.fish.ambush
    return Fish(
        instance_id=instance_id,
        fish_class=FishClass.AMBUSH,
        position=vec2(home_x, home_y),
        velocity=vec2(0.0, 0.0),
        size=uniform(rng, ambush.size_range),
        speed=uniform(rng, ambush.speed_range),
        flee_distance=uniform(rng, config.fish.flee_distance_range),
        color=ambush.color,
        chunk_key=key,
        state=AmbushFishState(home=vec2(home_x, home_y))
    )


# ============================================================================
# Normal fish
# ============================================================================

def generate_fish_chunk(state: SimulationState, cx: int, cy: int) -> int:
    """
    Populate one chunk with free-swimming fish.

    Each placed fish rolls its class independently: slow_fraction of them
    are slow (gold, larger), the rest fast (red, smaller).

    Returns:
        Number of fish placed
    """
    key = (cx, cy)
    epoch = state.fish_chunks.mark(key)
    if epoch is None:
        return 0

    chunks = state.config.chunks
    rng = make_rng(state.world_seed, "fish-chunk", cx, cy, epoch)
    origin_x, origin_y = _chunk_origin(key, chunks.chunk_size)

    min_y = state.world.surface_y + chunks.fish_surface_margin
    max_y = state.world.bottom_y - chunks.fish_floor_margin

    placed = 0
    for i in range(chunk_entity_count(chunks.chunk_size, chunks.fish_density)):
        x = origin_x + float(rng.random()) * chunks.chunk_size
        y = origin_y + float(rng.random()) * chunks.chunk_size

        if not (min_y <= y <= max_y):
            continue

        if rng.random() < state.config.fish.slow_fraction:
            fish_class, class_config = FishClass.SLOW, state.config.fish.slow
        else:
            fish_class, class_config = FishClass.FAST, state.config.fish.fast

        instance_id = f"{fish_class.value}-{cx}_{cy}-{epoch}-{i:03d}"
        state.fish.append(_spawn_normal_fish(rng, x, y, key, fish_class, class_config,
                                             state.config, instance_id))
        placed += 1

    return placed


def _spawn_normal_fish(rng: np.random.Generator, x: float, y: float, key: ChunkKey,
                       fish_class: FishClass, class_config: FishClassConfig,
                       config: OceanConfig, instance_id: str) -> Fish:
    speed = uniform(rng, class_config.speed_range)
    size = uniform(rng, class_config.size_range)
    velocity = vec2(symmetric(rng, 2.0 * INITIAL_VELOCITY_SPREAD),
                    symmetric(rng, 2.0 * INITIAL_VELOCITY_SPREAD))
    flee_distance = uniform(rng, config.fish.flee_distance_range)

    wander = NormalFishState(
        base_speed=uniform(rng, WANDER_BASE_SPEED),
        swim_direction=random_horizontal_heading(rng, HEADING_SPREAD),
        depth_oscillation=float(rng.uniform(0.0, 2.0 * math.pi)),
        direction_change_timer=float(rng.uniform(0.0, DIRECTION_CHANGE_INITIAL_TICKS))
    )

    return Fish(
        instance_id=instance_id,
        fish_class=fish_class,
        position=vec2(x, y),
        velocity=velocity,
        size=size,
        speed=speed,
        flee_distance=flee_distance,
        color=class_config.color,
        chunk_key=key,
        state=wander
    )


# ============================================================================
# Streaming
# ============================================================================

def evict_distant(state: SimulationState, center: np.ndarray) -> Tuple[int, int]:
    """
    Drop seaweed and fish beyond the eviction distance from center.

    Distance is tested per axis (|dx| or |dy|). Each evicted entity unmarks
    its chunk key in the owning registry so the chunk can be regenerated.

    Returns:
        Tuple of (seaweed evicted, fish evicted)
    """
    max_distance = state.config.chunks.eviction_distance

    kept_seaweed: List[SeaweedStalk] = []
    for stalk in state.seaweed:
        if chebyshev_exceeds(stalk.position, center, max_distance):
            state.seaweed_chunks.unmark(stalk.chunk_key)
        else:
            kept_seaweed.append(stalk)

    # Every fish, ambush included, unmarks the fish registry; the lurker's
    # seaweed chunk stays marked until its stalks are evicted
    kept_fish: List[Fish] = []
    for fish in state.fish:
        if chebyshev_exceeds(fish.position, center, max_distance):
            state.fish_chunks.unmark(fish.chunk_key)
        else:
            kept_fish.append(fish)

    evicted = (len(state.seaweed) - len(kept_seaweed), len(state.fish) - len(kept_fish))
    state.seaweed = kept_seaweed
    state.fish = kept_fish
    return evicted


def stream_chunks(state: SimulationState) -> Dict[str, int]:
    """
    Generate the neighborhood around the viewport center, then evict.

    The neighborhood spans range_x chunks left/right and range_y chunks
    above/below the chunk containing the viewport center.

    Returns:
        Dict with seaweed_placed, fish_placed, seaweed_evicted, fish_evicted
    """
    chunks = state.config.chunks
    center = state.world.view_center()
    center_x, center_y = chunk_coords_of(center, chunks.chunk_size)

    seaweed_placed = 0
    fish_placed = 0
    for dx in range(-chunks.range_x, chunks.range_x + 1):
        for dy in range(-chunks.range_y, chunks.range_y + 1):
            seaweed_placed += generate_seaweed_chunk(state, center_x + dx, center_y + dy)
            fish_placed += generate_fish_chunk(state, center_x + dx, center_y + dy)

    seaweed_evicted, fish_evicted = evict_distant(state, center)

    return {
        'seaweed_placed': seaweed_placed,
        'fish_placed': fish_placed,
        'seaweed_evicted': seaweed_evicted,
        'fish_evicted': fish_evicted
    }
