"""
Configuration data types mirroring the YAML config structure.

These dataclasses are populated by loader.py from YAML files. Every field
defaults to the matching value in constants.py, so OceanConfig() is a
complete, playable configuration on its own.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from . import constants as C


# ============================================================================
# World
# ============================================================================

@dataclass
class WorldConfig:
    """Static world geometry"""
    sky_height: float = C.SKY_HEIGHT
    ocean_depth: float = C.OCEAN_DEPTH
    sand_height: float = C.SAND_HEIGHT
    vertical_margin: float = C.VERTICAL_MARGIN


# ============================================================================
# Shark
# ============================================================================

@dataclass
class SharkConfig:
    """Player shark dimensions and movement"""
    base_width: float = C.SHARK_BASE_WIDTH
    base_height: float = C.SHARK_BASE_HEIGHT
    speed: float = C.SHARK_SPEED
    dead_zone_radius: float = C.DEAD_ZONE_RADIUS
    base_eat_radius: float = C.BASE_EAT_RADIUS


# ============================================================================
# Chunk Streaming
# ============================================================================

@dataclass
class ChunkConfig:
    """Procedural generation grid and density"""
    chunk_size: float = C.CHUNK_SIZE
    range_x: int = C.CHUNK_RANGE_X
    range_y: int = C.CHUNK_RANGE_Y
    eviction_chunks: float = C.EVICTION_CHUNKS
    seaweed_density: float = C.SEAWEED_DENSITY
    fish_density: float = C.FISH_DENSITY
    seaweed_surface_margin: float = C.SEAWEED_SURFACE_MARGIN
    seaweed_floor_margin: float = C.SEAWEED_FLOOR_MARGIN
    fish_surface_margin: float = C.FISH_SURFACE_MARGIN
    fish_floor_margin: float = C.FISH_FLOOR_MARGIN
    ambush_spawn_chance: float = C.AMBUSH_SPAWN_CHANCE

    @property
    def eviction_distance(self) -> float:
        return self.chunk_size * self.eviction_chunks


# ============================================================================
# Fish Classes
# ============================================================================

@dataclass
class FishClassConfig:
    """Spawn ranges for one fish class"""
    name: str
    speed_range: Tuple[float, float]
    size_range: Tuple[float, float]
    color: str


def _slow_class() -> FishClassConfig:
    return FishClassConfig('slow', C.SLOW_FISH_SPEED, C.SLOW_FISH_SIZE, C.SLOW_FISH_COLOR)


def _fast_class() -> FishClassConfig:
    return FishClassConfig('fast', C.FAST_FISH_SPEED, C.FAST_FISH_SIZE, C.FAST_FISH_COLOR)


def _ambush_class() -> FishClassConfig:
    return FishClassConfig('ambush', C.AMBUSH_FISH_SPEED, C.AMBUSH_FISH_SIZE, C.AMBUSH_FISH_COLOR)


@dataclass
class FishConfig:
    """Fish population mix"""
    slow_fraction: float = C.SLOW_FISH_FRACTION
    slow: FishClassConfig = field(default_factory=_slow_class)
    fast: FishClassConfig = field(default_factory=_fast_class)
    ambush: FishClassConfig = field(default_factory=_ambush_class)
    flee_distance_range: Tuple[float, float] = C.FLEE_DISTANCE_RANGE


# ============================================================================
# Particles
# ============================================================================

@dataclass
class ParticleConfig:
    """Blood burst parameters"""
    base_count: int = C.PARTICLE_BASE_COUNT
    max_count: int = C.PARTICLE_MAX_COUNT
    speed_range: Tuple[float, float] = C.PARTICLE_SPEED_RANGE
    size_range: Tuple[float, float] = C.PARTICLE_SIZE_RANGE
    life_range: Tuple[float, float] = C.PARTICLE_LIFE_RANGE
    gravity_range: Tuple[float, float] = C.PARTICLE_GRAVITY_RANGE


# ============================================================================
# Simulation
# ============================================================================

@dataclass
class SimulationConfig:
    """Loop and diagnostics settings"""
    frame_retry_delay_s: float = C.FRAME_RETRY_DELAY_S
    tick_summary_interval: int = C.TICK_SUMMARY_INTERVAL
    use_ckdtree: bool = C.USE_CKDTREE


@dataclass
class OceanConfig:
    """Complete simulation configuration"""
    world: WorldConfig = field(default_factory=WorldConfig)
    shark: SharkConfig = field(default_factory=SharkConfig)
    chunks: ChunkConfig = field(default_factory=ChunkConfig)
    fish: FishConfig = field(default_factory=FishConfig)
    particles: ParticleConfig = field(default_factory=ParticleConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    seed: Optional[int] = None
    name: str = "Infinite Ocean"
