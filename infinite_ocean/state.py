"""
Simulation state container.

Everything one session mutates lives on a SimulationState owned by
OceanSimulation and handed to each update phase. No module keeps
mutable globals.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .data_types import OceanConfig
from .entity import Shark, PointerState, Fish, SeaweedStalk, BloodParticle, GameStats
from .spatial import ChunkKey, vec2
from .world import WorldState


class ChunkRegistry:
    """
    Set of generated chunk keys for one content stream.

    Marking is idempotent. Each key also keeps a generation epoch that
    advances every time the chunk is (re)generated, so content produced
    after an eviction draws from a fresh seed.
    """

    def __init__(self, name: str):
        self.name = name
        self._generated: Set[ChunkKey] = set()
        self._epochs: Dict[ChunkKey, int] = {}

    def mark(self, key: ChunkKey) -> Optional[int]:
        """
        Mark key generated.

        Returns:
            Generation epoch for this key, or None if already generated
        """
        if key in self._generated:
            return None
        self._generated.add(key)
        epoch = self._epochs.get(key, 0)
        self._epochs[key] = epoch + 1
        return epoch

    def unmark(self, key: ChunkKey):
        self._generated.discard(key)

    def clear(self):
        self._generated.clear()
        self._epochs.clear()

    def keys(self) -> Set[ChunkKey]:
        return set(self._generated)

    def __contains__(self, key: ChunkKey) -> bool:
        return key in self._generated

    def __len__(self) -> int:
        return len(self._generated)


@dataclass
class SimulationState:
    """
    Mutable session state.

    Attributes:
        config: Active configuration
        world: Camera offset and bounds
        shark: Player shark (screen space)
        pointer: Latest pointer input
        fish: Active fish (normal and ambush)
        seaweed: Active seaweed stalks
        particles: Active blood particles
        stats: Eating counters
        seaweed_chunks: Registry for seaweed + ambush fish
        fish_chunks: Registry for normal fish
        world_seed: Root seed for every RNG stream
        behavior_rng: Per-tick randomness for fish wander
        particle_rng: Spawn and drift randomness for particles
        tick_count: Completed update ticks since reset
    """
    config: OceanConfig
    world: WorldState
    shark: Shark
    world_seed: int
    behavior_rng: np.random.Generator
    particle_rng: np.random.Generator
    pointer: PointerState = field(default_factory=PointerState)
    fish: List[Fish] = field(default_factory=list)
    seaweed: List[SeaweedStalk] = field(default_factory=list)
    particles: List[BloodParticle] = field(default_factory=list)
    stats: GameStats = field(default_factory=GameStats)
    seaweed_chunks: ChunkRegistry = field(default_factory=lambda: ChunkRegistry('seaweed'))
    fish_chunks: ChunkRegistry = field(default_factory=lambda: ChunkRegistry('fish'))
    tick_count: int = 0

    def shark_world_position(self) -> np.ndarray:
        """Shark anchor point in world space"""
        return self.world.translate_to_world(self.shark.position)

    def shark_visual_center(self) -> np.ndarray:
        """Center of the drawn shark body in world space"""
        corner = vec2(self.shark.width / 2.0, self.shark.height / 2.0)
        return self.world.translate_to_world(self.shark.position + corner)
