"""
Entity runtime representation.

Shark, fish, seaweed and blood particles as they exist in the simulation.
Fish carry a tagged behavior state: NormalFishState for free swimmers,
AmbushFishState for lurkers anchored to a seaweed home.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .spatial import ChunkKey


def _as_vec(value) -> np.ndarray:
    if not isinstance(value, np.ndarray):
        return np.array(value, dtype=np.float64)
    return value.astype(np.float64, copy=False)


# ============================================================================
# Shark and input
# ============================================================================

@dataclass
class Shark:
    """
    Player shark. Lives at the viewport center in screen space.

    Attributes:
        position: Screen position [x, y]
        base_width: Width at growth_factor 1.0
        base_height: Height at growth_factor 1.0
        speed: World offset units moved per tick
        width: base_width * growth_factor
        height: base_height * growth_factor
        growth_factor: Size multiplier, never decreases within a session
        direction_deg: Facing angle from the last movement vector
        target: Latest pointer position (screen space)
    """
    position: np.ndarray
    base_width: float
    base_height: float
    speed: float
    width: float = 0.0
    height: float = 0.0
    growth_factor: float = 1.0
    direction_deg: float = 0.0
    target: np.ndarray = None

    def __post_init__(self):
        self.position = _as_vec(self.position)
        self.target = self.position.copy() if self.target is None else _as_vec(self.target)
        self.apply_growth(0.0)

    def apply_growth(self, amount: float):
        """Increase growth_factor and rescale dimensions"""
        self.growth_factor += amount
        self.width = self.base_width * self.growth_factor
        self.height = self.base_height * self.growth_factor

    def to_dict(self) -> dict:
        return {
            'position': self.position.tolist(),
            'width': self.width,
            'height': self.height,
            'growth_factor': self.growth_factor,
            'direction_deg': self.direction_deg,
            'target': self.target.tolist()
        }


@dataclass
class PointerState:
    """Latest pointer/touch position; movement only while active"""
    x: float = 0.0
    y: float = 0.0
    is_active: bool = False


# ============================================================================
# Fish
# ============================================================================

class FishClass(str, Enum):
    SLOW = 'slow'
    FAST = 'fast'
    AMBUSH = 'ambush'


class AmbushMode(str, Enum):
    HIDING = 'hiding'
    EMERGING = 'emerging'
    RETURNING = 'returning'


@dataclass
class NormalFishState:
    """Wander state for free-swimming fish, built at spawn"""
    base_speed: float
    swim_direction: float
    depth_oscillation: float
    direction_change_timer: float


@dataclass
class AmbushFishState:
    """
    Lurker state machine.

    state_timer counts ticks spent emerging; it is tracked for diagnostics
    and is not a transition trigger.
    """
    home: np.ndarray
    mode: AmbushMode = AmbushMode.HIDING
    state_timer: int = 0

    def __post_init__(self):
        self.home = _as_vec(self.home)


FishBehaviorState = Union[NormalFishState, AmbushFishState]


@dataclass
class Fish:
    """
    Runtime fish.

    Attributes:
        instance_id: Unique id (format: "{class}-{cx}_{cy}-{epoch}-{index:03d}")
        fish_class: slow, fast or ambush
        position: World position [x, y]
        velocity: World velocity [vx, vy] per tick
        size: Body length
        speed: Nominal speed; clamps are fractions of this
        flee_distance: Shark distance that triggers fleeing (normal fish)
        color: Hex color; eating counters classify by it
        chunk_key: Chunk this fish was generated in
        state: NormalFishState or AmbushFishState
        is_fleeing: Whether the last update used flee physics
        heading: Smoothed facing angle for renderers (radians)
    """
    instance_id: str
    fish_class: FishClass
    position: np.ndarray
    velocity: np.ndarray
    size: float
    speed: float
    flee_distance: float
    color: str
    chunk_key: ChunkKey
    state: FishBehaviorState
    is_fleeing: bool = False
    heading: float = 0.0

    def __post_init__(self):
        self.position = _as_vec(self.position)
        self.velocity = _as_vec(self.velocity)

    @property
    def is_ambush(self) -> bool:
        return isinstance(self.state, AmbushFishState)

    def to_dict(self) -> dict:
        data = {
            'instance_id': self.instance_id,
            'fish_class': self.fish_class.value,
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'size': self.size,
            'speed': self.speed,
            'color': self.color,
            'chunk_key': list(self.chunk_key),
            'is_fleeing': self.is_fleeing,
            'heading': self.heading
        }
        if isinstance(self.state, AmbushFishState):
            data['mode'] = self.state.mode.value
            data['home'] = self.state.home.tolist()
        return data


# ============================================================================
# Seaweed
# ============================================================================

@dataclass
class SeaweedStalk:
    """Decorative stalk; sway_phase only feeds the renderer"""
    position: np.ndarray
    height: float
    sway_phase: float
    sway_speed: float
    chunk_key: ChunkKey

    def __post_init__(self):
        self.position = _as_vec(self.position)

    def to_dict(self) -> dict:
        return {
            'position': self.position.tolist(),
            'height': self.height,
            'sway_phase': self.sway_phase,
            'chunk_key': list(self.chunk_key)
        }


# ============================================================================
# Particles
# ============================================================================

@dataclass
class BloodParticle:
    """
    Blood cloud particle.

    life runs from 1.0 down to 0.0 over max_life ticks and is derived from
    the integer age so a particle dies on exactly its last tick.
    """
    position: np.ndarray
    velocity: np.ndarray
    size: float
    max_size: float
    max_life: float
    gravity: float
    fade_rate: float
    life: float = 1.0
    age: int = 0

    def __post_init__(self):
        self.position = _as_vec(self.position)
        self.velocity = _as_vec(self.velocity)

    def to_dict(self) -> dict:
        return {
            'position': self.position.tolist(),
            'size': self.size,
            'life': self.life,
            'fade_rate': self.fade_rate
        }


# ============================================================================
# Stats
# ============================================================================

@dataclass
class GameStats:
    """Monotonic eating counters for one session"""
    fish_eaten: int = 0
    slow_fish_eaten: int = 0
    fast_fish_eaten: int = 0

    def to_dict(self) -> dict:
        return {
            'fish_eaten': self.fish_eaten,
            'slow_fish_eaten': self.slow_fish_eaten,
            'fast_fish_eaten': self.fast_fish_eaten
        }
