"""
Spatial utility functions for 2D geometry.

Helper functions for distance calculations, vector normalisation,
speed clamping and chunk coordinates in the ocean plane.
"""

import math
import numpy as np
from typing import Tuple


ChunkKey = Tuple[int, int]


def vec2(x: float, y: float) -> np.ndarray:
    """Build a float64 2D vector"""
    return np.array([x, y], dtype=np.float64)


def distance_2d(pos_a: np.ndarray, pos_b: np.ndarray) -> float:
    """
    Calculate Euclidean distance between two 2D points.

    Args:
        pos_a: Position [x, y]
        pos_b: Position [x, y]

    Returns:
        Distance in world units
    """
    diff = pos_a - pos_b
    return float(math.sqrt(diff[0] * diff[0] + diff[1] * diff[1]))


def speed_of(velocity: np.ndarray) -> float:
    """Magnitude of a 2D velocity"""
    return float(math.hypot(velocity[0], velocity[1]))


def normalize(vec: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Normalize vector to unit length.

    Args:
        vec: Vector to normalize [x, y]

    Returns:
        Tuple of (normalized vector, original length)
    """
    length = speed_of(vec)

    if length < 1e-9:
        # Zero vector, return arbitrary unit vector
        return vec2(1.0, 0.0), 0.0

    return vec / length, length


def clamp_speed(velocity: np.ndarray, max_speed: float) -> np.ndarray:
    """
    Clamp velocity magnitude to maximum speed.

    Args:
        velocity: Velocity vector [vx, vy]
        max_speed: Maximum allowed speed

    Returns:
        Velocity with clamped magnitude
    """
    speed = speed_of(velocity)

    if speed > max_speed:
        # Rescale to max_speed
        return velocity * (max_speed / speed)

    return velocity


def steer_towards(position: np.ndarray, target: np.ndarray, speed: float,
                  arrival_distance: float) -> Tuple[np.ndarray, float]:
    """
    Velocity of magnitude `speed` pointing from position to target.

    Returns zero velocity once within arrival_distance of the target.

    Returns:
        Tuple of (velocity, distance to target)
    """
    delta = target - position
    dist = speed_of(delta)
    if dist > arrival_distance:
        return delta / dist * speed, dist
    return vec2(0.0, 0.0), dist


def chunk_coords_of(pos: np.ndarray, chunk_size: float) -> ChunkKey:
    """
    Chunk grid cell containing a world position.

    Uses floor division so negative coordinates map to negative chunks
    (x = -1 lies in chunk -1, not chunk 0).
    """
    return (int(math.floor(pos[0] / chunk_size)), int(math.floor(pos[1] / chunk_size)))


def chebyshev_exceeds(pos: np.ndarray, center: np.ndarray, max_distance: float) -> bool:
    """True when |dx| or |dy| from center exceeds max_distance"""
    return abs(pos[0] - center[0]) > max_distance or abs(pos[1] - center[1]) > max_distance


def reflect_into_band(position: np.ndarray, velocity: np.ndarray, min_y: float, max_y: float):
    """
    Clamp Y into [min_y, max_y] with a reflective bounce.

    At the top the vertical velocity is forced downward (positive), at the
    bottom upward (negative). Mutates position and velocity in place.

    Returns:
        True if a clamp happened this call
    """
    if position[1] < min_y:
        position[1] = min_y
        velocity[1] = abs(velocity[1])
        return True
    if position[1] > max_y:
        position[1] = max_y
        velocity[1] = -abs(velocity[1])
        return True
    return False
