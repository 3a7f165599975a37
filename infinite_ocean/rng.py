"""
Deterministic RNG utilities for the ocean simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world_seed, stream name, chunk coordinates, generation epoch). All
randomness uses numpy.random.Generator(PCG64) so a seeded session replays
identically.
"""

import hashlib
import math
import numpy as np
from typing import Any, Optional, Tuple


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (world_seed, stream name, chunk x/y, ...)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        chunk_seed = make_seed(world_seed, "fish-chunk", cx, cy, epoch)
    """
    hash_input = ":".join(str(c) for c in components)

    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    return int.from_bytes(hash_bytes[:8], byteorder='big')


def make_rng(*components: Any) -> np.random.Generator:
    """PCG64 generator seeded from make_seed(*components)"""
    return np.random.Generator(np.random.PCG64(make_seed(*components)))


def resolve_world_seed(seed: Optional[int]) -> int:
    """
    Return seed unchanged, or draw a fresh one from OS entropy when None.

    Unseeded sessions still get a concrete seed so they can be replayed
    from the value printed at startup.
    """
    if seed is not None:
        return int(seed)
    return int(np.random.SeedSequence().entropy % (1 << 63))


def uniform(rng: np.random.Generator, bounds: Tuple[float, float]) -> float:
    """Draw a float uniformly from [lo, hi)"""
    lo, hi = bounds
    return float(rng.uniform(lo, hi))


def symmetric(rng: np.random.Generator, width: float) -> float:
    """Draw a float uniformly from [-width/2, width/2)"""
    return float(rng.uniform(-0.5, 0.5)) * width


def random_horizontal_heading(rng: np.random.Generator, spread: float) -> float:
    """
    Pick a swim heading biased to horizontal travel.

    Returns 0 (right) or pi (left) with equal probability, perturbed by
    a symmetric jitter of total width `spread` radians.
    """
    base = 0.0 if rng.random() > 0.5 else math.pi
    return base + symmetric(rng, spread)
