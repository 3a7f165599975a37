"""
Blood particle bursts.

Each eaten fish releases a small cloud: particles drift outward, sink
slowly, swell to 115% of their size over the first 30% of their life and
then shrink to nothing.
"""

import math
import numpy as np
from typing import List

from .data_types import ParticleConfig
from .entity import BloodParticle
from .rng import uniform, symmetric
from .spatial import vec2
from .constants import (
    PARTICLE_ANGLE_JITTER,
    PARTICLE_FADE_RANGE,
    PARTICLE_SPAWN_SPREAD,
    PARTICLE_DRAG,
    PARTICLE_DRIFT,
    PARTICLE_EXPAND_PHASE,
    PARTICLE_EXPAND_RATE,
    PARTICLE_PEAK_SCALE,
)


def burst_size(fish_size: float, config: ParticleConfig) -> int:
    """Particles per burst: grows with fish size, capped"""
    return min(config.base_count + int(math.floor(fish_size / 2.0)), config.max_count)


def spawn_blood_burst(particles: List[BloodParticle], position: np.ndarray, fish_size: float,
                      rng: np.random.Generator, config: ParticleConfig) -> int:
    """
    Append a radial burst of blood particles.

    Angles are evenly spaced around the circle with random jitter.

    Returns:
        Number of particles spawned
    """
    count = burst_size(fish_size, config)
    spread = fish_size * PARTICLE_SPAWN_SPREAD

    for i in range(count):
        angle = 2.0 * math.pi * i / count + symmetric(rng, PARTICLE_ANGLE_JITTER)
        speed = uniform(rng, config.speed_range)
        size = uniform(rng, config.size_range)

        particles.append(BloodParticle(
            position=vec2(position[0] + symmetric(rng, spread),
                          position[1] + symmetric(rng, spread)),
            velocity=vec2(math.cos(angle) * speed, math.sin(angle) * speed),
            size=size,
            max_size=size,
            max_life=uniform(rng, config.life_range),
            gravity=uniform(rng, config.gravity_range),
            fade_rate=uniform(rng, PARTICLE_FADE_RANGE)
        ))

    return count


def envelope_size(max_size: float, life: float) -> float:
    """Two-phase size: linear swell to 115%, then linear shrink to zero"""
    progress = 1.0 - life
    if progress < PARTICLE_EXPAND_PHASE:
        return max_size * (1.0 + progress * PARTICLE_EXPAND_RATE)
    shrink = (progress - PARTICLE_EXPAND_PHASE) / (1.0 - PARTICLE_EXPAND_PHASE)
    return max_size * PARTICLE_PEAK_SCALE * (1.0 - shrink)


def advance_particle(particle: BloodParticle, rng: np.random.Generator):
    particle.position += particle.velocity
    particle.velocity[1] += particle.gravity
    particle.velocity *= PARTICLE_DRAG
    particle.velocity[0] += symmetric(rng, PARTICLE_DRIFT)
    particle.velocity[1] += symmetric(rng, PARTICLE_DRIFT)

    # Derived from age: equals repeated 1/max_life decrements without drift
    particle.age += 1
    particle.life = 1.0 - particle.age / particle.max_life
    particle.size = envelope_size(particle.max_size, particle.life)


def update_particles(particles: List[BloodParticle], rng: np.random.Generator) -> List[BloodParticle]:
    """
    Advance every particle one tick and drop the dead ones.

    Returns:
        Surviving particles (life > 0)
    """
    survivors = []
    for particle in particles:
        advance_particle(particle, rng)
        if particle.life > 0.0:
            survivors.append(particle)
    return survivors
