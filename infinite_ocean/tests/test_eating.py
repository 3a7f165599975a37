"""
Test eating: mouth point, strict radius, counters and growth.
"""

import sys
import math
import numpy as np
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from infinite_ocean.simulation import OceanSimulation
from infinite_ocean.entity import Fish, FishClass, NormalFishState, AmbushFishState
from infinite_ocean.eating import (
    mouth_point, is_facing_left, resolve_eating, consume_fish, growth_for, eat_radius
)
from infinite_ocean.particles import burst_size
from infinite_ocean.spatial_queries import FishIndexAdapter
from infinite_ocean.rng import make_rng
from infinite_ocean.spatial import vec2


def make_fish(instance_id, x, y, color='#FFD700', size=12.0, fish_class=FishClass.SLOW) -> Fish:
    return Fish(
        instance_id=instance_id,
        fish_class=fish_class,
        position=vec2(x, y),
        velocity=vec2(0.0, 0.0),
        size=size,
        speed=1.5,
        flee_distance=150.0,
        color=color,
        chunk_key=(0, 0),
        state=NormalFishState(base_speed=0.4, swim_direction=0.0,
                              depth_oscillation=0.0, direction_change_timer=0.0)
    )


def _place_mouth_at(sim: OceanSimulation, x: float, y: float):
    """Shift the world offset so the shark's mouth sits at world (x, y)"""
    state = sim.state
    state.world.offset_x = 0.0
    state.world.offset_y = 0.0
    mouth = mouth_point(state.shark_visual_center(), state.shark)
    state.world.offset_x = mouth[0] - x
    state.world.offset_y = mouth[1] - y


def test_eating_example():
    """Mouth at (100, 100), slow fish at (100, 100): eaten, counted, grown"""
    sim = OceanSimulation(seed=1)
    state = sim.state
    state.fish = [
        make_fish("slow-target", 100.0, 100.0, size=12.0),
        make_fish("fast-bystander", 100.0, 140.0, color='#FF6347', size=8.0, fish_class=FishClass.FAST),
    ]
    _place_mouth_at(sim, 100.0, 100.0)

    mouth = mouth_point(state.shark_visual_center(), state.shark)
    assert list(mouth) == pytest.approx([100.0, 100.0])
    assert eat_radius(state) == pytest.approx(30.0)

    events = resolve_eating(state, FishIndexAdapter())

    print(f"Eaten: {[e.fish.instance_id for e in events]}, growth now {state.shark.growth_factor:.3f}")

    assert [e.fish.instance_id for e in events] == ["slow-target"]
    assert [f.instance_id for f in state.fish] == ["fast-bystander"]
    assert state.stats.fish_eaten == 1
    assert state.stats.slow_fish_eaten == 1
    assert state.stats.fast_fish_eaten == 0
    assert state.shark.growth_factor == pytest.approx(1.0 + 0.02 + 12.0 / 500.0)
    assert state.shark.width == pytest.approx(state.shark.base_width * state.shark.growth_factor)
    assert len(state.particles) == burst_size(12.0, state.config.particles)


def test_radius_is_strict_and_scales_with_growth():
    sim = OceanSimulation(seed=1)
    state = sim.state
    state.fish = [make_fish("edge", 130.0, 100.0)]
    _place_mouth_at(sim, 100.0, 100.0)

    # Exactly on the radius: not eaten
    assert resolve_eating(state, FishIndexAdapter()) == []

    state.shark.apply_growth(0.5)
    _place_mouth_at(sim, 100.0, 100.0)
    events = resolve_eating(state, FishIndexAdapter())
    assert len(events) == 1


def test_multiple_fish_same_tick():
    sim = OceanSimulation(seed=1)
    state = sim.state
    state.fish = [make_fish(f"fish-{i}", 100.0 + i * 3.0, 100.0) for i in range(4)]
    _place_mouth_at(sim, 100.0, 100.0)

    events = resolve_eating(state, FishIndexAdapter(use_ckdtree=False))

    assert len(events) == 4
    assert state.fish == []
    assert state.stats.fish_eaten == 4


def test_counters_classify_by_color():
    """Ambush fish are not gold, so they count as fast"""
    sim = OceanSimulation(seed=1)
    state = sim.state
    lurker = make_fish("ambush-0", 0.0, 0.0, color='#2ECC40', size=14.0, fish_class=FishClass.AMBUSH)
    lurker.state = AmbushFishState(home=vec2(0.0, 0.0))

    event = consume_fish(state, lurker)

    assert event.slow is False
    assert state.stats.fast_fish_eaten == 1
    assert event.growth == pytest.approx(0.015 + 14.0 / 600.0)


def test_growth_monotonicity():
    sim = OceanSimulation(seed=1)
    state = sim.state
    shark = state.shark
    rng = make_rng("growth-test")

    previous = shark.growth_factor
    for i in range(60):
        color = '#FFD700' if rng.random() < 0.6 else '#FF6347'
        fish = make_fish(f"g-{i}", 0.0, 0.0, color=color, size=float(rng.uniform(6.0, 18.0)))
        consume_fish(state, fish)

        assert shark.growth_factor >= previous
        assert shark.width == pytest.approx(shark.base_width * shark.growth_factor)
        assert shark.height == pytest.approx(shark.base_height * shark.growth_factor)
        previous = shark.growth_factor

    assert state.stats.fish_eaten == 60
    assert state.stats.slow_fish_eaten + state.stats.fast_fish_eaten == 60
    print(f"[OK] Growth after 60 fish: {shark.growth_factor:.3f}")


def test_growth_formula():
    assert growth_for(make_fish("a", 0, 0, size=10.0), '#FFD700') == pytest.approx(0.04)
    assert growth_for(make_fish("b", 0, 0, color='#FF6347', size=6.0), '#FFD700') == pytest.approx(0.025)


def test_mouth_mirroring():
    sim = OceanSimulation(seed=1)
    shark = sim.state.shark
    center = vec2(500.0, 500.0)
    reach = shark.width * 0.4

    shark.direction_deg = 0.0
    assert not is_facing_left(shark.direction_deg)
    assert list(mouth_point(center, shark)) == pytest.approx([500.0 + reach, 500.0])

    shark.direction_deg = 180.0
    assert is_facing_left(shark.direction_deg)
    assert list(mouth_point(center, shark)) == pytest.approx([500.0 - reach, 500.0])

    shark.direction_deg = -90.0
    assert not is_facing_left(shark.direction_deg)
    assert list(mouth_point(center, shark)) == pytest.approx([500.0, 500.0 - reach])

    # Facing down-left: mouth ahead of the body in both axes
    shark.direction_deg = 135.0
    mouth = mouth_point(center, shark)
    assert mouth[0] == pytest.approx(500.0 - math.cos(math.radians(45.0)) * reach)
    assert mouth[1] == pytest.approx(500.0 + math.sin(math.radians(45.0)) * reach)
    assert np.hypot(*(mouth - center)) == pytest.approx(reach)
