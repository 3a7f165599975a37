"""
Test behavior engine: shark steering, fish physics, ambush state machine.

Verifies:
- Dead zone and inactive pointer freeze the world
- Vertical clamp keeps the shark in the water
- Wandering fish stay under 0.3x speed, fleeing fish under 0.8x
- Fish Y stays inside the open-water band with reflective bounce
- Ambush hiding -> emerging -> returning -> hiding
"""

import sys
import math
import numpy as np
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from infinite_ocean.simulation import OceanSimulation
from infinite_ocean.entity import Fish, FishClass, NormalFishState, AmbushFishState, AmbushMode
from infinite_ocean.behavior import (
    update_shark, update_normal_fish, update_ambush_fish, fish_band, update_seaweed
)
from infinite_ocean.rng import make_rng
from infinite_ocean.spatial import reflect_into_band, speed_of, vec2


def make_normal_fish(x, y, speed=1.5, flee_distance=150.0) -> Fish:
    return Fish(
        instance_id="slow-test-000",
        fish_class=FishClass.SLOW,
        position=vec2(x, y),
        velocity=vec2(0.0, 0.0),
        size=12.0,
        speed=speed,
        flee_distance=flee_distance,
        color='#FFD700',
        chunk_key=(0, 0),
        state=NormalFishState(base_speed=0.4, swim_direction=0.0,
                              depth_oscillation=0.0, direction_change_timer=0.0)
    )


def make_ambush_fish(home) -> Fish:
    return Fish(
        instance_id="ambush-test-000",
        fish_class=FishClass.AMBUSH,
        position=vec2(*home),
        velocity=vec2(0.0, 0.0),
        size=13.0,
        speed=1.5,
        flee_distance=150.0,
        color='#2ECC40',
        chunk_key=(0, 0),
        state=AmbushFishState(home=vec2(*home))
    )


# ============================================================================
# Shark
# ============================================================================

def test_inactive_pointer_does_not_move():
    sim = OceanSimulation(seed=1)
    state = sim.state
    state.shark.target = vec2(1000.0, 360.0)
    state.pointer.is_active = False

    assert update_shark(state) is False
    assert state.world.offset_x == 0.0
    assert state.world.offset_y == 0.0


def test_dead_zone():
    sim = OceanSimulation(seed=1)
    shark = sim.state.shark

    sim.set_pointer(shark.position[0] + 30.0, shark.position[1])
    assert update_shark(sim.state) is False
    assert sim.state.world.offset_x == 0.0

    sim.set_pointer(shark.position[0] + 100.0, shark.position[1])
    assert update_shark(sim.state) is True
    assert sim.state.world.offset_x == pytest.approx(-shark.speed)
    assert shark.direction_deg == pytest.approx(0.0)

    print("[OK] Dead zone blocks movement, outside it the world scrolls")


def test_pointer_leave_and_enter():
    sim = OceanSimulation(seed=1)
    shark = sim.state.shark

    sim.set_pointer(shark.position[0] - 200.0, shark.position[1])
    sim.pointer_leave()
    assert update_shark(sim.state) is False

    sim.pointer_enter()
    assert update_shark(sim.state) is True
    assert sim.state.world.offset_x == pytest.approx(shark.speed)
    assert abs(shark.direction_deg) == pytest.approx(180.0)


def test_vertical_clamp_at_surface_and_floor():
    """Shark world Y never leaves [surface + margin, floor - margin]"""
    sim = OceanSimulation(seed=1)
    state = sim.state
    world = state.world
    top = world.surface_y + world.vertical_margin
    bottom = world.bottom_y - world.vertical_margin

    sim.set_pointer(state.shark.position[0], 0.0)
    for _ in range(300):
        update_shark(state)
        assert state.shark_world_position()[1] >= top - 1e-9

    assert state.shark_world_position()[1] == pytest.approx(top)
    print(f"Clamped at surface: y={state.shark_world_position()[1]:.2f}")

    sim.set_pointer(state.shark.position[0], world.height)
    for _ in range(1200):
        update_shark(state)
        assert state.shark_world_position()[1] <= bottom + 1e-9

    assert state.shark_world_position()[1] == pytest.approx(bottom)
    print(f"Clamped at floor: y={state.shark_world_position()[1]:.2f}")


def test_horizontal_is_unbounded():
    sim = OceanSimulation(seed=1)
    sim.set_pointer(0.0, sim.state.shark.position[1])
    for _ in range(500):
        update_shark(sim.state)

    assert sim.state.world.offset_x == pytest.approx(500 * sim.state.shark.speed)


# ============================================================================
# Normal fish
# ============================================================================

def test_flee_speed_limit():
    sim = OceanSimulation(seed=1)
    world = sim.state.world
    rng = make_rng("flee-test")
    shark_world = vec2(600.0, 1000.0)
    fish = make_normal_fish(650.0, 1000.0)

    for _ in range(50):
        update_normal_fish(fish, shark_world, world, rng)
        if not fish.is_fleeing:
            break
        assert speed_of(fish.velocity) <= fish.speed * 0.8 + 1e-9
        assert fish.velocity[0] >= 0.0

    assert fish.position[0] > 650.0
    print(f"Fish fled to x={fish.position[0]:.1f}")


def test_wander_speed_limit():
    sim = OceanSimulation(seed=1)
    world = sim.state.world
    rng = make_rng("wander-test")
    shark_world = vec2(-5000.0, 1000.0)
    fish = make_normal_fish(0.0, 1000.0)
    fish.velocity = vec2(5.0, -5.0)

    for _ in range(2000):
        update_normal_fish(fish, shark_world, world, rng)
        assert not fish.is_fleeing
        assert speed_of(fish.velocity) <= fish.speed * 0.3 + 1e-9


def test_fish_speed_ordering_in_simulation():
    """Post-clamp speed bounds hold for every fish on every tick"""
    sim = OceanSimulation(seed=4)
    shark = sim.state.shark
    sim.set_pointer(shark.position[0] + 300.0, shark.position[1] + 40.0)

    fleeing_seen = 0
    for _ in range(400):
        # Fish streamed in this tick have not been through a clamp yet
        before = list(sim.state.fish)
        updated = {id(f) for f in before}
        sim.update()
        for fish in sim.state.fish:
            if fish.is_ambush or id(fish) not in updated:
                continue
            limit = 0.8 if fish.is_fleeing else 0.3
            assert speed_of(fish.velocity) <= fish.speed * limit + 1e-9
            fleeing_seen += fish.is_fleeing

    print(f"Fleeing fish-ticks observed: {fleeing_seen}")


def test_bounds_containment_in_simulation():
    sim = OceanSimulation(seed=6)
    min_y, max_y = fish_band(sim.state.world)
    shark = sim.state.shark
    sim.set_pointer(shark.position[0] - 250.0, shark.position[1] + 250.0)

    for _ in range(400):
        sim.update()
        for fish in sim.state.fish:
            assert min_y - 1e-9 <= fish.position[1] <= max_y + 1e-9

    print(f"[OK] All fish inside [{min_y:.0f}, {max_y:.0f}] for 400 ticks")


def test_reflective_bounce():
    position = vec2(0.0, 200.0)
    velocity = vec2(0.5, -1.0)
    assert reflect_into_band(position, velocity, 230.0, 2070.0) is True
    assert position[1] == 230.0
    assert velocity[1] == 1.0

    position = vec2(0.0, 2100.0)
    velocity = vec2(0.5, 1.0)
    assert reflect_into_band(position, velocity, 230.0, 2070.0) is True
    assert position[1] == 2070.0
    assert velocity[1] == -1.0

    position = vec2(0.0, 1000.0)
    velocity = vec2(0.5, 1.0)
    assert reflect_into_band(position, velocity, 230.0, 2070.0) is False
    assert velocity[1] == 1.0


def test_fish_at_surface_bounces_down():
    sim = OceanSimulation(seed=1)
    world = sim.state.world
    min_y, _ = fish_band(world)
    fish = make_normal_fish(0.0, min_y + 0.01)
    fish.velocity = vec2(0.0, -0.4)

    update_normal_fish(fish, vec2(-5000.0, 1000.0), world, make_rng("bounce"))

    assert fish.position[1] == min_y
    assert fish.velocity[1] >= 0.0


# ============================================================================
# Ambush fish
# ============================================================================

def test_ambush_state_machine():
    sim = OceanSimulation(seed=1)
    world = sim.state.world
    home = (1000.0, 1000.0)
    fish = make_ambush_fish(home)
    lurker = fish.state

    # Hiding: shark far, stays pinned
    update_ambush_fish(fish, vec2(1500.0, 1000.0), world)
    assert lurker.mode == AmbushMode.HIDING
    assert np.array_equal(fish.position, lurker.home)

    # Shark approaches within 120
    update_ambush_fish(fish, vec2(1100.0, 1000.0), world)
    assert lurker.mode == AmbushMode.EMERGING
    print("hiding -> emerging on approach")

    # Chase toward the shark
    update_ambush_fish(fish, vec2(1100.0, 1000.0), world)
    assert fish.position[0] > home[0]
    assert speed_of(fish.velocity) == pytest.approx(fish.speed * 0.7)
    assert lurker.state_timer == 1

    # Dragged beyond the leash
    fish.position = vec2(home[0] + 801.0, home[1])
    update_ambush_fish(fish, vec2(2400.0, 1000.0), world)
    assert lurker.mode == AmbushMode.RETURNING
    print("emerging -> returning past the leash")

    # Swim home
    ticks = 0
    while lurker.mode == AmbushMode.RETURNING and ticks < 5000:
        update_ambush_fish(fish, vec2(3000.0, 1000.0), world)
        ticks += 1

    assert lurker.mode == AmbushMode.HIDING
    assert np.array_equal(fish.position, lurker.home)
    print(f"returning -> hiding after {ticks} ticks, snapped to home")


def test_ambush_reemerges_while_returning():
    sim = OceanSimulation(seed=1)
    world = sim.state.world
    fish = make_ambush_fish((1000.0, 1000.0))
    fish.state.mode = AmbushMode.RETURNING
    fish.state.state_timer = 40
    fish.position = vec2(1300.0, 1000.0)

    update_ambush_fish(fish, vec2(1350.0, 1000.0), world)

    assert fish.state.mode == AmbushMode.EMERGING
    assert fish.state.state_timer == 0


def test_ambush_arrival_snaps_exactly():
    sim = OceanSimulation(seed=1)
    world = sim.state.world
    fish = make_ambush_fish((1000.0, 1000.0))
    fish.state.mode = AmbushMode.RETURNING
    fish.position = vec2(1001.5, 1000.5)

    update_ambush_fish(fish, vec2(3000.0, 1000.0), world)

    assert fish.state.mode == AmbushMode.HIDING
    assert fish.position[0] == 1000.0
    assert fish.position[1] == 1000.0


def test_seaweed_sway():
    sim = OceanSimulation(seed=1)
    stalks = sim.state.seaweed[:5]
    phases = [s.sway_phase for s in stalks]

    update_seaweed(stalks)

    for stalk, phase in zip(stalks, phases):
        assert stalk.sway_phase == pytest.approx(phase + stalk.sway_speed)
        assert 0.02 <= stalk.sway_speed < 0.05
        assert not math.isnan(stalk.sway_phase)
