"""
Test OceanSimulation: lifecycle, determinism, snapshots and timing.
"""

import sys
import math
import numpy as np
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from infinite_ocean.simulation import OceanSimulation
from infinite_ocean.data_types import OceanConfig, SharkConfig


def drive(sim: OceanSimulation, ticks: int):
    """Circle the pointer around the shark so the world scrolls"""
    cx, cy = sim.state.world.width / 2.0, sim.state.world.height / 2.0
    for tick in range(ticks):
        angle = 2.0 * math.pi * tick / 300.0
        sim.set_pointer(cx + math.cos(angle) * 200.0, cy + math.sin(angle) * 150.0)
        sim.update()


def fingerprint(sim: OceanSimulation):
    return [(f.instance_id, tuple(f.position), tuple(f.velocity)) for f in sim.state.fish]


def test_initial_state():
    sim = OceanSimulation(seed=42)
    state = sim.state

    print(f"Fish: {len(state.fish)}, seaweed: {len(state.seaweed)}")

    assert state.tick_count == 0
    assert state.shark.growth_factor == 1.0
    assert state.stats.fish_eaten == 0
    assert not state.pointer.is_active
    assert list(state.shark.position) == [640.0, 360.0]
    assert len(state.seaweed_chunks) > 0
    assert len(state.fish) > 0
    assert len(state.seaweed) > 0
    assert all(abs(k[0]) <= 2 and abs(k[1]) <= 1 for k in state.fish_chunks.keys())


def test_same_seed_same_session():
    a = OceanSimulation(seed=99)
    b = OceanSimulation(seed=99)
    assert fingerprint(a) == fingerprint(b)

    drive(a, 250)
    drive(b, 250)

    assert fingerprint(a) == fingerprint(b)
    assert a.state.stats.fish_eaten == b.state.stats.fish_eaten
    assert a.state.shark.growth_factor == b.state.shark.growth_factor
    assert len(a.state.particles) == len(b.state.particles)
    print(f"[OK] Identical after 250 ticks ({len(a.state.fish)} fish)")


def test_different_seeds_differ():
    a = OceanSimulation(seed=1)
    b = OceanSimulation(seed=2)
    assert fingerprint(a) != fingerprint(b)


def test_unseeded_session_records_seed():
    sim = OceanSimulation()
    replay = OceanSimulation(seed=sim.world_seed)
    assert fingerprint(sim) == fingerprint(replay)


def test_reset_restores_session():
    sim = OceanSimulation(seed=5)
    first_session = fingerprint(sim)
    drive(sim, 150)
    sim.state.shark.apply_growth(0.3)
    sim.state.stats.fish_eaten = 9

    sim.reset()
    state = sim.state

    assert state.tick_count == 0
    assert state.shark.growth_factor == 1.0
    assert state.shark.width == state.shark.base_width
    assert state.stats.fish_eaten == 0
    assert state.particles == []
    assert not state.pointer.is_active
    assert state.world.offset_x == 0.0 and state.world.offset_y == 0.0
    assert sim.session_count == 2
    # New session, new content
    assert fingerprint(sim) != first_session


def test_resize_reinitializes():
    sim = OceanSimulation(seed=5)
    drive(sim, 50)

    sim.resize(800.0, 600.0)
    state = sim.state

    assert state.world.width == 800.0
    assert state.world.height == 600.0
    assert list(state.shark.position) == [400.0, 300.0]
    assert state.tick_count == 0
    assert state.world.surface_y == state.config.world.sky_height
    assert state.world.bottom_y == state.world.surface_y + state.config.world.ocean_depth


def test_update_returns_eating_events():
    sim = OceanSimulation(seed=13)
    total = 0
    cx, cy = sim.state.world.width / 2.0, sim.state.world.height / 2.0
    for tick in range(600):
        sim.set_pointer(cx + 300.0, cy + (150.0 if (tick // 100) % 2 else -150.0))
        events = sim.update()
        assert events is sim.last_events
        total += len(events)

    assert total == sim.state.stats.fish_eaten
    assert sim.state.stats.fish_eaten == (sim.state.stats.slow_fish_eaten +
                                          sim.state.stats.fast_fish_eaten)
    print(f"Eaten over 600 ticks: {total}, growth {sim.state.shark.growth_factor:.3f}")


def test_snapshot_is_read_only():
    sim = OceanSimulation(seed=3)
    drive(sim, 5)
    snapshot = sim.get_snapshot()

    assert snapshot['tick_count'] == 5
    assert len(snapshot['fish']) == len(sim.state.fish)
    assert len(snapshot['seaweed']) == len(sim.state.seaweed)

    original = sim.state.fish[0].position.copy()
    snapshot['fish'][0]['position'][0] = 1e9
    snapshot['shark']['width'] = -1.0
    snapshot['stats']['fish_eaten'] = 1000
    snapshot['fish'].clear()

    assert np.array_equal(sim.state.fish[0].position, original)
    assert sim.state.shark.width == sim.state.shark.base_width * sim.state.shark.growth_factor
    assert sim.state.stats.fish_eaten < 1000
    assert len(sim.state.fish) > 0


def test_visible_snapshot_culls_offscreen():
    sim = OceanSimulation(seed=3)
    full = sim.get_snapshot()
    visible = sim.get_snapshot(visible_only=True)

    assert len(visible['seaweed']) <= len(full['seaweed'])
    assert len(visible['fish']) <= len(full['fish'])
    world = sim.state.world
    for stalk in visible['seaweed']:
        x, y = stalk['position']
        assert -50.0 < x + world.offset_x < world.width + 50.0
        assert -50.0 < y + world.offset_y < world.height + 50.0


def test_ambush_fish_in_snapshot():
    sim = OceanSimulation(seed=3)
    for entry in sim.get_snapshot()['fish']:
        if entry['fish_class'] == 'ambush':
            assert entry['mode'] in ('hiding', 'emerging', 'returning')
            assert len(entry['home']) == 2
        else:
            assert 'mode' not in entry


def test_tick_stats():
    sim = OceanSimulation(seed=3)
    stats = sim.get_tick_stats()
    assert stats['tick_count'] == 0
    assert stats['avg_tick_time_ms'] == 0.0

    drive(sim, 120)
    stats = sim.get_tick_stats()

    assert stats['tick_count'] == 120
    assert stats['avg_tick_time_ms'] > 0.0
    assert len(sim._tick_times) == 100
    sim.print_tick_summary()


def test_custom_config():
    config = OceanConfig(shark=SharkConfig(speed=5.0, base_width=100.0), seed=77)
    sim = OceanSimulation(config=config)

    assert sim.world_seed == 77
    assert sim.state.shark.width == 100.0

    sim.set_pointer(sim.state.shark.position[0] + 200.0, sim.state.shark.position[1])
    sim.update()
    assert sim.state.world.offset_x == pytest.approx(-5.0)
