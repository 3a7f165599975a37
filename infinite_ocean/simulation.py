"""
Ocean simulation kernel.

Owns the session state and runs the per-tick update phases in a fixed
order. Rendering, input capture and frame scheduling live outside; they
talk to the simulation through the input methods and get_snapshot().
"""

import time
from pathlib import Path
from typing import List, Optional

from .data_types import OceanConfig
from .entity import Shark, PointerState
from .world import WorldState
from .state import SimulationState
from .chunks import stream_chunks
from .behavior import update_fish, update_shark, update_seaweed
from .eating import resolve_eating, EatingEvent
from .particles import update_particles
from .spatial_queries import FishIndexAdapter
from .loader import load_config
from .rng import make_rng, make_seed, resolve_world_seed
from .spatial import vec2
from .constants import (
    DEFAULT_VIEWPORT_WIDTH,
    DEFAULT_VIEWPORT_HEIGHT,
    TICK_TIME_WINDOW,
)


class OceanSimulation:
    """
    Main simulation class for the infinite ocean.

    Manages the session lifecycle (reset/resize), pointer input and the
    tick loop. A tick is:

        1. fish behavior (flee/wander, ambush state machine)
        2. shark/world coupling (offset move + vertical clamp)
        3. chunk streaming (generate around viewport center, evict far)
        4. eating (mouth test, growth, blood bursts)
        5. particles (advance, cull)
        6. seaweed sway
    """

    def __init__(
        self,
        config: Optional[OceanConfig] = None,
        width: float = DEFAULT_VIEWPORT_WIDTH,
        height: float = DEFAULT_VIEWPORT_HEIGHT,
        seed: Optional[int] = None,
        config_path: Optional[Path] = None,
        schema_dir: Optional[Path] = None
    ):
        """
        Initialize simulation and generate the starting neighborhood.

        Args:
            config: Full configuration (defaults to OceanConfig())
            width: Viewport width in screen units
            height: Viewport height in screen units
            seed: Root seed, overrides config.seed (None = random session)
            config_path: Optional YAML config, used when config is None
            schema_dir: Optional JSON schema directory for config_path
        """
        if config is None:
            config = load_config(config_path, schema_dir) if config_path else OceanConfig()

        self.config: OceanConfig = config
        self.world_seed: int = resolve_world_seed(seed if seed is not None else config.seed)
        self.session_count: int = 0

        self.index = FishIndexAdapter(use_ckdtree=config.simulation.use_ckdtree)
        self.last_events: List[EatingEvent] = []
        self.last_stream: dict = {}

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW

        self.state: SimulationState = None
        self.reset(width, height)

    # ========================================================================
    # Session lifecycle
    # ========================================================================

    def reset(self, width: Optional[float] = None, height: Optional[float] = None):
        """
        Full reinitialization.

        Recomputes world bounds, re-centers the shark at growth 1.0, clears
        counters, input, entities and both chunk registries, then streams
        the starting chunks. Each reset begins a new RNG session.
        """
        if self.state is not None:
            width = self.state.world.width if width is None else width
            height = self.state.world.height if height is None else height

        session_seed = make_seed(self.world_seed, "session", self.session_count)
        self.session_count += 1

        world = WorldState.from_config(self.config.world, width, height)
        center = vec2(width / 2.0, height / 2.0)
        shark_config = self.config.shark
        shark = Shark(
            position=center,
            base_width=shark_config.base_width,
            base_height=shark_config.base_height,
            speed=shark_config.speed
        )

        self.state = SimulationState(
            config=self.config,
            world=world,
            shark=shark,
            world_seed=session_seed,
            behavior_rng=make_rng(session_seed, "behavior"),
            particle_rng=make_rng(session_seed, "particles"),
            pointer=PointerState(x=center[0], y=center[1], is_active=False)
        )

        self.last_events = []
        self.last_stream = stream_chunks(self.state)

        print(f"[OK] Ocean reset: viewport={width:.0f}x{height:.0f}, "
              f"fish={len(self.state.fish)}, seaweed={len(self.state.seaweed)}, "
              f"seed={self.world_seed}, session={self.session_count}")

    def resize(self, width: float, height: float):
        """Viewport changed: full reinitialization at the new size"""
        self.reset(width, height)

    # ========================================================================
    # Input
    # ========================================================================

    def set_pointer(self, x: float, y: float):
        """Pointer or touch moved to screen (x, y); latest position wins"""
        pointer = self.state.pointer
        pointer.x = x
        pointer.y = y
        pointer.is_active = True
        self.state.shark.target = vec2(x, y)

    def pointer_leave(self):
        """Pointer left the viewport: shark stops steering"""
        self.state.pointer.is_active = False

    def pointer_enter(self):
        """Pointer re-entered the viewport: resume toward the last target"""
        self.state.pointer.is_active = True

    # ========================================================================
    # Tick
    # ========================================================================

    @property
    def tick_count(self) -> int:
        return self.state.tick_count

    def update(self) -> List[EatingEvent]:
        """
        Advance simulation by one tick.

        Returns:
            Fish eaten during this tick
        """
        start_time = time.perf_counter()
        state = self.state

        update_fish(state)
        update_shark(state)
        self.last_stream = stream_chunks(state)
        self.last_events = resolve_eating(state, self.index)
        state.particles = update_particles(state.particles, state.particle_rng)
        update_seaweed(state.seaweed)

        state.tick_count += 1
        self._record_tick_time(time.perf_counter() - start_time)
        return self.last_events

    # ========================================================================
    # Snapshots and stats
    # ========================================================================

    def get_snapshot(self, visible_only: bool = False) -> dict:
        """
        Read-only state snapshot for renderers.

        Args:
            visible_only: Drop entities outside the viewport (with margin)

        Returns:
            Dict of plain Python values; mutating it never touches the simulation
        """
        state = self.state
        world = state.world

        fish = state.fish
        seaweed = state.seaweed
        particles = state.particles
        if visible_only:
            fish = [f for f in fish if world.is_on_screen(f.position)]
            seaweed = [s for s in seaweed if world.is_on_screen(s.position)]
            particles = [p for p in particles if world.is_on_screen(p.position, margin=20.0)]

        return {
            'tick_count': state.tick_count,
            'world': world.to_dict(),
            'shark': state.shark.to_dict(),
            'pointer_active': state.pointer.is_active,
            'fish': [f.to_dict() for f in fish],
            'seaweed': [s.to_dict() for s in seaweed],
            'particles': [p.to_dict() for p in particles],
            'stats': state.stats.to_dict(),
            'timing': self.get_tick_stats()
        }

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        state = self.state
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Fish: {len(state.fish):4d} | "
              f"Seaweed: {len(state.seaweed):4d} | "
              f"Particles: {len(state.particles):4d} | "
              f"Eaten: {state.stats.fish_eaten} | "
              f"Growth: {state.shark.growth_factor:.3f}")
