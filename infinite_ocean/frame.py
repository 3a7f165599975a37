"""
Frame orchestration: one update + draw per display refresh.

The orchestrator is a small supervisor around the simulation. Each frame
runs the full update then hands a snapshot to the renderer, all inside one
error boundary. A failed frame is logged and counted, and the loop is
re-armed after a short delay instead of immediately, so a persistent fault
cannot spin.

Scheduling and drawing are collaborators:
- FrameScheduler: request_frame(cb) runs cb on the next refresh,
  call_later(delay, cb) runs cb after delay seconds.
- Renderer: draw(snapshot) consumes a read-only snapshot.
"""

import heapq
import traceback
from functools import partial
from typing import Callable, List, Optional, Tuple

from .simulation import OceanSimulation


# ============================================================================
# Collaborator interfaces
# ============================================================================

class FrameScheduler:
    """Display-refresh scheduling primitive"""

    def request_frame(self, callback: Callable[[], None]):
        raise NotImplementedError

    def call_later(self, delay_s: float, callback: Callable[[], None]):
        raise NotImplementedError


class Renderer:
    """Drawing backend; must not mutate the snapshot's source"""

    def draw(self, snapshot: dict):
        raise NotImplementedError


class NullRenderer(Renderer):
    """Headless renderer: counts frames and keeps the last snapshot"""

    def __init__(self):
        self.frames_drawn = 0
        self.last_snapshot: Optional[dict] = None

    def draw(self, snapshot: dict):
        self.frames_drawn += 1
        self.last_snapshot = snapshot


class ManualScheduler(FrameScheduler):
    """
    In-memory scheduler driven by the caller.

    Frame callbacks queue until run_pending_frames(); delayed callbacks fire
    from advance() once the virtual clock passes their deadline. Used by the
    headless runner and tests in place of a real display loop.
    """

    def __init__(self):
        self.now: float = 0.0
        self._frames: List[Callable[[], None]] = []
        self._timers: List[Tuple[float, int, Callable[[], None]]] = []
        self._seq: int = 0

    def request_frame(self, callback: Callable[[], None]):
        self._frames.append(callback)

    def call_later(self, delay_s: float, callback: Callable[[], None]):
        heapq.heappush(self._timers, (self.now + delay_s, self._seq, callback))
        self._seq += 1

    @property
    def pending_frames(self) -> int:
        return len(self._frames)

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def advance(self, seconds: float) -> int:
        """
        Move the virtual clock forward and fire due timers in deadline order.

        Returns:
            Number of timers fired
        """
        self.now += seconds
        fired = 0
        while self._timers and self._timers[0][0] <= self.now:
            _, _, callback = heapq.heappop(self._timers)
            callback()
            fired += 1
        return fired

    def run_pending_frames(self) -> int:
        """
        Run callbacks queued for this refresh.

        Callbacks that re-arm themselves land in the next refresh's queue.

        Returns:
            Number of callbacks run
        """
        pending, self._frames = self._frames, []
        for callback in pending:
            callback()
        return len(pending)

    def step(self, frame_interval: float = 1.0 / 60.0) -> int:
        """One display refresh: advance the clock, then run queued frames"""
        self.advance(frame_interval)
        return self.run_pending_frames()


# ============================================================================
# Orchestrator
# ============================================================================

class FrameOrchestrator:
    """
    Supervises the update/draw cycle.

    Attributes:
        frames_run: Frames that completed update and draw
        failed_frames: Frames that raised
        last_error: Most recent frame exception (None if none yet)
    """

    def __init__(
        self,
        simulation: OceanSimulation,
        renderer: Renderer,
        scheduler: FrameScheduler,
        retry_delay_s: Optional[float] = None,
        summary_every: int = 0,
        visible_only: bool = True
    ):
        """
        Args:
            simulation: Simulation to drive
            renderer: Draw backend
            scheduler: Frame scheduling primitive
            retry_delay_s: Delay before re-arming after a failure
                           (default: config.simulation.frame_retry_delay_s)
            summary_every: Print a tick summary every N ticks (0 = never)
            visible_only: Pass only on-screen entities to the renderer
        """
        self.simulation = simulation
        self.renderer = renderer
        self.scheduler = scheduler
        self.retry_delay_s = (retry_delay_s if retry_delay_s is not None
                              else simulation.config.simulation.frame_retry_delay_s)
        self.summary_every = summary_every
        self.visible_only = visible_only

        self.running: bool = False
        self.frames_run: int = 0
        self.failed_frames: int = 0
        self.last_error: Optional[BaseException] = None

        # Bumped on every start(); callbacks armed under an older value are dropped
        self._generation: int = 0

    def start(self):
        """Arm the first frame of a new loop"""
        if self.running:
            return
        self.running = True
        self._generation += 1
        self._arm()

    def stop(self):
        """Stop re-arming; queued frames and pending retries become no-ops"""
        self.running = False

    def _is_current(self, generation: int) -> bool:
        return self.running and generation == self._generation

    def _arm(self):
        self.scheduler.request_frame(partial(self.run_frame, self._generation))

    def _arm_after_failure(self, generation: int):
        if self._is_current(generation):
            self._arm()

    def run_frame(self, generation: Optional[int] = None):
        """
        One full frame: update phases, then draw.

        Any exception is contained here; the next frame is then scheduled
        through call_later(retry_delay_s) rather than request_frame.

        Args:
            generation: Loop the callback was armed for (None = current loop)
        """
        if generation is None:
            generation = self._generation
        if not self._is_current(generation):
            return

        try:
            self.simulation.update()
            self.renderer.draw(self.simulation.get_snapshot(visible_only=self.visible_only))
            self.frames_run += 1
            if self.summary_every and self.simulation.tick_count % self.summary_every == 0:
                self.simulation.print_tick_summary()
        except Exception as exc:
            self.failed_frames += 1
            self.last_error = exc
            print(f"[ERROR] Frame failed at tick {self.simulation.tick_count}: {exc!r} "
                  f"(retrying in {self.retry_delay_s:.3f}s)")
            traceback.print_exc()
            self.scheduler.call_later(self.retry_delay_s, partial(self._arm_after_failure, generation))
            return

        self._arm()
