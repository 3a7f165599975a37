"""
Headless ocean run.

Drives the frame orchestrator with a ManualScheduler and a scripted
pointer that circles the shark, so the world scrolls, chunks stream in and
out and the shark eats whatever crosses its mouth. Prints periodic tick
summaries and final stats.

Usage:
    python scripts/run_headless.py --ticks 2000 --seed 42
    python scripts/run_headless.py --config data/ocean.yaml --schema-dir schemas
"""

import argparse
import math
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from infinite_ocean.simulation import OceanSimulation
from infinite_ocean.frame import FrameOrchestrator, ManualScheduler, NullRenderer
from infinite_ocean.loader import load_config
from infinite_ocean.constants import DEFAULT_VIEWPORT_WIDTH, DEFAULT_VIEWPORT_HEIGHT


POINTER_RADIUS = 200.0      # Screen units from viewport center
POINTER_PERIOD = 1200       # Ticks per lap


def pointer_at(tick: int, width: float, height: float):
    """Screen position of the scripted pointer at a given tick"""
    angle = 2.0 * math.pi * tick / POINTER_PERIOD
    return (width / 2.0 + math.cos(angle) * POINTER_RADIUS,
            height / 2.0 + math.sin(angle) * POINTER_RADIUS * 0.5)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the infinite ocean without a display")
    parser.add_argument('--ticks', type=int, default=1000, help="Frames to run")
    parser.add_argument('--seed', type=int, default=None, help="World seed (default: config or random)")
    parser.add_argument('--width', type=float, default=DEFAULT_VIEWPORT_WIDTH)
    parser.add_argument('--height', type=float, default=DEFAULT_VIEWPORT_HEIGHT)
    parser.add_argument('--config', type=Path, default=None, help="YAML config file")
    parser.add_argument('--schema-dir', type=Path, default=None, help="Directory with ocean.schema.json")
    parser.add_argument('--summary-every', type=int, default=None,
                        help="Print a tick summary every N ticks (default: config)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config = load_config(args.config, args.schema_dir) if args.config else None
    sim = OceanSimulation(config=config, width=args.width, height=args.height, seed=args.seed)

    summary_every = (args.summary_every if args.summary_every is not None
                     else sim.config.simulation.tick_summary_interval)

    scheduler = ManualScheduler()
    renderer = NullRenderer()
    orchestrator = FrameOrchestrator(sim, renderer, scheduler, summary_every=summary_every)

    print("=" * 60)
    print(f"{sim.config.name}: {args.ticks} ticks, viewport {args.width:.0f}x{args.height:.0f}")
    print("=" * 60)

    orchestrator.start()
    for tick in range(args.ticks):
        x, y = pointer_at(tick, args.width, args.height)
        sim.set_pointer(x, y)
        scheduler.step()

    orchestrator.stop()

    stats = sim.state.stats
    print("\n" + "=" * 60)
    print("Final stats")
    print("=" * 60)
    print(f"  Frames run:     {orchestrator.frames_run}")
    print(f"  Frames failed:  {orchestrator.failed_frames}")
    print(f"  Frames drawn:   {renderer.frames_drawn}")
    print(f"  Fish eaten:     {stats.fish_eaten} "
          f"(slow {stats.slow_fish_eaten}, fast {stats.fast_fish_eaten})")
    print(f"  Growth factor:  {sim.state.shark.growth_factor:.3f}")
    print(f"  Active fish:    {len(sim.state.fish)}")
    print(f"  Active seaweed: {len(sim.state.seaweed)}")
    print(f"  World offset:   ({sim.state.world.offset_x:.1f}, {sim.state.world.offset_y:.1f})")

    return 0 if orchestrator.failed_frames == 0 else 1


if __name__ == '__main__':
    sys.exit(main())
