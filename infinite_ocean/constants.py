"""
Central configuration constants for the ocean simulation.

Defines default values, thresholds, and tuning parameters used across
multiple modules. Config dataclasses in data_types.py default to these.
"""

# ============================================================================
# World Configuration
# ============================================================================

SKY_HEIGHT = 150.0        # Height of sky band above the water surface
OCEAN_DEPTH = 2000.0      # Surface to floor (many screens deep)
SAND_HEIGHT = 100.0       # Sand band below the floor (renderer only)
VERTICAL_MARGIN = 20.0    # Shark keeps this far from surface/floor

DEFAULT_VIEWPORT_WIDTH = 1280.0
DEFAULT_VIEWPORT_HEIGHT = 720.0


# ============================================================================
# Shark Configuration
# ============================================================================

SHARK_BASE_WIDTH = 80.0
SHARK_BASE_HEIGHT = 40.0
SHARK_SPEED = 2.0                 # Offset units per tick
DEAD_ZONE_RADIUS = 50.0           # Screen units around shark with no movement

# Eating
BASE_EAT_RADIUS = 30.0            # Scaled by growth_factor
MOUTH_DISTANCE_FACTOR = 0.4       # Mouth sits 0.4 * width ahead of center
SLOW_FISH_GROWTH_BASE = 0.02      # + size / SLOW_FISH_GROWTH_DIVISOR
SLOW_FISH_GROWTH_DIVISOR = 500.0
FAST_FISH_GROWTH_BASE = 0.015     # + size / FAST_FISH_GROWTH_DIVISOR
FAST_FISH_GROWTH_DIVISOR = 600.0


# ============================================================================
# Chunk Streaming Configuration
# ============================================================================

CHUNK_SIZE = 800.0
CHUNK_RANGE_X = 2                 # Chunks generated left/right of center chunk
CHUNK_RANGE_Y = 1                 # Chunks generated above/below center chunk
EVICTION_CHUNKS = 3               # Evict beyond EVICTION_CHUNKS * CHUNK_SIZE

# Density is per 100 unit^2 block: count = floor(area / 10000 * density * 100)
SEAWEED_DENSITY = 0.0025
FISH_DENSITY = 0.0005

SEAWEED_SURFACE_MARGIN = 100.0
SEAWEED_FLOOR_MARGIN = 50.0
FISH_SURFACE_MARGIN = 80.0
FISH_FLOOR_MARGIN = 80.0

AMBUSH_SPAWN_CHANCE = 0.12        # Per placed seaweed stalk
AMBUSH_HOME_DROP = 10.0           # Home sits slightly below the stalk anchor


# ============================================================================
# Fish Classes (game-balance constants, keep exact)
# ============================================================================

SLOW_FISH_FRACTION = 0.6

SLOW_FISH_SPEED = (1.2, 1.8)
SLOW_FISH_SIZE = (10.0, 18.0)
SLOW_FISH_COLOR = '#FFD700'       # Gold

FAST_FISH_SPEED = (2.2, 3.0)
FAST_FISH_SIZE = (6.0, 12.0)
FAST_FISH_COLOR = '#FF6347'       # Red

AMBUSH_FISH_SPEED = (1.3, 1.7)
AMBUSH_FISH_SIZE = (11.0, 16.0)
AMBUSH_FISH_COLOR = '#2ECC40'     # Green, distinct from seaweed

FLEE_DISTANCE_RANGE = (120.0, 200.0)
INITIAL_VELOCITY_SPREAD = 1.0     # Initial vx, vy uniform in [-spread, spread]


# ============================================================================
# Normal Fish Behavior
# ============================================================================

FLEE_MIN_STRENGTH = 0.5
FLEE_ACCEL_FACTOR = 0.4
FLEE_DRAG = 0.92
FLEE_JITTER_CUTOFF = 0.05         # Zero velocity components below this
FLEE_MAX_SPEED_FACTOR = 0.8

WANDER_BASE_SPEED = (0.3, 0.5)
WANDER_HORIZONTAL_BIAS = 0.8
WANDER_VERTICAL_SUBTLETY = 0.3
WANDER_THRUST = 0.04
WANDER_DRAG = 0.96
WANDER_MAX_SPEED_FACTOR = 0.3
WANDER_MIN_SPEED = 0.1
WANDER_PUSH_X = 0.3               # Fraction of WANDER_MIN_SPEED
WANDER_PUSH_Y = 0.1

DEPTH_OSCILLATION_STEP = 0.01
DEPTH_OSCILLATION_AMPLITUDE = 0.02

DIRECTION_CHANGE_BASE_TICKS = 60.0
DIRECTION_CHANGE_SPREAD_TICKS = 180.0
DIRECTION_CHANGE_INITIAL_TICKS = 60.0
DIRECTION_NUDGE = 0.2             # Full width of the random heading nudge
HEADING_SPREAD = 0.3              # Full width around 0 or pi for new headings
REVERSAL_PROBABILITY = 0.0005

FISH_BOUNDS_MARGIN = 80.0         # Y clamp [surface + m, floor - m]

HEADING_SMOOTHING = 0.9
HEADING_MIN_SPEED = 0.1


# ============================================================================
# Ambush Fish Behavior
# ============================================================================

AMBUSH_TRIGGER_DISTANCE = 120.0
AMBUSH_LEASH_DISTANCE = 800.0     # Emerging -> returning beyond this from home
AMBUSH_ARRIVAL_DISTANCE = 2.0
AMBUSH_EMERGE_SPEED_FACTOR = 0.7
AMBUSH_RETURN_SPEED_FACTOR = 0.5


# ============================================================================
# Seaweed
# ============================================================================

SEAWEED_HEIGHT_RANGE = (30.0, 90.0)
SEAWEED_SWAY_SPEED_RANGE = (0.02, 0.05)


# ============================================================================
# Blood Particles
# ============================================================================

PARTICLE_BASE_COUNT = 12          # + floor(size / 2)
PARTICLE_MAX_COUNT = 20
PARTICLE_ANGLE_JITTER = 1.0       # Full width, radians
PARTICLE_SPEED_RANGE = (0.3, 0.7)
PARTICLE_SIZE_RANGE = (1.5, 4.5)
PARTICLE_LIFE_RANGE = (120.0, 180.0)   # Ticks
PARTICLE_GRAVITY_RANGE = (0.005, 0.01)
PARTICLE_FADE_RANGE = (0.98, 0.99)     # Renderer alpha falloff
PARTICLE_SPAWN_SPREAD = 0.5            # Position jitter as fraction of fish size
PARTICLE_DRAG = 0.995
PARTICLE_DRIFT = 0.02                  # Full width of per-tick velocity jitter
PARTICLE_EXPAND_PHASE = 0.3            # Fraction of life spent growing
PARTICLE_EXPAND_RATE = 0.5             # Peak size = 1 + EXPAND_PHASE * RATE = 1.15
PARTICLE_PEAK_SCALE = 1.15


# ============================================================================
# Spatial Indexing Configuration
# ============================================================================

# Enable scipy.cKDTree fish index for eating queries
# Set to False to use O(n) scan for comparison
USE_CKDTREE = True
CKDTREE_LEAFSIZE = 16


# ============================================================================
# Frame Orchestration
# ============================================================================

FRAME_RETRY_DELAY_S = 0.1         # Delay before re-arming after a failed frame


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100
