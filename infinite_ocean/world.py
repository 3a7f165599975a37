"""
World model: camera offset, vertical bounds and viewport queries.

The shark never moves on screen. Travel is simulated by translating the
world offset, so screen = world + offset and world = screen - offset.
The horizontal axis is unbounded; the vertical axis is clamped so the
shark stays between the surface and the floor.
"""

import numpy as np
from dataclasses import dataclass

from .data_types import WorldConfig
from .spatial import vec2


@dataclass
class WorldState:
    """
    Camera translation plus static ocean geometry.

    Attributes:
        offset_x: World-to-screen translation (x)
        offset_y: World-to-screen translation (y)
        surface_y: Water surface in world space (= sky_height)
        bottom_y: Ocean floor in world space (= surface_y + ocean_depth)
        sky_height: Static config
        ocean_depth: Static config
        sand_height: Static config, renderer only
        vertical_margin: Shark keeps this far from surface/floor
        width: Viewport width (screen units)
        height: Viewport height (screen units)
    """
    sky_height: float
    ocean_depth: float
    sand_height: float
    vertical_margin: float
    width: float
    height: float
    offset_x: float = 0.0
    offset_y: float = 0.0
    surface_y: float = 0.0
    bottom_y: float = 0.0

    def __post_init__(self):
        self._recompute_bounds()

    @classmethod
    def from_config(cls, config: WorldConfig, width: float, height: float) -> 'WorldState':
        return cls(
            sky_height=config.sky_height,
            ocean_depth=config.ocean_depth,
            sand_height=config.sand_height,
            vertical_margin=config.vertical_margin,
            width=width,
            height=height
        )

    def _recompute_bounds(self):
        self.surface_y = self.sky_height
        self.bottom_y = self.surface_y + self.ocean_depth

    def reset(self, width: float, height: float):
        """Adopt new viewport dimensions, recompute bounds, zero the offset"""
        self.width = width
        self.height = height
        self.offset_x = 0.0
        self.offset_y = 0.0
        self._recompute_bounds()

    @property
    def offset(self) -> np.ndarray:
        return vec2(self.offset_x, self.offset_y)

    def translate_to_screen(self, world_pos: np.ndarray) -> np.ndarray:
        return world_pos + self.offset

    def translate_to_world(self, screen_pos: np.ndarray) -> np.ndarray:
        return screen_pos - self.offset

    def view_center(self) -> np.ndarray:
        """World-space point under the viewport center"""
        return self.translate_to_world(vec2(self.width / 2.0, self.height / 2.0))

    def move(self, dx: float, dy: float):
        """Translate the camera by (dx, dy) in world units"""
        self.offset_x -= dx
        self.offset_y -= dy

    def clamp_vertical(self, screen_y: float) -> bool:
        """
        Correct offset_y so a screen-space point stays inside the water.

        Args:
            screen_y: Screen Y of the tracked point (the shark)

        Returns:
            True if offset_y was corrected
        """
        world_y = screen_y - self.offset_y
        top = self.surface_y + self.vertical_margin
        bottom = self.bottom_y - self.vertical_margin

        if world_y < top:
            self.offset_y = screen_y - top
            return True
        if world_y > bottom:
            self.offset_y = screen_y - bottom
            return True
        return False

    def is_on_screen(self, world_pos: np.ndarray, margin: float = 50.0) -> bool:
        """Visibility test with a margin, used by renderers to cull draws"""
        sx, sy = self.translate_to_screen(world_pos)
        return -margin < sx < self.width + margin and -margin < sy < self.height + margin

    def to_dict(self) -> dict:
        return {
            'offset': [self.offset_x, self.offset_y],
            'surface_y': self.surface_y,
            'bottom_y': self.bottom_y,
            'sand_height': self.sand_height,
            'viewport': [self.width, self.height]
        }
