"""
Fish spatial index adapter.

Stable API for radius queries over the active fish set.
Backend selection via constants.USE_CKDTREE (overridable per instance):
- True: scipy.cKDTree, rebuilt from a positions snapshot each tick
- False: O(n) scan, kept for A/B comparison and tiny populations
"""

import time
import numpy as np
from typing import List, Optional
from scipy.spatial import cKDTree

from .entity import Fish
from .constants import USE_CKDTREE, CKDTREE_LEAFSIZE


class FishIndexAdapter:
    """
    Radius queries over a snapshot of fish positions.

    build() freezes positions at call time; later fish movement is not
    reflected until the next build().
    """

    def __init__(self, use_ckdtree: Optional[bool] = None, leafsize: Optional[int] = None):
        """
        Args:
            use_ckdtree: Override USE_CKDTREE constant (for testing)
            leafsize: Override CKDTREE_LEAFSIZE constant (for testing)
        """
        self._fish: List[Fish] = []
        self._positions: np.ndarray = np.empty((0, 2), dtype=np.float64)
        self._tree: Optional[cKDTree] = None
        self._use_ckdtree = use_ckdtree if use_ckdtree is not None else USE_CKDTREE
        self._leafsize = leafsize if leafsize is not None else CKDTREE_LEAFSIZE

        self.last_build_ms: float = 0.0

    @property
    def uses_ckdtree(self) -> bool:
        return self._use_ckdtree

    def build(self, fish: List[Fish]):
        """Snapshot positions and (re)build the tree"""
        build_start = time.perf_counter()

        self._fish = list(fish)
        if self._fish:
            self._positions = np.array([f.position for f in self._fish], dtype=np.float64)
        else:
            self._positions = np.empty((0, 2), dtype=np.float64)

        if self._use_ckdtree and len(self._positions) > 0:
            self._tree = cKDTree(self._positions, leafsize=self._leafsize)
        else:
            self._tree = None

        self.last_build_ms = (time.perf_counter() - build_start) * 1000.0

    def within(self, point: np.ndarray, radius: float) -> List[Fish]:
        """
        Fish strictly closer than radius to point.

        Returns:
            Fish ordered by their position in the built list
        """
        if len(self._positions) == 0:
            return []

        if self._tree is not None:
            candidates = sorted(self._tree.query_ball_point(point, r=radius))
        else:
            candidates = range(len(self._fish))

        hits = []
        for idx in candidates:
            diff = self._positions[idx] - point
            # query_ball_point is inclusive, eating is strict
            if np.sqrt(np.dot(diff, diff)) < radius:
                hits.append(self._fish[idx])
        return hits

    def __len__(self) -> int:
        return len(self._fish)
