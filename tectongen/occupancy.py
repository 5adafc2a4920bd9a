"""Cell survival: cylindrical hole carving and noise thresholding.

Neither test consumes randomness, so survival is a pure function of the
cell position and the noise field.
"""

import logging
from typing import Optional

import numpy as np

from .constants import RANDOM_NOISE_OFFSET_RANGE
from .lattice import LatticeLayout, sector_shift
from .models import CellCoordinate, GenerationConfig
from .noise import NoiseField
from .streams import SeededStreamSet

logger = logging.getLogger(__name__)

SKIP_HOLE = "hole"
SKIP_NOISE = "noise"


def resolve_noise_offset(config: GenerationConfig,
                         streams: SeededStreamSet) -> np.ndarray:
    """Global noise offset: the configured vector, or one seeded sample.

    The random variant draws three values from the noise-offset stream,
    exactly once per run.
    """
    if not config.use_random_noise_offset:
        return config.noise_offset.to_array()
    rng = streams.noise_offset
    offset = np.array([rng.random() * RANDOM_NOISE_OFFSET_RANGE
                       for _ in range(3)])
    logger.info(f"Random noise offset: ({offset[0]:.2f}, {offset[1]:.2f}, "
                f"{offset[2]:.2f})")
    return offset


class OccupancyFilter:
    def __init__(self, config: GenerationConfig, layout: LatticeLayout,
                 noise_field: NoiseField, noise_offset):
        self.config = config
        self.layout = layout
        self.noise_field = noise_field
        self.noise_offset = np.asarray(noise_offset, dtype=np.float64)
        self.noise_scale = np.array([config.noise_scale_x,
                                     config.noise_scale_y,
                                     config.noise_scale_z])
        self._hole_radius_sq = config.hole_radius * config.hole_radius

    def inside_hole(self, position) -> bool:
        """True if *position* lies in the clearing (XZ distance only)."""
        if not self.config.carve_central_hole:
            return False
        dx = position[0] - self.layout.clearing_center[0]
        dz = position[2] - self.layout.clearing_center[2]
        return (dx * dx + dz * dz) < self._hole_radius_sq

    def noise_coords(self, cell: CellCoordinate) -> np.ndarray:
        return (np.array(cell, dtype=np.float64) * self.noise_scale
                + self.noise_offset + sector_shift(cell, self.config))

    def normalized_noise(self, cell: CellCoordinate) -> float:
        x, y, z = self.noise_coords(cell)
        n = self.noise_field.noise3(float(x), float(y), float(z))
        return (n + 1.0) * 0.5

    def rejection(self, cell: CellCoordinate, position) -> Optional[str]:
        """Why *cell* is skipped, or ``None`` if it survives."""
        if self.inside_hole(position):
            return SKIP_HOLE
        if self.normalized_noise(cell) < self.config.noise_threshold:
            return SKIP_NOISE
        return None

    def survives(self, cell: CellCoordinate, position) -> bool:
        return self.rejection(cell, position) is None
