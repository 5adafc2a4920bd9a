"""Lattice traversal, world layout, and sector noise shifts."""

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from .models import CellCoordinate, GenerationConfig

logger = logging.getLogger(__name__)


def iter_cells(config: GenerationConfig) -> Iterator[CellCoordinate]:
    """Yield every cell, i outermost and k innermost.

    The order is observable: random draws are taken sequentially per
    surviving cell, so changing it changes every downstream decision.
    """
    for i in range(config.count_x):
        for j in range(config.count_y):
            for k in range(config.count_z):
                yield CellCoordinate(i, j, k)


@dataclass
class LatticeLayout:
    """World-space geometry of the lattice."""
    counts: np.ndarray
    cell_size: np.ndarray
    half_extents: np.ndarray
    origin: np.ndarray
    clearing_center: np.ndarray

    @classmethod
    def from_config(cls, config: GenerationConfig,
                    element_size) -> "LatticeLayout":
        counts = np.array(config.counts, dtype=np.int64)
        gaps = np.array([config.gap_x, config.gap_y, config.gap_z])
        cell_size = np.asarray(element_size, dtype=np.float64) + gaps
        half_extents = (counts - 1) * cell_size * 0.5

        if config.auto_center:
            origin = -half_extents
            clearing_center = np.zeros(3)
        else:
            offset = np.array([config.offset_x, config.offset_y,
                               config.offset_z], dtype=np.float64)
            origin = config.base_position.to_array() + offset * cell_size
            clearing_center = origin + half_extents

        return cls(counts=counts, cell_size=cell_size,
                   half_extents=half_extents, origin=origin,
                   clearing_center=clearing_center)

    def world_position(self, cell: CellCoordinate) -> np.ndarray:
        return self.origin + np.array(cell, dtype=np.float64) * self.cell_size

    @property
    def extents(self) -> np.ndarray:
        """Full span between the first and last cell centres."""
        return self.half_extents * 2.0


def sector_index(cell: CellCoordinate, config: GenerationConfig):
    sizes = (config.sector_size_x, config.sector_size_y, config.sector_size_z)
    return tuple(c // s for c, s in zip(cell, sizes))


def sector_shift(cell: CellCoordinate, config: GenerationConfig) -> np.ndarray:
    """Noise-space shift shared by every cell of a sector block.

    Applied to noise sampling coordinates only, never to world position.
    """
    if not config.enable_sector_offsets:
        return np.zeros(3)
    return (np.array(sector_index(cell, config), dtype=np.float64)
            * config.sector_offset_size.to_array())
