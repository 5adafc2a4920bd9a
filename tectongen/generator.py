"""Lattice generation pipeline: occupancy -> material -> wobble -> explosion.

``generate`` is the entry point for every driver (CLI, service, tests).
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .combine import MeshCombiner
from .config import validate_config
from .constants import PROGRESS_EVERY
from .elements import ElementFactory
from .errors import MissingCollaboratorError
from .explosion import displace
from .lattice import LatticeLayout, iter_cells
from .models import (GenerationConfig, GenerationResult, GenerationStats,
                     PlacementDecision)
from .noise import NoiseField, as_noise_field
from .occupancy import (SKIP_HOLE, OccupancyFilter, resolve_noise_offset)
from .palette import select_material
from .rotation import jitter_rotation
from .streams import SeededStreamSet

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


@dataclass
class Collaborators:
    """External pieces the pipeline needs.

    ``streams`` and ``combiner`` are optional; they default to streams
    seeded from the config and a combiner built from its combine flags.
    """
    noise_field: Optional[NoiseField] = None
    element_factory: Optional[ElementFactory] = None
    streams: Optional[SeededStreamSet] = None
    combiner: Optional[MeshCombiner] = None


def iter_placements(config: GenerationConfig, layout: LatticeLayout,
                    noise_field: NoiseField, streams: SeededStreamSet,
                    stats: Optional[GenerationStats] = None,
                    progress_callback: Optional[ProgressCallback] = None,
                    ) -> Iterator[PlacementDecision]:
    """Yield a placement for every surviving cell, in traversal order.

    *config* must already be validated.  Each survivor draws from the
    material, jitter and explosion streams, in that order; skipped cells
    draw nothing.
    """
    stats = stats if stats is not None else GenerationStats()
    noise_offset = resolve_noise_offset(config, streams)
    occupancy = OccupancyFilter(config, layout, noise_field, noise_offset)

    last_i = -1
    for cell in iter_cells(config):
        if progress_callback and cell.i != last_i:
            last_i = cell.i
            if cell.i % PROGRESS_EVERY == 0:
                pct = 100.0 * cell.i / config.count_x
                progress_callback(pct, f"Placing slice {cell.i + 1}/{config.count_x}")

        stats.cells_visited += 1
        position = layout.world_position(cell)

        reason = occupancy.rejection(cell, position)
        if reason is not None:
            if reason == SKIP_HOLE:
                stats.skipped_by_hole += 1
            else:
                stats.skipped_by_noise += 1
            continue

        material = select_material(cell, config, streams.material)
        rotation = jitter_rotation(streams.jitter, config)
        position, rotation = displace(position, rotation,
                                      streams.explosion, config)

        stats.survivors += 1
        if material is None:
            stats.without_material += 1
        yield PlacementDecision(cell=cell, position=position,
                                rotation=rotation, material=material)


def _require(collaborators: Optional[Collaborators]):
    if collaborators is None:
        raise MissingCollaboratorError("No collaborators supplied")
    if collaborators.element_factory is None:
        raise MissingCollaboratorError("Element factory is not assigned")
    noise_field = as_noise_field(collaborators.noise_field)
    return noise_field, collaborators.element_factory


def generate(config: GenerationConfig, collaborators: Collaborators,
             progress_callback: Optional[ProgressCallback] = None,
             ) -> GenerationResult:
    """Run one full generation pass and, if configured, the combine pass.

    Raises MissingCollaboratorError before producing anything when the
    noise field or element factory is absent.
    """
    def _progress(pct, msg):
        if progress_callback:
            progress_callback(pct, msg)

    noise_field, factory = _require(collaborators)
    config = validate_config(config)
    streams = collaborators.streams or SeededStreamSet.from_config(config)
    layout = LatticeLayout.from_config(config, factory.element_size)

    logger.info(f"Generating {config.count_x}x{config.count_y}x{config.count_z} "
                f"lattice, cell size {layout.cell_size.round(4).tolist()}")

    result = GenerationResult(config=config)
    t0 = time.perf_counter()
    for placement in iter_placements(config, layout, noise_field, streams,
                                     stats=result.stats,
                                     progress_callback=_progress):
        result.placements.append(placement)
        result.elements.append(factory.create(placement))

    stats = result.stats
    logger.info(f"Placed {stats.survivors} of {stats.cells_visited} cells "
                f"in {time.perf_counter() - t0:.1f}s "
                f"(hole: {stats.skipped_by_hole}, noise: {stats.skipped_by_noise})")
    if stats.without_material:
        logger.info(f"{stats.without_material} elements have no material")

    if config.combine_meshes:
        _progress(90, "Combining meshes...")
        combiner = collaborators.combiner or MeshCombiner(
            add_collider=config.add_collider,
            destroy_sources=config.destroy_sources_after_combine)
        result.groups = combiner.combine(result.elements)
        stats.combined_vertices = sum(g.vertex_count for g in result.groups)

    _progress(100, "Generation complete")
    return result
