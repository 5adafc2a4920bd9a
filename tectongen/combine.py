"""Merge per-element geometry into one static mesh per material."""

import logging
from typing import Dict, Iterable, List, Optional

import numpy as np
import trimesh

from .models import CombinedMeshGroup, Element, Material

logger = logging.getLogger(__name__)

# Face indices of combined meshes; 16-bit overflows past 65535 vertices.
INDEX_DTYPE = np.uint32


def _transform_points(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    return points @ matrix[:3, :3].T + matrix[:3, 3]


class MeshCombiner:
    """Owns the combined groups of one parent frame.

    ``combine`` replaces (never accumulates) the previous output: running
    it twice over the same elements leaves exactly one set of groups.
    """

    def __init__(self, parent_transform: Optional[np.ndarray] = None,
                 add_collider: bool = True,
                 destroy_sources: bool = True):
        self.parent_transform = (np.eye(4) if parent_transform is None
                                 else np.asarray(parent_transform, dtype=np.float64))
        self.add_collider = add_collider
        self.destroy_sources = destroy_sources
        self.groups: List[CombinedMeshGroup] = []

    @property
    def world_to_local(self) -> np.ndarray:
        return np.linalg.inv(self.parent_transform)

    def clear(self) -> int:
        """Tear down previously combined groups; returns how many."""
        removed = len(self.groups)
        for group in self.groups:
            group.mesh = None
            group.collision = None
        self.groups = []
        if removed:
            logger.debug(f"Removed {removed} previous combined groups")
        return removed

    def _group_by_material(self, elements: Iterable[Element]) -> Dict[Material, dict]:
        world_to_local = self.world_to_local
        groups: Dict[Material, dict] = {}
        for element in elements:
            if element.geometry is None or element.material is None:
                continue
            mesh = element.geometry
            if len(mesh.vertices) == 0:
                continue

            g = groups.setdefault(element.material, {
                'verts': [], 'faces': [], 'offset': 0, 'sources': [],
            })
            matrix = world_to_local @ element.transform
            g['verts'].append(_transform_points(
                np.asarray(mesh.vertices, dtype=np.float64), matrix))
            g['faces'].append(np.asarray(mesh.faces, dtype=np.int64) + g['offset'])
            g['offset'] += len(mesh.vertices)
            g['sources'].append(element)
        return groups

    def combine(self, elements: Iterable[Element]) -> List[CombinedMeshGroup]:
        """Merge *elements* by material into the parent's local frame.

        Elements without a material are left untouched as standalone
        elements.  Previous groups are always torn down first, so with no
        eligible elements the result is an empty list.
        """
        self.clear()
        by_material = self._group_by_material(elements)

        if not by_material:
            logger.warning("Nothing to combine (no materials found).")
            return []

        total_parts = 0
        total_vertices = 0
        used_names = set()
        for material, g in by_material.items():
            vertices = np.vstack(g['verts'])
            faces = np.vstack(g['faces'])
            if len(vertices) > np.iinfo(INDEX_DTYPE).max:
                raise ValueError(
                    f"Material {material.name}: {len(vertices)} vertices "
                    f"exceed the {INDEX_DTYPE.__name__} index range")

            mesh = trimesh.Trimesh(vertices=vertices,
                                   faces=faces.astype(INDEX_DTYPE),
                                   process=False)
            collision = mesh.copy() if self.add_collider else None
            group = CombinedMeshGroup(material=material, mesh=mesh,
                                      source_count=len(g['sources']),
                                      collision=collision)
            # same name, different colour: keep node names unique
            n = 0
            while group.name in used_names:
                n += 1
                group.name_suffix = f"_{n}"
            used_names.add(group.name)
            self.groups.append(group)
            total_parts += group.source_count
            total_vertices += group.vertex_count

        if self.destroy_sources:
            for g in by_material.values():
                for element in g['sources']:
                    element.geometry = None

        logger.info(f"Combined {total_parts} parts into {len(self.groups)} "
                    f"material groups (Static). "
                    f"Total vertices across all combined meshes = {total_vertices}")
        return list(self.groups)
