"""GLB and STL output of a generation result."""

import logging
import pathlib
from typing import Dict, List, Optional, Tuple

import trimesh
from trimesh.visual.material import PBRMaterial

from .constants import STANDALONE_COLOR
from .models import GenerationResult, Material, PathManager, material_name

logger = logging.getLogger(__name__)


def _pbr(material: Optional[Material]) -> PBRMaterial:
    color = list(material.color) if material is not None else list(STANDALONE_COLOR)
    return PBRMaterial(name=material_name(material),
                       baseColorFactor=color,
                       doubleSided=True)


def _with_material(mesh: trimesh.Trimesh,
                   material: Optional[Material]) -> trimesh.Trimesh:
    textured = mesh.copy()
    textured.visual = trimesh.visual.TextureVisuals(material=_pbr(material))
    return textured


def build_scene(result: GenerationResult) -> trimesh.Scene:
    """One node per combined group plus one instance per standalone element.

    Standalone elements share one geometry per (material, template) pair
    and differ only by their node transform.
    """
    scene = trimesh.Scene()
    for group in result.groups:
        scene.add_geometry(_with_material(group.mesh, group.material),
                           geom_name=group.name, node_name=group.name)

    shared: Dict[Tuple[Optional[Material], int], str] = {}
    for element in result.standalone_elements:
        key = (element.material, id(element.geometry))
        geom_name = shared.get(key)
        if geom_name is None:
            base = f"Tecton_{material_name(element.material)}"
            geom_name, n = base, 0
            while geom_name in scene.geometry:
                n += 1
                geom_name = f"{base}_{n}"
            shared[key] = geom_name
            scene.add_geometry(_with_material(element.geometry, element.material),
                               geom_name=geom_name, node_name=element.name,
                               transform=element.transform)
        else:
            scene.graph.update(frame_to=element.name,
                               frame_from=scene.graph.base_frame,
                               matrix=element.transform,
                               geometry=geom_name)
    return scene


def _baked_meshes(result: GenerationResult) -> List[trimesh.Trimesh]:
    meshes = [group.mesh for group in result.groups]
    for element in result.standalone_elements:
        mesh = element.geometry.copy()
        mesh.apply_transform(element.transform)
        meshes.append(mesh)
    return meshes


def _resolve(output_path) -> pathlib.Path:
    path = PathManager.get_output_path(str(output_path))
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _is_empty(result: GenerationResult) -> bool:
    if result.groups or result.standalone_elements:
        return False
    logger.warning("Nothing to export (no elements survived); no file written.")
    return True


def export_glb(result: GenerationResult, output_path) -> Optional[str]:
    """Write *result* as a GLB scene.

    Returns the absolute path, or ``None`` when there is no geometry.
    """
    if _is_empty(result):
        return None
    path = _resolve(output_path)
    scene = build_scene(result)
    scene.export(str(path), file_type='glb')
    size_mb = path.stat().st_size / 1024 / 1024
    logger.info(f"GLB file generated successfully: {path} "
                f"({len(scene.geometry)} meshes, {size_mb:.1f} MB)")
    return str(path)


def export_stl(result: GenerationResult, output_path) -> Optional[str]:
    """Write all geometry, baked to world space, as one STL mesh.

    Returns the absolute path, or ``None`` when there is no geometry.
    """
    if _is_empty(result):
        return None
    meshes = _baked_meshes(result)
    path = _resolve(output_path)
    merged = trimesh.util.concatenate(meshes)
    merged.export(str(path), file_type='stl')
    logger.info(f"STL file generated successfully: {path} "
                f"({len(merged.faces)} faces)")
    return str(path)
