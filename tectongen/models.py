"""Data classes and path management."""

import pathlib
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

import numpy as np
import trimesh

from .constants import (COMBINED_PREFIX, DEFAULT_PALETTE_COLORS, OUTPUT_DIR,
                        UNKNOWN_MATERIAL_NAME)


class PathManager:
    """Manage paths relative to the output directory."""

    @staticmethod
    def get_output_path(filename: str) -> pathlib.Path:
        """Get the output file path (absolute paths are kept as-is)."""
        return OUTPUT_DIR / filename


class Vector3(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_array(self) -> np.ndarray:
        return np.array(self, dtype=np.float64)


class CellCoordinate(NamedTuple):
    i: int
    j: int
    k: int


class PaletteCycleAxis(str, Enum):
    X = "X"
    Y = "Y"
    Z = "Z"


@dataclass(frozen=True)
class Material:
    """A named render material with a PBR base colour (RGBA, 0-1)."""
    name: str
    color: Tuple[float, float, float, float] = (0.8, 0.8, 0.8, 1.0)


# Slot indices; the roles are fixed, palette cycling only rotates them.
SLOT_TOP = 0
SLOT_RARE = 1
SLOT_BOTTOM = 2


@dataclass(frozen=True)
class MaterialPalette:
    """Three material slots: top-biased, rare, bottom-biased.

    Any slot may be ``None``; selection falls back to another slot.
    """
    top: Optional[Material] = None
    rare: Optional[Material] = None
    bottom: Optional[Material] = None

    def slots(self) -> Tuple[Optional[Material], ...]:
        return (self.top, self.rare, self.bottom)

    @classmethod
    def from_slots(cls, slots) -> "MaterialPalette":
        top, rare, bottom = slots
        return cls(top=top, rare=rare, bottom=bottom)

    @classmethod
    def default(cls) -> "MaterialPalette":
        return cls(**{role: Material(name, color)
                      for role, (name, color) in DEFAULT_PALETTE_COLORS.items()})

    def is_empty(self) -> bool:
        return all(m is None for m in self.slots())


@dataclass(frozen=True)
class GenerationConfig:
    """Immutable per-run parameter bundle.

    Defaults reproduce the reference scene: a 200x20x200 lattice centred on
    the origin with an 8 m cylindrical clearing.  Run it through
    ``validate_config`` before use.
    """
    # Grid
    count_x: int = 200
    count_y: int = 20
    count_z: int = 200

    # Noise
    noise_scale_x: float = 0.2
    noise_scale_y: float = 0.2
    noise_scale_z: float = 0.2
    noise_threshold: float = 0.3
    noise_offset: Vector3 = Vector3()
    use_random_noise_offset: bool = False
    noise_seed: int = 12345

    # Sector noise shifting
    enable_sector_offsets: bool = True
    sector_size_x: int = 20
    sector_size_y: int = 5
    sector_size_z: int = 20
    sector_offset_size: Vector3 = Vector3(50.0, 50.0, 50.0)

    # Spacing
    gap_x: float = 0.1
    gap_y: float = 0.1
    gap_z: float = 0.1

    # Placement (manual offset is in grid cells)
    auto_center: bool = True
    base_position: Vector3 = Vector3()
    offset_x: int = 0
    offset_y: int = 0
    offset_z: int = 0

    # Clearing (XZ only, Y ignored)
    carve_central_hole: bool = True
    hole_radius: float = 8.0

    # Palette & assignment
    palette: MaterialPalette = field(default_factory=MaterialPalette.default)
    rare_probability: float = 0.05
    material_seed: int = 54321
    height_bias: float = 2.0

    # Palette cycling
    enable_palette_cycle: bool = True
    palette_cycle_axis: PaletteCycleAxis = PaletteCycleAxis.X
    palette_cycle_size: int = 3
    palette_cycle_offset: int = 0

    # Rotation jitter
    enable_rotation_jitter: bool = True
    jitter_max_degrees: float = 0.8
    jitter_seed: int = 7777

    # Explosion
    enable_explosion: bool = False
    explosion_center: Vector3 = Vector3()
    explosion_strength: float = 0.0
    explosion_falloff_power: float = 2.0
    use_cubic_falloff: bool = False
    explosion_rotation_scale: float = 45.0
    explosion_seed: int = 24680
    explosion_direction_jitter_degrees: float = 8.0
    explosion_magnitude_jitter: float = 0.25

    # Combining
    combine_meshes: bool = True
    add_collider: bool = True
    destroy_sources_after_combine: bool = True

    @property
    def counts(self) -> Tuple[int, int, int]:
        return (self.count_x, self.count_y, self.count_z)


@dataclass
class PlacementDecision:
    """Where and how one surviving cell's element is placed."""
    cell: CellCoordinate
    position: np.ndarray            # world space, float64[3]
    rotation: np.ndarray            # 3x3 rotation matrix
    material: Optional[Material] = None

    def transform(self) -> np.ndarray:
        """4x4 local-to-world matrix."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation
        matrix[:3, 3] = self.position
        return matrix


@dataclass
class Element:
    """One instantiated tecton.

    ``geometry`` is in the element's local frame and may be shared between
    elements; it is set to ``None`` once discarded after a combine pass.
    """
    name: str
    cell: CellCoordinate
    transform: np.ndarray
    material: Optional[Material] = None
    geometry: Optional[trimesh.Trimesh] = None


def material_name(material: Optional[Material]) -> str:
    return material.name if material is not None else UNKNOWN_MATERIAL_NAME


@dataclass
class CombinedMeshGroup:
    """All geometry of one material merged into the parent's local frame."""
    material: Material
    mesh: trimesh.Trimesh
    source_count: int
    collision: Optional[trimesh.Trimesh] = None
    static: bool = True
    # Set by the combiner when another group already uses the same name
    name_suffix: str = ""

    @property
    def name(self) -> str:
        return f"{COMBINED_PREFIX}{material_name(self.material)}{self.name_suffix}"

    @property
    def vertex_count(self) -> int:
        return len(self.mesh.vertices)

    @property
    def indices(self) -> np.ndarray:
        """Flat triangle index buffer, 32-bit so large scenes don't overflow."""
        return np.asarray(self.mesh.faces, dtype=np.uint32).reshape(-1)


@dataclass
class GenerationStats:
    cells_visited: int = 0
    skipped_by_hole: int = 0
    skipped_by_noise: int = 0
    survivors: int = 0
    without_material: int = 0
    combined_vertices: int = 0


@dataclass
class GenerationResult:
    config: GenerationConfig
    placements: List[PlacementDecision] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    groups: List[CombinedMeshGroup] = field(default_factory=list)
    stats: GenerationStats = field(default_factory=GenerationStats)

    @property
    def standalone_elements(self) -> List[Element]:
        """Elements still carrying their own geometry (not merged away)."""
        return [e for e in self.elements if e.geometry is not None]
