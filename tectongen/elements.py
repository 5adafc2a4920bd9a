"""Element instantiation collaborators."""

import logging
from typing import Optional, Protocol

import numpy as np
import trimesh

from .constants import DEFAULT_ELEMENT_SIZE, ELEMENT_NAME_FORMAT
from .errors import MissingCollaboratorError
from .models import Element, PlacementDecision

logger = logging.getLogger(__name__)


class ElementFactory(Protocol):
    """Turns a placement decision into a renderable element."""

    element_size: np.ndarray

    def create(self, placement: PlacementDecision) -> Element:
        ...


def measure_template(template: trimesh.Trimesh) -> np.ndarray:
    """Bounding-box size of *template*; unit size when it has no bounds."""
    if template is None or len(template.vertices) == 0:
        return np.array(DEFAULT_ELEMENT_SIZE, dtype=np.float64)
    return np.asarray(template.extents, dtype=np.float64)


class TemplateElementFactory:
    """Places copies of one shared template mesh.

    Every element references the same template geometry (like a shared
    mesh asset); only its transform and material differ.
    """

    def __init__(self, template: Optional[trimesh.Trimesh]):
        if template is None:
            raise MissingCollaboratorError(
                "Tecton template mesh is not assigned")
        self.template = template
        self.element_size = measure_template(template)
        logger.debug(f"Template size: {self.element_size.tolist()}")

    @classmethod
    def unit_box(cls, extents=DEFAULT_ELEMENT_SIZE) -> "TemplateElementFactory":
        return cls(trimesh.creation.box(extents=extents))

    def create(self, placement: PlacementDecision) -> Element:
        i, j, k = placement.cell
        return Element(name=ELEMENT_NAME_FORMAT.format(i=i, j=j, k=k),
                       cell=placement.cell,
                       transform=placement.transform(),
                       material=placement.material,
                       geometry=self.template)
