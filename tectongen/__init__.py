"""tectongen -- noise-carved lattices of discrete elements, merged per material.

Entry point: ``generate(config, Collaborators(noise_field, element_factory))``.
"""

from tectongen.config import load_config, validate_config
from tectongen.elements import TemplateElementFactory
from tectongen.generator import Collaborators, generate
from tectongen.models import (GenerationConfig, GenerationResult, Material,
                              MaterialPalette, PaletteCycleAxis, Vector3)
from tectongen.noise import SimplexNoiseField
