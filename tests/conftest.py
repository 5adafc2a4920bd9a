import math
import os
import random
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tectongen.elements import TemplateElementFactory
from tectongen.generator import Collaborators
from tectongen.models import GenerationConfig, Material, MaterialPalette

TOP = Material("top", (1.0, 0.0, 0.0, 1.0))
RARE = Material("rare", (0.0, 1.0, 0.0, 1.0))
BOTTOM = Material("bottom", (0.0, 0.0, 1.0, 1.0))
PALETTE = MaterialPalette(top=TOP, rare=RARE, bottom=BOTTOM)


class ConstantNoise:
    def __init__(self, value):
        self.value = value
        self.calls = []

    def noise3(self, x, y, z):
        self.calls.append((x, y, z))
        return self.value


class WaveNoise:
    """Smooth deterministic field in [-1, 1], cheap to evaluate."""

    def noise3(self, x, y, z):
        return math.sin(x * 1.7 + 0.3) * math.cos(y * 1.3) * math.sin(z * 0.9 + 1.1)


class RecordingRandom:
    """random.Random stand-in that counts draws."""

    def __init__(self, seed=0):
        self._rng = random.Random(seed)
        self.draws = 0

    def random(self):
        self.draws += 1
        return self._rng.random()

    def randrange(self, n):
        self.draws += 1
        return self._rng.randrange(n)


def small_config(**overrides):
    """A tiny lattice with every optional stage off unless overridden."""
    values = dict(
        count_x=4, count_y=3, count_z=4,
        gap_x=0.0, gap_y=0.0, gap_z=0.0,
        noise_threshold=0.0,
        enable_sector_offsets=False,
        carve_central_hole=False,
        palette=PALETTE,
        enable_palette_cycle=False,
        enable_rotation_jitter=False,
        enable_explosion=False,
        combine_meshes=False,
    )
    values.update(overrides)
    return GenerationConfig(**values)


@pytest.fixture
def factory():
    return TemplateElementFactory.unit_box()


@pytest.fixture
def collaborators(factory):
    return Collaborators(noise_field=WaveNoise(), element_factory=factory)
