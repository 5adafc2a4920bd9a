"""Coherent-noise collaborators.

The generator only needs ``noise3(x, y, z) -> float in [-1, 1]``, pure and
deterministic.  ``SimplexNoiseField`` is the default, backed by OpenSimplex.
"""

import logging
from typing import Callable, Protocol, runtime_checkable

from opensimplex import OpenSimplex

from .constants import NOISE_FIELD_SEED
from .errors import MissingCollaboratorError

logger = logging.getLogger(__name__)


@runtime_checkable
class NoiseField(Protocol):
    def noise3(self, x: float, y: float, z: float) -> float:
        ...


class SimplexNoiseField:
    """OpenSimplex 3D noise clamped to [-1, 1]."""

    def __init__(self, seed: int = NOISE_FIELD_SEED):
        self.seed = seed
        self._simplex = OpenSimplex(seed=seed)

    def noise3(self, x: float, y: float, z: float) -> float:
        n = float(self._simplex.noise3(x, y, z))
        return max(-1.0, min(1.0, n))


class FunctionNoiseField:
    """Adapt a plain ``f(x, y, z)`` callable to the NoiseField protocol."""

    def __init__(self, fn: Callable[[float, float, float], float]):
        self.fn = fn

    def noise3(self, x: float, y: float, z: float) -> float:
        return float(self.fn(x, y, z))


def as_noise_field(obj) -> NoiseField:
    """Accept a NoiseField or a bare callable."""
    if obj is None:
        raise MissingCollaboratorError("Noise field is not assigned")
    if isinstance(obj, NoiseField):
        return obj
    if callable(obj):
        return FunctionNoiseField(obj)
    raise MissingCollaboratorError(
        f"Object of type {type(obj).__name__} is not a noise field")
