"""Static radial explosion offset field.

Each element is pushed away from the explosion centre by
``strength / dist**power`` along a slightly jittered direction and given an
extra random rotation scaled by the same falloff.
"""

import math
import random
from typing import Tuple

import numpy as np
from trimesh import transformations as tf

from .constants import EXPLOSION_DIST_EPS, NEAR_ZERO_SQ
from .models import GenerationConfig
from .rotation import euler_matrix
from .streams import signed_unit

UP = np.array([0.0, 1.0, 0.0])


def falloff_power(config: GenerationConfig) -> float:
    if config.use_cubic_falloff:
        return 3.0
    return max(1.0, config.explosion_falloff_power)


def _normalized(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    return v / n if n > 0 else v


def jitter_direction(direction: np.ndarray, rng: random.Random,
                     max_degrees: float) -> np.ndarray:
    """Tilt *direction* by up to *max_degrees* about a random perpendicular.

    Draws three components then one angle.
    """
    rand = np.array([signed_unit(rng) for _ in range(3)])
    if rand.dot(rand) < NEAR_ZERO_SQ:
        rand = UP

    axis = np.cross(direction, rand)
    if axis.dot(axis) < NEAR_ZERO_SQ:
        axis = np.cross(direction, UP)

    angle = signed_unit(rng) * max_degrees
    if axis.dot(axis) < NEAR_ZERO_SQ:
        # degenerate direction: nothing to tilt about
        return direction
    tilt = tf.rotation_matrix(math.radians(angle), _normalized(axis))[:3, :3]
    return _normalized(tilt @ direction)


def displace(position: np.ndarray, rotation: np.ndarray,
             rng: random.Random,
             config: GenerationConfig) -> Tuple[np.ndarray, np.ndarray]:
    """Return the exploded ``(position, rotation)``.

    A no-op returning the inputs unchanged when the explosion is disabled
    or has zero strength.
    """
    if not config.enable_explosion or config.explosion_strength <= 0:
        return position, rotation

    from_center = position - config.explosion_center.to_array()
    dist = max(float(np.linalg.norm(from_center)), EXPLOSION_DIST_EPS)
    falloff = config.explosion_strength / dist ** falloff_power(config)
    direction = from_center / dist

    if config.explosion_direction_jitter_degrees > 0:
        direction = jitter_direction(
            direction, rng, config.explosion_direction_jitter_degrees)

    if config.explosion_magnitude_jitter > 0:
        factor = 1.0 + signed_unit(rng) * config.explosion_magnitude_jitter
        falloff *= max(0.0, factor)

    exploded_position = position + direction * falloff

    exploded_rotation = rotation
    if config.explosion_rotation_scale > 0:
        limit = config.explosion_rotation_scale * falloff
        rx, ry, rz = (signed_unit(rng) * limit for _ in range(3))
        exploded_rotation = euler_matrix(rx, ry, rz) @ rotation

    return exploded_position, exploded_rotation
