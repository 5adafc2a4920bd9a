"""Small per-element rotation wobble."""

import math
import random

import numpy as np
from trimesh import transformations as tf

from .models import GenerationConfig
from .streams import coin, signed_unit


def euler_matrix(rx_deg: float, ry_deg: float, rz_deg: float) -> np.ndarray:
    """3x3 intrinsic X, then Y, then Z rotation from degrees."""
    return tf.euler_matrix(math.radians(rx_deg), math.radians(ry_deg),
                           math.radians(rz_deg), axes='rxyz')[:3, :3]


def jitter_angles(rng: random.Random, max_degrees: float):
    """Draw ``(rx, ry, rz)`` in degrees.

    Yaw is always jittered; exactly one of the X/Z tilts is drawn (a coin
    picks which) and the other stays exactly 0.
    """
    ry = signed_unit(rng) * max_degrees
    tilt_x = coin(rng)
    secondary = signed_unit(rng) * max_degrees
    if tilt_x:
        return secondary, ry, 0.0
    return 0.0, ry, secondary


def jitter_rotation(rng: random.Random, config: GenerationConfig) -> np.ndarray:
    if not config.enable_rotation_jitter or config.jitter_max_degrees <= 0:
        return np.eye(3)
    return euler_matrix(*jitter_angles(rng, config.jitter_max_degrees))
