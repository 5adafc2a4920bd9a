"""Independent seeded random streams.

Each stream is a ``random.Random`` consumed sequentially; the order in
which the pipeline draws from them is part of the determinism contract:

* ``noise_offset`` -- three draws once at run start (only when the noise
  offset is randomised).
* ``material`` -- one draw per surviving cell.
* ``jitter`` -- three draws per surviving cell when rotation jitter is on.
* ``explosion`` -- up to eight draws per surviving cell when the explosion
  field is on (direction vector, angle, magnitude, three rotation angles).
"""

import random
from dataclasses import dataclass

from .models import GenerationConfig


@dataclass
class SeededStreamSet:
    noise_offset: random.Random
    material: random.Random
    jitter: random.Random
    explosion: random.Random

    @classmethod
    def from_seeds(cls, noise_seed: int, material_seed: int,
                   jitter_seed: int, explosion_seed: int) -> "SeededStreamSet":
        return cls(noise_offset=random.Random(noise_seed),
                   material=random.Random(material_seed),
                   jitter=random.Random(jitter_seed),
                   explosion=random.Random(explosion_seed))

    @classmethod
    def from_config(cls, config: GenerationConfig) -> "SeededStreamSet":
        return cls.from_seeds(config.noise_seed, config.material_seed,
                              config.jitter_seed, config.explosion_seed)


def signed_unit(rng: random.Random) -> float:
    """Uniform sample in [-1, 1)."""
    return rng.random() * 2.0 - 1.0


def coin(rng: random.Random) -> bool:
    return rng.randrange(2) == 0
