"""Time each phase of a tecton generation."""

import dataclasses
import logging
import time
import sys
import os

# Ensure the project root is on the path
sys.path.insert(0, os.path.dirname(__file__))

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

from tectongen.combine import MeshCombiner
from tectongen.config import load_config, validate_config
from tectongen.elements import TemplateElementFactory
from tectongen.export import export_glb
from tectongen.generator import Collaborators, generate
from tectongen.models import GenerationConfig
from tectongen.noise import SimplexNoiseField


def timed_generate(name: str, config: GenerationConfig):
    timings = {}

    t0 = time.perf_counter()
    config = validate_config(config)
    timings["1. Config validation"] = time.perf_counter() - t0

    # Phase 2: traversal only (combine deferred so it can be timed alone)
    t0 = time.perf_counter()
    collaborators = Collaborators(
        noise_field=SimplexNoiseField(),
        element_factory=TemplateElementFactory.unit_box())
    traversal_config = dataclasses.replace(config, combine_meshes=False)
    result = generate(traversal_config, collaborators)
    timings["2. Lattice traversal"] = time.perf_counter() - t0

    t0 = time.perf_counter()
    if config.combine_meshes:
        combiner = MeshCombiner(add_collider=config.add_collider,
                                destroy_sources=config.destroy_sources_after_combine)
        result.groups = combiner.combine(result.elements)
    timings["3. Combine"] = time.perf_counter() - t0

    t0 = time.perf_counter()
    export_glb(result, f"{name}.glb")
    timings["4. GLB export"] = time.perf_counter() - t0

    print("\n" + "=" * 60)
    print(f"GENERATION COMPLETE: {name} ({result.stats.survivors} elements)")
    print("=" * 60)
    total = 0
    for label, dur in timings.items():
        print(f"  {label}: {dur:.1f}s")
        total += dur
    print(f"  TOTAL: {total:.1f}s")
    print("=" * 60)


if __name__ == "__main__":
    if len(sys.argv) > 1:
        cfg = load_config(sys.argv[1])
    else:
        # Reduced default scene so a timing run finishes quickly
        cfg = GenerationConfig(count_x=60, count_y=10, count_z=60)
    timed_generate("timing", cfg)
