import random

import numpy as np

from tectongen.lattice import LatticeLayout, iter_cells
from tectongen.models import CellCoordinate, Vector3
from tectongen.occupancy import (SKIP_HOLE, SKIP_NOISE, OccupancyFilter,
                                 resolve_noise_offset)
from tectongen.streams import SeededStreamSet

from conftest import ConstantNoise, RecordingRandom, small_config


def _filter(cfg, noise, offset=(0.0, 0.0, 0.0)):
    layout = LatticeLayout.from_config(cfg, (1.0, 1.0, 1.0))
    return layout, OccupancyFilter(cfg, layout, noise, offset)


def test_hole_excludes_cells_inside_xz_radius():
    cfg = small_config(count_x=5, count_y=3, count_z=5,
                       carve_central_hole=True, hole_radius=1.5)
    layout, occupancy = _filter(cfg, ConstantNoise(1.0))

    for cell in iter_cells(cfg):
        pos = layout.world_position(cell)
        d2 = pos[0] ** 2 + pos[2] ** 2
        assert occupancy.survives(cell, pos) == (d2 >= 1.5 ** 2)


def test_hole_ignores_y():
    cfg = small_config(count_x=1, count_y=5, count_z=1,
                       carve_central_hole=True, hole_radius=0.5)
    layout, occupancy = _filter(cfg, ConstantNoise(1.0))
    reasons = {occupancy.rejection(c, layout.world_position(c)) for c in iter_cells(cfg)}
    assert reasons == {SKIP_HOLE}


def test_zero_radius_hole_never_excludes():
    cfg = small_config(count_x=3, count_y=1, count_z=3,
                       carve_central_hole=True, hole_radius=0.0)
    layout, occupancy = _filter(cfg, ConstantNoise(1.0))
    assert all(occupancy.survives(c, layout.world_position(c)) for c in iter_cells(cfg))


def test_threshold_compares_normalized_noise():
    # noise 0.0 normalizes to 0.5
    cell = CellCoordinate(0, 0, 0)
    _, at = _filter(small_config(noise_threshold=0.5), ConstantNoise(0.0))
    _, above = _filter(small_config(noise_threshold=0.51), ConstantNoise(0.0))
    assert at.survives(cell, np.zeros(3))
    assert above.rejection(cell, np.zeros(3)) == SKIP_NOISE


def test_noise_is_sampled_at_scaled_index_plus_offsets():
    noise = ConstantNoise(1.0)
    cfg = small_config(noise_scale_x=0.5, noise_scale_y=0.25, noise_scale_z=2.0,
                       enable_sector_offsets=True, sector_size_x=2,
                       sector_size_y=1, sector_size_z=10,
                       sector_offset_size=Vector3(100.0, 10.0, 1000.0))
    _, occupancy = _filter(cfg, noise, offset=(1.0, 2.0, 3.0))
    occupancy.survives(CellCoordinate(3, 2, 1), np.array([50.0, 0.0, 50.0]))

    x, y, z = noise.calls[-1]
    assert x == 3 * 0.5 + 1.0 + 100.0
    assert y == 2 * 0.25 + 2.0 + 20.0
    assert z == 1 * 2.0 + 3.0 + 0.0


def test_fixed_noise_offset_consumes_no_draws():
    cfg = small_config(noise_offset=Vector3(4.0, 5.0, 6.0))
    rng = RecordingRandom()
    streams = SeededStreamSet(rng, random.Random(), random.Random(), random.Random())
    np.testing.assert_array_equal(resolve_noise_offset(cfg, streams), [4, 5, 6])
    assert rng.draws == 0


def test_random_noise_offset_draws_three_values_once():
    cfg = small_config(use_random_noise_offset=True, noise_seed=99)
    rng = RecordingRandom(99)
    streams = SeededStreamSet(rng, random.Random(), random.Random(), random.Random())
    offset = resolve_noise_offset(cfg, streams)
    assert rng.draws == 3
    assert np.all((offset >= 0) & (offset < 10000))

    again = resolve_noise_offset(cfg, SeededStreamSet.from_config(cfg))
    np.testing.assert_array_equal(offset, again)
