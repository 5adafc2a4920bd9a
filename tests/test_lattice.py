import numpy as np

from tectongen.lattice import LatticeLayout, iter_cells, sector_shift
from tectongen.models import CellCoordinate, Vector3

from conftest import small_config


def test_cells_iterate_i_outer_k_inner():
    cells = list(iter_cells(small_config(count_x=2, count_y=2, count_z=2)))
    assert cells == [
        (0, 0, 0), (0, 0, 1), (0, 1, 0), (0, 1, 1),
        (1, 0, 0), (1, 0, 1), (1, 1, 0), (1, 1, 1),
    ]
    assert all(isinstance(c, CellCoordinate) for c in cells)


def test_auto_center_puts_lattice_around_origin():
    cfg = small_config(count_x=3, count_y=1, count_z=3, gap_x=0.5, gap_z=0.5)
    layout = LatticeLayout.from_config(cfg, (1.0, 1.0, 1.0))

    np.testing.assert_allclose(layout.cell_size, [1.5, 1.0, 1.5])
    np.testing.assert_allclose(layout.origin, [-1.5, 0.0, -1.5])
    np.testing.assert_allclose(layout.world_position(CellCoordinate(1, 0, 1)), [0, 0, 0])
    np.testing.assert_allclose(layout.world_position(CellCoordinate(2, 0, 0)), [1.5, 0, -1.5])
    np.testing.assert_allclose(layout.clearing_center, [0, 0, 0])


def test_manual_placement_offsets_in_cells():
    cfg = small_config(count_x=3, count_y=2, count_z=1, auto_center=False,
                       base_position=Vector3(10.0, 0.0, 0.0),
                       offset_x=2, offset_y=-1, gap_x=0.1, gap_y=0.1)
    layout = LatticeLayout.from_config(cfg, (1.0, 2.0, 1.0))

    np.testing.assert_allclose(layout.cell_size, [1.1, 2.1, 1.0])
    np.testing.assert_allclose(layout.origin, [10.0 + 2.2, -2.1, 0.0])
    # clearing sits at the middle of the lattice, not the world origin
    np.testing.assert_allclose(layout.clearing_center,
                               layout.origin + [1.1, 1.05, 0.0])


def test_sector_shift_is_per_block():
    cfg = small_config(enable_sector_offsets=True, sector_size_x=2,
                       sector_size_y=5, sector_size_z=2,
                       sector_offset_size=Vector3(50.0, 20.0, 50.0))
    np.testing.assert_allclose(sector_shift(CellCoordinate(3, 0, 5), cfg), [50, 0, 100])
    np.testing.assert_allclose(sector_shift(CellCoordinate(0, 4, 1), cfg), [0, 0, 0])
    np.testing.assert_allclose(sector_shift(CellCoordinate(1, 5, 0), cfg), [0, 20, 0])


def test_sector_shift_disabled_is_zero():
    cfg = small_config(enable_sector_offsets=False)
    np.testing.assert_array_equal(sector_shift(CellCoordinate(9, 9, 9), cfg), [0, 0, 0])
