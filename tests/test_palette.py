import random

import pytest

from tectongen.models import (SLOT_BOTTOM, SLOT_RARE, SLOT_TOP, CellCoordinate,
                              MaterialPalette, PaletteCycleAxis)
from tectongen.palette import (cycle_palette, cycle_shift, pick_slot,
                               resolve_slot, select_material, selection_weights)

from conftest import BOTTOM, PALETTE, RARE, TOP, RecordingRandom, small_config


def test_cycle_rotates_palette_left_by_axis_index():
    cfg = small_config(enable_palette_cycle=True, palette_cycle_size=3,
                       palette_cycle_axis=PaletteCycleAxis.X)
    assert cycle_palette(PALETTE, CellCoordinate(0, 5, 5), cfg) == PALETTE
    assert cycle_palette(PALETTE, CellCoordinate(1, 0, 0), cfg).slots() == (RARE, BOTTOM, TOP)
    assert cycle_palette(PALETTE, CellCoordinate(2, 0, 0), cfg).slots() == (BOTTOM, TOP, RARE)
    assert cycle_palette(PALETTE, CellCoordinate(3, 0, 0), cfg) == PALETTE


def test_cycle_uses_configured_axis_and_absolute_offset():
    cfg = small_config(enable_palette_cycle=True, palette_cycle_size=3,
                       palette_cycle_axis=PaletteCycleAxis.Z,
                       palette_cycle_offset=-4)
    # |0 - 4| % 3 == 1
    assert cycle_shift(CellCoordinate(7, 7, 0), cfg) == 1
    assert cycle_shift(CellCoordinate(7, 7, 4), cfg) == 0


def test_cycle_disabled_is_identity():
    cfg = small_config(enable_palette_cycle=False)
    assert cycle_palette(PALETTE, CellCoordinate(1, 1, 1), cfg) is PALETTE


def test_interior_row_weights_sum_to_one():
    for count_y in (3, 5, 20):
        for j in range(1, count_y - 1):
            w = selection_weights(j, count_y, height_bias=2.0, rare_probability=0.1)
            assert w.rare + w.top + w.bottom == pytest.approx(1.0)
            assert w.top == pytest.approx(0.9 * (j / (count_y - 1)) ** 2.0)


def test_edge_rows_force_top_and_bottom():
    bottom_row = selection_weights(0, 5, height_bias=2.0, rare_probability=0.2)
    top_row = selection_weights(4, 5, height_bias=2.0, rare_probability=0.2)
    assert bottom_row == (0.2, 0.0, pytest.approx(0.8))
    assert top_row == (0.2, pytest.approx(0.8), 0.0)


def test_single_row_counts_as_bottom_row():
    w = selection_weights(0, 1, height_bias=1.0, rare_probability=0.0)
    assert (w.top, w.bottom) == (0.0, 1.0)


def test_pick_slot_boundaries():
    w = selection_weights(2, 5, height_bias=1.0, rare_probability=0.1)
    assert pick_slot(0.0, w) == SLOT_RARE
    assert pick_slot(0.1, w) == SLOT_TOP
    assert pick_slot(0.1 + w.top, w) == SLOT_BOTTOM
    assert pick_slot(0.999, w) == SLOT_BOTTOM


def test_unset_slot_falls_back_bottom_then_top_then_rare():
    no_top = MaterialPalette(top=None, rare=RARE, bottom=BOTTOM)
    assert resolve_slot(no_top, SLOT_TOP) is BOTTOM

    no_bottom = MaterialPalette(top=TOP, rare=RARE, bottom=None)
    assert resolve_slot(no_bottom, SLOT_BOTTOM) is TOP

    rare_only = MaterialPalette(top=None, rare=RARE, bottom=None)
    assert resolve_slot(rare_only, SLOT_TOP) is RARE
    assert resolve_slot(MaterialPalette(), SLOT_RARE) is None


def test_height_bias_scenario():
    cfg = small_config(count_y=3, rare_probability=0.0, height_bias=2.0)
    rng = random.Random(2024)
    picks = {j: set() for j in range(3)}
    for _ in range(300):
        for j in range(3):
            picks[j].add(select_material(CellCoordinate(0, j, 0), cfg, rng))

    assert picks[0] == {BOTTOM}
    assert picks[2] == {TOP}
    assert picks[1] == {TOP, BOTTOM}


def test_select_material_draws_once_even_without_palette():
    cfg = small_config(palette=MaterialPalette())
    rng = RecordingRandom()
    assert select_material(CellCoordinate(0, 1, 0), cfg, rng) is None
    assert rng.draws == 1
