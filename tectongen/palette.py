"""Palette cycling and height-biased material selection."""

import random
from typing import NamedTuple, Optional

from .models import (SLOT_BOTTOM, SLOT_RARE, SLOT_TOP, CellCoordinate,
                     GenerationConfig, Material, MaterialPalette,
                     PaletteCycleAxis)


class SelectionWeights(NamedTuple):
    rare: float
    top: float
    bottom: float


def cycle_shift(cell: CellCoordinate, config: GenerationConfig) -> int:
    """Number of slots to rotate the palette left by; 0 when disabled."""
    if not config.enable_palette_cycle or config.palette_cycle_size <= 0:
        return 0
    axis_index = {
        PaletteCycleAxis.X: cell.i,
        PaletteCycleAxis.Y: cell.j,
        PaletteCycleAxis.Z: cell.k,
    }[PaletteCycleAxis(config.palette_cycle_axis)]
    return abs(axis_index + config.palette_cycle_offset) % config.palette_cycle_size


def cycle_palette(palette: MaterialPalette, cell: CellCoordinate,
                  config: GenerationConfig) -> MaterialPalette:
    """Rotate the palette: ``slot'[s] = base[(s + shift) % 3]``."""
    shift = cycle_shift(cell, config)
    if shift == 0:
        return palette
    base = palette.slots()
    return MaterialPalette.from_slots(
        [base[(s + shift) % 3] for s in range(3)])


def selection_weights(j: int, count_y: int, height_bias: float,
                      rare_probability: float) -> SelectionWeights:
    """Rare/top/bottom probabilities for row *j*.

    The bottom row always prefers the bottom-biased slot and the top row
    the top-biased slot; rows in between blend by ``(j / (countY-1))**bias``.
    """
    j_norm = 1.0 if count_y <= 1 else j / (count_y - 1)
    curved = j_norm ** height_bias

    p_rare = max(0.0, min(1.0, rare_probability))
    remain = 1.0 - p_rare
    p_top = remain * curved
    p_bottom = remain * (1.0 - curved)
    if j == 0:
        p_top, p_bottom = 0.0, remain
    elif j == count_y - 1:
        p_top, p_bottom = remain, 0.0
    return SelectionWeights(p_rare, p_top, p_bottom)


def pick_slot(r: float, weights: SelectionWeights) -> int:
    if r < weights.rare:
        return SLOT_RARE
    if r < weights.rare + weights.top:
        return SLOT_TOP
    return SLOT_BOTTOM


# Tried in this order when the chosen slot is unset.
FALLBACK_ORDER = (SLOT_BOTTOM, SLOT_TOP, SLOT_RARE)


def resolve_slot(palette: MaterialPalette, slot: int) -> Optional[Material]:
    slots = palette.slots()
    if slots[slot] is not None:
        return slots[slot]
    for fallback in FALLBACK_ORDER:
        if slots[fallback] is not None:
            return slots[fallback]
    return None


def select_material(cell: CellCoordinate, config: GenerationConfig,
                    rng: random.Random) -> Optional[Material]:
    """Pick a material for a surviving cell.

    Always consumes exactly one draw from the material stream, even when
    the palette is empty.
    """
    palette = cycle_palette(config.palette, cell, config)
    weights = selection_weights(cell.j, config.count_y, config.height_bias,
                                config.rare_probability)
    r = rng.random()
    return resolve_slot(palette, pick_slot(r, weights))
