"""Parameter clamping and JSON (de)serialisation of GenerationConfig."""

import dataclasses
import json
import logging
import math
import pathlib
from typing import Any, Dict, Optional, Union

from .constants import (DIRECTION_JITTER_MAX_DEGREES, HEIGHT_BIAS_MIN,
                        JITTER_MAX_DEGREES, NOISE_SCALE_MIN)
from .errors import ConfigLoadError
from .models import (GenerationConfig, Material, MaterialPalette,
                     PaletteCycleAxis, Vector3)

logger = logging.getLogger(__name__)

_VECTOR_FIELDS = ('noise_offset', 'sector_offset_size', 'base_position',
                  'explosion_center')


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def _clamp01(value):
    return _clamp(float(value), 0.0, 1.0)


def _vec(value) -> Vector3:
    x, y, z = value
    return Vector3(float(x), float(y), float(z))


def _int_at_least(value, floor: int) -> int:
    """Truncate to int and raise to *floor*; non-finite values become *floor*."""
    value = float(value)
    if not math.isfinite(value):
        return floor
    return max(floor, int(value))


def _finite_int(value) -> int:
    value = float(value)
    return int(value) if math.isfinite(value) else 0


def _axis(value) -> PaletteCycleAxis:
    if isinstance(value, PaletteCycleAxis):
        return value
    return PaletteCycleAxis(str(value).strip().upper())


def _validated_axis(value) -> PaletteCycleAxis:
    try:
        return _axis(value)
    except ValueError:
        logger.debug(f"Unknown palette_cycle_axis {value!r}, using X")
        return PaletteCycleAxis.X


def validate_config(config: GenerationConfig) -> GenerationConfig:
    """Return a copy of *config* with every bounded field forced into range.

    Never raises for out-of-range or non-finite numbers; they are corrected,
    not rejected.  An unknown cycle axis falls back to X.
    """
    c = config
    corrected = {
        'count_x': _int_at_least(c.count_x, 1),
        'count_y': _int_at_least(c.count_y, 1),
        'count_z': _int_at_least(c.count_z, 1),
        'noise_scale_x': max(NOISE_SCALE_MIN, float(c.noise_scale_x)),
        'noise_scale_y': max(NOISE_SCALE_MIN, float(c.noise_scale_y)),
        'noise_scale_z': max(NOISE_SCALE_MIN, float(c.noise_scale_z)),
        'noise_threshold': _clamp01(c.noise_threshold),
        'sector_size_x': _int_at_least(c.sector_size_x, 1),
        'sector_size_y': _int_at_least(c.sector_size_y, 1),
        'sector_size_z': _int_at_least(c.sector_size_z, 1),
        'gap_x': max(0.0, float(c.gap_x)),
        'gap_y': max(0.0, float(c.gap_y)),
        'gap_z': max(0.0, float(c.gap_z)),
        'offset_x': _finite_int(c.offset_x),
        'offset_y': _finite_int(c.offset_y),
        'offset_z': _finite_int(c.offset_z),
        'hole_radius': max(0.0, float(c.hole_radius)),
        'rare_probability': _clamp01(c.rare_probability),
        'height_bias': max(HEIGHT_BIAS_MIN, float(c.height_bias)),
        'palette_cycle_axis': _validated_axis(c.palette_cycle_axis),
        'palette_cycle_size': _int_at_least(c.palette_cycle_size, 1),
        'palette_cycle_offset': _finite_int(c.palette_cycle_offset),
        'jitter_max_degrees': _clamp(float(c.jitter_max_degrees),
                                     0.0, JITTER_MAX_DEGREES),
        'explosion_strength': max(0.0, float(c.explosion_strength)),
        'explosion_falloff_power': max(1.0, float(c.explosion_falloff_power)),
        'explosion_rotation_scale': max(0.0,
                                        float(c.explosion_rotation_scale)),
        'explosion_direction_jitter_degrees': _clamp(
            float(c.explosion_direction_jitter_degrees),
            0.0, DIRECTION_JITTER_MAX_DEGREES),
        'explosion_magnitude_jitter': _clamp01(c.explosion_magnitude_jitter),
    }
    for name in _VECTOR_FIELDS:
        corrected[name] = _vec(getattr(c, name))

    for name, value in corrected.items():
        old = getattr(c, name)
        if old != value:
            logger.debug(f"Clamped {name}: {old!r} -> {value!r}")

    return dataclasses.replace(c, **corrected)


# ── JSON mapping ────────────────────────────────────────────────────────

def _material_from_json(data) -> Optional[Material]:
    if data is None:
        return None
    if isinstance(data, str):
        return Material(name=data)
    color = tuple(float(v) for v in data.get('color', (0.8, 0.8, 0.8, 1.0)))
    if len(color) == 3:
        color = color + (1.0,)
    return Material(name=str(data['name']), color=color)


def _material_to_json(material: Optional[Material]):
    if material is None:
        return None
    return {'name': material.name, 'color': list(material.color)}


def _palette_from_json(data) -> MaterialPalette:
    if isinstance(data, (list, tuple)):
        if len(data) != 3:
            raise ConfigLoadError(
                f"palette must have exactly 3 slots, got {len(data)}")
        return MaterialPalette.from_slots(
            [_material_from_json(m) for m in data])
    unknown = set(data) - {'top', 'rare', 'bottom'}
    if unknown:
        raise ConfigLoadError(f"Unknown palette slot(s): {sorted(unknown)}")
    return MaterialPalette(top=_material_from_json(data.get('top')),
                           rare=_material_from_json(data.get('rare')),
                           bottom=_material_from_json(data.get('bottom')))


def config_from_dict(data: Dict[str, Any],
                     base: Optional[GenerationConfig] = None) -> GenerationConfig:
    """Build a config from a JSON-style mapping layered over *base*."""
    known = {f.name for f in dataclasses.fields(GenerationConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigLoadError(f"Unknown config field(s): {sorted(unknown)}")

    values = dict(data)
    try:
        for name in _VECTOR_FIELDS:
            if name in values:
                values[name] = _vec(values[name])
        if 'palette' in values:
            values['palette'] = _palette_from_json(values['palette'])
        if 'palette_cycle_axis' in values:
            values['palette_cycle_axis'] = _axis(values['palette_cycle_axis'])
    except ConfigLoadError:
        raise
    except (TypeError, ValueError, KeyError) as e:
        raise ConfigLoadError(f"Invalid config value: {e}") from e

    return dataclasses.replace(base or GenerationConfig(), **values)


def config_to_dict(config: GenerationConfig) -> Dict[str, Any]:
    data = {}
    for f in dataclasses.fields(config):
        value = getattr(config, f.name)
        if f.name == 'palette':
            value = {role: _material_to_json(m) for role, m in
                     zip(('top', 'rare', 'bottom'), value.slots())}
        elif f.name in _VECTOR_FIELDS:
            value = list(value)
        elif isinstance(value, PaletteCycleAxis):
            value = value.value
        data[f.name] = value
    return data


def load_config(path: Union[str, pathlib.Path]) -> GenerationConfig:
    """Read a JSON config file; missing fields keep their defaults."""
    path = pathlib.Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigLoadError(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config {path} must be a JSON object")
    logger.info(f"Loaded config from {path} ({len(data)} fields set)")
    return config_from_dict(data)


def dump_config(config: GenerationConfig,
                path: Union[str, pathlib.Path]) -> pathlib.Path:
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(config_to_dict(config), f, indent=2)
    return path
