"""Configuration constants, paths, and environment overrides."""

import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = pathlib.Path(
    os.environ.get("TECTONGEN_OUTPUT_DIR", str(BASE_DIR / "output")))

LOG_LEVEL = os.environ.get("TECTONGEN_LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# ── Numeric floors and tolerances ────────────────────────────────────────
NOISE_SCALE_MIN = 1e-4
HEIGHT_BIAS_MIN = 0.5
JITTER_MAX_DEGREES = 2.0
DIRECTION_JITTER_MAX_DEGREES = 45.0
EXPLOSION_DIST_EPS = 1e-4
NEAR_ZERO_SQ = 1e-8           # squared-length cutoff for degenerate vectors
RANDOM_NOISE_OFFSET_RANGE = 10000.0

# Seed of the default coherent-noise field (the field itself is not part
# of a generation config; only its sampling offset is).
NOISE_FIELD_SEED = 0

# ── Geometry ────────────────────────────────────────────────────────────
DEFAULT_ELEMENT_SIZE = (1.0, 1.0, 1.0)
ELEMENT_NAME_FORMAT = "Tecton_{i}_{j}_{k}"
COMBINED_PREFIX = "Combined_"
UNKNOWN_MATERIAL_NAME = "UnknownMat"

# ── Palette defaults (RGBA 0-1, PBR base colour) ────────────────────────
DEFAULT_PALETTE_COLORS = {
    'top': ('sandstone', (0.86, 0.78, 0.62, 1.0)),
    'rare': ('copper', (0.72, 0.45, 0.20, 1.0)),
    'bottom': ('basalt', (0.25, 0.25, 0.28, 1.0)),
}
STANDALONE_COLOR = (0.8, 0.8, 0.8, 1.0)

# Emit a progress update every this many outer-axis slices
PROGRESS_EVERY = 10
