import os

from tectongen.constants import OUTPUT_DIR as _TECTONGEN_OUTPUT_DIR

OUTPUT_DIR = _TECTONGEN_OUTPUT_DIR

# Upper bound on lattice cells a single service request may ask for
MAX_CELLS = int(os.environ.get("TECTONGEN_MAX_CELLS", "2000000"))

CORS_ORIGINS = [
    o.strip() for o in os.environ.get(
        "TECTONGEN_CORS_ORIGINS",
        "http://localhost:5174,http://127.0.0.1:5174").split(",")
    if o.strip()
]
