import logging
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config
from backend.models import ModelInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])

# Export formats a generation job can write, by file suffix
MEDIA_TYPES = {
    ".glb": "model/gltf-binary",
    ".stl": "model/stl",
}


def _model_info(path) -> ModelInfo:
    return ModelInfo(
        name=path.stem,
        filename=path.name,
        format=path.suffix.lstrip(".").lower(),
        size_mb=round(path.stat().st_size / 1024 / 1024, 2),
        model_url=f"/output/{path.name}",
    )


@router.get("", response_model=List[ModelInfo])
async def list_models():
    """List generated lattices (GLB and STL), newest first."""
    output_dir = config.OUTPUT_DIR
    if not output_dir.exists():
        return []
    files = [p for p in output_dir.iterdir()
             if p.is_file() and p.suffix.lower() in MEDIA_TYPES]
    files.sort(key=lambda p: (-p.stat().st_mtime, p.name))
    return [_model_info(p) for p in files]


@router.get("/{filename}")
async def get_model(filename: str):
    """Serve one generated lattice with the media type of its format."""
    file_path = config.OUTPUT_DIR / filename
    media_type = MEDIA_TYPES.get(file_path.suffix.lower())
    if (media_type is None
            or file_path.resolve().parent != config.OUTPUT_DIR.resolve()
            or not file_path.is_file()):
        logger.debug(f"Rejected model request for {filename!r}")
        raise HTTPException(status_code=404, detail="Model file not found")

    return FileResponse(path=str(file_path), media_type=media_type,
                        filename=filename)
