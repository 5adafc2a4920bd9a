from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    name: str = "tectons"
    output_format: str = "glb"  # "glb" or "stl"
    # GenerationConfig fields in their JSON form; missing ones keep defaults
    config: Dict[str, Any] = Field(default_factory=dict)


class JobResponse(BaseModel):
    job_id: str
    status: str
    progress: float
    message: str
    result: Optional[dict] = None


class ModelInfo(BaseModel):
    name: str
    filename: str
    format: str  # "glb" or "stl"
    size_mb: Optional[float] = None
    model_url: Optional[str] = None
