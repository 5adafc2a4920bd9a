import asyncio
import logging

from fastapi import APIRouter, HTTPException

from backend.jobs import job_manager
from backend.models import GenerateRequest, JobResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/generate", tags=["generate"])

# Strong references to running tasks so they are not garbage-collected
_background_tasks = set()


def _job_response(job) -> JobResponse:
    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )


@router.post("", response_model=JobResponse)
async def start_generate(request: GenerateRequest):
    """Start a lattice generation from a JSON config.

    The heavy lifting runs in a background task; the caller receives a job
    ID immediately and can poll ``/status/{job_id}`` for progress.
    """
    if request.output_format not in ("glb", "stl"):
        raise HTTPException(status_code=422,
                            detail=f"Unsupported output format: {request.output_format}")

    job = job_manager.create_job()
    task = asyncio.create_task(job_manager.run_generate(
        job, request.config, request.name,
        output_format=request.output_format))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    return _job_response(job)


@router.get("/status/{job_id}", response_model=JobResponse)
async def get_generate_status(job_id: str):
    """Poll the status of a running or completed generation job."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_response(job)
