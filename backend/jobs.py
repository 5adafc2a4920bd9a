import asyncio
import logging
import pathlib
import re
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

# Ensure the project root is importable so we can reach the tectongen package
_project_root = str(pathlib.Path(__file__).parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"


@dataclass
class Job:
    id: str
    status: JobStatus = JobStatus.queued
    progress: float = 0.0
    message: str = "Queued"
    result: Optional[dict] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def safe_filename(name: str) -> str:
    """Derive a filename-safe stem from a free-form job name."""
    stem = re.sub(r"[^a-z0-9_-]+", "-", name.lower()).strip("-")
    return stem or "tectons"


def _sync_generate(config_data: dict, output_filename: str,
                   output_format: str = "glb",
                   progress_callback=None) -> dict:
    """Run generation + export in a worker thread.

    Every call builds its own config, noise field and streams, so
    concurrent jobs never share generator state.
    """
    from tectongen.config import config_from_dict, validate_config
    from tectongen.elements import TemplateElementFactory
    from tectongen.export import export_glb, export_stl
    from tectongen.generator import Collaborators, generate
    from tectongen.noise import SimplexNoiseField
    from backend import config as _cfg

    config = validate_config(config_from_dict(config_data))
    cells = config.count_x * config.count_y * config.count_z
    if cells > _cfg.MAX_CELLS:
        raise ValueError(f"Lattice of {cells} cells exceeds the service "
                         f"limit of {_cfg.MAX_CELLS}")

    result = generate(config, Collaborators(
        noise_field=SimplexNoiseField(),
        element_factory=TemplateElementFactory.unit_box()),
        progress_callback=progress_callback)

    output_path = _cfg.OUTPUT_DIR / output_filename
    if output_format == "stl":
        path = export_stl(result, output_path)
    else:
        path = export_glb(result, output_path)

    stats = result.stats
    return {
        "format": output_format,
        "path": path,
        "model_url": f"/output/{output_filename}" if path else None,
        "cells": stats.cells_visited,
        "elements": stats.survivors,
        "groups": [
            {"name": g.name, "parts": g.source_count, "vertices": g.vertex_count}
            for g in result.groups
        ],
    }


class JobManager:
    def __init__(self) -> None:
        self.jobs: dict[str, Job] = {}

    def create_job(self) -> Job:
        job = Job(id=str(uuid.uuid4()))
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.jobs.get(job_id)

    async def run_generate(self, job: Job, config_data: dict, name: str,
                           output_format: str = "glb") -> None:
        """Execute the generation pipeline, updating *job* with progress."""
        try:
            job.status = JobStatus.running
            job.progress = 5.0
            job.message = "Validating parameters..."

            suffix = "stl" if output_format == "stl" else "glb"
            output_filename = f"{safe_filename(name)}.{suffix}"

            def _update_progress(pct: float, msg: str) -> None:
                job.progress = pct
                job.message = msg

            result = await asyncio.to_thread(
                _sync_generate,
                config_data,
                output_filename,
                output_format=output_format,
                progress_callback=_update_progress,
            )

            job.progress = 100.0
            job.message = "Generation complete"
            job.status = JobStatus.completed
            job.result = result

        except Exception as exc:
            logger.exception("Generation failed for job %s", job.id)
            job.status = JobStatus.failed
            job.progress = 0.0
            job.message = f"Generation failed: {exc}"


# Singleton instance used across the application
job_manager = JobManager()
