import asyncio

from backend import config as backend_config
from backend.jobs import JobManager, JobStatus, safe_filename

SMALL = {
    "count_x": 3, "count_y": 2, "count_z": 3,
    "noise_threshold": 0.0,
    "carve_central_hole": False,
    "enable_explosion": False,
}


def test_safe_filename():
    assert safe_filename("My Lattice #1") == "my-lattice-1"
    assert safe_filename("tower_02") == "tower_02"
    assert safe_filename("***") == "tectons"


def test_job_completes_and_writes_model(tmp_path, monkeypatch):
    monkeypatch.setattr(backend_config, "OUTPUT_DIR", tmp_path)
    manager = JobManager()
    job = manager.create_job()

    asyncio.run(manager.run_generate(job, SMALL, "Small Lattice"))

    assert job.status is JobStatus.completed, job.message
    assert job.progress == 100.0
    assert job.result["model_url"] == "/output/small-lattice.glb"
    assert job.result["cells"] == 18
    assert job.result["elements"] == 18
    assert (tmp_path / "small-lattice.glb").exists()
    assert manager.get_job(job.id) is job


def test_job_fails_on_unknown_field(tmp_path, monkeypatch):
    monkeypatch.setattr(backend_config, "OUTPUT_DIR", tmp_path)
    manager = JobManager()
    job = manager.create_job()

    asyncio.run(manager.run_generate(job, {"no_such_field": 1}, "broken"))

    assert job.status is JobStatus.failed
    assert "no_such_field" in job.message


def test_job_fails_over_cell_limit(tmp_path, monkeypatch):
    monkeypatch.setattr(backend_config, "OUTPUT_DIR", tmp_path)
    monkeypatch.setattr(backend_config, "MAX_CELLS", 10)
    manager = JobManager()
    job = manager.create_job()

    asyncio.run(manager.run_generate(job, SMALL, "too-big"))

    assert job.status is JobStatus.failed
    assert "exceeds" in job.message


def test_job_with_no_survivors_completes_without_model(tmp_path, monkeypatch):
    monkeypatch.setattr(backend_config, "OUTPUT_DIR", tmp_path)
    manager = JobManager()
    job = manager.create_job()

    asyncio.run(manager.run_generate(job, dict(SMALL, noise_threshold=1.0), "empty"))

    assert job.status is JobStatus.completed, job.message
    assert job.result["elements"] == 0
    assert job.result["model_url"] is None
    assert list(tmp_path.iterdir()) == []
