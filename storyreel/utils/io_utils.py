"""I/O utility functions for job directories and artifact files."""

# This module is part of storyreel.utils package

import re
import uuid
from pathlib import Path

_JOB_ID_RE = re.compile(r"^[a-z0-9]{6,32}$")


def new_job_id() -> str:
    """Generate a unique, filesystem-safe job identifier."""
    return uuid.uuid4().hex[:12]


def is_valid_job_id(job_id: str) -> bool:
    """Check that a job id can be safely used as a directory name."""
    return bool(_JOB_ID_RE.match(job_id))


def create_job_dir(base_dir: str, job_id: str) -> Path:
    """
    Create the output directory for one job.

    Args:
        base_dir: Base directory for all jobs (e.g., "stories").
        job_id: Job identifier, used as the directory name.

    Returns:
        Path to the created directory.
    """
    if not is_valid_job_id(job_id):
        raise ValueError(f"Invalid job id: {job_id!r}")
    job_dir = Path(base_dir) / job_id
    job_dir.mkdir(parents=True, exist_ok=False)
    return job_dir


def write_text(path: Path, content: str) -> Path:
    """Write a UTF-8 text artifact and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_bytes(path: Path, payload: bytes) -> Path:
    """Write a binary artifact and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path
