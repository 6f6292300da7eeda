"""Storage repository for job manifests."""

from pathlib import Path
from typing import Any, Optional

from storyreel.core.config import Settings
from storyreel.models.schemas import JobRecord
from storyreel.utils.io_utils import is_valid_job_id, write_text

MANIFEST_NAME = "job.json"


class JobRepository:
    """Stores one job.json manifest inside each job directory."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the repository.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.stories_dir = Path(settings.stories_dir)
        self.stories_dir.mkdir(parents=True, exist_ok=True)

    def job_dir(self, job_id: str) -> Path:
        return self.stories_dir / job_id

    def save_job(self, record: JobRecord) -> Path:
        """
        Save a job manifest, replacing any earlier version.

        Args:
            record: Job record to save

        Returns:
            Path to the manifest
        """
        file_path = self.job_dir(record.job_id) / MANIFEST_NAME
        tmp_path = file_path.with_suffix(".json.tmp")
        write_text(tmp_path, record.model_dump_json(indent=2))
        tmp_path.replace(file_path)
        self.logger.debug(f"Job manifest saved: {file_path} (state={record.state.value})")
        return file_path

    def load_job(self, job_id: str) -> Optional[JobRecord]:
        """
        Load a job manifest.

        Args:
            job_id: Job identifier

        Returns:
            Job record if found, None otherwise
        """
        if not is_valid_job_id(job_id):
            self.logger.warning(f"Rejected malformed job id: {job_id!r}")
            return None

        file_path = self.job_dir(job_id) / MANIFEST_NAME
        if not file_path.exists():
            self.logger.warning(f"Job not found: {job_id}")
            return None

        with open(file_path, "r", encoding="utf-8") as f:
            record = JobRecord.model_validate_json(f.read())
        self.logger.info(f"Job loaded: {job_id} (state={record.state.value})")
        return record

    def list_jobs(self) -> list[str]:
        """
        List all job IDs that have a manifest.

        Returns:
            Sorted list of job IDs
        """
        job_ids = sorted(path.parent.name for path in self.stories_dir.glob(f"*/{MANIFEST_NAME}"))
        self.logger.info(f"Found {len(job_ids)} jobs")
        return job_ids
