"""Tests for storage repository."""

import pytest

from storyreel.models.schemas import JobRecord, JobState, Segment
from storyreel.storage.repository import JobRepository


@pytest.fixture
def repository(settings, logger):
    """Create repository with temp storage."""
    return JobRepository(settings, logger)


@pytest.fixture
def sample_record():
    """Create sample job record for testing."""
    return JobRecord(
        job_id="abc123def456",
        source_url="https://example.com/article",
        state=JobState.GENERATING_ASSETS,
        summary="One two three.",
        segments=[Segment(index=1, text="One two three.", estimated_duration_seconds=2)],
        degradations=["voiceover for segment 1 degraded to placeholder (RuntimeError: boom)"],
    )


def test_save_job(repository, sample_record, settings):
    """Test saving a job writes job.json in the job directory."""
    path = repository.save_job(sample_record)

    assert path == repository.stories_dir / "abc123def456" / "job.json"
    assert path.exists()
    assert not path.with_suffix(".json.tmp").exists()


def test_load_job(repository, sample_record):
    """Test loading a job returns the same data."""
    repository.save_job(sample_record)

    loaded = repository.load_job(sample_record.job_id)

    assert loaded is not None
    assert loaded.state == JobState.GENERATING_ASSETS
    assert loaded.segments == sample_record.segments
    assert loaded.degraded


def test_save_job_overwrites(repository, sample_record):
    repository.save_job(sample_record)
    sample_record.state = JobState.COMPLETE
    repository.save_job(sample_record)

    assert repository.load_job(sample_record.job_id).state == JobState.COMPLETE


def test_load_nonexistent_job(repository):
    """Test loading non-existent job returns None."""
    assert repository.load_job("000000000000") is None


def test_load_malformed_job_id(repository):
    assert repository.load_job("../../etc") is None


def test_list_jobs(repository, sample_record):
    """Test listing jobs returns all job IDs."""
    repository.save_job(sample_record)

    assert repository.list_jobs() == ["abc123def456"]
