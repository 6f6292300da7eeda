"""Shared pytest fixtures and configuration."""

import pytest

from storyreel.core.config import Settings
from storyreel.core.logging_config import get_logger


@pytest.fixture
def settings(tmp_path):
    """Create test settings instance with no provider keys and a temp stories dir."""
    return Settings(
        _env_file=None,
        stories_dir=str(tmp_path / "stories"),
        perplexity_api_key=None,
        elevenlabs_api_key=None,
        openai_api_key=None,
        ffmpeg_binary="ffmpeg",
    )


@pytest.fixture
def logger():
    """Create test logger instance."""
    return get_logger(__name__)
