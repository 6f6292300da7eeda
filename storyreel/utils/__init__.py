"""Utility functions for StoryReel."""

from storyreel.utils.io_utils import create_job_dir, new_job_id
from storyreel.utils.text_utils import clean_summary_text, count_words, split_into_segments, truncate_for_preview

__all__ = [
    "create_job_dir",
    "new_job_id",
    "clean_summary_text",
    "count_words",
    "split_into_segments",
    "truncate_for_preview",
]
