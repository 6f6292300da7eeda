"""Pipeline entrypoints for StoryReel."""

from storyreel.pipelines.run_story_pipeline import main, run_story_job

__all__ = ["main", "run_story_job"]
