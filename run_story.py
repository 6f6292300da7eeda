#!/usr/bin/env python3
"""Main CLI entrypoint for generating a story video from a URL."""

import sys

import click

from storyreel.pipelines import run_story_job


@click.command()
@click.option(
    "--url",
    required=True,
    type=str,
    help="Page to turn into a story (e.g., 'https://example.com/article')",
)
@click.option(
    "--stories-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory for job output (default: STORIES_DIR or 'stories')",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override LOG_LEVEL",
)
def main(url: str, stories_dir: str, log_level: str) -> None:
    """
    Generate a narrated story video.

    This script produces, in a new folder under the stories directory:
    - story-1..3.txt segment text
    - b-roll-1..3.png images (1x1 placeholder if generation fails)
    - voiceover-1..3.mp3 narration (.txt placeholder if TTS fails)
    - subtitle-1..3.srt and combined-subtitles.srt
    - final-video.mp4 with burned-in subtitles
    """
    sys.exit(run_story_job(url, stories_dir=stories_dir, log_level=log_level.upper() if log_level else None))


if __name__ == "__main__":
    main()
