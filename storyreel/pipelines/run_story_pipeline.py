"""Command-line runner - one URL in, one story video out."""

import argparse
import sys
from typing import Optional

from storyreel.core.config import settings
from storyreel.core.exceptions import StoryPipelineError
from storyreel.core.logging_config import get_logger, setup_logging
from storyreel.services.story_pipeline import StoryPipeline


def run_story_job(url: str, stories_dir: Optional[str] = None, log_level: Optional[str] = None) -> int:
    """
    Run one story job and print the output video path.

    Args:
        url: Page to summarize and narrate
        stories_dir: Override for the job output directory
        log_level: Override for LOG_LEVEL

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    run_settings = settings
    if stories_dir:
        run_settings = settings.model_copy(update={"stories_dir": stories_dir})

    setup_logging(log_level=log_level or run_settings.log_level, log_file=run_settings.log_file)
    logger = get_logger(__name__, url=url)

    logger.info("=" * 60)
    logger.info("StoryReel - Story Pipeline")
    logger.info(f"URL: {url}")
    logger.info(f"Stories directory: {run_settings.stories_dir}")
    logger.info("=" * 60)

    try:
        result = StoryPipeline(run_settings, logger).run(url)
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        return 1
    except StoryPipelineError as e:
        logger.error(f"❌ Error ({type(e).__name__}): {e.message}")
        return 1
    except Exception as e:
        logger.opt(exception=e).error("Pipeline failed: {}", e)
        return 1

    for reason in result.degradations:
        logger.warning(f"Degraded: {reason}")
    print(result.output_path)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entrypoint for a single story job."""
    parser = argparse.ArgumentParser(
        description="StoryReel - turn a web page into a narrated story video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Example:\n  python -m storyreel.pipelines.run_story_pipeline --url https://example.com/article",
    )
    parser.add_argument("--url", type=str, required=True, help="Page to summarize and narrate")
    parser.add_argument(
        "--stories-dir",
        type=str,
        default=None,
        help=f"Directory for job output (default: {settings.stories_dir})",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    return run_story_job(args.url, stories_dir=args.stories_dir, log_level=args.log_level)


if __name__ == "__main__":
    sys.exit(main())
