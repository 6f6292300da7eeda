"""Story pipeline orchestrator - URL → summary → segments → assets → timeline → render plan → video."""

from pathlib import Path
from typing import Any, Optional

from storyreel.core.config import Settings
from storyreel.core.exceptions import (
    IncompleteTimeline,
    InvalidInput,
    RenderError,
    StoryPipelineError,
    UpstreamError,
)
from storyreel.models.schemas import (
    JobRecord,
    JobResult,
    JobState,
    Segment,
    SegmentAssets,
    SubtitleCue,
)
from storyreel.services.asset_fallback import AssetFallbackPolicy, ImageStage, VoiceStage
from storyreel.services.duration_estimator import DurationEstimator
from storyreel.services.image_client import PollinationsImageClient
from storyreel.services.render_executor import COMBINED_SUBTITLES_NAME, FFmpegRenderExecutor
from storyreel.services.render_plan_builder import RenderPlanBuilder
from storyreel.services.subtitle_builder import SubtitleTrackBuilder
from storyreel.services.summarizer import PerplexitySummarizer
from storyreel.services.timeline_composer import TimelineComposer
from storyreel.services.tts_client import TTSClient
from storyreel.storage.repository import JobRepository
from storyreel.utils.io_utils import create_job_dir, new_job_id, write_text
from storyreel.utils.parallel_executor import ParallelExecutor
from storyreel.utils.text_utils import split_into_segments

FINAL_VIDEO_NAME = "final-video.mp4"

# Fatal error type used when an unexpected exception escapes a stage.
STAGE_ERRORS = {
    JobState.SUMMARIZING: UpstreamError,
    JobState.PARTITIONING_TEXT: InvalidInput,
    JobState.GENERATING_ASSETS: IncompleteTimeline,
    JobState.COMPOSING_TIMELINE: IncompleteTimeline,
    JobState.BUILDING_RENDER_PLAN: IncompleteTimeline,
    JobState.RENDERING: RenderError,
}


class StoryPipeline:
    """
    Runs one story job end to end.

    Collaborators (summarizer, image and voice providers, render executor)
    can be injected; anything not given is built from ``settings``. Each
    run owns a fresh job directory and never touches another job's files.
    """

    def __init__(
        self,
        settings: Settings,
        logger: Any,
        summarizer: Optional[PerplexitySummarizer] = None,
        image_client: Optional[PollinationsImageClient] = None,
        tts_client: Optional[TTSClient] = None,
        render_executor: Optional[FFmpegRenderExecutor] = None,
        repository: Optional[JobRepository] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Application settings
            logger: Logger instance
            summarizer: Summarization collaborator
            image_client: Image provider
            tts_client: Voice provider
            render_executor: Render executor
            repository: Job manifest repository
        """
        self.settings = settings
        self.logger = logger

        self.summarizer = summarizer or PerplexitySummarizer(settings, logger)
        self.render_executor = render_executor or FFmpegRenderExecutor(settings, logger)
        self.repository = repository or JobRepository(settings, logger)

        self.duration_estimator = DurationEstimator(settings, logger)
        self.subtitle_builder = SubtitleTrackBuilder(settings, logger)
        self.timeline_composer = TimelineComposer(settings, logger, self.subtitle_builder)
        self.render_plan_builder = RenderPlanBuilder(settings, logger, self.timeline_composer)
        self.fallback_policy = AssetFallbackPolicy(settings, logger)
        self.parallel_executor = ParallelExecutor(settings, logger)
        self.image_stage = ImageStage(image_client or PollinationsImageClient(settings, logger))
        self.voice_stage = VoiceStage(tts_client or TTSClient(settings, logger))

    def run(self, url: str) -> JobResult:
        """
        Produce a narrated video for ``url``.

        Args:
            url: Source page URL

        Returns:
            JobResult for the completed job

        Raises:
            InvalidInput: Empty URL or empty summary
            UpstreamError: Summarization failed
            IncompleteTimeline: Segments and assets disagree
            RenderError: Final assembly failed
        """
        if not url or not url.strip():
            raise InvalidInput("A source URL is required")
        url = url.strip()

        job_id = new_job_id()
        job_dir = create_job_dir(self.settings.stories_dir, job_id)
        log = self.logger.bind(job_id=job_id)
        record = JobRecord(job_id=job_id, source_url=url)

        log.info("=" * 60)
        log.info(f"Starting story job {job_id} for {url}")
        log.info("=" * 60)
        self.repository.save_job(record)

        try:
            self._transition(record, JobState.SUMMARIZING, log)
            summary = self.summarizer.summarize(url)
            record.summary = summary

            self._transition(record, JobState.PARTITIONING_TEXT, log)
            segments = self._partition(summary, job_dir, record)
            record.segments = segments

            self._transition(record, JobState.GENERATING_ASSETS, log)
            segment_assets = self._generate_assets(segments, job_dir, record, log)

            self._transition(record, JobState.COMPOSING_TIMELINE, log)
            timeline = self.timeline_composer.compose(segments)
            record.timeline = timeline

            self._transition(record, JobState.BUILDING_RENDER_PLAN, log)
            plan = self.render_plan_builder.build(timeline, segment_assets, job_dir / FINAL_VIDEO_NAME)
            record.render_plan = plan

            self._transition(record, JobState.RENDERING, log)
            output_path = self.render_executor.render(plan)
            record.output_path = output_path
            record.files.subtitles.append(COMBINED_SUBTITLES_NAME)
            record.files.video = output_path.name

            self._transition(record, JobState.COMPLETE, log)
        except Exception as e:
            failed_in = record.state
            error = e
            if not isinstance(e, StoryPipelineError):
                error_type = STAGE_ERRORS.get(failed_in, StoryPipelineError)
                error = error_type(f"{failed_in.value} failed: {type(e).__name__}: {e}")
            record.state = JobState.FAILED
            record.error = error.message
            self.repository.save_job(record)
            log.error(f"Job failed during {failed_in.value}: {error.message}")
            if error is e:
                raise
            raise error from e

        if record.degraded:
            log.warning(f"Job completed with {len(record.degradations)} placeholder asset(s)")
        log.info(f"✅ Story video ready: {record.output_path}")

        return JobResult(
            job_id=job_id,
            summary=summary,
            output_path=record.output_path,
            files=record.files,
            degradations=list(record.degradations),
        )

    def _transition(self, record: JobRecord, state: JobState, log: Any) -> None:
        """Move the job to ``state`` and persist the manifest."""
        if record.state.is_terminal:
            raise IncompleteTimeline(f"Job {record.job_id} is already {record.state.value}")
        log.info(f"[{record.job_id}] {record.state.value} → {state.value}")
        record.state = state
        self.repository.save_job(record)

    def _partition(self, summary: str, job_dir: Path, record: JobRecord) -> list[Segment]:
        """Split the summary, estimate durations, and export the segment text files."""
        if not summary or not summary.strip():
            raise InvalidInput("Summary is empty; nothing to build a story from")

        segments = []
        for index, text in enumerate(split_into_segments(summary, self.settings.segment_count), 1):
            segment = Segment(
                index=index,
                text=text,
                estimated_duration_seconds=self.duration_estimator.estimate(text),
            )
            path = write_text(job_dir / f"story-{index}.txt", text)
            record.files.text.append(path.name)
            segments.append(segment)

        self.logger.info(
            f"Partitioned summary into {len(segments)} segments: "
            f"{[segment.estimated_duration_seconds for segment in segments]}s"
        )
        return segments

    def _build_cues(self, segment: Segment, job_dir: Path) -> tuple[SubtitleCue, ...]:
        cues = self.subtitle_builder.build_cues(segment.text, 1, segment.estimated_duration_seconds)
        write_text(job_dir / f"subtitle-{segment.index}.srt", self.subtitle_builder.to_srt(cues))
        return cues

    def _generate_assets(
        self,
        segments: list[Segment],
        job_dir: Path,
        record: JobRecord,
        log: Any,
    ) -> list[SegmentAssets]:
        """
        Fan out image and voice generation for every segment, then wait for all of them.

        Each call goes through the fallback policy, so a provider failure
        yields a placeholder rather than an error. Results are joined back
        by segment index, not completion order.
        """
        tasks = []
        task_names = []
        for segment in segments:
            for stage in (self.image_stage, self.voice_stage):
                tasks.append(
                    lambda stage=stage, segment=segment: self.fallback_policy.execute(stage, segment, job_dir)
                )
                task_names.append(f"{stage.kind.value}_{segment.index}")

        results = self.parallel_executor.execute_api_calls(tasks, task_names=task_names, job_id=record.job_id)

        segment_assets = []
        for position, segment in enumerate(segments):
            (image, image_error), (voiceover, voice_error) = results[2 * position : 2 * position + 2]
            if image_error is not None or voice_error is not None:
                cause = image_error or voice_error
                raise IncompleteTimeline(
                    f"Asset generation for segment {segment.index} did not finish: {type(cause).__name__}: {cause}"
                )

            cues = self._build_cues(segment, job_dir)
            record.files.subtitles.append(f"subtitle-{segment.index}.srt")
            record.files.images.append(image.file_name)
            record.files.audio.append(voiceover.file_name)
            for asset in (image, voiceover):
                record.assets.append(asset)
                if asset.is_placeholder:
                    record.degradations.append(asset.reason)

            segment_assets.append(SegmentAssets(segment=segment, image=image, voiceover=voiceover, cues=cues))

        log.info(
            f"Assets ready for {len(segment_assets)} segments "
            f"({len(record.degradations)} placeholder(s))"
        )
        return segment_assets
