"""Render Plan Builder - turns a composed timeline and its assets into the plan the render executor consumes."""

from pathlib import Path
from typing import Any, Optional, Sequence

from storyreel.core.config import Settings
from storyreel.core.exceptions import IncompleteTimeline
from storyreel.models.schemas import (
    AssetKind,
    AudioInput,
    GeneratedAsset,
    RenderPlan,
    SegmentAssets,
    Timeline,
    TimelineEntry,
    VisualInput,
)
from storyreel.services.timeline_composer import TimelineComposer

AUDIO_SUFFIXES = {".mp3", ".wav", ".m4a", ".aac", ".ogg", ".flac"}


class RenderPlanBuilder:
    """Builds the immutable RenderPlan consumed once by the render executor."""

    def __init__(self, settings: Settings, logger: Any, timeline_composer: Optional[TimelineComposer] = None):
        """
        Initialize the render plan builder.

        Args:
            settings: Application settings
            logger: Logger instance
            timeline_composer: Composer used to merge subtitle cues (created if not given)
        """
        self.settings = settings
        self.logger = logger
        self.timeline_composer = timeline_composer or TimelineComposer(settings, logger)

    def build(self, timeline: Timeline, segment_assets: Sequence[SegmentAssets], output_path: Path) -> RenderPlan:
        """
        Build the render plan in timeline order.

        Each segment contributes one image shown for its estimated
        duration, one audio slot of the same length (silence when the
        voiceover is a placeholder) and its cues shifted to the segment's
        start offset.

        Args:
            timeline: Composed timeline
            segment_assets: One entry per timeline segment, in any order
            output_path: Final video path

        Returns:
            RenderPlan

        Raises:
            IncompleteTimeline: If assets and timeline entries do not line up one to one
        """
        if len(segment_assets) != len(timeline):
            raise IncompleteTimeline(
                f"Timeline has {len(timeline)} entries but {len(segment_assets)} asset sets were supplied"
            )

        by_index = {assets.segment.index: assets for assets in segment_assets}
        if len(by_index) != len(segment_assets):
            raise IncompleteTimeline("Duplicate segment indices among asset sets")

        visual_inputs = []
        audio_inputs = []
        cues_by_segment = {}
        for entry in timeline.entries:
            assets = by_index.get(entry.segment.index)
            if assets is None:
                raise IncompleteTimeline(f"No assets for timeline segment {entry.segment.index}")
            self._check_asset(assets.image, AssetKind.IMAGE, entry)
            self._check_asset(assets.voiceover, AssetKind.VOICEOVER, entry)

            visual_inputs.append(VisualInput(image_path=assets.image.path, duration_ms=entry.duration_ms))
            audio_inputs.append(self._audio_input(assets.voiceover, entry))
            cues_by_segment[entry.segment.index] = assets.cues

        plan = RenderPlan(
            visual_inputs=tuple(visual_inputs),
            audio_inputs=tuple(audio_inputs),
            subtitle_track=self.timeline_composer.merge_subtitles(timeline, cues_by_segment),
            output_path=output_path,
        )
        silent = sum(1 for audio in plan.audio_inputs if audio.is_silence)
        self.logger.info(
            f"Render plan: {len(plan.visual_inputs)} visuals, {len(plan.audio_inputs)} audio slots "
            f"({silent} silent), {len(plan.subtitle_track)} cues, {plan.total_duration_ms / 1000:.3f}s"
        )
        return plan

    def _check_asset(self, asset: GeneratedAsset, kind: AssetKind, entry: TimelineEntry) -> None:
        if asset.kind != kind or asset.segment_index != entry.segment.index:
            raise IncompleteTimeline(
                f"Expected {kind.value} for segment {entry.segment.index}, "
                f"got {asset.kind.value} for segment {asset.segment_index}"
            )

    def _audio_input(self, voiceover: GeneratedAsset, entry: TimelineEntry) -> AudioInput:
        """Real voice file, or silence of the segment's duration for anything that is not audio."""
        if voiceover.is_placeholder:
            return AudioInput.silence(entry.duration_ms)
        if voiceover.path.suffix.lower() not in AUDIO_SUFFIXES:
            self.logger.warning(
                f"Voiceover for segment {entry.segment.index} is not an audio file ({voiceover.file_name}), using silence"
            )
            return AudioInput.silence(entry.duration_ms)
        return AudioInput(path=voiceover.path, duration_ms=entry.duration_ms)
