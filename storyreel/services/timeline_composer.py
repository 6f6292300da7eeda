"""Timeline Composer - places segments back to back and merges their subtitle cues."""

from typing import Any, Mapping, Optional, Sequence

from storyreel.core.config import Settings
from storyreel.core.exceptions import IncompleteTimeline, InvalidInput
from storyreel.models.schemas import Segment, SubtitleCue, Timeline, TimelineEntry
from storyreel.services.subtitle_builder import SubtitleTrackBuilder


class TimelineComposer:
    """
    Computes absolute start offsets for an ordered set of segments.

    Must only run once every segment's duration is final. Segments are
    placed by ordinal index, never by the order their assets finished.
    """

    def __init__(self, settings: Settings, logger: Any, subtitle_builder: Optional[SubtitleTrackBuilder] = None):
        """
        Initialize the timeline composer.

        Args:
            settings: Application settings
            logger: Logger instance
            subtitle_builder: Builder used to re-anchor cues (created if not given)
        """
        self.settings = settings
        self.logger = logger
        self.subtitle_builder = subtitle_builder or SubtitleTrackBuilder(settings, logger)

    def compose(self, segments: Sequence[Segment]) -> Timeline:
        """
        Lay segments end to end starting at offset 0.

        Args:
            segments: Segments with final durations, in any order

        Returns:
            Timeline with ``start[0] = 0`` and ``start[i] = start[i-1] + duration[i-1]``

        Raises:
            InvalidInput: If no segments are given
            IncompleteTimeline: If two segments share an index
        """
        if not segments:
            raise InvalidInput("Cannot compose a timeline from zero segments")

        ordered = sorted(segments, key=lambda segment: segment.index)
        indices = [segment.index for segment in ordered]
        if len(set(indices)) != len(indices):
            raise IncompleteTimeline(f"Duplicate segment indices in timeline input: {indices}")

        entries = []
        offset_ms = 0
        for segment in ordered:
            entries.append(TimelineEntry(segment=segment, start_offset_ms=offset_ms))
            offset_ms += segment.duration_ms

        timeline = Timeline(entries=tuple(entries))
        self.logger.info(
            f"Composed timeline: {len(timeline)} segments, offsets {timeline.start_offsets_seconds}, "
            f"total {timeline.total_duration_seconds:.3f}s"
        )
        return timeline

    def merge_subtitles(
        self,
        timeline: Timeline,
        cues_by_segment: Mapping[int, Sequence[SubtitleCue]],
    ) -> tuple[SubtitleCue, ...]:
        """
        Shift each segment's cues to its start offset and number them globally.

        Args:
            timeline: Composed timeline
            cues_by_segment: Segment index -> cues anchored at offset 0

        Returns:
            One continuous track numbered 1..N in timeline order

        Raises:
            IncompleteTimeline: If a timeline segment has no cues
        """
        merged = []
        for entry in timeline.entries:
            segment_cues = cues_by_segment.get(entry.segment.index)
            if segment_cues is None:
                raise IncompleteTimeline(f"No subtitle cues for segment {entry.segment.index}")
            for cue in segment_cues:
                merged.append(
                    self.subtitle_builder.reanchor(cue, entry.start_offset_ms, new_index=len(merged) + 1)
                )
        return tuple(merged)
