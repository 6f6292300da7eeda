"""Tests for Timeline Composer service."""

import pytest

from storyreel.core.exceptions import IncompleteTimeline, InvalidInput
from storyreel.models.schemas import Segment, SubtitleCue
from storyreel.services.timeline_composer import TimelineComposer


@pytest.fixture
def composer(settings, logger):
    return TimelineComposer(settings, logger)


def make_segments(durations):
    return [
        Segment(index=i, text=f"segment {i}", estimated_duration_seconds=duration)
        for i, duration in enumerate(durations, 1)
    ]


def test_compose_three_equal_segments(composer):
    timeline = composer.compose(make_segments([10, 10, 10]))

    assert timeline.start_offsets_seconds == [0, 10, 20]
    assert timeline.total_duration_seconds == 30
    assert timeline.total_duration_ms == 30_000


def test_compose_cumulative_offsets(composer):
    timeline = composer.compose(make_segments([3, 7, 1, 5]))

    assert [entry.start_offset_ms for entry in timeline.entries] == [0, 3000, 10_000, 11_000]
    for previous, current in zip(timeline.entries, timeline.entries[1:]):
        assert current.start_offset_ms == previous.end_offset_ms


def test_compose_orders_by_index_not_input_order(composer):
    segments = make_segments([5, 10, 15])
    timeline = composer.compose(list(reversed(segments)))

    assert [entry.segment.index for entry in timeline.entries] == [1, 2, 3]
    assert timeline.start_offsets_seconds == [0, 5, 15]


def test_compose_empty_raises(composer):
    with pytest.raises(InvalidInput):
        composer.compose([])


def test_compose_duplicate_indices_raises(composer):
    segment = Segment(index=1, text="a", estimated_duration_seconds=1)
    with pytest.raises(IncompleteTimeline):
        composer.compose([segment, segment])


def test_merge_subtitles_shifts_and_renumbers(composer):
    timeline = composer.compose(make_segments([40, 40, 40]))
    cues = {
        i: (SubtitleCue(index=1, start_ms=0, end_ms=40_000, text=f"part {i}"),)
        for i in (1, 2, 3)
    }

    track = composer.merge_subtitles(timeline, cues)

    assert [cue.index for cue in track] == [1, 2, 3]
    assert [cue.start_ms for cue in track] == [0, 40_000, 80_000]
    assert [cue.text for cue in track] == ["part 1", "part 2", "part 3"]


def test_merge_subtitles_missing_segment_raises(composer):
    timeline = composer.compose(make_segments([1, 1]))
    with pytest.raises(IncompleteTimeline):
        composer.merge_subtitles(timeline, {1: ()})
