"""Tests for Subtitle Track Builder and SRT helpers."""

import pytest

from storyreel.core.config import Settings
from storyreel.core.exceptions import InvalidInput
from storyreel.models.schemas import SubtitleCue
from storyreel.services.subtitle_builder import (
    SubtitleTrackBuilder,
    format_timestamp,
    parse_srt,
    parse_timestamp,
    serialize_cues,
)


@pytest.fixture
def builder(settings, logger):
    return SubtitleTrackBuilder(settings, logger)


def test_format_timestamp():
    assert format_timestamp(0) == "00:00:00,000"
    assert format_timestamp(40_000) == "00:00:40,000"
    assert format_timestamp(80_000) == "00:01:20,000"
    assert format_timestamp(3_723_045) == "01:02:03,045"


def test_format_timestamp_rejects_negative():
    with pytest.raises(ValueError):
        format_timestamp(-1)


def test_parse_timestamp():
    assert parse_timestamp("01:02:03,045") == 3_723_045
    with pytest.raises(ValueError):
        parse_timestamp("1:02:03.045")


def test_build_cue_anchored_at_zero(builder):
    cue = builder.build_cue("  Hello world  ", index=2, duration_seconds=40)

    assert cue.index == 2
    assert cue.start_ms == 0
    assert cue.end_ms == 40_000
    assert cue.text == "Hello world"


def test_build_cue_from_empty_text(builder):
    """Empty text gives an empty cue, not an error."""
    cue = builder.build_cue("", index=1, duration_seconds=1)
    assert cue.text == ""
    assert cue.end_ms == 1000


def test_build_cues_single_by_default(builder):
    cues = builder.build_cues("one two three four", first_index=1, duration_seconds=4)
    assert len(cues) == 1


def test_build_cues_splits_by_word_count(logger):
    builder = SubtitleTrackBuilder(Settings(_env_file=None, subtitle_max_words_per_cue=2), logger)

    cues = builder.build_cues("one two three four five", first_index=1, duration_seconds=5)

    assert [cue.text for cue in cues] == ["one two", "three four", "five"]
    assert [cue.index for cue in cues] == [1, 2, 3]
    assert cues[0].start_ms == 0
    assert cues[-1].end_ms == 5000
    for previous, current in zip(cues, cues[1:]):
        assert previous.end_ms == current.start_ms


def test_reanchor_shifts_and_relabels(builder):
    cue = SubtitleCue(index=1, start_ms=0, end_ms=40_000, text="Part two")

    shifted = builder.reanchor(cue, 40_000, new_index=2)

    assert shifted.index == 2
    assert shifted.start_ms == 40_000
    assert shifted.end_ms == 80_000
    assert shifted.text == "Part two"
    assert cue.start_ms == 0  # original untouched


def test_reanchor_is_additive(builder):
    cue = SubtitleCue(index=1, start_ms=250, end_ms=1250, text="x")

    for d1, d2 in [(0, 0), (1, 999), (40_000, 40_000), (123_457, 7), (5000, -200)]:
        twice = builder.reanchor(builder.reanchor(cue, d1), d2)
        once = builder.reanchor(cue, d1 + d2)
        assert twice == once


def test_reanchor_rejects_negative_start(builder):
    cue = SubtitleCue(index=1, start_ms=100, end_ms=200, text="x")
    with pytest.raises(InvalidInput):
        builder.reanchor(cue, -101)


def test_serialize_cues_format():
    cues = [
        SubtitleCue(index=1, start_ms=0, end_ms=40_000, text="First"),
        SubtitleCue(index=2, start_ms=40_000, end_ms=80_000, text="Second"),
    ]

    assert serialize_cues(cues) == (
        "1\n00:00:00,000 --> 00:00:40,000\nFirst\n\n"
        "2\n00:00:40,000 --> 00:01:20,000\nSecond\n\n"
    )


def test_parse_srt_reads_serialized_track():
    content = (
        "\ufeff1\r\n00:00:00,000 --> 00:00:40,000\r\nFirst\r\n\r\n"
        "2\r\n00:00:40,000 --> 00:01:20,000\r\n\r\n"
    )

    cues = parse_srt(content)

    assert [(c.index, c.start_ms, c.end_ms, c.text) for c in cues] == [
        (1, 0, 40_000, "First"),
        (2, 40_000, 80_000, ""),
    ]


def test_parse_srt_rejects_malformed_timing():
    with pytest.raises(ValueError):
        parse_srt("1\n00:00:00 --> 00:00:01\ntext\n")


def test_cue_end_before_start_is_invalid():
    with pytest.raises(ValueError):
        SubtitleCue(index=1, start_ms=10, end_ms=5)
