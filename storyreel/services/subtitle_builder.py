"""Subtitle Track Builder - builds per-segment cues and re-anchors them on the job timeline."""

import re
from typing import Any, Iterable, Optional

from storyreel.core.config import Settings
from storyreel.core.exceptions import InvalidInput
from storyreel.models.schemas import SubtitleCue

_TIMESTAMP_RE = re.compile(r"^(\d{2,}):([0-5]\d):([0-5]\d),(\d{3})$")
_TIMING_LINE_RE = re.compile(r"^\s*(\S+)\s+-->\s+(\S+)\s*$")


def format_timestamp(ms: int) -> str:
    """Format milliseconds as an SRT timestamp (HH:MM:SS,mmm)."""
    if ms < 0:
        raise ValueError(f"Negative timestamp: {ms}")
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


def parse_timestamp(value: str) -> int:
    """Parse an SRT timestamp (HH:MM:SS,mmm) into milliseconds."""
    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        raise ValueError(f"Malformed SRT timestamp: {value!r}")
    hours, minutes, seconds, millis = (int(part) for part in match.groups())
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + millis


def serialize_cues(cues: Iterable[SubtitleCue]) -> str:
    """
    Serialize cues to SRT text.

    Each block is the index line, the timing line, the cue text and a
    blank separator. Blank lines inside cue text are dropped since they
    would end the block early.
    """
    blocks = []
    for cue in cues:
        text = "\n".join(line for line in cue.text.splitlines() if line.strip())
        blocks.append(
            f"{cue.index}\n{format_timestamp(cue.start_ms)} --> {format_timestamp(cue.end_ms)}\n{text}\n"
        )
    return "\n".join(blocks) + ("\n" if blocks else "")


def parse_srt(content: str) -> list[SubtitleCue]:
    """Parse SRT text into cues. Cues with empty text are supported."""
    cues: list[SubtitleCue] = []
    lines = content.replace("\r\n", "\n").lstrip("\ufeff").split("\n")
    i = 0
    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue

        index_line = lines[i].strip()
        if not index_line.isdigit():
            raise ValueError(f"Expected cue index at line {i + 1}, got {index_line!r}")
        if i + 1 >= len(lines):
            raise ValueError(f"Cue {index_line} has no timing line")
        timing = _TIMING_LINE_RE.match(lines[i + 1])
        if not timing:
            raise ValueError(f"Malformed timing line at line {i + 2}: {lines[i + 1]!r}")

        i += 2
        text_lines = []
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i])
            i += 1

        cues.append(
            SubtitleCue(
                index=int(index_line),
                start_ms=parse_timestamp(timing.group(1)),
                end_ms=parse_timestamp(timing.group(2)),
                text="\n".join(text_lines),
            )
        )
    return cues


class SubtitleTrackBuilder:
    """Produces subtitle cues for a segment and shifts them onto the job timeline."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the subtitle builder.

        Args:
            settings: Application settings (uses subtitle_max_words_per_cue)
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.max_words_per_cue = settings.subtitle_max_words_per_cue

    def build_cue(self, text: str, index: int, duration_seconds: int) -> SubtitleCue:
        """Build a single cue spanning the whole segment, anchored at offset 0."""
        return SubtitleCue(index=index, start_ms=0, end_ms=duration_seconds * 1000, text=text.strip())

    def build_cues(self, text: str, first_index: int, duration_seconds: int) -> tuple[SubtitleCue, ...]:
        """
        Build the cues for one segment, anchored at offset 0.

        With ``subtitle_max_words_per_cue`` unset (0) this is a single cue.
        Otherwise the text is cut into runs of at most that many words and
        the segment duration is shared out in proportion to word count; the
        last cue always ends exactly at the segment duration.

        Args:
            text: Segment text
            first_index: Cue number for the first cue
            duration_seconds: Segment duration

        Returns:
            Tuple of cues covering [0, duration) without gaps
        """
        words = text.split()
        if self.max_words_per_cue <= 0 or len(words) <= self.max_words_per_cue:
            return (self.build_cue(text, first_index, duration_seconds),)

        duration_ms = duration_seconds * 1000
        chunks = [words[i : i + self.max_words_per_cue] for i in range(0, len(words), self.max_words_per_cue)]
        cues = []
        start_ms = 0
        words_so_far = 0
        for offset, chunk in enumerate(chunks):
            words_so_far += len(chunk)
            end_ms = duration_ms * words_so_far // len(words)
            cues.append(
                SubtitleCue(index=first_index + offset, start_ms=start_ms, end_ms=end_ms, text=" ".join(chunk))
            )
            start_ms = end_ms
        return tuple(cues)

    def reanchor(self, cue: SubtitleCue, offset_delta_ms: int, new_index: Optional[int] = None) -> SubtitleCue:
        """
        Shift a cue by ``offset_delta_ms`` and optionally renumber it.

        Shifting is additive: reanchoring by d1 then d2 equals reanchoring
        by d1 + d2.

        Raises:
            InvalidInput: If the shifted cue would start before 0
        """
        start_ms = cue.start_ms + offset_delta_ms
        if start_ms < 0:
            raise InvalidInput(
                f"Cannot shift cue {cue.index} by {offset_delta_ms}ms: it would start at {start_ms}ms"
            )
        return SubtitleCue(
            index=cue.index if new_index is None else new_index,
            start_ms=start_ms,
            end_ms=cue.end_ms + offset_delta_ms,
            text=cue.text,
        )

    def to_srt(self, cues: Iterable[SubtitleCue]) -> str:
        """Serialize cues to SRT text."""
        return serialize_cues(cues)
