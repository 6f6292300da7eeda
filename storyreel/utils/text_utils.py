"""Text utility functions for summary processing."""

# This module is part of storyreel.utils package

import re

_CITATION_RE = re.compile(r"\[\d+(?:\s*,\s*\d+)*\]")


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def clean_summary_text(text: str) -> str:
    """
    Normalize provider output before it is split into segments.

    Removes bracketed citation markers such as ``[1]`` or ``[2, 3]`` and
    collapses runs of whitespace (including newlines) to single spaces.

    Args:
        text: Raw summary text.

    Returns:
        Cleaned single-line text.
    """
    text = _CITATION_RE.sub("", text)
    text = " ".join(text.split())
    return re.sub(r"\s+([.,!?;:])", r"\1", text)


def split_into_segments(text: str, parts: int = 3) -> list[str]:
    """
    Split text into exactly ``parts`` contiguous, word-balanced chunks.

    Chunk sizes differ by at most one word; earlier chunks absorb the
    remainder. When there are fewer words than parts the trailing chunks
    are empty strings.

    Args:
        text: Text to split.
        parts: Number of chunks to produce.

    Returns:
        List of exactly ``parts`` strings.
    """
    if parts < 1:
        raise ValueError("parts must be at least 1")
    words = text.split()
    base, remainder = divmod(len(words), parts)
    chunks = []
    start = 0
    for i in range(parts):
        size = base + (1 if i < remainder else 0)
        chunks.append(" ".join(words[start : start + size]))
        start += size
    return chunks


def truncate_for_preview(text: str, max_chars: int = 100) -> str:
    """Return the first ``max_chars`` characters followed by an ellipsis."""
    return text[:max_chars] + "..."
